"""Core loader, node view and field extraction."""
