"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed yamldb package.
"""

import textwrap
from pathlib import Path

import pytest

from yamldb import layout as layout_module
from yamldb.layout import LayoutConfig


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def write_yaml(tmp_path):
    """Write dedented YAML text below tmp_path and return the file path."""
    def _writer(relative: str, text: str) -> Path:
        return _write(tmp_path / relative, text)
    return _writer


@pytest.fixture
def db_layout(tmp_path) -> LayoutConfig:
    """A layout rooted in tmp_path (db/, conf/, re/ and import/)."""
    return LayoutConfig(
        db_path=str(tmp_path / "db"),
        conf_path=str(tmp_path / "conf"),
        variant_dir="re",
        import_dir="import",
    )


@pytest.fixture(autouse=True)
def _fresh_layout(monkeypatch):
    """Keep the process-wide layout and YAMLDB_* variables out of other tests."""
    for name in ("DB_PATH", "CONF_PATH", "VARIANT_DIR", "IMPORT_DIR"):
        monkeypatch.delenv(f"YAMLDB_{name}", raising=False)
    layout_module.reset_layout()
    yield
    layout_module.reset_layout()
