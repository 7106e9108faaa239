"""Code constants for yamldb loaders.

These constants prevent stringly-typed fault kinds and location names
and ensure client code uses the correct values.
"""

from enum import Enum


class FaultKind(str, Enum):
    """Fault kinds reported by loading and field extraction."""

    # Document level (abort the file)
    IO_ERROR = "IO_ERROR"
    SYNTAX_ERROR = "SYNTAX_ERROR"
    MISSING_HEADER = "MISSING_HEADER"
    MISSING_TYPE = "MISSING_TYPE"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    INVALID_VERSION = "INVALID_VERSION"
    VERSION_TOO_NEW = "VERSION_TOO_NEW"
    VERSION_TOO_OLD = "VERSION_TOO_OLD"

    # Field level (local to one entry)
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"

    # Logic errors in the caller, not data errors
    PROGRAMMER_ERROR = "PROGRAMMER_ERROR"


class DatabaseLocation(str, Enum):
    """Where a logical database file lives."""

    NORMAL = "NORMAL"  # {db}/{file}, {db}/{import}/{file}
    SPLIT = "SPLIT"  # {db}/{variant}/{file}, {db}/{import}/{file}
    CONF = "CONF"  # {conf}/{file}, {conf}/import/{file}
