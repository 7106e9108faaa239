"""Process-wide filesystem layout for database files.

The layout names two base directories (database root, configuration root)
and two subdirectories (the split-database variant directory and the
import override directory). It is configured once at startup and read-only
afterwards.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

RENEWAL_DIR = "re"
PRE_RENEWAL_DIR = "pre-re"
IMPORT_DIR = "import"

ENV_PREFIX = "YAMLDB_"


class LayoutConfig(BaseModel):
    """Base directories and subdirectory names used to locate files."""
    db_path: str = "db"
    conf_path: str = "conf"
    variant_dir: str = RENEWAL_DIR
    import_dir: str = IMPORT_DIR

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("db_path", "conf_path", "variant_dir", "import_dir")
    @classmethod
    def strip_trailing_separator(cls, v: str) -> str:
        """Paths are joined with '/', so a trailing one would double up."""
        stripped = v.rstrip("/")
        if not stripped:
            if v:
                return "/"
            raise ValueError("layout paths must not be empty")
        return stripped

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LayoutConfig":
        """Build a layout from YAMLDB_DB_PATH, YAMLDB_CONF_PATH, YAMLDB_VARIANT_DIR and YAMLDB_IMPORT_DIR."""
        environ = os.environ if environ is None else environ
        values = {}
        for field_name in cls.model_fields:
            env_value = environ.get(ENV_PREFIX + field_name.upper())
            if env_value:
                values[field_name] = env_value
        return cls(**values)


_layout: Optional[LayoutConfig] = None
_layout_in_use = False


def configure_layout(layout: Optional[LayoutConfig] = None, **overrides) -> LayoutConfig:
    """
    Set the process-wide layout.

    Args:
        layout: Layout to install (defaults to one built from the environment)
        **overrides: Field values replacing those of ``layout``

    Raises:
        RuntimeError: If a different layout was already read by a loader
    """
    global _layout
    new_layout = layout if layout is not None else LayoutConfig.from_env()
    if overrides:
        new_layout = LayoutConfig(**{**new_layout.model_dump(), **overrides})
    if _layout_in_use and _layout is not None and new_layout != _layout:
        raise RuntimeError("Database layout is already in use and cannot be reconfigured.")
    _layout = new_layout
    return _layout


def get_layout() -> LayoutConfig:
    """Return the process-wide layout, configuring it from the environment on first use."""
    global _layout, _layout_in_use
    if _layout is None:
        _layout = LayoutConfig.from_env()
    _layout_in_use = True
    return _layout


def reset_layout() -> None:
    """Forget the configured layout. Intended for tests."""
    global _layout, _layout_in_use
    _layout = None
    _layout_in_use = False
