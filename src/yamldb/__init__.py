"""yamldb: schema-versioned YAML database loading."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("yamldb")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from yamldb.codes import DatabaseLocation, FaultKind
from yamldb.contracts import CompatibilityResult, FileReport, LoadFault, LoadResult, ParseResult
from yamldb.diagnostics import Diagnostic, DiagnosticLog, Severity
from yamldb.kernel.fields import REQUIRED, Extraction, ExtractionStatus, FieldType
from yamldb.kernel.loader import YamlDatabase, resolve_locations
from yamldb.kernel.node import Node
from yamldb.kernel.store import TypesafeYamlDatabase
from yamldb.layout import LayoutConfig, configure_layout, get_layout

__all__ = [
    "__version__",
    "CompatibilityResult",
    "DatabaseLocation",
    "Diagnostic",
    "DiagnosticLog",
    "Extraction",
    "ExtractionStatus",
    "FaultKind",
    "FieldType",
    "FileReport",
    "LayoutConfig",
    "LoadFault",
    "LoadResult",
    "Node",
    "ParseResult",
    "REQUIRED",
    "Severity",
    "TypesafeYamlDatabase",
    "YamlDatabase",
    "configure_layout",
    "get_layout",
    "resolve_locations",
]
