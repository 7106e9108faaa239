"""Versioned YAML database loader.

A loader knows the document type it accepts and the range of schema
versions it understands. Loading a file composes it, checks its header
and only then hands the body entries to a caller-supplied visitor.

Version policy, for a document declaring version ``v``:

- ``v == version``: compatible
- ``v > version``: rejected, the document is newer than this loader
- ``minimum_version <= v < version``: compatible, with a staleness warning
- ``v < minimum_version``: rejected, the document is no longer supported
"""

from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from yamldb.codes import DatabaseLocation, FaultKind
from yamldb.contracts import CompatibilityResult, FileReport, LoadFault, LoadResult, ParseResult
from yamldb.diagnostics import DiagnosticLog
from yamldb.kernel import fields
from yamldb.kernel.fields import REQUIRED, Extraction
from yamldb.kernel.node import Node
from yamldb.layout import LayoutConfig, get_layout
from yamldb._internal.io.document_io import DocumentReadError, compose_file

UINT16_MAX = 2 ** 16 - 1

# (entry, source file path) -> whether the entry was ingested
Visitor = Callable[[Node, str], bool]


def resolve_locations(
    filename: str,
    location: Union[DatabaseLocation, str],
    layout: LayoutConfig,
) -> List[str]:
    """Map a logical file name to its candidate paths, base path first.

    The second path is always the import (override) path. Unknown
    locations resolve to no paths.
    """
    try:
        location = DatabaseLocation(location)
    except ValueError:
        return []

    if location == DatabaseLocation.NORMAL:
        return [
            f"{layout.db_path}/{filename}",
            f"{layout.db_path}/{layout.import_dir}/{filename}",
        ]
    if location == DatabaseLocation.SPLIT:
        return [
            f"{layout.db_path}/{layout.variant_dir}/{filename}",
            f"{layout.db_path}/{layout.import_dir}/{filename}",
        ]
    if location == DatabaseLocation.CONF:
        return [
            f"{layout.conf_path}/{filename}",
            f"{layout.conf_path}/import/{filename}",
        ]
    return []


class YamlDatabase:
    """Base class for databases stored as versioned YAML documents.

    Concrete databases supply a type name and versions, then call
    ``parse`` with a visitor that turns body entries into records.
    """

    def __init__(
        self,
        type_name: str,
        version: int,
        minimum_version: Optional[int] = None,
        *,
        layout: Optional[LayoutConfig] = None,
        diagnostics: Optional[DiagnosticLog] = None,
    ):
        if minimum_version is None:
            minimum_version = version
        for label, value in (("version", version), ("minimum_version", minimum_version)):
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT16_MAX:
                raise ValueError(f"{label} must be an integer between 0 and {UINT16_MAX}, got {value!r}")
        if minimum_version > version:
            raise ValueError(f"minimum_version {minimum_version} is greater than version {version}")
        if not type_name:
            raise ValueError("type_name must not be empty")

        self._type_name = type_name
        self._version = version
        self._minimum_version = minimum_version
        self._layout = layout
        self._diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self._root: Optional[Node] = None

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def version(self) -> int:
        return self._version

    @property
    def minimum_version(self) -> int:
        return self._minimum_version

    @property
    def diagnostics(self) -> DiagnosticLog:
        return self._diagnostics

    @property
    def layout(self) -> LayoutConfig:
        return self._layout if self._layout is not None else get_layout()

    @staticmethod
    def node_exists(node: Optional[Node], name: str) -> bool:
        """True if ``node`` is a mapping holding ``name``; anything else counts as absent."""
        if not isinstance(node, Node):
            return False
        return node.get(name) is not None

    def _incompatible(self, kind: FaultKind, message: str, node: Optional[Node] = None, **found) -> CompatibilityResult:
        line = node.line if node is not None else None
        self._diagnostics.error(message, kind=kind, line=line)
        return CompatibilityResult(
            ok=False,
            fault=LoadFault(kind=kind, message=message, line=line),
            **found,
        )

    def check_compatibility(self, root: Optional[Node]) -> CompatibilityResult:
        """Check the document header against this loader's type and versions."""
        if not self.node_exists(root, "Header"):
            return self._incompatible(FaultKind.MISSING_HEADER, "No database header was found.", root)

        header = root.get("Header")

        if not self.node_exists(header, "Type"):
            return self._incompatible(FaultKind.MISSING_TYPE, "No database type was found.", header)

        type_node = header.get("Type")
        if not type_node.is_scalar or type_node.is_null:
            return self._incompatible(FaultKind.MISSING_TYPE, "Invalid database type was found.", type_node)

        found_type = type_node.value
        if found_type != self._type_name:
            return self._incompatible(
                FaultKind.TYPE_MISMATCH,
                f"Database type mismatch: {self._type_name} != {found_type}.",
                type_node,
                found_type=found_type,
            )

        extraction = fields.as_uint16(header, "Version", diagnostics=self._diagnostics)
        if not extraction:
            return self._incompatible(
                FaultKind.INVALID_VERSION,
                f"Invalid header version type for {self._type_name} database.",
                header,
                found_type=found_type,
            )

        found_version = extraction.value
        stale = False
        if found_version != self._version:
            if found_version > self._version:
                return self._incompatible(
                    FaultKind.VERSION_TOO_NEW,
                    f"Your database version {found_version} is not supported by your server. "
                    f"Maximum version is: {self._version}",
                    header,
                    found_type=found_type,
                    found_version=found_version,
                )
            elif found_version >= self._minimum_version:
                self._diagnostics.warning(
                    f"Your database version {found_version} is outdated and should be updated. "
                    f"Current version is: {self._version}",
                    line=extraction.line,
                )
                stale = True
            else:
                return self._incompatible(
                    FaultKind.VERSION_TOO_OLD,
                    f"Your database version {found_version} is not supported anymore by your server. "
                    f"Minimum version is: {self._minimum_version}",
                    header,
                    found_type=found_type,
                    found_version=found_version,
                )

        return CompatibilityResult(ok=True, found_type=found_type, found_version=found_version, stale=stale)

    def verify_compatibility(self, root: Optional[Node]) -> bool:
        return self.check_compatibility(root).ok

    def load(self, path: Union[str, Path]) -> LoadResult:
        """
        Load and verify one database file.

        The stored root node is only replaced once the header checks pass.

        Returns:
            LoadResult carrying the root node on success, the fault otherwise
        """
        path_str = str(path)
        try:
            root = compose_file(path_str)
        except DocumentReadError as e:
            fault = e.fault
            self._diagnostics.error(
                f"Failed to read {self._type_name} database file from '{path_str}'.",
                kind=fault.kind,
                path=path_str,
            )
            if fault.line is not None:
                self._diagnostics.error(
                    f"{fault.message} (Line {fault.line}: Column {fault.column})",
                    kind=fault.kind,
                    path=path_str,
                    line=fault.line,
                )
            else:
                self._diagnostics.error(fault.message, kind=fault.kind, path=path_str)
            return LoadResult(ok=False, path=path_str, fault=fault)

        compatibility = self.check_compatibility(root)
        if not compatibility.ok:
            self._diagnostics.error(
                f"Failed to verify compatibility with {self._type_name} database file from '{path_str}'.",
                kind=compatibility.fault.kind,
                path=path_str,
            )
            fault = compatibility.fault.model_copy(update={"path": path_str})
            return LoadResult(ok=False, path=path_str, compatibility=compatibility, fault=fault)

        self._root = root
        return LoadResult(ok=True, path=path_str, document=root, compatibility=compatibility)

    def get_root_node(self) -> Optional[Node]:
        """Root of the last successfully loaded document, None before the first."""
        return self._root

    def get_locations(self, filename: str, location: Union[DatabaseLocation, str]) -> List[str]:
        return resolve_locations(filename, location, self.layout)

    def _body_entries(self, root: Node, path: str) -> List[Node]:
        body = root.get("Body")
        if body is None:
            return []
        if not body.is_sequence:
            self._diagnostics.warning(
                f"Body of '{path}' in line {body.line} is not a list, no entries were read.",
                path=path,
                line=body.line,
            )
            return []
        return list(body)

    def parse(self, filename: str, location: Union[DatabaseLocation, str], visitor: Visitor) -> ParseResult:
        """
        Load every candidate file of ``filename`` and visit its body entries.

        Files are processed base first, import second, so visitors see
        overriding entries last. The first file that fails to load stops
        the whole parse.

        Args:
            filename: Logical file name, e.g. "item_db.yml"
            location: Where the file lives
            visitor: Called as visitor(entry, path); returns whether the entry was ingested

        Returns:
            ParseResult, ok only if every candidate file loaded
        """
        db_files = self.get_locations(filename, location)
        if not db_files:
            message = f"parse: no database locations for '{filename}' with location {location!r}."
            self._diagnostics.fatal(message, kind=FaultKind.PROGRAMMER_ERROR)
            return ParseResult(ok=False, fault=LoadFault(kind=FaultKind.PROGRAMMER_ERROR, message=message))

        reports: List[FileReport] = []
        for current_file in db_files:
            result = self.load(current_file)
            if not result:
                return ParseResult(ok=False, files=reports, fault=result.fault)

            entries = 0
            count = 0
            for node in self._body_entries(result.document, current_file):
                entries += 1
                if visitor(node, current_file):
                    count += 1

            self._diagnostics.status(f"Done reading '{count}' entries in '{current_file}'", path=current_file)
            reports.append(FileReport(path=current_file, entries=entries, ingested=count))

        return ParseResult(ok=True, files=reports)

    def invalid_warning(self, template: str, node: Node, path: str) -> None:
        """Warn about a malformed entry, quoting it back as YAML.

        ``template`` may reference the file as ``{file}``; other braces are kept as written.
        """
        message = template.replace("{file}", path)
        self._diagnostics.warning(
            f"{message}\n{node.dump().rstrip()}",
            path=path,
            line=node.line,
        )

    def as_bool(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_bool(node, name, default, self._diagnostics)

    def as_int16(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_int16(node, name, default, self._diagnostics)

    def as_uint16(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_uint16(node, name, default, self._diagnostics)

    def as_int32(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_int32(node, name, default, self._diagnostics)

    def as_uint32(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_uint32(node, name, default, self._diagnostics)

    def as_int64(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_int64(node, name, default, self._diagnostics)

    def as_uint64(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_uint64(node, name, default, self._diagnostics)

    def as_float(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_float(node, name, default, self._diagnostics)

    def as_double(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_double(node, name, default, self._diagnostics)

    def as_string(self, node: Node, name: str, default: Any = REQUIRED) -> Extraction:
        return fields.as_string(node, name, default, self._diagnostics)
