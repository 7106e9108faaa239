"""Public result models for yamldb loaders."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from yamldb.codes import FaultKind
from yamldb.kernel.node import Node


class LoadFault(BaseModel):
    """Why a document could not be loaded."""
    kind: FaultKind
    message: str
    path: Optional[str] = None
    line: Optional[int] = None  # 1-based, when the fault has a source position
    column: Optional[int] = None  # 1-based


class CompatibilityResult(BaseModel):
    """Outcome of checking a document header against a loader."""
    ok: bool
    found_type: Optional[str] = None
    found_version: Optional[int] = None
    stale: bool = False  # older than current but still supported
    fault: Optional[LoadFault] = None

    def __bool__(self) -> bool:
        return self.ok


class LoadResult(BaseModel):
    """Outcome of loading one file."""
    ok: bool
    path: str
    document: Optional[Node] = None  # root node, only set when ok
    compatibility: Optional[CompatibilityResult] = None  # None when the file never parsed
    fault: Optional[LoadFault] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __bool__(self) -> bool:
        return self.ok


class FileReport(BaseModel):
    """Per-file ingestion counts."""
    path: str
    entries: int  # body entries handed to the visitor
    ingested: int  # entries the visitor accepted


class ParseResult(BaseModel):
    """Outcome of parsing a logical database file (base + import)."""
    ok: bool
    files: List[FileReport] = Field(default_factory=list)  # files fully processed, in load order
    fault: Optional[LoadFault] = None

    @property
    def ingested(self) -> int:
        return sum(report.ingested for report in self.files)

    def __bool__(self) -> bool:
        return self.ok
