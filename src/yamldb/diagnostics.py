"""Diagnostics sink for loaders.

Every report is kept as a ``Diagnostic`` record and forwarded to the
standard ``logging`` module. The sink never stops the process; callers
decide what to do with failures.
"""

import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from yamldb.codes import FaultKind


class Severity(str, Enum):
    """Diagnostic severities."""

    STATUS = "STATUS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"  # programmer errors only


_LEVELS = {
    Severity.STATUS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class Diagnostic(BaseModel):
    """A single reported message."""
    severity: Severity
    message: str
    kind: Optional[FaultKind] = None
    path: Optional[str] = None  # file the message is about, when known
    line: Optional[int] = None  # 1-based


class DiagnosticLog:
    """Records diagnostics and forwards them to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("yamldb")
        self.records: List[Diagnostic] = []

    def emit(
        self,
        severity: Severity,
        message: str,
        kind: Optional[FaultKind] = None,
        path: Optional[str] = None,
        line: Optional[int] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(severity=severity, message=message, kind=kind, path=path, line=line)
        self.records.append(diagnostic)
        self._logger.log(_LEVELS[severity], "%s", message)
        return diagnostic

    def status(self, message: str, **details) -> Diagnostic:
        return self.emit(Severity.STATUS, message, **details)

    def warning(self, message: str, **details) -> Diagnostic:
        return self.emit(Severity.WARNING, message, **details)

    def error(self, message: str, **details) -> Diagnostic:
        return self.emit(Severity.ERROR, message, **details)

    def fatal(self, message: str, **details) -> Diagnostic:
        return self.emit(Severity.FATAL, message, **details)

    def by_severity(self, severity: Severity) -> List[Diagnostic]:
        return [d for d in self.records if d.severity == severity]

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.by_severity(Severity.WARNING)

    @property
    def errors(self) -> List[Diagnostic]:
        return self.by_severity(Severity.ERROR)

    def clear(self) -> None:
        self.records.clear()
