"""Typed field extraction: extract-or-default-or-fail.

Every accessor comes in two forms. Called without ``default`` the field
is required: a missing or malformed value is reported as an error and the
extraction fails. Called with ``default`` the field is optional: a missing
value silently yields the default, a malformed one yields the default with
a warning.

    >>> as_uint32(entry, "Id")               # required
    >>> as_uint16(entry, "Weight", default=0)  # defaulted
"""

import math
import struct
from enum import Enum
from typing import Any, Optional

import yaml
from pydantic import BaseModel

from yamldb.codes import FaultKind
from yamldb.diagnostics import DiagnosticLog
from yamldb.kernel.node import Node


class _Required:
    def __repr__(self) -> str:
        return "REQUIRED"


# Marks an accessor call without a default value.
REQUIRED: Any = _Required()


class FieldType(str, Enum):
    """Primitive value kinds a field can be extracted as."""

    BOOL = "bool"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"


_INT_RANGES = {
    FieldType.INT16: (-(2 ** 15), 2 ** 15 - 1),
    FieldType.UINT16: (0, 2 ** 16 - 1),
    FieldType.INT32: (-(2 ** 31), 2 ** 31 - 1),
    FieldType.UINT32: (0, 2 ** 32 - 1),
    FieldType.INT64: (-(2 ** 63), 2 ** 63 - 1),
    FieldType.UINT64: (0, 2 ** 64 - 1),
}


class ExtractionStatus(str, Enum):
    VALUE = "VALUE"
    DEFAULT_APPLIED = "DEFAULT_APPLIED"
    FAILURE = "FAILURE"


class Extraction(BaseModel):
    """Outcome of extracting one field.

    ``value`` is only meaningful when ``ok`` is true.
    """
    status: ExtractionStatus
    value: Any = None
    kind: Optional[FaultKind] = None  # set on FAILURE
    reason: Optional[str] = None  # set on FAILURE and on a default applied over a bad value
    line: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status != ExtractionStatus.FAILURE

    def __bool__(self) -> bool:
        return self.ok


class CoercionError(ValueError):
    """Raised when a node cannot be read as the requested field type."""


def coerce(node: Node, field_type: FieldType) -> Any:
    """Convert ``node`` to ``field_type`` or raise CoercionError.

    Scalars are resolved with the YAML 1.1 rules of PyYAML's SafeLoader,
    so ``"5"`` (quoted) is a string and not an integer. Null scalars and
    collections never convert.
    """
    if not node.is_scalar or node.is_null:
        raise CoercionError("not a scalar value")

    if field_type == FieldType.STRING:
        return node.value

    try:
        value = node.construct()
    except (yaml.YAMLError, ValueError, TypeError, KeyError, AttributeError, ArithmeticError) as e:
        # SafeConstructor raises plain KeyError/AttributeError for some malformed tagged scalars
        raise CoercionError(f"cannot read {node.value!r} as {node.tag}") from e

    if field_type == FieldType.BOOL:
        if isinstance(value, bool):
            return value
        raise CoercionError(f"expected a boolean, got {node.value!r}")

    if field_type in _INT_RANGES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise CoercionError(f"expected an integer, got {node.value!r}")
        low, high = _INT_RANGES[field_type]
        if not low <= value <= high:
            raise CoercionError(f"{value} is out of range for {field_type.value}")
        return value

    if field_type in (FieldType.FLOAT, FieldType.DOUBLE):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CoercionError(f"expected a number, got {node.value!r}")
        try:
            value = float(value)
            if field_type == FieldType.FLOAT:
                single = struct.unpack("f", struct.pack("f", value))[0]
                if math.isinf(single) and not math.isinf(value):
                    raise OverflowError("float out of single precision range")
                value = single
        except OverflowError as e:
            raise CoercionError(f"{node.value} is out of range for {field_type.value}") from e
        return value

    raise CoercionError(f"unsupported field type {field_type!r}")


def extract(
    node: Node,
    name: str,
    field_type: FieldType,
    default: Any = REQUIRED,
    diagnostics: Optional[DiagnosticLog] = None,
) -> Extraction:
    """
    Extract field ``name`` of ``node`` as ``field_type``.

    Args:
        node: Mapping node holding the field
        name: Field name
        field_type: Requested primitive type
        default: Value used when the field is missing or malformed;
                 omit to make the field required
        diagnostics: Sink for errors and warnings (a logging-only sink
                     is used when omitted)

    Returns:
        Extraction with status VALUE, DEFAULT_APPLIED or FAILURE
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    if not isinstance(node, Node) or not isinstance(field_type, FieldType):
        message = f"extract: no node or field type was given for \"{name}\"."
        diagnostics.fatal(message, kind=FaultKind.PROGRAMMER_ERROR)
        return Extraction(status=ExtractionStatus.FAILURE, kind=FaultKind.PROGRAMMER_ERROR, reason=message)

    data_node = node.get(name)

    if data_node is None:
        # Optional field with a default value
        if default is not REQUIRED:
            return Extraction(status=ExtractionStatus.DEFAULT_APPLIED, value=default, line=node.line)
        message = f"Missing node \"{name}\" in line {node.line}."
        diagnostics.error(message, kind=FaultKind.MISSING_FIELD, line=node.line)
        return Extraction(
            status=ExtractionStatus.FAILURE,
            kind=FaultKind.MISSING_FIELD,
            reason=message,
            line=node.line,
        )

    try:
        value = coerce(data_node, field_type)
    except CoercionError as e:
        if default is not REQUIRED:
            diagnostics.warning(
                f"Unable to parse \"{name}\" in line {data_node.line}. Using default value...",
                kind=FaultKind.INVALID_FIELD,
                line=data_node.line,
            )
            return Extraction(
                status=ExtractionStatus.DEFAULT_APPLIED,
                value=default,
                reason=str(e),
                line=data_node.line,
            )
        message = f"Unable to parse \"{name}\" in line {data_node.line}."
        diagnostics.error(message, kind=FaultKind.INVALID_FIELD, line=data_node.line)
        return Extraction(
            status=ExtractionStatus.FAILURE,
            kind=FaultKind.INVALID_FIELD,
            reason=f"{message} ({e})",
            line=data_node.line,
        )

    return Extraction(status=ExtractionStatus.VALUE, value=value, line=data_node.line)


def as_bool(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.BOOL, default, diagnostics)


def as_int16(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.INT16, default, diagnostics)


def as_uint16(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.UINT16, default, diagnostics)


def as_int32(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.INT32, default, diagnostics)


def as_uint32(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.UINT32, default, diagnostics)


def as_int64(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.INT64, default, diagnostics)


def as_uint64(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.UINT64, default, diagnostics)


def as_float(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.FLOAT, default, diagnostics)


def as_double(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.DOUBLE, default, diagnostics)


def as_string(node: Node, name: str, default: Any = REQUIRED, diagnostics: Optional[DiagnosticLog] = None) -> Extraction:
    return extract(node, name, FieldType.STRING, default, diagnostics)
