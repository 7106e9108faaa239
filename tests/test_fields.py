"""Tests for typed field extraction."""

import struct

import pytest
import yaml

from yamldb.codes import FaultKind
from yamldb.diagnostics import DiagnosticLog, Severity
from yamldb.kernel import fields
from yamldb.kernel.fields import ExtractionStatus, FieldType, extract
from yamldb.kernel.node import Node


def _node(text: str) -> Node:
    return Node(yaml.compose(text, Loader=yaml.SafeLoader))


ENTRY = _node(
    """
Id: 501
Name: Red Potion
Weight: 70
Buy: -12
Rate: 0.5
Refineable: yes
Flags: [a, b]
Empty:
Quoted: "42"
"""
)


@pytest.mark.parametrize(
    "field_type,text,expected",
    [
        (FieldType.BOOL, "false", False),
        (FieldType.INT16, "-32768", -32768),
        (FieldType.UINT16, "65535", 65535),
        (FieldType.INT32, "-2147483648", -2147483648),
        (FieldType.UINT32, "4294967295", 4294967295),
        (FieldType.INT64, "-9223372036854775808", -9223372036854775808),
        (FieldType.UINT64, "18446744073709551615", 18446744073709551615),
        (FieldType.FLOAT, "0.25", 0.25),
        (FieldType.DOUBLE, "3.141592653589793", 3.141592653589793),
        (FieldType.STRING, "Poring Card", "Poring Card"),
    ],
)
def test_extract_written_value(field_type, text, expected):
    """A value written as a field comes back as the same value."""
    node = _node(f"Field: {text}\n")
    result = extract(node, "Field", field_type, diagnostics=DiagnosticLog())
    assert result.status == ExtractionStatus.VALUE
    assert result.ok
    assert result.value == expected


def test_missing_field_with_default_applies_default_silently():
    log = DiagnosticLog()
    result = fields.as_uint16(ENTRY, "Slots", default=3, diagnostics=log)
    assert result.status == ExtractionStatus.DEFAULT_APPLIED
    assert result.ok
    assert result.value == 3
    assert log.records == []


def test_missing_required_field_fails_with_line():
    log = DiagnosticLog()
    entry = _node("Header: x\nBody:\n  - Id: 1\n    Name: Apple\n")
    item = list(entry.get("Body"))[0]
    result = fields.as_string(item, "AegisName", diagnostics=log)
    assert not result.ok
    assert result.status == ExtractionStatus.FAILURE
    assert result.kind == FaultKind.MISSING_FIELD
    assert result.value is None
    assert len(log.errors) == 1
    assert log.errors[0].message == 'Missing node "AegisName" in line 3.'


def test_malformed_field_with_default_warns_and_applies_default():
    log = DiagnosticLog()
    result = fields.as_uint32(ENTRY, "Name", default=0, diagnostics=log)
    assert result.status == ExtractionStatus.DEFAULT_APPLIED
    assert result.value == 0
    assert len(log.warnings) == 1
    assert "Unable to parse \"Name\"" in log.warnings[0].message
    assert "Using default value" in log.warnings[0].message
    assert log.errors == []


def test_malformed_required_field_fails():
    log = DiagnosticLog()
    result = fields.as_int32(ENTRY, "Flags", diagnostics=log)
    assert not result.ok
    assert result.kind == FaultKind.INVALID_FIELD
    assert log.errors[0].kind == FaultKind.INVALID_FIELD
    assert log.errors[0].line == 8


@pytest.mark.parametrize(
    "field_type,text",
    [
        (FieldType.UINT16, "-1"),
        (FieldType.UINT16, "65536"),
        (FieldType.INT16, "32768"),
        (FieldType.UINT32, "4294967296"),
        (FieldType.INT64, "9223372036854775808"),
        (FieldType.UINT64, "-5"),
    ],
)
def test_out_of_range_integers_fail(field_type, text):
    node = _node(f"Field: {text}\n")
    assert not extract(node, "Field", field_type, diagnostics=DiagnosticLog())


def test_integers_reject_booleans_and_floats():
    log = DiagnosticLog()
    assert not fields.as_int32(_node("A: true\n"), "A", diagnostics=log)
    assert not fields.as_int32(_node("A: 1.5\n"), "A", diagnostics=log)


def test_quoted_number_is_a_string():
    log = DiagnosticLog()
    assert not fields.as_uint32(ENTRY, "Quoted", diagnostics=log)
    assert fields.as_string(ENTRY, "Quoted", diagnostics=log).value == "42"


def test_yaml_11_booleans():
    assert fields.as_bool(ENTRY, "Refineable", diagnostics=DiagnosticLog()).value is True
    assert not fields.as_bool(ENTRY, "Weight", diagnostics=DiagnosticLog())


def test_float_is_rounded_to_single_precision():
    result = fields.as_float(_node("Rate: 0.1\n"), "Rate", diagnostics=DiagnosticLog())
    assert result.value == struct.unpack("f", struct.pack("f", 0.1))[0]
    assert fields.as_double(_node("Rate: 0.1\n"), "Rate", diagnostics=DiagnosticLog()).value == 0.1


def test_float_out_of_single_range_fails_but_double_accepts():
    node = _node("Rate: 1.0e+39\n")
    assert not fields.as_float(node, "Rate", diagnostics=DiagnosticLog())
    assert fields.as_double(node, "Rate", diagnostics=DiagnosticLog()).value == 1.0e39


def test_integers_widen_to_floating_point():
    result = fields.as_double(ENTRY, "Weight", diagnostics=DiagnosticLog())
    assert result.value == 70.0
    assert isinstance(result.value, float)


def test_string_accepts_scalars_but_not_null_or_collections():
    log = DiagnosticLog()
    assert fields.as_string(ENTRY, "Weight", diagnostics=log).value == "70"
    assert not fields.as_string(ENTRY, "Empty", diagnostics=log)
    assert not fields.as_string(ENTRY, "Flags", diagnostics=log)


def test_field_on_scalar_node_is_missing():
    log = DiagnosticLog()
    scalar = ENTRY.get("Name")
    result = fields.as_string(scalar, "Anything", diagnostics=log)
    assert result.kind == FaultKind.MISSING_FIELD


def test_unknown_tag_is_a_parse_failure():
    log = DiagnosticLog()
    result = fields.as_int32(_node("A: !custom 5\n"), "A", default=9, diagnostics=log)
    assert result.status == ExtractionStatus.DEFAULT_APPLIED
    assert result.value == 9


@pytest.mark.parametrize(
    "accessor,text",
    [
        (fields.as_bool, "A: !!bool maybe\n"),
        (fields.as_int32, "A: !!timestamp garbage\n"),
        (fields.as_double, "A: !!float many\n"),
    ],
)
def test_malformed_tagged_scalars_fall_back_or_fail(accessor, text):
    node = _node(text)
    log = DiagnosticLog()
    defaulted = accessor(node, "A", default=7, diagnostics=log)
    assert defaulted.status == ExtractionStatus.DEFAULT_APPLIED
    assert defaulted.value == 7
    assert len(log.warnings) == 1

    required = accessor(node, "A", diagnostics=log)
    assert required.status == ExtractionStatus.FAILURE
    assert required.kind == FaultKind.INVALID_FIELD


def test_float_just_outside_single_range_fails():
    assert not fields.as_float(_node("Rate: 3.5e+38\n"), "Rate", diagnostics=DiagnosticLog())
    assert not fields.as_float(_node("Rate: -1.0e+39\n"), "Rate", diagnostics=DiagnosticLog())


def test_float_infinity_is_kept():
    result = fields.as_float(_node("Rate: .inf\n"), "Rate", diagnostics=DiagnosticLog())
    assert result.status == ExtractionStatus.VALUE
    assert result.value == float("inf")


def test_no_node_is_a_programmer_error():
    log = DiagnosticLog()
    result = fields.as_bool(None, "Flag", diagnostics=log)
    assert not result.ok
    assert result.kind == FaultKind.PROGRAMMER_ERROR
    assert [d.severity for d in log.records] == [Severity.FATAL]


def test_default_diagnostics_log_through_logging(caplog):
    with caplog.at_level("ERROR", logger="yamldb"):
        fields.as_int16(ENTRY, "Missing")
    assert 'Missing node "Missing"' in caplog.text
