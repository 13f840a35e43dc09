"""Tests for the ruamel.yaml syntax check."""

from __future__ import annotations

from copilot.validator.yaml_syntax import check_yaml_syntax


def test_valid_yaml_has_no_finding(devices_yaml: str) -> None:
    assert check_yaml_syntax(devices_yaml) is None


def test_empty_document_is_valid() -> None:
    assert check_yaml_syntax("") is None


def test_syntax_error_reports_line() -> None:
    finding = check_yaml_syntax("devices:\n  - name: sw1\n    type: x: y\n")
    assert finding is not None
    assert finding.tool == "yaml"
    assert finding.line == 3
    assert finding.annotation_text.startswith("[yaml]: ")


def test_duplicate_keys_are_not_syntax_errors() -> None:
    assert check_yaml_syntax("a: 1\na: 2\n") is None
