"""YAML syntax check using ruamel.yaml."""

from __future__ import annotations

from io import StringIO

from ruamel.yaml import YAML, YAMLError

from copilot.validator.models import LintFinding, ValidationSeverity

TOOL_NAME = "yaml"


def check_yaml_syntax(yaml_str: str) -> LintFinding | None:
    """Parse the document and report the first syntax error, if any.

    Returns None when the text parses. An error without a position is
    reported on line 1.
    """
    yaml = YAML()
    yaml.allow_duplicate_keys = True

    try:
        yaml.load(StringIO(yaml_str))
    except YAMLError as e:
        line = 1
        column = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1  # 0-indexed to 1-indexed
            column = mark.column + 1
        problem = getattr(e, "problem", None) or str(e).strip().split("\n")[0]
        return LintFinding(
            tool=TOOL_NAME,
            line=line,
            column=column,
            severity=ValidationSeverity.error,
            message=problem,
        )

    return None
