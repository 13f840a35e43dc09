"""External validator and linter collaborators."""

from copilot.validator.linters import StyleLinter, ansible_lint, yamllint
from copilot.validator.models import (
    LintFinding,
    LintReport,
    SchemaFailure,
    ToolError,
    ValidationOutcome,
    ValidationSeverity,
    ValidationSuccess,
)
from copilot.validator.runner import ProcessRunner, ToolRun
from copilot.validator.yamale import YamaleValidator

__all__ = [
    "LintFinding",
    "LintReport",
    "ProcessRunner",
    "SchemaFailure",
    "StyleLinter",
    "ToolError",
    "ToolRun",
    "ValidationOutcome",
    "ValidationSeverity",
    "ValidationSuccess",
    "YamaleValidator",
    "ansible_lint",
    "yamllint",
]
