"""Validation data models."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class ValidationSeverity(str, Enum):
    """Severity level reported by a linter."""

    error = "error"
    warning = "warning"
    info = "info"


class LintFinding(BaseModel):
    """A single style-linter diagnostic with an absolute line number."""

    tool: str
    line: int
    column: int | None = None
    severity: ValidationSeverity = ValidationSeverity.warning
    message: str
    rule: str | None = None

    @property
    def annotation_text(self) -> str:
        return f"[{self.tool}]: {self.message}"


class ValidationSuccess(BaseModel):
    """The schema validator accepted the document."""

    kind: Literal["success"] = "success"
    message: str


class SchemaFailure(BaseModel):
    """The schema validator rejected the document."""

    kind: Literal["schema_failure"] = "schema_failure"
    errors: list[str] = Field(default_factory=list)
    raw_message: str = ""


class ToolError(BaseModel):
    """The validator could not produce a verdict."""

    kind: Literal["tool_error"] = "tool_error"
    tool: str = ""
    raw_message: str = ""


ValidationOutcome = Annotated[
    Union[ValidationSuccess, SchemaFailure, ToolError],
    Field(discriminator="kind"),
]


class LintReport(BaseModel):
    """Output of one style-linter run."""

    tool: str
    output: str = ""
    findings: list[LintFinding] = Field(default_factory=list)
    suppressed: int = 0
    error: str | None = None
