"""Validation orchestrator -- one schema pass plus two style passes per run.

A pass clears the document's overlay, runs every collaborator, and only then
applies annotations. No ``await`` sits between the first and last
``apply()``, so a cancelled pass leaves the overlay empty rather than half
populated. Passes on the same document are queued behind a lock.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from copilot.annotations.overlay import Annotation, OverlayManager
from copilot.annotations.resolver import SourceDocument, resolve_errors
from copilot.config import CopilotSettings
from copilot.llm.base import LLMBackend
from copilot.suggestions.engine import SuggestionContext, SuggestionEngine
from copilot.validator.linters import (
    DEFAULT_SUPPRESSED_KEYWORDS,
    StyleLinter,
    ansible_lint,
    filter_findings,
    is_yaml_file,
    yamllint,
)
from copilot.validator.models import (
    LintFinding,
    LintReport,
    SchemaFailure,
    ToolError,
    ValidationOutcome,
    ValidationSuccess,
)
from copilot.validator.runner import ProcessRunner
from copilot.validator.yamale import TOOL_NAME as YAMALE, YamaleValidator
from copilot.validator.yaml_syntax import check_yaml_syntax

logger = logging.getLogger(__name__)

NO_SCHEMA_MESSAGE = "No validation schema found for this document"


class SchemaAnnotation(BaseModel):
    """A validator error paired with its resolved line and suggestion."""

    error: str
    line: int
    suggestion: str


class PassReport(BaseModel):
    """Everything one validation pass produced."""

    document: str
    outcome: ValidationOutcome
    schema_annotations: list[SchemaAnnotation] = Field(default_factory=list)
    suggestion_source: Literal["llm", "validator"] | None = None
    syntax: LintFinding | None = None
    lint: list[LintReport] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return isinstance(self.outcome, ValidationSuccess)


class ValidationOrchestrator:
    """Drives the validator, the linters and the overlay for a document."""

    def __init__(
        self,
        validator: YamaleValidator,
        linters: list[StyleLinter],
        suggestion_engine: SuggestionEngine,
        suppressed_keywords: list[str] | None = None,
    ) -> None:
        self._validator = validator
        self._linters = linters
        self._suggestions = suggestion_engine
        self._suppressed = (
            list(suppressed_keywords)
            if suppressed_keywords is not None
            else list(DEFAULT_SUPPRESSED_KEYWORDS)
        )
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @classmethod
    def from_settings(
        cls, settings: CopilotSettings, llm_backend: LLMBackend | None,
    ) -> ValidationOrchestrator:
        runner = ProcessRunner(timeout=settings.tool_timeout)
        return cls(
            validator=YamaleValidator(runner, settings.yamale_path),
            linters=[
                ansible_lint(runner, settings.ansible_lint_path),
                yamllint(runner, settings.yamllint_path),
            ],
            suggestion_engine=SuggestionEngine(llm_backend, settings.suggestion_policy),
            suppressed_keywords=settings.suppressed_keywords,
        )

    async def run_pass(
        self,
        document_path: Path,
        overlay: OverlayManager,
        schema_path: Path | None = None,
        context: SuggestionContext | None = None,
        source_path: Path | None = None,
    ) -> PassReport:
        """Validate and lint ``document_path`` and repopulate ``overlay``.

        Errors are resolved against the overlay's surface, which holds the
        text the user currently sees. When that text is unsaved, the caller
        writes it to ``source_path`` and the tools check that file instead.
        """
        key = str(document_path.resolve())
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                return await self._run_pass(
                    document_path, overlay, schema_path, context, source_path,
                )
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def _run_pass(
        self,
        document_path: Path,
        overlay: OverlayManager,
        schema_path: Path | None,
        context: SuggestionContext | None,
        source_path: Path | None,
    ) -> PassReport:
        checked_path = source_path or document_path
        overlay.clear_all()
        document = SourceDocument.from_surface(overlay.surface)
        syntax = check_yaml_syntax("\n".join(document.lines))

        outcome = await self._validate(checked_path, schema_path)

        schema_annotations: list[SchemaAnnotation] = []
        suggestion_source = None
        if isinstance(outcome, SchemaFailure) and outcome.errors:
            result = await self._suggestions.suggest(outcome.errors, document, context)
            suggestion_source = result.source
            lines = resolve_errors(outcome.errors, document)
            schema_annotations = [
                SchemaAnnotation(error=error, line=line, suggestion=suggestion)
                for error, line, suggestion in zip(outcome.errors, lines, result.suggestions)
            ]

        lint_reports: list[LintReport] = []
        if is_yaml_file(document_path):
            for linter in self._linters:
                lint_reports.append(await self._lint(linter, checked_path))

        for item in schema_annotations:
            overlay.apply(item.line, item.suggestion, source=YAMALE)
        if syntax is not None:
            overlay.apply(syntax.line, syntax.annotation_text, source=syntax.tool)
        for report in lint_reports:
            for finding in report.findings:
                overlay.apply(finding.line, finding.annotation_text, source=finding.tool)

        logger.info(
            "Validation pass for %s: %s, %d annotation(s)",
            document_path.name,
            outcome.kind,
            len(overlay),
        )
        return PassReport(
            document=str(document_path),
            outcome=outcome,
            schema_annotations=schema_annotations,
            suggestion_source=suggestion_source,
            syntax=syntax,
            lint=lint_reports,
            annotations=overlay.annotations,
        )

    async def _validate(
        self, document_path: Path, schema_path: Path | None,
    ) -> ValidationSuccess | SchemaFailure | ToolError:
        if schema_path is None:
            logger.info("Skipping schema validation for %s: no schema", document_path.name)
            return ToolError(tool=YAMALE, raw_message=NO_SCHEMA_MESSAGE)
        return await self._validator.validate(schema_path, document_path)

    async def _lint(self, linter: StyleLinter, document_path: Path) -> LintReport:
        report = await linter.lint(document_path)
        kept, dropped = filter_findings(report.findings, self._suppressed)
        if dropped:
            logger.debug("%s: suppressed %d layout finding(s)", linter.name, dropped)
        return report.model_copy(update={"findings": kept, "suppressed": dropped})
