"""Yamale schema validation -- run the CLI and classify its report."""

from __future__ import annotations

import logging
from pathlib import Path

from copilot.errors import ToolInvocationError
from copilot.validator.models import SchemaFailure, ToolError, ValidationSuccess
from copilot.validator.runner import ProcessRunner, ToolRun

logger = logging.getLogger(__name__)

TOOL_NAME = "yamale"
FAILURE_MARKER = "Validation failed!"
REPORT_HEADER = "Error validating data"
BANNER_PREFIX = "Validating "
DEFAULT_SUCCESS = "Validation success!"
STDERR_TAIL = 2


def build_command(yamale_path: str, schema_path: Path, document_path: Path) -> list[str]:
    return [yamale_path, "-s", str(schema_path), "-v", str(document_path)]


def _non_empty(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def extract_errors(stdout: str) -> list[str]:
    """Return the ``<key-path>: <message>`` lines of a failure report.

    Everything up to and including the failure marker is banner, and each
    document in the report starts with an ``Error validating data`` header.
    """
    lines = _non_empty(stdout)
    start = next(
        (i + 1 for i, line in enumerate(lines) if FAILURE_MARKER in line), len(lines)
    )
    return [line for line in lines[start:] if not line.startswith(REPORT_HEADER)]


def classify_output(run: ToolRun) -> ValidationSuccess | SchemaFailure | ToolError:
    """Turn yamale's stdout/stderr into a validation outcome."""
    if FAILURE_MARKER in run.stdout:
        errors = extract_errors(run.stdout)
        return SchemaFailure(errors=errors, raw_message="\n".join(errors))

    stderr_lines = _non_empty(run.stderr)
    if stderr_lines:
        return ToolError(
            tool=TOOL_NAME, raw_message="\n".join(stderr_lines[-STDERR_TAIL:]),
        )

    if run.returncode != 0:
        return ToolError(
            tool=TOOL_NAME,
            raw_message=run.stdout.strip() or f"exited with status {run.returncode}",
        )

    summary = [line for line in _non_empty(run.stdout) if not line.startswith(BANNER_PREFIX)]
    return ValidationSuccess(message=summary[0] if summary else DEFAULT_SUCCESS)


class YamaleValidator:
    """Schema validator collaborator backed by the yamale CLI."""

    def __init__(
        self, runner: ProcessRunner, yamale_path: str = TOOL_NAME,
    ) -> None:
        self._runner = runner
        self._yamale_path = yamale_path

    async def validate(
        self, schema_path: Path, document_path: Path,
    ) -> ValidationSuccess | SchemaFailure | ToolError:
        """Validate a document; invocation failures become a ToolError."""
        argv = build_command(self._yamale_path, schema_path, document_path)
        try:
            run = await self._runner.run(argv)
        except ToolInvocationError as e:
            logger.warning("Schema validation could not run: %s", e)
            return ToolError(tool=TOOL_NAME, raw_message=e.detail)

        outcome = classify_output(run)
        if isinstance(outcome, SchemaFailure):
            logger.info(
                "Schema validation failed for %s with %d error(s)",
                document_path,
                len(outcome.errors),
            )
        elif isinstance(outcome, ToolError):
            logger.warning("yamale reported an error: %s", outcome.raw_message)
        return outcome
