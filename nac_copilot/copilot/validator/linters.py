"""Style linters (ansible-lint, yamllint) -- run them and parse their findings.

Both tools report absolute line numbers, so no key-path resolution is
needed for their output.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from pathlib import Path

from copilot.errors import ToolInvocationError
from copilot.validator.models import LintFinding, LintReport, ValidationSeverity
from copilot.validator.runner import ProcessRunner

logger = logging.getLogger(__name__)

ANSIBLE_LINT = "ansible-lint"
YAMLLINT = "yamllint"

YAML_SUFFIXES = {".yml", ".yaml"}

# Findings about whitespace layout are left to the editor's formatter
DEFAULT_SUPPRESSED_KEYWORDS = ("indent", "indented", "align")

# path:line or path:line:col on a line of its own
_LOCATOR_RE = re.compile(r"^(?P<path>\S.*?):(?P<line>\d+)(?::(?P<col>\d+))?$")
# rule-id[tag]: message
_RULE_PREFIX_RE = re.compile(r"^(?P<rule>[\w-]+(?:\[[\w-]+\])?):\s+(?P<message>.+)$")
# "  3:5  error  message  (rule)" or "path:3:5: [error] message (rule)"
_YAMLLINT_RE = re.compile(
    r"^\s*(?:(?P<path>.*?):)?(?P<line>\d+):(?P<col>\d+):?\s+"
    r"\[?(?P<level>error|warning)\]?\s+"
    r"(?P<message>.*?)(?:\s+\((?P<rule>[\w-]+)\))?\s*$"
)

_LEVELS = {
    "error": ValidationSeverity.error,
    "warning": ValidationSeverity.warning,
}


def parse_ansible_lint(stdout: str) -> list[LintFinding]:
    """Pair each message line with the ``path:line`` locator that follows it."""
    findings: list[LintFinding] = []
    pending: str | None = None

    for raw in stdout.splitlines():
        line = raw.strip()
        if not line:
            continue
        locator = _LOCATOR_RE.match(line)
        if locator is None or pending is None:
            pending = line
            continue

        rule = None
        message = pending
        prefixed = _RULE_PREFIX_RE.match(pending)
        if prefixed:
            rule = prefixed.group("rule")
            message = prefixed.group("message")

        col = locator.group("col")
        findings.append(
            LintFinding(
                tool=ANSIBLE_LINT,
                line=int(locator.group("line")),
                column=int(col) if col else None,
                severity=ValidationSeverity.error,
                message=message,
                rule=rule,
            )
        )
        pending = None

    return findings


def parse_yamllint(stdout: str) -> list[LintFinding]:
    """Parse yamllint's standard or parsable output format."""
    findings: list[LintFinding] = []
    for raw in stdout.splitlines():
        match = _YAMLLINT_RE.match(raw)
        if match is None:
            continue
        findings.append(
            LintFinding(
                tool=YAMLLINT,
                line=int(match.group("line")),
                column=int(match.group("col")),
                severity=_LEVELS[match.group("level")],
                message=match.group("message"),
                rule=match.group("rule"),
            )
        )
    return findings


def filter_findings(
    findings: Iterable[LintFinding],
    keywords: Iterable[str] = DEFAULT_SUPPRESSED_KEYWORDS,
) -> tuple[list[LintFinding], int]:
    """Drop findings whose message mentions a suppressed keyword.

    Returns the kept findings and how many were dropped.
    """
    lowered = [k.lower() for k in keywords]
    kept: list[LintFinding] = []
    dropped = 0
    for finding in findings:
        text = finding.message.lower()
        if any(k in text for k in lowered):
            dropped += 1
        else:
            kept.append(finding)
    return kept, dropped


def is_yaml_file(path: Path) -> bool:
    return path.suffix.lower() in YAML_SUFFIXES


class StyleLinter:
    """A style-linter collaborator: an executable plus an output parser."""

    def __init__(
        self,
        name: str,
        executable: str,
        parser: Callable[[str], list[LintFinding]],
        runner: ProcessRunner,
    ) -> None:
        self.name = name
        self._executable = executable
        self._parser = parser
        self._runner = runner

    async def lint(self, document_path: Path) -> LintReport:
        """Lint a document. Never raises; failures are recorded on the report."""
        try:
            run = await self._runner.run([self._executable, str(document_path)])
            findings = self._parser(run.stdout)
            if not findings and run.returncode != 0 and run.stderr.strip():
                raise ToolInvocationError(self.name, run.stderr.strip())
        except ToolInvocationError as e:
            logger.warning("%s failed: %s", self.name, e.detail)
            return LintReport(tool=self.name, error=e.detail)

        logger.info("%s reported %d finding(s)", self.name, len(findings))
        return LintReport(tool=self.name, output=run.stdout, findings=findings)


def ansible_lint(runner: ProcessRunner, executable: str = ANSIBLE_LINT) -> StyleLinter:
    return StyleLinter(ANSIBLE_LINT, executable, parse_ansible_lint, runner)


def yamllint(runner: ProcessRunner, executable: str = YAMLLINT) -> StyleLinter:
    return StyleLinter(YAMLLINT, executable, parse_yamllint, runner)
