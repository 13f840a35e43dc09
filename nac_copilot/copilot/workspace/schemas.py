"""Locate the validation schema and sample vars files of a workflow.

Workflows follow the reference repository layout::

    workflows/<workflow>/schema/<name>_schema.yml
    workflows/<workflow>/vars/<name>.yml

Delete playbooks come with their own ``*delete*`` schema and sample vars.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DELETE_MARKER = "delete"
JINJA_MARKER = "jinja"


def _workflow_dirs(root: Path, workflow: str) -> list[Path]:
    return sorted(p for p in root.glob(f"**/workflows/{workflow}") if p.is_dir())


def find_schema(root: Path, workflow: str, playbook: str = "") -> Path | None:
    """Return the schema file for a workflow, or None if there is none.

    A delete playbook prefers a delete schema when the workflow has more
    than one; every other playbook ignores delete schemas.
    """
    candidates: list[Path] = []
    for wf_dir in _workflow_dirs(root, workflow):
        candidates.extend(sorted((wf_dir / "schema").glob("*_schema.yml")))

    if len(candidates) > 1 and DELETE_MARKER in playbook:
        candidates = [c for c in candidates if DELETE_MARKER in c.name]
    else:
        candidates = [c for c in candidates if DELETE_MARKER not in c.name]

    if not candidates:
        logger.info("No validation schema found for workflow %s", workflow)
        return None
    logger.debug("Validation schema for %s: %s", workflow, candidates[0])
    return candidates[0]


def _matches_playbook(path: Path, playbook: str) -> bool:
    name = path.name
    if DELETE_MARKER in playbook:
        return DELETE_MARKER in name
    if DELETE_MARKER in name:
        return False
    return JINJA_MARKER in playbook or JINJA_MARKER not in name


def load_example_vars(
    root: Path, workflow: str, playbook: str = "", singular: bool = False,
) -> str:
    """Read the sample vars files of a workflow as prompt context.

    With ``singular`` only the first sample matching the playbook is
    returned; otherwise every sample is concatenated as numbered examples.
    Unreadable files are skipped.
    """
    files: list[Path] = []
    for wf_dir in _workflow_dirs(root, workflow):
        files.extend(sorted((wf_dir / "vars").glob("*.yml")))

    examples: list[str] = []
    for path in files:
        if singular and not _matches_playbook(path, playbook):
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read sample vars file %s: %s", path, e)
            continue
        if singular:
            return content
        examples.append(f"Example {len(examples) + 1}: {content}")

    return "\n".join(examples)


def read_schema(path: Path | None) -> str | None:
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read validation schema %s: %s", path, e)
        return None
