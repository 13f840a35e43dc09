"""Validation and annotation endpoints."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from copilot.annotations.overlay import Annotation, OverlayRegistry
from copilot.annotations.surface import MarkerView, TextBufferSurface
from copilot.config import CopilotSettings
from copilot.deps import get_llm_backend, get_orchestrator, get_overlays, get_settings
from copilot.llm.base import LLMBackend
from copilot.orchestrator.engine import PassReport, ValidationOrchestrator
from copilot.suggestions.engine import SuggestionContext
from copilot.workspace.schemas import find_schema, load_example_vars, read_schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["validate"])

# A single directory name under workflows/
_WORKFLOW_RE = re.compile(r"[\w.-]+")


class ValidateRequest(BaseModel):
    """Request body for POST /api/validate."""

    path: str = Field(..., min_length=1, description="Vars file to validate")
    text: str | None = Field(
        None, description="Unsaved editor contents; the file on disk is used if omitted"
    )
    schema_path: str | None = None
    workflow: str | None = None
    playbook: str = ""


class ValidateResponse(BaseModel):
    report: PassReport
    markers: list[MarkerView] = Field(default_factory=list)


class AnnotationsResponse(BaseModel):
    path: str
    annotations: list[Annotation] = Field(default_factory=list)
    markers: list[MarkerView] = Field(default_factory=list)


def _resolve(path: str, settings: CopilotSettings) -> Path:
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = settings.workspace / candidate
    return candidate.resolve()


@contextmanager
def _unsaved_copy(document_path: Path, text: str | None) -> Iterator[Path | None]:
    """Write unsaved editor text beside the document for the tools to read.

    The copy keeps the document's suffix and is removed when the pass ends.
    """
    if text is None:
        yield None
        return
    fd, name = tempfile.mkstemp(
        suffix=document_path.suffix,
        prefix=f".{document_path.stem}.",
        dir=document_path.parent,
    )
    copy = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        yield copy
    finally:
        copy.unlink(missing_ok=True)


def _check_workflow(workflow: str) -> None:
    if not _WORKFLOW_RE.fullmatch(workflow) or ".." in workflow:
        raise HTTPException(status_code=400, detail=f"Invalid workflow name: {workflow}")


def _markers(registry: OverlayRegistry, key: str) -> list[MarkerView]:
    overlay = registry.get(key)
    if overlay is not None and isinstance(overlay.surface, TextBufferSurface):
        return overlay.surface.markers
    return []


@router.post("/validate", response_model=ValidateResponse)
async def validate_document(
    body: ValidateRequest,
    settings: CopilotSettings = Depends(get_settings),
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
    overlays: OverlayRegistry = Depends(get_overlays),
) -> ValidateResponse:
    """Run a validation pass and return the resulting annotations."""
    document_path = _resolve(body.path, settings)
    if not document_path.is_file():
        raise HTTPException(status_code=404, detail=f"Document not found: {body.path}")

    if body.workflow:
        _check_workflow(body.workflow)

    schema_path: Path | None = None
    if body.schema_path:
        schema_path = _resolve(body.schema_path, settings)
        if not schema_path.is_file():
            raise HTTPException(
                status_code=400, detail=f"Schema not found: {body.schema_path}"
            )
    elif body.workflow:
        schema_path = find_schema(settings.workspace, body.workflow, body.playbook)

    example_vars = None
    if body.workflow:
        example_vars = load_example_vars(
            settings.workspace, body.workflow, body.playbook, singular=True,
        ) or None

    context = SuggestionContext(
        workflow=body.workflow,
        playbook=body.playbook or None,
        schema_text=read_schema(schema_path),
        example_vars=example_vars,
    )

    surface = (
        TextBufferSurface(body.text)
        if body.text is not None
        else TextBufferSurface.from_path(document_path)
    )
    key = str(document_path)
    overlay = overlays.open(key, surface)

    with _unsaved_copy(document_path, body.text) as source_path:
        report = await orchestrator.run_pass(
            document_path, overlay, schema_path, context, source_path=source_path,
        )
    return ValidateResponse(report=report, markers=_markers(overlays, key))


@router.get("/annotations", response_model=AnnotationsResponse)
async def get_annotations(
    path: str = Query(..., min_length=1),
    settings: CopilotSettings = Depends(get_settings),
    overlays: OverlayRegistry = Depends(get_overlays),
) -> AnnotationsResponse:
    """Return the current overlay of a document."""
    key = str(_resolve(path, settings))
    overlay = overlays.get(key)
    if overlay is None:
        raise HTTPException(status_code=404, detail="No annotations for this document")
    return AnnotationsResponse(
        path=key, annotations=overlay.annotations, markers=_markers(overlays, key),
    )


@router.delete("/annotations")
async def close_document(
    path: str = Query(..., min_length=1),
    settings: CopilotSettings = Depends(get_settings),
    overlays: OverlayRegistry = Depends(get_overlays),
) -> dict:
    """Clear a document's overlay when its editor is closed."""
    closed = overlays.close(str(_resolve(path, settings)))
    return {"closed": closed}


@router.get("/health")
async def health(
    settings: CopilotSettings = Depends(get_settings),
    llm: LLMBackend | None = Depends(get_llm_backend),
) -> dict:
    """Report chat backend reachability and the configured tool paths."""
    reachable = await llm.health_check() if llm is not None else False
    return {
        "llm_backend": settings.llm_backend,
        "llm_model": settings.llm_model,
        "llm_reachable": reachable,
        "tools": {
            "yamale": settings.yamale_path,
            "ansible-lint": settings.ansible_lint_path,
            "yamllint": settings.yamllint_path,
        },
    }
