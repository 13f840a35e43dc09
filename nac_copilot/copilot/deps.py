"""Shared FastAPI dependencies."""

from __future__ import annotations

from copilot.annotations.overlay import OverlayRegistry
from copilot.config import CopilotSettings
from copilot.llm.base import LLMBackend
from copilot.orchestrator.engine import ValidationOrchestrator

_settings: CopilotSettings | None = None
_llm_backend: LLMBackend | None = None
_orchestrator: ValidationOrchestrator | None = None
_overlays: OverlayRegistry | None = None


def get_settings() -> CopilotSettings:
    """FastAPI dependency: return the loaded settings."""
    assert _settings is not None, "Settings not initialised"
    return _settings


def get_llm_backend() -> LLMBackend | None:
    """FastAPI dependency: return the chat backend (None when disabled)."""
    return _llm_backend


def get_orchestrator() -> ValidationOrchestrator:
    """FastAPI dependency: return the shared ValidationOrchestrator."""
    assert _orchestrator is not None, "ValidationOrchestrator not initialised"
    return _orchestrator


def get_overlays() -> OverlayRegistry:
    """FastAPI dependency: return the per-document overlay registry."""
    assert _overlays is not None, "OverlayRegistry not initialised"
    return _overlays
