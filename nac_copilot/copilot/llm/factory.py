"""Build the configured chat backend."""

from __future__ import annotations

import logging

from copilot.config import CopilotSettings
from copilot.llm.base import LLMBackend
from copilot.llm.ollama import OllamaBackend
from copilot.llm.openai_compat import OpenAICompatBackend

logger = logging.getLogger(__name__)


def create_backend(settings: CopilotSettings) -> LLMBackend | None:
    """Return the backend named by ``settings.llm_backend``, or None if disabled."""
    if settings.llm_backend == "none":
        logger.info("LLM suggestions disabled")
        return None
    if settings.llm_backend == "openai_compat":
        backend: LLMBackend = OpenAICompatBackend(
            base_url=settings.llm_api_url,
            model=settings.llm_model,
            api_key=settings.llm_api_key,
            timeout=settings.llm_timeout,
        )
    else:
        backend = OllamaBackend(
            base_url=settings.llm_api_url,
            model=settings.llm_model,
            timeout=settings.llm_timeout,
        )
    logger.info("LLM backend: %s (model: %s)", settings.llm_backend, settings.llm_model)
    return backend
