"""Copilot settings -- options file with environment fallback."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from copilot.validator.linters import DEFAULT_SUPPRESSED_KEYWORDS

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_PATH = "copilot_options.json"


class CopilotSettings(BaseModel):
    """Tool paths and chat-model options."""

    yamale_path: str = "yamale"
    ansible_lint_path: str = "ansible-lint"
    yamllint_path: str = "yamllint"
    tool_timeout: float = 60.0

    llm_backend: Literal["ollama", "openai_compat", "none"] = "ollama"
    llm_api_url: str = "http://localhost:11434"
    llm_api_key: str = ""
    llm_model: str = "llama3.2"
    llm_timeout: float = 120.0
    suggestion_policy: Literal["reconcile", "reject"] = "reconcile"

    workspace: Path = Field(default_factory=Path.cwd)
    suppressed_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SUPPRESSED_KEYWORDS)
    )

    def redacted(self) -> dict:
        """Settings as a dict, safe to log."""
        return {
            k: ("***" if "key" in k and v else v)
            for k, v in self.model_dump(mode="json").items()
        }


def _from_env() -> dict:
    env = {
        "yamale_path": os.environ.get("YAMALE_PATH"),
        "ansible_lint_path": os.environ.get("ANSIBLE_LINT_PATH"),
        "yamllint_path": os.environ.get("YAMLLINT_PATH"),
        "tool_timeout": os.environ.get("TOOL_TIMEOUT"),
        "llm_backend": os.environ.get("LLM_BACKEND"),
        "llm_api_url": os.environ.get("LLM_API_URL"),
        "llm_api_key": os.environ.get("LLM_API_KEY"),
        "llm_model": os.environ.get("LLM_MODEL"),
        "workspace": os.environ.get("COPILOT_WORKSPACE"),
    }
    return {k: v for k, v in env.items() if v}


def load_settings(options_path: str | None = None) -> CopilotSettings:
    """Load settings from a JSON options file, or the environment if absent."""
    path = Path(
        options_path or os.environ.get("COPILOT_OPTIONS_PATH", DEFAULT_OPTIONS_PATH)
    )
    if path.exists():
        logger.debug("Loading options from %s", path)
        return CopilotSettings.model_validate(json.loads(path.read_text()))
    return CopilotSettings.model_validate(_from_env())
