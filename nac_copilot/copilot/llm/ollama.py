"""Ollama chat backend."""

from __future__ import annotations

from typing import Any

from copilot.errors import BackendResponseError
from copilot.llm.base import HTTPChatBackend, LLMResponse


class OllamaBackend(HTTPChatBackend):
    """Local model served by Ollama's ``/api/chat``."""

    provider = "Ollama"
    chat_path = "/api/chat"
    health_path = "/api/tags"

    def _payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": self._messages(system_prompt, user_prompt),
            "stream": False,
            "options": {"temperature": 0},
        }

    def _parse(self, data: dict[str, Any]) -> LLMResponse:
        if "message" not in data:
            raise BackendResponseError(
                "Unexpected Ollama response format (missing 'message' key). "
                f"Got keys: {list(data.keys())}."
            )
        return LLMResponse(
            content=data["message"].get("content") or "",
            model=data.get("model", self._model),
            prompt_tokens=data.get("prompt_eval_count", 0),
            completion_tokens=data.get("eval_count", 0),
            raw=data,
        )
