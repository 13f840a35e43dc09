"""OpenAI-compatible chat backend.

Works with any provider exposing ``/v1/chat/completions`` (OpenAI, vLLM,
LiteLLM, an Azure gateway, ...).
"""

from __future__ import annotations

from typing import Any

import httpx

from copilot.errors import BackendResponseError
from copilot.llm.base import HTTPChatBackend, LLMResponse


class OpenAICompatBackend(HTTPChatBackend):
    """Hosted or self-served model behind ``/v1/chat/completions``."""

    provider = "OpenAI-compat"
    chat_path = "/v1/chat/completions"
    health_path = "/v1/models"

    def __init__(
        self, base_url: str, model: str, api_key: str = "", timeout: float = 120.0,
    ) -> None:
        super().__init__(base_url, model, timeout)
        self._api_key = api_key

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {"Authorization": f"Bearer {self._api_key}"}

    def _payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": self._messages(system_prompt, user_prompt),
            "temperature": 0,
            "stream": False,
        }

    def _check_status(self, resp: httpx.Response) -> None:
        if resp.status_code == 200:
            return
        try:
            err_msg = resp.json().get("error", {}).get("message", resp.text)
        except ValueError:
            err_msg = resp.text
        raise BackendResponseError(f"API error ({resp.status_code}): {err_msg}")

    def _parse(self, data: dict[str, Any]) -> LLMResponse:
        if not data.get("choices"):
            raise BackendResponseError(
                "Unexpected API response format (missing 'choices'). "
                f"Got keys: {list(data.keys())}."
            )
        message = data["choices"][0].get("message", {})
        usage = data.get("usage") or {}
        return LLMResponse(
            content=message.get("content") or "",
            model=data.get("model", self._model),
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            raw=data,
        )
