"""Chat-model backend interface and the shared HTTP plumbing."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel, Field

from copilot.errors import BackendResponseError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 10.0


class LLMResponse(BaseModel):
    """A single non-streamed completion."""

    content: str
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    raw: dict[str, Any] = Field(default_factory=dict)


class LLMBackend(ABC):
    """Anything that can answer a system + user prompt pair."""

    @property
    def model_name(self) -> str:
        return getattr(self, "_model", "")

    @abstractmethod
    async def generate(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...

    async def close(self) -> None:
        return None


class HTTPChatBackend(LLMBackend):
    """Backend talking JSON to a chat endpoint over one lazily opened client.

    Subclasses name the endpoints and map the provider's reply onto
    ``LLMResponse``.
    """

    provider = "chat"
    chat_path = ""
    health_path = ""

    def __init__(self, base_url: str, model: str, timeout: float = 120.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=httpx.Timeout(self._timeout, connect=CONNECT_TIMEOUT),
            )
        return self._client

    @staticmethod
    def _messages(system_prompt: str, user_prompt: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    @abstractmethod
    def _payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        ...

    @abstractmethod
    def _parse(self, data: dict[str, Any]) -> LLMResponse:
        ...

    def _check_status(self, resp: httpx.Response) -> None:
        resp.raise_for_status()

    async def generate(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        client = await self._get_client()
        logger.debug(
            "%s request: model=%s, prompt_len=%d",
            self.provider,
            self._model,
            len(user_prompt),
        )
        resp = await client.post(
            self.chat_path, json=self._payload(system_prompt, user_prompt),
        )
        self._check_status(resp)

        try:
            data = resp.json()
        except ValueError:
            preview = resp.text[:200] if resp.text else "(empty)"
            raise BackendResponseError(
                f"{self.provider} returned non-JSON response "
                f"(status {resp.status_code}, url {self._base_url}): {preview}"
            )
        return self._parse(data)

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            resp = await client.get(self.health_path)
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
