"""Tests for the chat backends."""

import json

import pytest

from copilot.config import CopilotSettings
from copilot.errors import BackendResponseError
from copilot.llm.factory import create_backend
from copilot.llm.ollama import OllamaBackend
from copilot.llm.openai_compat import OpenAICompatBackend


def _openai_reply(content: str) -> dict:
    return {
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5},
    }


# -- OpenAI-compat --


@pytest.mark.asyncio
async def test_openai_compat_sends_system_and_user_messages(httpx_mock) -> None:
    httpx_mock.add_response(
        url="https://llm.example.com/v1/chat/completions",
        json=_openai_reply('["Add a type field"]'),
    )

    backend = OpenAICompatBackend(
        base_url="https://llm.example.com/", model="gpt-4o-mini", api_key="sk-test",
    )
    resp = await backend.generate("system text", "user text")
    await backend.close()

    request = httpx_mock.get_request()
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o-mini"
    assert body["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]
    assert body["stream"] is False
    assert request.headers["Authorization"] == "Bearer sk-test"

    assert resp.content == '["Add a type field"]'
    assert resp.prompt_tokens == 10
    assert resp.completion_tokens == 5


@pytest.mark.asyncio
async def test_openai_compat_no_auth_header_without_key(httpx_mock) -> None:
    httpx_mock.add_response(
        url="http://localhost:8000/v1/chat/completions",
        json=_openai_reply("[]"),
    )

    backend = OpenAICompatBackend(base_url="http://localhost:8000", model="local")
    await backend.generate("s", "u")
    await backend.close()

    assert "Authorization" not in httpx_mock.get_request().headers


@pytest.mark.asyncio
async def test_openai_compat_api_error(httpx_mock) -> None:
    httpx_mock.add_response(
        url="https://llm.example.com/v1/chat/completions",
        status_code=401,
        json={"error": {"message": "invalid api key"}},
    )

    backend = OpenAICompatBackend(base_url="https://llm.example.com", model="m")
    with pytest.raises(RuntimeError, match="invalid api key"):
        await backend.generate("s", "u")
    await backend.close()


@pytest.mark.asyncio
async def test_openai_compat_missing_choices(httpx_mock) -> None:
    httpx_mock.add_response(
        url="https://llm.example.com/v1/chat/completions",
        json={"id": "x"},
    )

    backend = OpenAICompatBackend(base_url="https://llm.example.com", model="m")
    with pytest.raises(BackendResponseError, match="missing 'choices'"):
        await backend.generate("s", "u")
    await backend.close()


# -- Ollama --


@pytest.mark.asyncio
async def test_ollama_generate(httpx_mock) -> None:
    httpx_mock.add_response(
        url="http://localhost:11434/api/chat",
        json={
            "model": "llama3.2",
            "message": {"role": "assistant", "content": '["Fix it"]'},
            "prompt_eval_count": 42,
            "eval_count": 7,
        },
    )

    backend = OllamaBackend(base_url="http://localhost:11434", model="llama3.2")
    resp = await backend.generate("s", "u")
    await backend.close()

    body = json.loads(httpx_mock.get_request().content)
    assert body["model"] == "llama3.2"
    assert body["stream"] is False
    assert resp.content == '["Fix it"]'
    assert resp.prompt_tokens == 42
    assert resp.completion_tokens == 7


@pytest.mark.asyncio
async def test_ollama_unexpected_format(httpx_mock) -> None:
    httpx_mock.add_response(url="http://localhost:11434/api/chat", json={"choices": []})

    backend = OllamaBackend(base_url="http://localhost:11434", model="llama3.2")
    with pytest.raises(BackendResponseError, match="missing 'message'"):
        await backend.generate("s", "u")
    await backend.close()


@pytest.mark.asyncio
async def test_ollama_health_check(httpx_mock) -> None:
    httpx_mock.add_response(url="http://localhost:11434/api/tags", json={"models": []})

    backend = OllamaBackend(base_url="http://localhost:11434", model="llama3.2")
    assert await backend.health_check() is True
    await backend.close()


# -- Factory --


def test_factory_disabled() -> None:
    assert create_backend(CopilotSettings(llm_backend="none")) is None


def test_factory_openai_compat() -> None:
    backend = create_backend(
        CopilotSettings(
            llm_backend="openai_compat",
            llm_api_url="https://llm.example.com",
            llm_model="gpt-4o-mini",
            llm_api_key="sk",
        )
    )
    assert isinstance(backend, OpenAICompatBackend)
    assert backend.model_name == "gpt-4o-mini"


def test_factory_defaults_to_ollama() -> None:
    backend = create_backend(CopilotSettings())
    assert isinstance(backend, OllamaBackend)
    assert backend.model_name == "llama3.2"


@pytest.mark.asyncio
async def test_non_json_reply_names_the_provider(httpx_mock) -> None:
    httpx_mock.add_response(url="http://localhost:11434/api/chat", text="<html>proxy</html>")

    backend = OllamaBackend(base_url="http://localhost:11434", model="llama3.2")
    with pytest.raises(BackendResponseError, match="Ollama returned non-JSON"):
        await backend.generate("s", "u")
    await backend.close()
