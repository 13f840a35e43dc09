"""Suggestion engine -- one human-readable fix per validator error.

The chat model must return exactly one suggestion per error, in order.
When it does not, the ``reconcile`` policy drops surplus suggestions and
fills missing ones with the validator's own message, so every error still
gets an annotation. The ``reject`` policy discards the model output and uses
the validator messages for every error.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Literal

from pydantic import BaseModel, Field

from copilot.annotations.keypath import parse_error_line
from copilot.annotations.resolver import SourceDocument
from copilot.errors import SuggestionCountMismatch
from copilot.llm.base import LLMBackend
from copilot.llm.prompts.annotations import (
    ANNOTATION_SYSTEM_PROMPT,
    build_annotation_user_prompt,
)

logger = logging.getLogger(__name__)

MismatchPolicy = Literal["reconcile", "reject"]


class SuggestionContext(BaseModel):
    """Background the model gets alongside the errors."""

    workflow: str | None = None
    playbook: str | None = None
    schema_text: str | None = None
    example_vars: str | None = None


class SuggestionResult(BaseModel):
    """Suggestions aligned by position with the errors they fix."""

    suggestions: list[str] = Field(default_factory=list)
    source: Literal["llm", "validator"] = "validator"
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    returned: int | None = None


def validator_message(raw_error: str) -> str:
    """The validator's own text for an error, used when no suggestion exists."""
    return parse_error_line(raw_error).message or raw_error.strip()


def parse_suggestions(content: str) -> list[str]:
    """Extract the JSON list of suggestion strings from a model reply.

    Raises ValueError if the reply holds no JSON array of strings.
    """
    match = re.search(r"```(?:json)?\s*\n(.*?)```", content, re.DOTALL)
    if match:
        raw_json = match.group(1).strip()
    else:
        start, end = content.find("["), content.rfind("]")
        raw_json = content[start : end + 1] if 0 <= start < end else content.strip()

    data = json.loads(raw_json)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    return [item if isinstance(item, str) else json.dumps(item) for item in data]


def reconcile_suggestions(suggestions: list[str], raw_errors: list[str]) -> list[str]:
    """Trim surplus suggestions and fill missing ones from the errors."""
    result = list(suggestions[: len(raw_errors)])
    for raw in raw_errors[len(result):]:
        result.append(validator_message(raw))
    return result


class SuggestionEngine:
    """Asks the chat model for fix suggestions, falling back to error text."""

    def __init__(
        self,
        llm_backend: LLMBackend | None,
        policy: MismatchPolicy = "reconcile",
    ) -> None:
        self._llm = llm_backend
        self._policy = policy

    @property
    def policy(self) -> MismatchPolicy:
        return self._policy

    def _fallback(self, raw_errors: list[str], returned: int | None = None) -> SuggestionResult:
        return SuggestionResult(
            suggestions=[validator_message(r) for r in raw_errors],
            source="validator",
            returned=returned,
        )

    async def suggest(
        self,
        raw_errors: list[str],
        document: SourceDocument,
        context: SuggestionContext | None = None,
    ) -> SuggestionResult:
        """Return exactly ``len(raw_errors)`` suggestions. Never raises."""
        if not raw_errors:
            return SuggestionResult()
        if self._llm is None:
            return self._fallback(raw_errors)

        ctx = context or SuggestionContext()
        user_prompt = build_annotation_user_prompt(
            raw_errors,
            document.numbered(),
            workflow=ctx.workflow,
            playbook=ctx.playbook,
            schema_text=ctx.schema_text,
            example_vars=ctx.example_vars,
        )

        try:
            llm_response = await self._llm.generate(ANNOTATION_SYSTEM_PROMPT, user_prompt)
            suggestions = parse_suggestions(llm_response.content)
        except Exception:
            logger.exception("Suggestion request failed, using validator messages")
            return self._fallback(raw_errors)

        returned = len(suggestions)
        if returned != len(raw_errors):
            mismatch = SuggestionCountMismatch(len(raw_errors), returned)
            if self._policy == "reject":
                logger.warning("%s; using validator messages", mismatch)
                return self._fallback(raw_errors, returned=returned)
            logger.warning("%s; reconciling", mismatch)
            suggestions = reconcile_suggestions(suggestions, raw_errors)

        return SuggestionResult(
            suggestions=suggestions,
            source="llm",
            model=llm_response.model,
            prompt_tokens=llm_response.prompt_tokens,
            completion_tokens=llm_response.completion_tokens,
            returned=returned,
        )
