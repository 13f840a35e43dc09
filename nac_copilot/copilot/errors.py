"""Exception types raised by collaborator adapters."""

from __future__ import annotations


class CopilotError(Exception):
    """Base class for NaC Copilot errors."""


class ToolInvocationError(CopilotError):
    """An external validator or linter could not be run or gave no usable output."""

    def __init__(self, tool: str, detail: str) -> None:
        super().__init__(f"{tool}: {detail}")
        self.tool = tool
        self.detail = detail


class BackendResponseError(CopilotError, RuntimeError):
    """A chat backend answered with something other than a usable completion."""


class SuggestionCountMismatch(CopilotError):
    """The model returned a different number of suggestions than requested."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"expected {expected} suggestion(s), model returned {actual}"
        )
        self.expected = expected
        self.actual = actual
