"""Error path parser -- turn a validator error line into a structured key path.

Validator errors look like ``devices.3.type: Required field missing``. The
part before the first colon is a dotted path whose segments are either field
names or zero-based list positions.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class Segment(BaseModel):
    """One component of a key path: a field name or a list index."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["key", "index"]
    value: str

    @classmethod
    def from_text(cls, text: str) -> Segment:
        return cls(kind="index" if _is_base10_int(text) else "key", value=text)

    @property
    def is_index(self) -> bool:
        return self.kind == "index"

    @property
    def position(self) -> int:
        """Integer value of an index segment."""
        if not self.is_index:
            raise ValueError(f"Segment '{self.value}' is not a list index")
        return int(self.value)


KeyPath = tuple[Segment, ...]


class ParsedError(BaseModel):
    """A validator error split into key path, message and classification."""

    model_config = ConfigDict(frozen=True)

    raw: str
    path: KeyPath = ()
    message: str
    missing: bool = False

    @property
    def is_document_level(self) -> bool:
        return len(self.path) <= 1

    @property
    def target_path(self) -> KeyPath:
        """Path to resolve: a missing field is located via its parent container."""
        if self.missing and len(self.path) > 1:
            return self.path[:-1]
        return self.path

    @property
    def dotted_path(self) -> str:
        return ".".join(s.value for s in self.path)


def _is_base10_int(text: str) -> bool:
    # str.isdigit() also accepts superscripts and other non-ASCII digits
    return text.isascii() and text.isdigit()


def is_missing_field(message: str) -> bool:
    """Return True when the message reports a required field as missing."""
    return "missing" in message.lower()


def parse_error_line(raw: str) -> ParsedError:
    """Parse one ``<key-path>: <message>`` line.

    A line without a colon is kept whole as the message with an empty path,
    which resolves to the top of the document.
    """
    path_part, sep, message = raw.partition(":")
    if not sep:
        return ParsedError(raw=raw, path=(), message=raw.strip())

    path_part = path_part.strip()
    message = message.strip()
    missing = is_missing_field(message)

    if "." not in path_part:
        return ParsedError(
            raw=raw,
            path=(Segment.from_text(path_part),),
            message=message,
            missing=missing,
        )

    path = tuple(Segment.from_text(p.strip()) for p in path_part.split("."))
    return ParsedError(raw=raw, path=path, message=message, missing=missing)


def parse_error_lines(lines: list[str]) -> list[ParsedError]:
    """Parse every non-blank error line, preserving order."""
    return [parse_error_line(line) for line in lines if line.strip()]
