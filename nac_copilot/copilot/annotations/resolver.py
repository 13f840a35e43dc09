"""Line resolver -- map a validator key path onto a line of the raw document.

The document is scanned as plain text rather than parsed, so resolution keeps
working while the file is half-edited and not valid YAML. The scan only moves
forward: each segment is looked up at or after the line matched by the
previous one. Two keys with the same literal text cannot be told apart, and
list nesting is judged only by the indentation string in front of ``-``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from copilot.annotations.keypath import KeyPath, ParsedError, Segment, parse_error_line

if TYPE_CHECKING:
    from copilot.annotations.surface import EditorSurface

logger = logging.getLogger(__name__)

LIST_MARKER = "-"


@dataclass(frozen=True)
class SourceDocument:
    """Immutable snapshot of a document's lines, addressed from 1."""

    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> SourceDocument:
        return cls(tuple(text.splitlines()))

    @classmethod
    def from_path(cls, path: Path) -> SourceDocument:
        return cls.from_text(path.read_text(encoding="utf-8"))

    @classmethod
    def from_surface(cls, surface: EditorSurface) -> SourceDocument:
        return cls(
            tuple(surface.line_text(n) for n in range(1, surface.line_count + 1))
        )

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, number: int) -> str:
        return self.lines[number - 1]

    def numbered(self) -> str:
        """Render the document with ``N: `` prefixes for prompts."""
        return "\n".join(f"{i}: {text}" for i, text in enumerate(self.lines, start=1))


def _indentation(text: str) -> str:
    return text[: len(text) - len(text.lstrip())]


def _find_key(key: str, document: SourceDocument, cursor: int) -> int | None:
    for number in range(cursor, document.line_count + 1):
        if key in document.line(number).strip():
            return number
    return None


def _find_list_item(position: int, document: SourceDocument, cursor: int) -> int | None:
    indent: str | None = None
    count = 0
    for number in range(cursor, document.line_count + 1):
        text = document.line(number)
        if not text.strip().startswith(LIST_MARKER):
            continue
        if indent is None:
            indent = _indentation(text)
        if not text.startswith(indent + LIST_MARKER):
            continue
        if count == position:
            return number
        count += 1
    return None


def _advance(segment: Segment, document: SourceDocument, cursor: int) -> int:
    if segment.is_index:
        found = _find_list_item(segment.position, document, cursor)
    else:
        found = _find_key(segment.value, document, cursor)

    if found is None:
        logger.debug(
            "No match for segment %r at or after line %d, keeping cursor",
            segment.value,
            cursor,
        )
        return cursor
    return found


def resolve_line(path: KeyPath, document: SourceDocument) -> int:
    """Return the 1-based line a key path points at, best effort.

    Paths of one segment or less are document-level and map to line 1.
    Unmatched segments leave the cursor where it was, so the result is the
    last line that could be matched.
    """
    if len(path) <= 1:
        return 1
    return _walk(path, document)


def _walk(path: KeyPath, document: SourceDocument) -> int:
    cursor = 1
    for segment in path:
        cursor = _advance(segment, document, cursor)
    return min(cursor, max(1, document.line_count))


def resolve_error(error: ParsedError, document: SourceDocument) -> int:
    """Resolve a parsed error, annotating the parent of a missing field.

    Whether the error is document-level is decided on the path as reported.
    A two-segment path whose last field is missing still scans for its parent
    key instead of jumping to line 1.
    """
    if error.is_document_level:
        return 1
    return _walk(error.target_path, document)


def resolve_errors(raw_errors: list[str], document: SourceDocument) -> list[int]:
    """Resolve each raw error independently against the same document."""
    lines = [resolve_error(parse_error_line(raw), document) for raw in raw_errors]
    logger.debug("Resolved %d error(s) to lines %s", len(lines), lines)
    return lines
