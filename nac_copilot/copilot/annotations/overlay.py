"""Annotation overlay -- the advisory markers shown against one document."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from copilot.annotations.surface import EditorSurface, MarkerHandle

logger = logging.getLogger(__name__)


class Annotation(BaseModel):
    """Advisory text anchored to a document line."""

    line: int
    text: str
    source: str = ""


class OverlayManager:
    """Owns the markers of one open document.

    A line holds at most one annotation: the first ``apply()`` for a line
    wins and later ones are dropped until ``clear_all()``.
    """

    def __init__(self, surface: EditorSurface) -> None:
        self._surface = surface
        self._annotations: dict[int, Annotation] = {}
        self._handles: dict[int, MarkerHandle] = {}

    @property
    def surface(self) -> EditorSurface:
        return self._surface

    def apply(self, line: int, text: str, source: str = "") -> bool:
        """Annotate ``line`` unless it already carries an annotation.

        Returns True when a marker was created.
        """
        if line in self._annotations:
            logger.debug("Line %d already annotated, dropping %r", line, text)
            return False
        if not 1 <= line <= self._surface.line_count:
            logger.warning(
                "Line %d outside document (%d lines), dropping %r",
                line,
                self._surface.line_count,
                text,
            )
            return False

        column = len(self._surface.line_text(line))
        handle = self._surface.create_marker(line, column, f" {text}", text)
        self._handles[line] = handle
        self._annotations[line] = Annotation(line=line, text=text, source=source)
        return True

    def clear_all(self) -> None:
        """Dispose every live marker and forget all annotations.

        A marker that fails to dispose is logged and forgotten anyway.
        """
        for line, handle in self._handles.items():
            try:
                handle.dispose()
            except Exception:
                logger.exception("Failed to dispose marker on line %d", line)
        if self._handles:
            logger.debug("Cleared %d annotation(s)", len(self._handles))
        self._handles.clear()
        self._annotations.clear()

    def get(self, line: int) -> Annotation | None:
        return self._annotations.get(line)

    @property
    def annotations(self) -> list[Annotation]:
        return [self._annotations[line] for line in sorted(self._annotations)]

    @property
    def live_markers(self) -> int:
        return len(self._handles)

    @property
    def is_empty(self) -> bool:
        return not self._annotations

    def __len__(self) -> int:
        return len(self._annotations)

    def __contains__(self, line: object) -> bool:
        return line in self._annotations


class OverlayRegistry:
    """One overlay per open document, keyed by document path."""

    def __init__(self) -> None:
        self._overlays: dict[str, OverlayManager] = {}

    def open(self, document: str, surface: EditorSurface) -> OverlayManager:
        """Return the document's overlay, rebinding it to ``surface``.

        Markers of a previous surface are disposed first.
        """
        current = self._overlays.get(document)
        if current is not None and current.surface is surface:
            return current
        if current is not None:
            current.clear_all()
        overlay = OverlayManager(surface)
        self._overlays[document] = overlay
        return overlay

    def get(self, document: str) -> OverlayManager | None:
        return self._overlays.get(document)

    def close(self, document: str) -> bool:
        """Clear and forget the overlay of a closed document."""
        overlay = self._overlays.pop(document, None)
        if overlay is None:
            return False
        overlay.clear_all()
        return True

    def __len__(self) -> int:
        return len(self._overlays)
