"""Editor surface interface and an in-memory implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel


class MarkerHandle(ABC):
    """A live end-of-line marker created by an editor surface."""

    @abstractmethod
    def dispose(self) -> None:
        """Remove the marker from the editor. Safe to call more than once."""
        ...


class EditorSurface(ABC):
    """The editor primitives the overlay needs for one open document."""

    @property
    @abstractmethod
    def line_count(self) -> int:
        ...

    @abstractmethod
    def line_text(self, line: int) -> str:
        """Return the text of a 1-based line without its line break."""
        ...

    @abstractmethod
    def create_marker(
        self, line: int, column: int, text: str, hover: str,
    ) -> MarkerHandle:
        """Show ``text`` after ``column`` on ``line`` with ``hover`` as tooltip."""
        ...


class MarkerView(BaseModel):
    """Serializable snapshot of a marker."""

    line: int
    column: int
    text: str
    hover: str


class BufferMarker(MarkerHandle):
    def __init__(self, surface: TextBufferSurface, view: MarkerView) -> None:
        self._surface = surface
        self.view = view
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self._surface._markers.remove(self)


class TextBufferSurface(EditorSurface):
    """Editor surface backed by a string, recording markers in memory.

    Used by the HTTP API, where the real editor lives in another process and
    only needs the resulting marker list.
    """

    def __init__(self, text: str) -> None:
        self._lines = text.splitlines()
        self._markers: list[BufferMarker] = []

    @classmethod
    def from_path(cls, path: Path) -> TextBufferSurface:
        return cls(path.read_text(encoding="utf-8"))

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_text(self, line: int) -> str:
        return self._lines[line - 1]

    def create_marker(
        self, line: int, column: int, text: str, hover: str,
    ) -> MarkerHandle:
        marker = BufferMarker(
            self, MarkerView(line=line, column=column, text=text, hover=hover)
        )
        self._markers.append(marker)
        return marker

    @property
    def markers(self) -> list[MarkerView]:
        return sorted((m.view for m in self._markers), key=lambda v: v.line)
