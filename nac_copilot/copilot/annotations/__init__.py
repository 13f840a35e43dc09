"""Error-to-line resolution and the annotation overlay."""

from copilot.annotations.keypath import ParsedError, Segment, parse_error_line
from copilot.annotations.overlay import Annotation, OverlayManager, OverlayRegistry
from copilot.annotations.resolver import (
    SourceDocument,
    resolve_error,
    resolve_errors,
    resolve_line,
)
from copilot.annotations.surface import EditorSurface, MarkerHandle, TextBufferSurface

__all__ = [
    "Annotation",
    "EditorSurface",
    "MarkerHandle",
    "OverlayManager",
    "OverlayRegistry",
    "ParsedError",
    "Segment",
    "SourceDocument",
    "TextBufferSurface",
    "parse_error_line",
    "resolve_error",
    "resolve_errors",
    "resolve_line",
]
