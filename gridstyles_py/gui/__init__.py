from __future__ import annotations

from .compositor import CoverOverlayPainter
from .host import BaseRenderMode, GridHost, RenderContext, build_context

__all__ = [
    "BaseRenderMode",
    "CoverOverlayPainter",
    "GridHost",
    "RenderContext",
    "build_context",
]
