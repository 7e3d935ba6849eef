"""Backend-core public surface – re-export runtime API."""

from __future__ import annotations

from .colors import ResolvedColorCache, resolve_colors
from .errors import ColorParseError, LayoutError, StyleConfigError
from .layout import (
    CoverTarget,
    LayoutContext,
    LayoutResult,
    Rect,
    compute_layout,
    inner_rect_for,
    resolve_bar_span,
    thickness_fraction,
)
from .model import (
    ItemFacts,
    ItemStatus,
    page_count_from_path,
    parse_folder_counts,
)
from .style_config import StyleConfig, load

__all__ = [
    "ColorParseError",
    "CoverTarget",
    "ItemFacts",
    "ItemStatus",
    "LayoutContext",
    "LayoutError",
    "LayoutResult",
    "Rect",
    "ResolvedColorCache",
    "StyleConfig",
    "StyleConfigError",
    "compute_layout",
    "inner_rect_for",
    "load",
    "page_count_from_path",
    "parse_folder_counts",
    "resolve_bar_span",
    "resolve_colors",
    "thickness_fraction",
]
