"""Offscreen rendering of a decorated cover grid."""

from __future__ import annotations

from collections.abc import Sequence

from PySide6.QtGui import QColor, QImage, QPainter

from gridstyles_py.core.layout import LayoutResult
from gridstyles_py.core.model import ItemFacts

from .compositor import CoverOverlayPainter

_BACKGROUND = QColor("#ffffff")


def render_grid(
    items: Sequence[ItemFacts],
    overlay: CoverOverlayPainter,
    *,
    columns: int = 4,
    cell_width: int = 180,
    cell_height: int = 260,
) -> tuple[QImage, list[LayoutResult | None]]:
    """Paint *items* row by row into a new image; return it with each layout."""
    columns = max(1, columns)
    rows = max(1, -(-len(items) // columns))
    image = QImage(columns * cell_width, rows * cell_height, QImage.Format_ARGB32)
    image.fill(_BACKGROUND)
    layouts: list[LayoutResult | None] = []
    painter = QPainter(image)
    try:
        for idx, facts in enumerate(items):
            row, col = divmod(idx, columns)
            layouts.append(
                overlay.paint(
                    painter,
                    facts,
                    col * cell_width,
                    row * cell_height,
                    cell_width,
                    cell_height,
                )
            )
    finally:
        painter.end()
    return image, layouts
