"""Paint host base content, then the custom overlay in a fixed z-order."""

from __future__ import annotations

import logging

from PySide6.QtCore import QRect, QRectF, Qt
from PySide6.QtGui import QPainter

from gridstyles_py.core.errors import LayoutError
from gridstyles_py.core.layout import (
    LayoutResult,
    RoundedRect,
    TextBadgeLayout,
    compute_layout,
    inner_rect_for,
)
from gridstyles_py.core.model import ItemFacts

from .fonts import FontCache
from .host import GridHost, RenderContext
from .icons import IconPainter
from .paint_trace import PaintEvent, PaintTrace

logger = logging.getLogger(__name__)


def paint_rounded_rect(painter: QPainter, shape: RoundedRect) -> None:
    rect = shape.rect
    if rect.is_empty:
        return
    painter.setPen(Qt.NoPen)
    painter.setBrush(shape.color)
    radius = float(min(shape.radius, rect.width / 2, rect.height / 2))
    target = QRectF(rect.x, rect.y, rect.width, rect.height)
    if radius <= 0:
        painter.drawRect(target)
        return
    painter.drawRoundedRect(target, radius, radius)


class CoverOverlayPainter:
    """Decorate one grid item at a time on top of the host's thumbnail."""

    def __init__(
        self,
        host: GridHost,
        context: RenderContext,
        *,
        fonts: FontCache | None = None,
        icons: IconPainter | None = None,
        trace: PaintTrace | None = None,
    ) -> None:
        self._host = host
        self._context = context
        self._fonts = fonts or FontCache()
        self._icons = icons or IconPainter()
        self._trace = trace or PaintTrace.from_env(
            debug_logging=context.config.debug_logging
        )

    @property
    def context(self) -> RenderContext:
        return self._context

    def paint(
        self,
        painter: QPainter,
        item: ItemFacts,
        x: int,
        y: int,
        width: int,
        height: int,
    ) -> LayoutResult | None:
        """Paint *item* into the cell; return the overlay layout when drawn."""
        ctx = self._context
        if item.file_path is None or ctx.force_no_progress_bars:
            self._host.paint_base_content(
                painter, item, x, y, width, height, ctx.native_mode
            )
            self._trace.event(PaintEvent(item.file_path, "deferred"))
            return None

        with self._trace.timed("paint"):
            return self._paint_overlay(painter, item, x, y, width, height)

    def _paint_overlay(
        self,
        painter: QPainter,
        item: ItemFacts,
        x: int,
        y: int,
        width: int,
        height: int,
    ) -> LayoutResult | None:
        ctx = self._context
        target = self._host.paint_base_content(
            painter, item.suppressed_for_base(), x, y, width, height, ctx.overlay_mode
        )
        if target is None:
            logger.warning("no cover target for %s, skipping overlay", item.file_path)
            self._trace.event(PaintEvent(item.file_path, "no_cover_target"))
            return None

        inner = inner_rect_for(x, y, width, height, target)
        try:
            with self._trace.timed("layout"):
                layout = compute_layout(inner, item, ctx.layout, self._fonts.measure)
        except LayoutError as exc:
            logger.warning("skipping overlay for %s: %s", item.file_path, exc)
            self._trace.event(PaintEvent(item.file_path, "layout_error"))
            return None
        try:
            self.paint_layout(painter, layout)
        except Exception:
            logger.warning(
                "failed to paint overlay for %s", item.file_path, exc_info=True
            )
            self._trace.event(PaintEvent(item.file_path, "paint_error"))
            return None
        self._trace.event(PaintEvent(item.file_path, "painted", layout.trace_fields()))
        return layout

    def paint_layout(self, painter: QPainter, layout: LayoutResult) -> None:
        """Paint bar, status badge, page badge, folder name, folder count."""
        painter.save()
        painter.setRenderHint(QPainter.Antialiasing, True)
        try:
            bar = layout.bar
            if bar is not None:
                for shape in (bar.border, bar.track, bar.fill):
                    if shape is not None:
                        paint_rounded_rect(painter, shape)
            badge = layout.status_badge
            if badge is not None:
                if badge.border is not None:
                    paint_rounded_rect(painter, badge.border)
                paint_rounded_rect(painter, badge.background)
                self._icons.draw(painter, badge.icon)
            for text_badge in (
                layout.page_badge,
                layout.folder_name_badge,
                layout.folder_count_badge,
            ):
                if text_badge is not None:
                    self._paint_text_badge(painter, text_badge)
        finally:
            painter.restore()

    def _paint_text_badge(self, painter: QPainter, badge: TextBadgeLayout) -> None:
        if badge.border is not None:
            paint_rounded_rect(painter, badge.border)
        if badge.background is not None:
            paint_rounded_rect(painter, badge.background)
        text = badge.text
        painter.save()
        if text.clip is not None:
            clip = text.clip
            painter.setClipRect(QRect(clip.x, clip.y, clip.width, clip.height))
        painter.setFont(self._fonts.font(text.font))
        painter.setPen(text.color)
        painter.drawText(text.x, text.baseline, text.text)
        painter.restore()
