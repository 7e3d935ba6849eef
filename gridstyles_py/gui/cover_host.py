"""Reference grid host: cover art, frame, title and built-in decorations."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import PurePosixPath

from PySide6.QtCore import QRect, Qt
from PySide6.QtGui import QColor, QPainter, QPixmap

from gridstyles_py.core.layout import CoverTarget
from gridstyles_py.core.model import ItemFacts

from .host import BaseRenderMode

_FRAME_COLOR = QColor("#202020")
_PLACEHOLDER_BOOK = QColor("#e6e6e6")
_PLACEHOLDER_FOLDER = QColor("#cfd6dc")
_TITLE_COLOR = QColor("#303030")
_NATIVE_TRACK = QColor(80, 80, 80, 180)
_NATIVE_FILL = QColor(0, 200, 0, 200)
_NATIVE_MARK = QColor("#404040")
_LABEL_BG = QColor(255, 255, 255, 220)

CoverLookup = Callable[[str], QPixmap | None]


class QtCoverHost:
    """Paint book/folder thumbnails the way a simple mosaic view would."""

    def __init__(
        self,
        *,
        cover_lookup: CoverLookup | None = None,
        last_opened: str | None = None,
        folder_labels: bool = True,
        force_no_progress_bars: bool = False,
        mirrored: bool = False,
        corner_mark_size: int | None = None,
        frame_border: int = 1,
        frame_padding: int = 0,
        cell_margin: int = 4,
        aspect_ratio: float = 1.5,
    ) -> None:
        self._cover_lookup = cover_lookup
        self._last_opened = last_opened
        self._folder_labels = folder_labels
        self._force_no_progress_bars = force_no_progress_bars
        self._mirrored = mirrored
        self._corner_mark_size = corner_mark_size
        self._frame_border = max(0, frame_border)
        self._frame_padding = max(0, frame_padding)
        self._cell_margin = max(0, cell_margin)
        self._aspect_ratio = aspect_ratio

    def last_opened_file_path(self) -> str | None:
        return self._last_opened

    def folder_label_preference(self) -> bool:
        return self._folder_labels

    def force_no_progress_bars(self) -> bool:
        return self._force_no_progress_bars

    def corner_mark_size(self) -> int | None:
        return self._corner_mark_size

    def is_mirrored(self) -> bool:
        return self._mirrored

    def cover_target(self, width: int, height: int) -> CoverTarget | None:
        """Fit a cover frame of the configured aspect ratio into the cell."""
        avail_w = width - 2 * self._cell_margin
        avail_h = height - 2 * self._cell_margin
        if avail_w <= 0 or avail_h <= 0:
            return None
        frame_h = avail_h
        frame_w = int(frame_h / self._aspect_ratio)
        if frame_w > avail_w:
            frame_w = avail_w
            frame_h = int(frame_w * self._aspect_ratio)
        return CoverTarget(frame_w, frame_h, self._frame_border, self._frame_padding)

    def paint_base_content(
        self,
        painter: QPainter,
        item: ItemFacts,
        x: int,
        y: int,
        width: int,
        height: int,
        mode: BaseRenderMode,
    ) -> CoverTarget | None:
        target = self.cover_target(width, height)
        if target is None:
            return None
        frame = QRect(
            x + (width - target.width) // 2,
            y + (height - target.height) // 2,
            target.width,
            target.height,
        )
        edge = target.border + target.padding
        inner = frame.adjusted(edge, edge, -edge, -edge)
        painter.save()
        if target.border > 0:
            painter.fillRect(frame, _FRAME_COLOR)
        self._paint_cover(painter, item, inner)
        if mode.show_progress and item.percent_finished is not None:
            self._paint_native_progress(painter, inner, item.percent_finished)
        if mode.show_status_marks and item.status is not None and item.been_opened:
            self._paint_native_mark(painter, inner, mode)
        if mode.show_folder_labels and item.is_directory:
            self._paint_native_label(painter, inner, item)
        painter.restore()
        return target

    def _paint_cover(self, painter: QPainter, item: ItemFacts, inner: QRect) -> None:
        pixmap = None
        if self._cover_lookup is not None and item.file_path:
            pixmap = self._cover_lookup(item.file_path)
        if pixmap is not None and not pixmap.isNull():
            painter.drawPixmap(inner, pixmap)
            return
        painter.fillRect(inner, _PLACEHOLDER_FOLDER if item.is_directory else _PLACEHOLDER_BOOK)
        if item.is_directory or not item.file_path:
            return
        painter.setPen(_TITLE_COLOR)
        painter.drawText(
            inner.adjusted(6, 6, -6, -6),
            Qt.AlignHCenter | Qt.AlignVCenter | Qt.TextWordWrap,
            PurePosixPath(item.file_path).stem,
        )

    def _paint_native_progress(
        self, painter: QPainter, inner: QRect, percent: float
    ) -> None:
        bar_height = 6
        progress = max(0.0, min(1.0, percent))
        track = QRect(inner.x(), inner.bottom() - bar_height + 1, inner.width(), bar_height)
        painter.fillRect(track, _NATIVE_TRACK)
        painter.fillRect(
            QRect(track.x(), track.y(), int(track.width() * progress), bar_height),
            _NATIVE_FILL,
        )

    def _paint_native_mark(
        self, painter: QPainter, inner: QRect, mode: BaseRenderMode
    ) -> None:
        if not mode.show_corner_marks:
            return
        size = self._corner_mark_size or 24
        painter.fillRect(
            QRect(inner.right() - size + 1, inner.y(), size, size), _NATIVE_MARK
        )

    def _paint_native_label(
        self, painter: QPainter, inner: QRect, item: ItemFacts
    ) -> None:
        label = QRect(inner.x(), inner.center().y() - 12, inner.width(), 24)
        painter.fillRect(label, _LABEL_BG)
        painter.setPen(_TITLE_COLOR)
        painter.drawText(label, Qt.AlignCenter, item.directory_name or "")
