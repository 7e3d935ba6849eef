"""Delegate that draws decorated cover thumbnails in a Qt icon-mode view."""

from __future__ import annotations

from collections.abc import Iterable

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QPainter, QStandardItem, QStandardItemModel
from PySide6.QtWidgets import QStyledItemDelegate, QStyleOptionViewItem

from gridstyles_py.core.model import ItemFacts

from .compositor import CoverOverlayPainter

ITEM_FACTS_ROLE = Qt.UserRole + 41


class CoverGridDelegate(QStyledItemDelegate):
    """Paint each cell through the overlay compositor."""

    def __init__(
        self, overlay: CoverOverlayPainter, cell_size: QSize, parent=None
    ) -> None:
        super().__init__(parent)
        self._overlay = overlay
        self._cell_size = QSize(cell_size)

    def paint(self, painter: QPainter, option: QStyleOptionViewItem, index) -> None:  # noqa: N802
        """Paint decorated thumbnail, or fall back for rows without facts."""
        facts = index.data(ITEM_FACTS_ROLE)
        if not isinstance(facts, ItemFacts):
            super().paint(painter, option, index)
            return
        rect = option.rect
        if rect.width() <= 0 or rect.height() <= 0:
            return
        self._overlay.paint(
            painter, facts, rect.x(), rect.y(), rect.width(), rect.height()
        )

    def sizeHint(self, _option, _index) -> QSize:  # noqa: N802
        return QSize(self._cell_size)


def build_grid_model(items: Iterable[ItemFacts], parent=None) -> QStandardItemModel:
    model = QStandardItemModel(parent)
    for facts in items:
        row = QStandardItem()
        row.setEditable(False)
        row.setData(facts, ITEM_FACTS_ROLE)
        row.setToolTip(facts.file_path or "")
        model.appendRow(row)
    return model
