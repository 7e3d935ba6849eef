"""Test module for the reference host, grid rendering and view delegate."""

from __future__ import annotations

import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import QRect, QSize  # noqa: E402
from PySide6.QtGui import QColor, QImage, QPainter, QStandardItem  # noqa: E402
from PySide6.QtWidgets import QStyleOptionViewItem  # noqa: E402

from _support import plain_config  # noqa: E402

from gridstyles_py.core.layout import CoverTarget  # noqa: E402
from gridstyles_py.core.model import ItemFacts  # noqa: E402
from gridstyles_py.gui.compositor import CoverOverlayPainter  # noqa: E402
from gridstyles_py.gui.cover_host import QtCoverHost  # noqa: E402
from gridstyles_py.gui.grid_delegate import (  # noqa: E402
    ITEM_FACTS_ROLE,
    CoverGridDelegate,
    build_grid_model,
)
from gridstyles_py.gui.host import build_context  # noqa: E402
from gridstyles_py.gui.paint_trace import PaintTrace  # noqa: E402
from gridstyles_py.gui.render import render_grid  # noqa: E402


def _overlay(host: QtCoverHost) -> CoverOverlayPainter:
    return CoverOverlayPainter(
        host, build_context(plain_config(), host), trace=PaintTrace(set())
    )


def test_cover_target_fits_aspect_ratio() -> None:
    """Verify the cover frame keeps its aspect inside the cell margins."""
    host = QtCoverHost()
    assert host.cover_target(220, 340) == CoverTarget(212, 318, 1, 0)
    assert host.cover_target(400, 200) == CoverTarget(128, 192, 1, 0)
    assert host.cover_target(6, 6) is None


def test_host_settings_are_reported() -> None:
    """Verify the host exposes the settings read by the render context."""
    host = QtCoverHost(
        last_opened="/lib/a.epub",
        folder_labels=False,
        force_no_progress_bars=True,
        mirrored=True,
        corner_mark_size=20,
    )
    context = build_context(plain_config(), host)
    assert context.layout.last_opened_path == "/lib/a.epub"
    assert context.layout.mirrored is True
    assert context.layout.folder_badges_enabled is False
    assert context.force_no_progress_bars is True


def test_render_grid_lays_out_cells(qapp) -> None:
    """Verify items are painted row by row with one layout per item."""
    host = QtCoverHost()
    items = [
        ItemFacts.for_book("/lib/a.epub", percent=0.5),
        ItemFacts.for_book("/lib/b.epub"),
        ItemFacts(),
    ]
    image, layouts = render_grid(
        items, _overlay(host), columns=2, cell_width=220, cell_height=340
    )
    assert (image.width(), image.height()) == (440, 680)
    assert len(layouts) == 3
    assert layouts[0] is not None
    assert layouts[0].bar is not None
    assert layouts[1] is not None
    assert layouts[1].bar is None
    assert layouts[2] is None
    bar = layouts[0].bar.track.rect
    assert image.pixelColor(bar.x + bar.width - 3, bar.y + bar.height // 2) == QColor(
        "#dadada"
    )


def test_delegate_paints_through_overlay(qapp) -> None:
    """Verify the delegate hands cells with facts to the compositor."""
    host = QtCoverHost()
    delegate = CoverGridDelegate(_overlay(host), QSize(220, 340))
    model = build_grid_model([ItemFacts.for_book("/lib/a.epub", percent=1.0)])
    index = model.index(0, 0)
    assert isinstance(index.data(ITEM_FACTS_ROLE), ItemFacts)

    option = QStyleOptionViewItem()
    option.rect = QRect(0, 0, 220, 340)
    assert delegate.sizeHint(option, index) == QSize(220, 340)

    image = QImage(220, 340, QImage.Format_ARGB32)
    image.fill(QColor("#ffffff"))
    painter = QPainter(image)
    try:
        delegate.paint(painter, option, index)
    finally:
        painter.end()
    assert image.pixelColor(110, 317) == QColor("#555555")


def test_delegate_falls_back_for_plain_rows(qapp) -> None:
    """Verify rows without item facts use the default delegate painting."""
    host = QtCoverHost()
    delegate = CoverGridDelegate(_overlay(host), QSize(100, 100))
    model = build_grid_model([])
    model.appendRow(QStandardItem("plain"))
    assert model.index(0, 0).data(ITEM_FACTS_ROLE) is None
    option = QStyleOptionViewItem()
    option.rect = QRect(0, 0, 100, 100)
    image = QImage(100, 100, QImage.Format_ARGB32)
    image.fill(QColor("#ffffff"))
    painter = QPainter(image)
    try:
        delegate.paint(painter, option, model.index(0, 0))
    finally:
        painter.end()
