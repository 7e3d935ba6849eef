"""Test module for font fallback and status icon resolution."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import Qt  # noqa: E402
from PySide6.QtGui import QColor, QImage, QPainter  # noqa: E402

from gridstyles_py.core.layout import FontSpec, IconPlacement  # noqa: E402
from gridstyles_py.gui.fonts import FontCache  # noqa: E402
from gridstyles_py.gui.icons import IconPainter  # noqa: E402


def _write_icon(path: Path, color: str) -> None:
    image = QImage(8, 8, QImage.Format_ARGB32)
    image.fill(QColor(color))
    assert image.save(str(path))


def test_missing_font_falls_back_once(qapp, caplog) -> None:
    """Verify an unknown font warns once and uses the default family."""
    fonts = FontCache()
    spec = FontSpec("does/not/exist.ttf", 11)
    with caplog.at_level(logging.WARNING, logger="gridstyles_py.gui.fonts"):
        first = fonts.font(spec)
        fonts.font(FontSpec("does/not/exist.ttf", 14))
    assert first.pixelSize() == 11
    assert fonts.family("does/not/exist.ttf") is None
    assert caplog.text.count("could not load font") == 1


def test_measure_reports_positive_metrics(qapp) -> None:
    """Verify measuring text returns usable metrics."""
    metrics = FontCache().measure(FontSpec(None, 12), "320")
    assert metrics.width > 0
    assert metrics.ascent > 0
    assert metrics.height == metrics.ascent + metrics.descent


def test_icon_resolve_prefers_dedicated_asset(qapp, tmp_path: Path) -> None:
    """Verify dedicated assets are used as-is."""
    _write_icon(tmp_path / "dogear.complete.rtl.png", "#ff0000")
    _write_icon(tmp_path / "dogear.complete.png", "#00ff00")
    icons = IconPainter([tmp_path])
    assert icons.resolve("dogear.complete.rtl") == (
        tmp_path / "dogear.complete.rtl.png",
        False,
    )


def test_icon_resolve_mirrors_base_for_missing_rtl(qapp, tmp_path: Path) -> None:
    """Verify a missing right-to-left asset mirrors the base icon."""
    _write_icon(tmp_path / "dogear.abandoned.png", "#00ff00")
    icons = IconPainter([tmp_path])
    assert icons.resolve("dogear.abandoned.rtl") == (
        tmp_path / "dogear.abandoned.png",
        True,
    )


def test_on_hold_falls_back_to_reading_icon(qapp, tmp_path: Path) -> None:
    """Verify the on-hold mark reuses the reading mark when not shipped."""
    _write_icon(tmp_path / "dogear.reading.png", "#0000ff")
    icons = IconPainter([tmp_path])
    assert icons.resolve("dogear.on_hold") == (tmp_path / "dogear.reading.png", False)


def test_missing_icon_is_skipped_with_warning(qapp, tmp_path: Path, caplog) -> None:
    """Verify a missing icon draws nothing and warns once."""
    icons = IconPainter([tmp_path])
    image = QImage(20, 20, QImage.Format_ARGB32)
    image.fill(Qt.white)
    painter = QPainter(image)
    try:
        with caplog.at_level(logging.WARNING, logger="gridstyles_py.gui.icons"):
            assert icons.draw(painter, IconPlacement("dogear.complete", 2, 2, 8)) is False
            assert icons.draw(painter, IconPlacement("dogear.complete", 2, 2, 8)) is False
    finally:
        painter.end()
    assert caplog.text.count("not found") == 1
    assert image.pixelColor(5, 5) == QColor("#ffffff")


def test_icon_draw_blits_pixels(qapp, tmp_path: Path) -> None:
    """Verify a found icon is painted into its placement box."""
    _write_icon(tmp_path / "dogear.complete.png", "#00ff00")
    icons = IconPainter([tmp_path])
    image = QImage(20, 20, QImage.Format_ARGB32)
    image.fill(Qt.white)
    painter = QPainter(image)
    try:
        assert icons.draw(painter, IconPlacement("dogear.complete", 2, 2, 8, 270)) is True
    finally:
        painter.end()
    assert image.pixelColor(5, 5) == QColor("#00ff00")
    assert image.pixelColor(15, 15) == QColor("#ffffff")
