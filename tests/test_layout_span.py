"""Test module for progress bar span resolution and bookthickbar scaling."""

from __future__ import annotations

from dataclasses import replace

import pytest

pytest.importorskip("PySide6")

from _support import plain_config  # noqa: E402

from gridstyles_py.core.errors import LayoutError  # noqa: E402
from gridstyles_py.core.layout import (  # noqa: E402
    Rect,
    resolve_bar_span,
    thickness_fraction,
)
from gridstyles_py.core.style_config import Corner, StyleConfig  # noqa: E402

PAGE_RECT_LEFT = Rect(6, 298, 26, 18)
PAGE_RECT_RIGHT = Rect(188, 298, 26, 18)


def _with_badge(config: StyleConfig, **changes) -> StyleConfig:
    return replace(config, status_badge=replace(config.status_badge, **changes))


def _with_corner(config: StyleConfig, corner: Corner) -> StyleConfig:
    return replace(config, page_badge=replace(config.page_badge, corner=corner))


def _thick(config: StyleConfig) -> StyleConfig:
    return replace(config, thick_bar=replace(config.thick_bar, enabled=True))


@pytest.mark.parametrize(
    ("pages", "expected"),
    [
        (None, 0.66),
        (1, 0.25),
        (100, 0.25),
        (375, 0.625),
        (650, 1.0),
        (5000, 1.0),
    ],
)
def test_thickness_fraction(pages: int | None, expected: float) -> None:
    """Verify page counts map onto the 25%..100% range."""
    assert thickness_fraction(pages) == pytest.approx(expected)


def test_thickness_fraction_is_monotonic() -> None:
    """Verify more pages never produce a shorter bar."""
    values = [thickness_fraction(pages) for pages in range(0, 800, 7)]
    assert values == sorted(values)


def test_base_span_uses_horizontal_margins(inner: Rect) -> None:
    """Verify the slot starts from the inner rect minus bar margins."""
    assert resolve_bar_span(inner, plain_config()) == (14, 206)


def test_gap_mode_reserves_badge_and_gap(inner: Rect) -> None:
    """Verify gap mode ends the bar `gap` pixels before the badge box."""
    config = _with_badge(plain_config(), use_gap=True)
    left, right = resolve_bar_span(inner, config, show_status_badge=True)
    assert (left, right) == (14, 185)
    badge_left = inner.right - config.bar.margin_right - 17
    assert badge_left - right == config.status_badge.gap


def test_overlay_mode_tucks_bar_under_badge(inner: Rect) -> None:
    """Verify overlay mode shortens the bar by half the badge size only."""
    config = _with_badge(plain_config(), use_gap=False)
    assert resolve_bar_span(inner, config, show_status_badge=True) == (14, 198)


def test_hidden_badge_reserves_nothing(inner: Rect) -> None:
    """Verify no reservation is made when the badge is not shown."""
    config = _with_badge(plain_config(), use_gap=True)
    assert resolve_bar_span(inner, config, show_status_badge=False) == (14, 206)


def test_unresolved_badge_size_is_a_layout_error(inner: Rect) -> None:
    """Verify badge reservation needs a resolved badge size."""
    config = _with_badge(plain_config(), background_size=None)
    with pytest.raises(LayoutError):
        resolve_bar_span(inner, config, show_status_badge=True)


def test_bottom_left_page_badge_pulls_left_edge(inner: Rect) -> None:
    """Verify the bar starts where the rounded page badge ends."""
    config = _with_corner(plain_config(), Corner.BOTTOM_LEFT)
    span = resolve_bar_span(inner, config, page_badge_rect=PAGE_RECT_LEFT)
    assert span == (29, 206)


def test_bottom_right_page_badge_pulls_right_edge(inner: Rect) -> None:
    """Verify a bottom-right page badge shortens the bar from the right."""
    config = _with_corner(plain_config(), Corner.BOTTOM_RIGHT)
    span = resolve_bar_span(inner, config, page_badge_rect=PAGE_RECT_RIGHT)
    assert span == (14, 191)


def test_status_badge_never_widens_page_badge_span(inner: Rect) -> None:
    """Verify the tighter of page badge and status badge limits wins."""
    config = _with_badge(_with_corner(plain_config(), Corner.BOTTOM_RIGHT), use_gap=False)
    span = resolve_bar_span(
        inner, config, show_status_badge=True, page_badge_rect=PAGE_RECT_RIGHT
    )
    assert span == (14, 191)


def test_top_corner_page_badge_does_not_touch_bar(inner: Rect) -> None:
    """Verify top-corner badges leave the bar span alone."""
    config = _with_corner(plain_config(), Corner.TOP_LEFT)
    rect = Rect(6, 24, 26, 18)
    assert resolve_bar_span(inner, config, page_badge_rect=rect) == (14, 206)


def test_thick_bar_keeps_left_edge_anchored(inner: Rect) -> None:
    """Verify bookthickbar rescales the right edge only."""
    config = _thick(plain_config())
    assert resolve_bar_span(inner, config, page_count=375) == (14, 134)
    assert resolve_bar_span(inner, config, page_count=None) == (14, 141)
    assert resolve_bar_span(inner, config, page_count=900) == (14, 206)


def test_thick_bar_applies_after_page_badge_adjustment(inner: Rect) -> None:
    """Verify the thickness fraction scales the slot left after badges."""
    config = _thick(_with_corner(plain_config(), Corner.BOTTOM_LEFT))
    span = resolve_bar_span(
        inner, config, page_badge_rect=PAGE_RECT_LEFT, page_count=100
    )
    assert span == (29, 73)


def test_degenerate_slot_keeps_one_pixel(inner: Rect) -> None:
    """Verify a slot squeezed shut still yields a one pixel bar."""
    narrow = Rect(10, 20, 20, 300)
    config = _with_badge(plain_config(), use_gap=True)
    left, right = resolve_bar_span(narrow, config, show_status_badge=True)
    assert right - left == 1
