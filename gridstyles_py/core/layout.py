"""Geometry engine: turn item facts into non-overlapping bar and badge shapes.

Every function here is pure over integers and already-resolved colors. The
compositor paints the returned `LayoutResult` in z-order; nothing in this
module touches a painter.

Span resolution order for the progress bar:

1. start from the inner rect minus the left/right margins;
2. a bottom-corner page badge pulls the matching bar end in so both rounded
   ends meet;
3. a visible status badge reserves space at the right end (gap mode) or lets
   the bar end under the badge (overlay mode);
4. bookthickbar rescales the remaining slot by a page-count fraction, keeping
   the left edge anchored.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from PySide6.QtGui import QColor

from .colors import ResolvedColorCache
from .errors import LayoutError
from .model import ItemFacts, ItemStatus
from .style_config import Corner, StyleConfig

THIN_BAR_FRACTION = 0.25
THIN_BAR_PAGES = 100
FULL_BAR_PAGES = 650
UNKNOWN_LENGTH_FRACTION = 0.66
MIN_FOLDER_NAME_WIDTH = 10


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inset(self, amount: int) -> Rect:
        return Rect(
            self.x + amount,
            self.y + amount,
            self.width - 2 * amount,
            self.height - 2 * amount,
        )


@dataclass(frozen=True, slots=True)
class CoverTarget:
    """Cover frame established by the host's base paint."""

    width: int
    height: int
    border: int = 0
    padding: int = 0


def inner_rect_for(
    x: int, y: int, cell_width: int, cell_height: int, target: CoverTarget
) -> Rect:
    """Center *target* inside the cell and strip its border and padding."""
    frame_x = x + (cell_width - target.width) // 2
    frame_y = y + (cell_height - target.height) // 2
    edge = target.border + target.padding
    return Rect(
        frame_x + edge,
        frame_y + edge,
        target.width - 2 * edge,
        target.height - 2 * edge,
    )


@dataclass(frozen=True, slots=True)
class FontSpec:
    name: str | None
    size: int


@dataclass(frozen=True, slots=True)
class TextMetrics:
    width: int
    ascent: int
    descent: int

    @property
    def height(self) -> int:
        return self.ascent + self.descent


MeasureText = Callable[[FontSpec, str], TextMetrics]


@dataclass(frozen=True, slots=True)
class RoundedRect:
    rect: Rect
    color: QColor
    radius: int


class BarShape(enum.Enum):
    STANDARD = "standard"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class BarLayout:
    shape: BarShape
    left: int
    right: int
    border: RoundedRect | None
    track: RoundedRect | None
    fill: RoundedRect | None

    @property
    def fill_width(self) -> int:
        return self.fill.rect.width if self.fill is not None else 0

    @property
    def extent(self) -> Rect:
        """Outermost painted rectangle of the bar (border included)."""
        if self.border is not None:
            return self.border.rect
        body = self.track if self.track is not None else self.fill
        assert body is not None
        return body.rect


@dataclass(frozen=True, slots=True)
class IconPlacement:
    icon_id: str
    x: int
    y: int
    size: int
    rotation: int = 0


@dataclass(frozen=True, slots=True)
class StatusBadgeLayout:
    box: Rect
    border: RoundedRect | None
    background: RoundedRect
    icon: IconPlacement


@dataclass(frozen=True, slots=True)
class TextPlacement:
    text: str
    x: int
    baseline: int
    color: QColor
    font: FontSpec
    clip: Rect | None = None


@dataclass(frozen=True, slots=True)
class TextBadgeLayout:
    rect: Rect
    border: RoundedRect | None
    background: RoundedRect | None
    text: TextPlacement


@dataclass(frozen=True, slots=True)
class LayoutResult:
    inner: Rect
    bar: BarLayout | None = None
    status_badge: StatusBadgeLayout | None = None
    page_badge: TextBadgeLayout | None = None
    folder_name_badge: TextBadgeLayout | None = None
    folder_count_badge: TextBadgeLayout | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.bar is None
            and self.status_badge is None
            and self.page_badge is None
            and self.folder_name_badge is None
            and self.folder_count_badge is None
        )

    def trace_fields(self) -> dict[str, Any]:
        """Return the key geometry values as a flat dict for tracing."""
        fields: dict[str, Any] = {
            "inner": (self.inner.x, self.inner.y, self.inner.width, self.inner.height)
        }
        if self.bar is not None:
            fields["bar_shape"] = self.bar.shape.value
            fields["bar_span"] = (self.bar.left, self.bar.right)
            fields["fill_width"] = self.bar.fill_width
        if self.status_badge is not None:
            box = self.status_badge.box
            fields["status_badge"] = (box.x, box.y, box.width)
            fields["status_icon"] = self.status_badge.icon.icon_id
        for name in ("page_badge", "folder_name_badge", "folder_count_badge"):
            badge = getattr(self, name)
            if badge is not None:
                fields[name] = badge.text.text
        return fields


@dataclass(frozen=True, slots=True)
class LayoutContext:
    """Session-wide inputs shared by every layout call."""

    config: StyleConfig
    colors: ResolvedColorCache
    last_opened_path: str | None = None
    folder_label_preference: bool | None = True
    mirrored: bool = False

    def is_last_opened(self, path: str | None) -> bool:
        return bool(self.last_opened_path) and path == self.last_opened_path

    @property
    def folder_badges_enabled(self) -> bool:
        return (
            self.config.folder_badges.style_enabled
            and self.folder_label_preference is not False
        )


def thickness_fraction(page_count: int | None) -> float:
    """Map page count to the share of the slot the bar occupies."""
    if page_count is None:
        return UNKNOWN_LENGTH_FRACTION
    if page_count <= THIN_BAR_PAGES:
        return THIN_BAR_FRACTION
    if page_count >= FULL_BAR_PAGES:
        return 1.0
    return THIN_BAR_FRACTION + (page_count - THIN_BAR_PAGES) * (
        1.0 - THIN_BAR_FRACTION
    ) / (FULL_BAR_PAGES - THIN_BAR_PAGES)


def status_badge_visible(config: StyleConfig, facts: ItemFacts) -> bool:
    badge = config.status_badge
    return (
        badge.show
        and not facts.is_directory
        and badge.enabled_for(facts.status)
        and (facts.been_opened or facts.hint_opened)
    )


def _badge_size(config: StyleConfig) -> int:
    size = config.status_badge.background_size
    if size is None:
        raise LayoutError("status badge size is unresolved")
    return size


def resolve_bar_span(
    inner: Rect,
    config: StyleConfig,
    *,
    show_status_badge: bool = False,
    page_badge_rect: Rect | None = None,
    page_count: int | None = None,
) -> tuple[int, int]:
    """Return the bar's `(left, right)` after badge and thickness adjustments."""
    bar = config.bar
    base_left = inner.x + bar.margin_left
    base_right = inner.right - bar.margin_right
    left, right = base_left, base_right

    corner = config.page_badge.corner
    if page_badge_rect is not None and corner.is_bottom:
        combined_radius = config.page_badge.radius + bar.border_radius
        if corner is Corner.BOTTOM_LEFT:
            offset = max(0, page_badge_rect.right - inner.x - combined_radius)
            left = base_left + offset
        else:
            offset = max(0, inner.right - page_badge_rect.x - combined_radius)
            right = base_right - offset

    if show_status_badge:
        size = _badge_size(config)
        if config.status_badge.use_gap:
            reserve = size + config.status_badge.gap
        else:
            reserve = size // 2
        right = min(right, base_right - reserve)

    if config.thick_bar.enabled:
        slot_width = max(1, right - left)
        used = max(1, _round(slot_width * thickness_fraction(page_count)))
        right = left + used

    if right - left < 1:
        right = left + 1
    return left, right


def _bar_border(
    ctx: LayoutContext, is_last_opened: bool
) -> tuple[int, QColor]:
    config = ctx.config
    if is_last_opened and not config.status_badge.show:
        return config.last_opened.border_width, ctx.colors["last_opened_border"]
    return config.bar.border_width, ctx.colors["border"]


def _outer_border(body: Rect, width: int, color: QColor, radius: int) -> RoundedRect:
    return RoundedRect(body.inset(-width), color, radius + width)


def bar_layout(
    inner: Rect,
    span: tuple[int, int],
    ctx: LayoutContext,
    *,
    status: ItemStatus | None,
    percent: float,
    is_last_opened: bool = False,
) -> BarLayout:
    """Build track/fill (or the complete indicator) inside the resolved slot."""
    bar = ctx.config.bar
    left, right = span
    slot_width = max(1, right - left)
    border_width, border_color = _bar_border(ctx, is_last_opened)

    track_color = ctx.colors.track_for(status)
    fill_color = ctx.colors.fill_for(status)
    if is_last_opened and "fill_last_opened" in ctx.colors:
        fill_color = ctx.colors["fill_last_opened"]

    y = inner.bottom - bar.margin_bottom - bar.height

    if status is ItemStatus.COMPLETE:
        outer_width = min(bar.complete_width, slot_width)
        body_width = max(1, outer_width - 2 * border_width)
        body = Rect(right - border_width - body_width, y, body_width, bar.height)
        border = None
        if border_width > 0:
            border = _outer_border(body, border_width, border_color, bar.border_radius)
        return BarLayout(
            shape=BarShape.COMPLETE,
            left=left,
            right=right,
            border=border,
            track=None,
            fill=RoundedRect(body, fill_color, bar.border_radius),
        )

    track_width = max(1, slot_width - 2 * border_width)
    track = Rect(left + border_width, y, track_width, bar.height)
    border = None
    if border_width > 0:
        border = _outer_border(track, border_width, border_color, bar.border_radius)

    progress = max(0.0, min(1.0, percent))
    full_width = _round(track_width * progress)
    avail_width = track_width - 2 * bar.fill_inset_horizontal
    fill_width = 0
    if full_width > 0 and avail_width > 0:
        fill_width = min(avail_width, max(1, full_width - 2 * bar.fill_inset_horizontal))
    fill_height = bar.height - 2 * bar.fill_inset_vertical
    fill = None
    if fill_width > 0 and fill_height > 0:
        fill_radius = max(
            0, bar.border_radius - max(bar.fill_inset_vertical, bar.fill_inset_horizontal)
        )
        fill = RoundedRect(
            Rect(
                track.x + bar.fill_inset_horizontal,
                track.y + bar.fill_inset_vertical,
                fill_width,
                fill_height,
            ),
            fill_color,
            fill_radius,
        )
    return BarLayout(
        shape=BarShape.STANDARD,
        left=left,
        right=right,
        border=border,
        track=RoundedRect(track, track_color, bar.border_radius),
        fill=fill,
    )


def status_icon(status: ItemStatus | None, *, mirrored: bool) -> tuple[str, int]:
    """Return `(icon_id, rotation)` for the status badge mark."""
    if status is ItemStatus.ABANDONED:
        return ("dogear.abandoned.rtl" if mirrored else "dogear.abandoned"), 0
    if status is ItemStatus.COMPLETE:
        return ("dogear.complete.rtl" if mirrored else "dogear.complete"), 0
    if status is ItemStatus.ON_HOLD:
        return "dogear.on_hold", 0
    return "dogear.reading", 270 if mirrored else 0


def status_badge_layout(
    inner: Rect,
    ctx: LayoutContext,
    *,
    status: ItemStatus | None,
    is_last_opened: bool = False,
) -> StatusBadgeLayout:
    """Place the circular badge at the bar's right end, centered on the bar."""
    config = ctx.config
    bar = config.bar
    size = _badge_size(config)
    icon_size = config.status_badge.icon_size or size

    bar_y = inner.bottom - bar.margin_bottom - bar.height
    box = Rect(
        inner.right - bar.margin_right - size,
        _round(bar_y + (bar.height - size) / 2),
        size,
        size,
    )

    emphasis_width = config.last_opened.border_width
    border = None
    background_box = box
    if is_last_opened and config.status_badge.show and emphasis_width > 0:
        border = RoundedRect(box, ctx.colors["last_opened_border"], size // 2)
        inner_size = max(1, size - 2 * emphasis_width)
        background_box = Rect(
            box.x + emphasis_width, box.y + emphasis_width, inner_size, inner_size
        )

    icon_id, rotation = status_icon(status, mirrored=ctx.mirrored)
    offset = (background_box.width - icon_size) // 2
    return StatusBadgeLayout(
        box=box,
        border=border,
        background=RoundedRect(
            background_box, ctx.colors["badge_bg"], background_box.width // 2
        ),
        icon=IconPlacement(
            icon_id,
            background_box.x + offset,
            background_box.y + offset,
            icon_size,
            rotation,
        ),
    )


def _text_badge(
    rect: Rect,
    *,
    border_width: int,
    radius: int,
    border_color: QColor,
    background_color: QColor,
    text: str,
    metrics: TextMetrics,
    text_color: QColor,
    font: FontSpec,
    left_padding: int | None = None,
) -> TextBadgeLayout:
    border = RoundedRect(rect, border_color, radius) if border_width > 0 else None
    background_rect = rect.inset(border_width)
    background = None
    if not background_rect.is_empty:
        background = RoundedRect(
            background_rect, background_color, max(0, radius - border_width)
        )
    else:
        background_rect = rect

    if left_padding is None:
        text_x = background_rect.x + (background_rect.width - metrics.width) // 2
        clip = None
    else:
        text_x = background_rect.x + left_padding
        clip = background_rect
    center_y = background_rect.y + background_rect.height / 2
    baseline = _round(center_y - (metrics.descent - metrics.ascent) / 2)
    return TextBadgeLayout(
        rect=rect,
        border=border,
        background=background,
        text=TextPlacement(text, text_x, baseline, text_color, font, clip),
    )


def page_badge_rect(inner: Rect, config: StyleConfig, metrics: TextMetrics) -> Rect:
    """Anchor the page badge in its configured corner of the inner rect."""
    page = config.page_badge
    width = page.width if page.width is not None else metrics.width + 2 * page.padding_x
    height = (
        page.height if page.height is not None else metrics.height + 2 * page.padding_y
    )
    if page.corner.is_left:
        x = inner.x + page.x_offset
    else:
        x = inner.right - width - page.x_offset
    if page.corner.is_bottom:
        y = inner.bottom - height - page.y_offset
    else:
        y = inner.y + page.y_offset
    return Rect(x, y, width, height)


def page_badge_font(config: StyleConfig) -> FontSpec:
    return FontSpec(config.page_badge.font, config.page_badge.text_size)


def page_badge_layout(
    inner: Rect, ctx: LayoutContext, page_count: int, measure: MeasureText
) -> TextBadgeLayout:
    page = ctx.config.page_badge
    text = str(page_count)
    font = page_badge_font(ctx.config)
    metrics = measure(font, text)
    return _text_badge(
        page_badge_rect(inner, ctx.config, metrics),
        border_width=page.border_width,
        radius=page.radius,
        border_color=ctx.colors["page_badge_border"],
        background_color=ctx.colors["page_badge_bg"],
        text=text,
        metrics=metrics,
        text_color=ctx.colors["page_badge_text"],
        font=font,
    )


def folder_name_badge_layout(
    inner: Rect, ctx: LayoutContext, name: str, measure: MeasureText
) -> TextBadgeLayout:
    """Full-width single-line banner; long names are clipped at the edge."""
    page = ctx.config.page_badge
    folder = ctx.config.folder_badges
    font = FontSpec(folder.name_font or page.font, page.text_size)
    metrics = measure(font, name)

    x_offset = folder.name_x_offset if folder.name_x_offset is not None else page.x_offset
    y_offset = folder.name_y_offset if folder.name_y_offset is not None else page.y_offset
    width = max(MIN_FOLDER_NAME_WIDTH, inner.width - x_offset)
    height = (
        page.height if page.height is not None else metrics.height + 2 * page.padding_y
    )
    return _text_badge(
        Rect(inner.x + x_offset, inner.y + y_offset, width, height),
        border_width=page.border_width,
        radius=page.radius,
        border_color=ctx.colors["folder_name_badge_border"],
        background_color=ctx.colors["folder_name_badge_bg"],
        text=name,
        metrics=metrics,
        text_color=ctx.colors["folder_name_badge_text"],
        font=font,
        left_padding=page.padding_x,
    )


def folder_count_text(book_count: int, folder_count: int | None) -> str:
    if folder_count:
        return f"{book_count}[{folder_count}]"
    return str(book_count)


def folder_count_badge_layout(
    inner: Rect,
    ctx: LayoutContext,
    book_count: int,
    folder_count: int | None,
    measure: MeasureText,
) -> TextBadgeLayout:
    page = ctx.config.page_badge
    text = folder_count_text(book_count, folder_count)
    font = page_badge_font(ctx.config)
    metrics = measure(font, text)
    width = page.width if page.width is not None else metrics.width + 2 * page.padding_x
    height = (
        page.height if page.height is not None else metrics.height + 2 * page.padding_y
    )
    return _text_badge(
        Rect(inner.x + page.x_offset, inner.bottom - height - page.y_offset, width, height),
        border_width=page.border_width,
        radius=page.radius,
        border_color=ctx.colors["page_badge_border"],
        background_color=ctx.colors["page_badge_bg"],
        text=text,
        metrics=metrics,
        text_color=ctx.colors["page_badge_text"],
        font=font,
    )


def _directory_layout(
    inner: Rect, facts: ItemFacts, ctx: LayoutContext, measure: MeasureText
) -> LayoutResult:
    if not ctx.folder_badges_enabled:
        return LayoutResult(inner=inner)
    folder = ctx.config.folder_badges
    name_badge = None
    if folder.name_enabled and facts.directory_name:
        name_badge = folder_name_badge_layout(inner, ctx, facts.directory_name, measure)
    count_badge = None
    if folder.count_enabled and facts.directory_book_count is not None:
        count_badge = folder_count_badge_layout(
            inner,
            ctx,
            facts.directory_book_count,
            facts.directory_folder_count,
            measure,
        )
    return LayoutResult(
        inner=inner, folder_name_badge=name_badge, folder_count_badge=count_badge
    )


def compute_layout(
    inner: Rect, facts: ItemFacts, ctx: LayoutContext, measure: MeasureText
) -> LayoutResult:
    """Compute every overlay shape for one item.

    Raises `LayoutError` when the inner rect is empty. Missing optional facts
    only disable the feature depending on them.
    """
    if inner.is_empty:
        raise LayoutError(
            f"empty inner rect {inner.width}x{inner.height} for {facts.file_path!r}"
        )
    if facts.is_directory:
        return _directory_layout(inner, facts, ctx, measure)

    config = ctx.config
    page_count = facts.page_count
    page_badge = None
    if config.page_badge.enabled and page_count is not None:
        page_badge = page_badge_layout(inner, ctx, page_count, measure)

    percent = facts.percent_finished
    if percent is None and config.thick_bar.enabled and config.thick_bar.unopened_books:
        percent = 0.0
    if percent is None:
        return LayoutResult(inner=inner, page_badge=page_badge)

    is_last_opened = ctx.is_last_opened(facts.file_path)
    show_badge = status_badge_visible(config, facts)
    span = resolve_bar_span(
        inner,
        config,
        show_status_badge=show_badge,
        page_badge_rect=page_badge.rect if page_badge is not None else None,
        page_count=page_count,
    )
    bar = bar_layout(
        inner,
        span,
        ctx,
        status=facts.status,
        percent=percent,
        is_last_opened=is_last_opened,
    )
    status_badge = None
    if show_badge:
        status_badge = status_badge_layout(
            inner, ctx, status=facts.status, is_last_opened=is_last_opened
        )
    return LayoutResult(
        inner=inner, bar=bar, status_badge=status_badge, page_badge=page_badge
    )
