"""Style configuration loading for cover progress bars and badges."""

from __future__ import annotations

import enum
import importlib
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Any

from .errors import StyleConfigError
from .model import DEFAULT_STATUS_KEY, ItemStatus

tomllib: ModuleType | None
try:  # Python 3.11+
    tomllib = importlib.import_module("tomllib")
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None

CONFIG_FILENAME = "gridstyles.toml"
DEFAULT_CORNER_MARK_SIZE = 24

_BOOL_TRUE = {"1", "true", "yes", "on"}
_BOOL_FALSE = {"0", "false", "no", "off"}
_UNSET = {"", "none", "auto"}


class Corner(str, enum.Enum):
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"

    @property
    def is_bottom(self) -> bool:
        return self in (Corner.BOTTOM_LEFT, Corner.BOTTOM_RIGHT)

    @property
    def is_left(self) -> bool:
        return self in (Corner.TOP_LEFT, Corner.BOTTOM_LEFT)


def normalize_corner(value: object, *, default: Corner = Corner.BOTTOM_RIGHT) -> Corner:
    """Normalize a corner name; unknown names fall back to *default*."""
    raw = str(value).strip().lower()
    for corner in Corner:
        if corner.value == raw:
            return corner
    return default


@dataclass(frozen=True, slots=True)
class BarStyle:
    height: int = 9
    border_radius: int = 5
    border_width: int = 0
    fill_inset_vertical: int = 2
    fill_inset_horizontal: int = 2
    margin_left: int = 4
    margin_right: int = 4
    margin_bottom: int = 8
    complete_width: int = 9
    border_color: str = "#606060"


@dataclass(frozen=True, slots=True)
class StatusBadgeStyle:
    show: bool = True
    # True: the bar stops `gap` pixels before the badge.
    # False: the bar ends under the badge, shortened by its radius.
    use_gap: bool = False
    gap: int = 4
    show_reading: bool = False
    show_complete: bool = True
    show_abandoned: bool = True
    show_on_hold: bool = True
    icon_size: int | None = 13
    background_size: int | None = 17

    def enabled_for(self, status: ItemStatus | None) -> bool:
        """Return per-status badge visibility (unknown status: hidden)."""
        if status is ItemStatus.READING:
            return self.show_reading
        if status is ItemStatus.COMPLETE:
            return self.show_complete
        if status is ItemStatus.ABANDONED:
            return self.show_abandoned
        if status is ItemStatus.ON_HOLD:
            return self.show_on_hold
        return False


@dataclass(frozen=True, slots=True)
class LastOpenedStyle:
    border_width: int = 0
    border_color: str = "#555555"
    fill_color: str | None = "#111111"


@dataclass(frozen=True, slots=True)
class ThickBarStyle:
    enabled: bool = True
    unopened_books: bool = False


@dataclass(frozen=True, slots=True)
class PageBadgeStyle:
    enabled: bool = True
    font: str | None = "source/SourceSans3-Regular.ttf"
    corner: Corner = Corner.BOTTOM_LEFT
    x_offset: int = -4
    y_offset: int = 4
    width: int | None = None
    height: int | None = None
    radius: int = 2
    border_width: int = 0
    border_color: str = "#606060"
    bg_color: str = "#dadada"
    text_color: str = "#333333"
    text_size: int = 8
    padding_x: int = 4
    padding_y: int = 4


@dataclass(frozen=True, slots=True)
class FolderBadgeStyle:
    style_enabled: bool = True
    name_font: str | None = "source/SourceSerif4-Regular.ttf"
    name_enabled: bool = True
    count_enabled: bool = True
    name_bg_color: str | None = "#ffffff"
    name_border_color: str | None = None
    name_text_color: str | None = None
    name_x_offset: int | None = None
    name_y_offset: int | None = 0


def _default_track_colors() -> Mapping[str, str]:
    return MappingProxyType(
        {
            "reading": "#dadada",
            "complete": "#b0b0b0",
            "on_hold": "#b0b0b0",
            "abandoned": "#b0b0b0",
            "default": "#dadada",
        }
    )


def _default_fill_colors() -> Mapping[str, str]:
    return MappingProxyType(
        {
            "reading": "#555555",
            "complete": "#666666",
            "on_hold": "#888888",
            "abandoned": "#888888",
            "default": "#555555",
        }
    )


@dataclass(frozen=True, slots=True)
class StyleConfig:
    """Immutable, process-wide style settings for the overlay layer."""

    bar: BarStyle = field(default_factory=BarStyle)
    status_badge: StatusBadgeStyle = field(default_factory=StatusBadgeStyle)
    last_opened: LastOpenedStyle = field(default_factory=LastOpenedStyle)
    thick_bar: ThickBarStyle = field(default_factory=ThickBarStyle)
    page_badge: PageBadgeStyle = field(default_factory=PageBadgeStyle)
    folder_badges: FolderBadgeStyle = field(default_factory=FolderBadgeStyle)
    track_colors: Mapping[str, str] = field(default_factory=_default_track_colors)
    fill_colors: Mapping[str, str] = field(default_factory=_default_fill_colors)
    debug_logging: bool = False

    def __post_init__(self) -> None:
        for name in ("track_colors", "fill_colors"):
            table = getattr(self, name)
            if DEFAULT_STATUS_KEY not in table:
                raise StyleConfigError(
                    f"{name} must define a {DEFAULT_STATUS_KEY!r} entry"
                )
            if not isinstance(table, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(table)))


# Dimension fields scaled by `[display] scale`.
_PIXEL_FIELDS: dict[type, tuple[str, ...]] = {
    BarStyle: (
        "height",
        "border_radius",
        "border_width",
        "fill_inset_vertical",
        "fill_inset_horizontal",
        "margin_left",
        "margin_right",
        "margin_bottom",
        "complete_width",
    ),
    StatusBadgeStyle: ("gap", "icon_size", "background_size"),
    LastOpenedStyle: ("border_width",),
    PageBadgeStyle: (
        "x_offset",
        "y_offset",
        "width",
        "height",
        "radius",
        "border_width",
        "text_size",
        "padding_x",
        "padding_y",
    ),
    FolderBadgeStyle: ("name_x_offset", "name_y_offset"),
}


def scale_by_size(value: int, scale: float) -> int:
    """Scale a pixel dimension with half-up rounding."""
    return int(math.floor(value * scale + 0.5))


def _scale_section(section: Any, scale: float) -> Any:
    changes: dict[str, int] = {}
    for name in _PIXEL_FIELDS.get(type(section), ()):
        value = getattr(section, name)
        if value is None:
            continue
        changes[name] = scale_by_size(value, scale)
    return replace(section, **changes) if changes else section


def apply_scale(config: StyleConfig, scale: float) -> StyleConfig:
    """Return *config* with every pixel dimension multiplied by *scale*."""
    if scale == 1.0:
        return config
    return replace(
        config,
        bar=_scale_section(config.bar, scale),
        status_badge=_scale_section(config.status_badge, scale),
        last_opened=_scale_section(config.last_opened, scale),
        page_badge=_scale_section(config.page_badge, scale),
        folder_badges=_scale_section(config.folder_badges, scale),
    )


def resolve_badge_sizes(
    config: StyleConfig, corner_mark_size: int | None
) -> StyleConfig:
    """Default unset status-badge sizes from the host corner mark size."""
    mark = corner_mark_size if corner_mark_size else DEFAULT_CORNER_MARK_SIZE
    badge = config.status_badge
    changes: dict[str, int] = {}
    if badge.background_size is None:
        changes["background_size"] = mark
    if badge.icon_size is None:
        changes["icon_size"] = int(math.floor(mark * 0.75))
    if not changes:
        return config
    return replace(config, status_badge=replace(badge, **changes))


def _candidate_roots(root: Path | None) -> list[Path]:
    roots = [Path.cwd()]
    if root is not None:
        roots.append(root)
    seen: set[Path] = set()
    out: list[Path] = []
    for entry in roots:
        entry = entry.resolve()
        if entry in seen:
            continue
        seen.add(entry)
        out.append(entry)
    return out


def _load_toml(path: Path) -> dict[str, Any]:
    if tomllib is None or not path.exists():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _normalize_bool(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    raw = str(value).strip().lower()
    if raw in _BOOL_TRUE:
        return True
    if raw in _BOOL_FALSE:
        return False
    return default


def _normalize_int(value: Any, *, default: int | None) -> int | None:
    if isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _normalize_optional_str(value: Any, *, default: str | None) -> str | None:
    if value is None:
        return default
    raw = str(value).strip()
    if raw.lower() in _UNSET:
        return None
    return raw


def _merge_section(section: Any, data: Any) -> Any:
    """Overlay known keys from a TOML table onto a style dataclass."""
    if not isinstance(data, dict):
        return section
    changes: dict[str, Any] = {}
    for spec in fields(section):
        if spec.name not in data:
            continue
        current = getattr(section, spec.name)
        value = data[spec.name]
        kind = spec.type
        if kind == "Corner":
            changes[spec.name] = normalize_corner(value)
        elif kind == "bool":
            changes[spec.name] = _normalize_bool(value, default=current)
        elif kind == "int | None" and str(value).strip().lower() in _UNSET:
            changes[spec.name] = None
        elif kind in ("int", "int | None"):
            changes[spec.name] = _normalize_int(value, default=current)
        elif kind == "str":
            changes[spec.name] = _normalize_optional_str(value, default=current) or current
        else:
            changes[spec.name] = _normalize_optional_str(value, default=current)
    return replace(section, **changes) if changes else section


def _merge_colors(table: Mapping[str, str], data: Any) -> Mapping[str, str]:
    if not isinstance(data, dict):
        return table
    merged = dict(table)
    for key, value in data.items():
        merged[str(key).strip().lower()] = str(value).strip()
    return MappingProxyType(merged)


def merge(config: StyleConfig, data: Mapping[str, Any]) -> StyleConfig:
    """Overlay one parsed TOML document onto *config*."""
    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        colors = {}
    debug = data.get("debug", {})
    debug_logging = config.debug_logging
    if isinstance(debug, dict) and "logging" in debug:
        debug_logging = _normalize_bool(debug["logging"], default=debug_logging)
    return replace(
        config,
        bar=_merge_section(config.bar, data.get("bar")),
        status_badge=_merge_section(config.status_badge, data.get("status_badge")),
        last_opened=_merge_section(config.last_opened, data.get("last_opened")),
        thick_bar=_merge_section(config.thick_bar, data.get("bookthickbar")),
        page_badge=_merge_section(config.page_badge, data.get("page_badge")),
        folder_badges=_merge_section(config.folder_badges, data.get("folder_badges")),
        track_colors=_merge_colors(config.track_colors, colors.get("track")),
        fill_colors=_merge_colors(config.fill_colors, colors.get("fill")),
        debug_logging=debug_logging,
    )


def _display_scale(data: Mapping[str, Any], *, default: float) -> float:
    display = data.get("display", {})
    if not isinstance(display, dict) or "scale" not in display:
        return default
    try:
        scale = float(display["scale"])
    except (TypeError, ValueError):
        return default
    return scale if scale > 0 else default


@lru_cache(maxsize=8)
def load(root: Path | None = None) -> StyleConfig:
    """Load and merge style configuration from `config/gridstyles.toml` candidates."""
    cfg = StyleConfig()
    scale = 1.0
    for base in _candidate_roots(root):
        data = _load_toml(base / "config" / CONFIG_FILENAME)
        if not data:
            continue
        cfg = merge(cfg, data)
        scale = _display_scale(data, default=scale)
    return apply_scale(cfg, scale)
