"""Parse configured color strings once into `QColor` values."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from PySide6.QtGui import QColor

from .errors import ColorParseError
from .model import DEFAULT_STATUS_KEY, ItemStatus, status_key
from .style_config import StyleConfig

BADGE_BG_COLOR = "#f0f0f0"


def parse_color(key: str, value: object) -> QColor:
    """Parse one color spec (`#rgb`, `#rrggbb`, `#aarrggbb`, SVG names)."""
    if not isinstance(value, str) or not value.strip():
        raise ColorParseError(key, value)
    color = QColor(value.strip())
    if not color.isValid():
        raise ColorParseError(key, value)
    return color


class ResolvedColorCache(Mapping[str, QColor]):
    """Read-only mapping from semantic keys to parsed colors."""

    def __init__(self, colors: Mapping[str, QColor]) -> None:
        self._colors = dict(colors)

    def __getitem__(self, key: str) -> QColor:
        return QColor(self._colors[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def _status_lookup(self, prefix: str, status: ItemStatus | None) -> QColor:
        key = f"{prefix}_{status_key(status)}"
        if key in self._colors:
            return self[key]
        return self[f"{prefix}_{DEFAULT_STATUS_KEY}"]

    def track_for(self, status: ItemStatus | None) -> QColor:
        return self._status_lookup("track", status)

    def fill_for(self, status: ItemStatus | None) -> QColor:
        return self._status_lookup("fill", status)


def resolve_colors(config: StyleConfig) -> ResolvedColorCache:
    """Parse every color in *config*; raise `ColorParseError` on the first bad one."""
    raw: dict[str, object] = {}
    for status, value in config.track_colors.items():
        raw[f"track_{status}"] = value
    for status, value in config.fill_colors.items():
        raw[f"fill_{status}"] = value
    raw["border"] = config.bar.border_color
    raw["last_opened_border"] = config.last_opened.border_color
    if config.last_opened.fill_color is not None:
        raw["fill_last_opened"] = config.last_opened.fill_color
    raw["badge_bg"] = BADGE_BG_COLOR

    page = config.page_badge
    raw["page_badge_border"] = page.border_color
    raw["page_badge_bg"] = page.bg_color
    raw["page_badge_text"] = page.text_color

    folder = config.folder_badges
    raw["folder_name_badge_bg"] = folder.name_bg_color or page.bg_color
    raw["folder_name_badge_border"] = folder.name_border_color or page.border_color
    raw["folder_name_badge_text"] = folder.name_text_color or page.text_color

    return ResolvedColorCache({key: parse_color(key, value) for key, value in raw.items()})
