"""Host-side contract and the immutable per-session render context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from PySide6.QtGui import QPainter

from gridstyles_py.core.colors import resolve_colors
from gridstyles_py.core.layout import CoverTarget, LayoutContext
from gridstyles_py.core.model import ItemFacts
from gridstyles_py.core.style_config import StyleConfig, resolve_badge_sizes


@dataclass(frozen=True, slots=True)
class BaseRenderMode:
    """Which built-in decorations the host may paint in its base pass."""

    show_progress: bool = True
    show_status_marks: bool = True
    show_corner_marks: bool = True
    show_folder_labels: bool = True


class GridHost(Protocol):
    """Grid view collaborator that owns cover art, titles and host settings."""

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
        """Paint the base thumbnail and return the cover frame it drew."""
        ...

    def last_opened_file_path(self) -> str | None: ...

    def folder_label_preference(self) -> bool: ...

    def force_no_progress_bars(self) -> bool: ...

    def corner_mark_size(self) -> int | None: ...

    def is_mirrored(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Everything the compositor needs, resolved once per session."""

    layout: LayoutContext
    force_no_progress_bars: bool
    overlay_mode: BaseRenderMode
    native_mode: BaseRenderMode

    @property
    def config(self) -> StyleConfig:
        return self.layout.config


def build_context(config: StyleConfig, host: GridHost) -> RenderContext:
    """Read host settings once and resolve colors; `ColorParseError` propagates."""
    config = resolve_badge_sizes(config, host.corner_mark_size())
    colors = resolve_colors(config)
    folder_pref = host.folder_label_preference()
    layout = LayoutContext(
        config=config,
        colors=colors,
        last_opened_path=host.last_opened_file_path(),
        folder_label_preference=folder_pref,
        mirrored=host.is_mirrored(),
    )
    overlay_mode = BaseRenderMode(
        show_progress=False,
        show_status_marks=False,
        show_corner_marks=config.status_badge.show,
        show_folder_labels=(
            not config.folder_badges.style_enabled and folder_pref is not False
        ),
    )
    native_mode = BaseRenderMode(show_folder_labels=folder_pref is not False)
    return RenderContext(
        layout=layout,
        force_no_progress_bars=bool(host.force_no_progress_bars()),
        overlay_mode=overlay_mode,
        native_mode=native_mode,
    )
