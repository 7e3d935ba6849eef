"""Status-mark icon lookup and blitting."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from PySide6.QtCore import QRect
from PySide6.QtGui import QIcon, QPainter, QPixmap, QTransform

from gridstyles_py.core.layout import IconPlacement

logger = logging.getLogger(__name__)

ICON_SUFFIXES = (".svg", ".png")
_RTL_SUFFIX = ".rtl"
# Stand-ins used when a dedicated asset is not shipped.
_FALLBACKS = {"dogear.on_hold": "dogear.reading"}


class IconPainter:
    """Draw icons from `<icon_dir>/<icon_id>.svg|png` into a painter."""

    def __init__(self, icon_dirs: Sequence[Path] = ()) -> None:
        self._icon_dirs = tuple(Path(entry) for entry in icon_dirs)
        self._paths: dict[str, Path | None] = {}
        self._missing: set[str] = set()

    def _find(self, icon_id: str) -> Path | None:
        if icon_id in self._paths:
            return self._paths[icon_id]
        found = None
        for base in self._icon_dirs:
            for suffix in ICON_SUFFIXES:
                path = base / f"{icon_id}{suffix}"
                if path.is_file():
                    found = path
                    break
            if found is not None:
                break
        self._paths[icon_id] = found
        return found

    def resolve(self, icon_id: str) -> tuple[Path | None, bool]:
        """Return the icon file and whether it must be mirrored horizontally."""
        path = self._find(icon_id)
        if path is not None:
            return path, False
        mirror = False
        base_id = icon_id
        if base_id.endswith(_RTL_SUFFIX):
            base_id = base_id[: -len(_RTL_SUFFIX)]
            mirror = True
        base_id = _FALLBACKS.get(base_id, base_id)
        return self._find(base_id), mirror

    def pixmap(self, icon_id: str, size: int) -> tuple[QPixmap | None, bool]:
        path, mirror = self.resolve(icon_id)
        if path is None:
            if icon_id not in self._missing:
                self._missing.add(icon_id)
                logger.warning("icon %r not found, skipping mark", icon_id)
            return None, False
        pixmap = QIcon(str(path)).pixmap(size, size)
        if pixmap.isNull():
            return None, False
        return pixmap, mirror

    def draw(self, painter: QPainter, icon: IconPlacement) -> bool:
        pixmap, mirror = self.pixmap(icon.icon_id, icon.size)
        if pixmap is None:
            return False
        painter.save()
        center_x = icon.x + icon.size / 2
        center_y = icon.y + icon.size / 2
        transform = QTransform()
        transform.translate(center_x, center_y)
        if icon.rotation:
            transform.rotate(icon.rotation)
        if mirror:
            transform.scale(-1, 1)
        transform.translate(-center_x, -center_y)
        painter.setTransform(transform, True)
        painter.drawPixmap(QRect(icon.x, icon.y, icon.size, icon.size), pixmap)
        painter.restore()
        return True
