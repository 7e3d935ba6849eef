"""Font loading with default-font fallback and text measurement."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from PySide6.QtGui import QFont, QFontDatabase, QFontMetrics

from gridstyles_py.core.layout import FontSpec, TextMetrics

logger = logging.getLogger(__name__)


class FontCache:
    """Resolve `FontSpec` values to `QFont` objects, loading files once."""

    def __init__(self, font_dirs: Sequence[Path] = ()) -> None:
        self._font_dirs = tuple(Path(entry) for entry in font_dirs)
        self._families: dict[str, str | None] = {}
        self._fonts: dict[FontSpec, QFont] = {}

    def _font_path(self, name: str) -> Path | None:
        candidate = Path(name)
        if candidate.is_absolute():
            return candidate if candidate.is_file() else None
        for base in self._font_dirs:
            path = base / name
            if path.is_file():
                return path
        return None

    def _load_family(self, name: str) -> str | None:
        path = self._font_path(name)
        if path is not None:
            font_id = QFontDatabase.addApplicationFont(str(path))
            if font_id != -1:
                families = QFontDatabase.applicationFontFamilies(font_id)
                if families:
                    return families[0]
        elif name in QFontDatabase.families():
            return name
        return None

    def family(self, name: str | None) -> str | None:
        """Return the loaded family for *name*; `None` means the default font."""
        if name is None:
            return None
        if name not in self._families:
            family = self._load_family(name)
            if family is None:
                logger.warning("could not load font %r, falling back to default font", name)
            self._families[name] = family
        return self._families[name]

    def font(self, spec: FontSpec) -> QFont:
        cached = self._fonts.get(spec)
        if cached is not None:
            return QFont(cached)
        family = self.family(spec.name)
        font = QFont(family) if family else QFont()
        font.setPixelSize(max(1, spec.size))
        self._fonts[spec] = font
        return QFont(font)

    def measure(self, spec: FontSpec, text: str) -> TextMetrics:
        metrics = QFontMetrics(self.font(spec))
        return TextMetrics(
            width=metrics.horizontalAdvance(text),
            ascent=metrics.ascent(),
            descent=metrics.descent(),
        )
