"""Process-wide QApplication used by the CLI renderer."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import cast

from PySide6.QtWidgets import QApplication

_APP: QApplication | None = None


def get_app(
    argv: Sequence[str] | None = None, *, headless: bool = False
) -> QApplication:
    """Return the running application, creating one on first use."""
    global _APP
    if _APP is None:
        if headless:
            os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        app = QApplication.instance()
        if app is None:
            app = QApplication(list(argv) if argv is not None else sys.argv)
            app.setApplicationName("gridstyles-py")
        _APP = cast(QApplication, app)
    return _APP
