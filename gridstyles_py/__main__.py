"""CLI entry-point: render a decorated cover grid for a folder to an image."""
from __future__ import annotations

import argparse
import logging
import sys
from functools import lru_cache
from importlib import metadata
from pathlib import Path

from gridstyles_py.core import style_config
from gridstyles_py.core.errors import ColorParseError, StyleConfigError
from gridstyles_py.core.library_scan import load_state, scan_library
from gridstyles_py.logging_utils import configure_logging

logger = logging.getLogger("gridstyles_py")

_COVER_SUFFIXES = (".jpg", ".jpeg", ".png")


def _parse_cell(value: str) -> tuple[int, int]:
    try:
        raw_w, raw_h = value.lower().split("x", 1)
        width, height = int(raw_w), int(raw_h)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"cell size must be positive, got {value!r}")
    return width, height


def _version() -> str:
    try:
        return metadata.version("gridstyles-py")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridstyles-py",
        description="Render cover thumbnails with custom progress bars and badges.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument("--log-level", default="INFO", help="logging level (default INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="render a folder as a cover grid image")
    render.add_argument("root", type=Path, help="library folder to scan")
    render.add_argument("--out", type=Path, required=True, help="output image path")
    render.add_argument(
        "--config",
        type=Path,
        default=None,
        help="folder containing config/gridstyles.toml (defaults to cwd)",
    )
    render.add_argument("--state", type=Path, help="JSON reading state per file")
    render.add_argument("--last-opened", help="path of the last opened book")
    render.add_argument("--columns", type=int, default=4)
    render.add_argument("--cell", type=_parse_cell, default=(180, 260), help="WIDTHxHEIGHT")
    render.add_argument("--rtl", action="store_true", help="mirror the UI layout")
    render.add_argument(
        "--no-folder-labels",
        action="store_true",
        help="disable the host folder-label preference",
    )
    render.add_argument(
        "--force-no-progress-bars",
        action="store_true",
        help="skip all custom decoration",
    )
    render.add_argument("--icons", type=Path, action="append", default=[])
    render.add_argument("--fonts", type=Path, action="append", default=[])
    return parser


def _make_cover_lookup():
    from PySide6.QtGui import QPixmap

    @lru_cache(maxsize=256)
    def lookup(path: str) -> QPixmap | None:
        item = Path(path)
        candidates = [item.with_suffix(suffix) for suffix in _COVER_SUFFIXES]
        if item.is_dir():
            candidates = [item / f"cover{suffix}" for suffix in _COVER_SUFFIXES]
        for candidate in candidates:
            if candidate.is_file():
                pixmap = QPixmap(str(candidate))
                if not pixmap.isNull():
                    return pixmap
        return None

    return lookup


def _render(args: argparse.Namespace) -> int:
    from gridstyles_py.gui.app import get_app
    from gridstyles_py.gui.compositor import CoverOverlayPainter
    from gridstyles_py.gui.cover_host import QtCoverHost
    from gridstyles_py.gui.fonts import FontCache
    from gridstyles_py.gui.host import build_context
    from gridstyles_py.gui.icons import IconPainter
    from gridstyles_py.gui.render import render_grid

    config = style_config.load(args.config.resolve() if args.config else None)
    if config.debug_logging:
        configure_logging(logging.DEBUG)
    state = load_state(args.state) if args.state else None
    items = scan_library(args.root, state)
    get_app(headless=True)
    last_opened = args.last_opened
    if last_opened:
        last_opened = Path(last_opened).as_posix()
    host = QtCoverHost(
        cover_lookup=_make_cover_lookup(),
        last_opened=last_opened,
        folder_labels=not args.no_folder_labels,
        force_no_progress_bars=args.force_no_progress_bars,
        mirrored=args.rtl,
    )
    context = build_context(config, host)
    overlay = CoverOverlayPainter(
        host,
        context,
        fonts=FontCache(args.fonts),
        icons=IconPainter(args.icons),
    )
    cell_w, cell_h = args.cell
    image, _layouts = render_grid(
        items, overlay, columns=args.columns, cell_width=cell_w, cell_height=cell_h
    )
    if not image.save(str(args.out)):
        logger.error("could not write %s", args.out)
        return 1
    logger.info("rendered %d items to %s", len(items), args.out)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        return _render(args)
    except (ColorParseError, StyleConfigError) as exc:
        logger.error("invalid style configuration: %s", exc)
        return 2
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
