"""Build `ItemFacts` for a folder of books, the way a file browser host would."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .model import ItemFacts, normalize_status

BOOK_EXTENSIONS = frozenset(
    {".epub", ".pdf", ".mobi", ".azw3", ".fb2", ".djvu", ".cbz", ".cbr", ".txt"}
)


def is_book(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in BOOK_EXTENSIONS


def directory_summary(path: Path) -> str:
    """Return the host-style summary, e.g. "24 books, 3 folders"."""
    books = 0
    folders = 0
    for child in path.iterdir():
        if child.name.startswith("."):
            continue
        if child.is_dir():
            folders += 1
        elif is_book(child):
            books += 1
    if folders:
        return f"{books} books, {folders} folders"
    return f"{books} books"


def load_state(path: Path) -> dict[str, dict[str, Any]]:
    """Read `{path: {percent, status, opened}}` reading state from JSON."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return {str(key): value for key, value in data.items() if isinstance(value, dict)}


def _percent(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _lookup(state: Mapping[str, Mapping[str, Any]], path: Path, root: Path) -> Mapping[str, Any]:
    for key in (str(path), path.relative_to(root).as_posix(), path.name):
        entry = state.get(key)
        if entry is not None:
            return entry
    return {}


def scan_library(
    root: Path, state: Mapping[str, Mapping[str, Any]] | None = None
) -> list[ItemFacts]:
    """Return folders first, then books, each sorted by name."""
    if not root.is_dir():
        raise NotADirectoryError(root)
    state = state or {}
    children = sorted(
        (child for child in root.iterdir() if not child.name.startswith(".")),
        key=lambda child: child.name.lower(),
    )
    folders: list[ItemFacts] = []
    books: list[ItemFacts] = []
    for child in children:
        if child.is_dir():
            folders.append(
                ItemFacts.for_directory(child.as_posix(), directory_summary(child))
            )
        elif is_book(child):
            entry = _lookup(state, child, root)
            books.append(
                ItemFacts.for_book(
                    child.as_posix(),
                    percent=_percent(entry.get("percent")),
                    status=normalize_status(entry.get("status")),
                    been_opened=bool(entry.get("opened", entry.get("percent") is not None)),
                )
            )
    return folders + books
