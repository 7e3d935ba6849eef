from __future__ import annotations

import enum
import re
from dataclasses import dataclass, replace
from pathlib import PurePosixPath


class ItemStatus(str, enum.Enum):
    READING = "reading"
    COMPLETE = "complete"
    ON_HOLD = "on_hold"
    ABANDONED = "abandoned"


STATUS_ORDER = (
    ItemStatus.READING,
    ItemStatus.COMPLETE,
    ItemStatus.ON_HOLD,
    ItemStatus.ABANDONED,
)
DEFAULT_STATUS_KEY = "default"

_PAGE_COUNT_RE = re.compile(r"P\((\d+)\)")
_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]+$")
_NUMBER_RE = re.compile(r"\d+")


def normalize_status(value: object) -> ItemStatus | None:
    """Map arbitrary status input to a known status, or `None`."""
    if value is None:
        return None
    if isinstance(value, ItemStatus):
        return value
    raw = str(value).strip().lower()
    for status in STATUS_ORDER:
        if status.value == raw:
            return status
    return None


def status_key(status: ItemStatus | None) -> str:
    """Return the color-table key for *status* (`default` when absent)."""
    return status.value if status is not None else DEFAULT_STATUS_KEY


def page_count_from_path(path: str | None) -> int | None:
    """Parse `P(<digits>)` from the base name of *path* (extension stripped)."""
    if not path:
        return None
    filename = path.rsplit("/", 1)[-1] or path
    basename = _EXTENSION_RE.sub("", filename, count=1)
    match = _PAGE_COUNT_RE.search(basename)
    if match is None:
        return None
    return int(match.group(1))


def parse_folder_counts(summary: str | None) -> tuple[int, int] | None:
    """Return `(books, folders)` from a summary like "24 books, 3 folders"."""
    if not isinstance(summary, str):
        return None
    numbers = [int(n) for n in _NUMBER_RE.findall(summary)]
    books = numbers[0] if numbers else 0
    folders = numbers[1] if len(numbers) > 1 else 0
    return books, folders


def directory_name_from_path(path: str | None) -> str | None:
    if not path:
        return None
    name = PurePosixPath(path.rstrip("/")).name
    return name or path


@dataclass(frozen=True, slots=True)
class ItemFacts:
    """Per-item facts supplied by the host for one paint call."""

    is_directory: bool = False
    file_path: str | None = None
    percent_finished: float | None = None
    status: ItemStatus | None = None
    been_opened: bool = False
    hint_opened: bool = False
    directory_summary: str | None = None
    directory_book_count: int | None = None
    directory_folder_count: int | None = None
    directory_name: str | None = None

    @classmethod
    def for_book(
        cls,
        path: str,
        *,
        percent: float | None = None,
        status: object = None,
        been_opened: bool = False,
        hint_opened: bool = False,
    ) -> ItemFacts:
        return cls(
            is_directory=False,
            file_path=path,
            percent_finished=percent,
            status=normalize_status(status),
            been_opened=been_opened,
            hint_opened=hint_opened,
        )

    @classmethod
    def for_directory(cls, path: str, summary: str | None = None) -> ItemFacts:
        """Build directory facts, deriving name and counts from host strings."""
        counts = parse_folder_counts(summary)
        books, folders = counts if counts is not None else (None, None)
        return cls(
            is_directory=True,
            file_path=path,
            directory_summary=summary,
            directory_book_count=books,
            directory_folder_count=folders,
            directory_name=directory_name_from_path(path),
        )

    @property
    def page_count(self) -> int | None:
        if self.is_directory:
            return None
        return page_count_from_path(self.file_path)

    def suppressed_for_base(self) -> ItemFacts:
        """Return a copy with progress and status facts hidden from the host."""
        return replace(
            self,
            percent_finished=None,
            status=None,
            been_opened=False,
            hint_opened=False,
        )
