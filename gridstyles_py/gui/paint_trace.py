"""Per-item paint events and categorized timing for the overlay compositor.

Set `GRIDSTYLES_TRACE=1` (or a comma list such as `paint,events`) to enable.
Timings are summarized on stderr about once a second; events go through the
`logging` module with the `PaintEvent` attached as `record.paint_event`.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, TextIO

TRACE_ENV = "GRIDSTYLES_TRACE"
TRACE_CATEGORIES = frozenset({"paint", "layout", "events"})
_ENABLE_ALL = {"1", "true", "yes", "on", "all"}

logger = logging.getLogger(__name__)


def _parse_categories(value: str) -> set[str]:
    words = {word.strip() for word in value.lower().split(",")} - {""}
    if words & _ENABLE_ALL:
        return set(TRACE_CATEGORIES)
    return set(words & TRACE_CATEGORIES)


@dataclass(frozen=True, slots=True)
class PaintEvent:
    """One record per painted item with its key geometry."""

    path: str | None
    outcome: str
    fields: dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        parts = [f"path={self.path!r}", f"outcome={self.outcome}"]
        parts.extend(f"{key}={value}" for key, value in sorted(self.fields.items()))
        return "paint " + " ".join(parts)


@dataclass
class _Timing:
    samples: int = 0
    total_ms: float = 0.0
    worst_ms: float = 0.0

    def add(self, elapsed_ms: float) -> None:
        self.samples += 1
        self.total_ms += elapsed_ms
        self.worst_ms = max(self.worst_ms, elapsed_ms)

    def summary(self, name: str) -> str:
        mean = self.total_ms / self.samples if self.samples else 0.0
        return (
            f"perf {name}: {self.samples} calls, {self.total_ms:.1f}ms total, "
            f"{mean:.2f}ms/call, max {self.worst_ms:.1f}ms"
        )


class PaintTrace:
    """Collect paint timings per category and log paint events."""

    def __init__(
        self,
        categories: Iterable[str],
        *,
        interval_s: float = 1.0,
        out: TextIO | None = None,
    ) -> None:
        self._categories = frozenset(categories)
        self._interval_s = interval_s
        self._out = out if out is not None else sys.stderr
        self._timings: dict[str, _Timing] = {}
        self._flushed_at = time.monotonic()

    @classmethod
    def from_env(cls, *, debug_logging: bool = False) -> PaintTrace:
        """Build from `GRIDSTYLES_TRACE`; `debug_logging` turns on events."""
        categories = _parse_categories(os.getenv(TRACE_ENV, ""))
        if debug_logging:
            categories.add("events")
        return cls(categories)

    @property
    def enabled(self) -> bool:
        return bool(self._categories)

    def wants(self, name: str) -> bool:
        return name in self._categories

    def start(self, name: str) -> float | None:
        return time.perf_counter() if self.wants(name) else None

    def stop(self, name: str, start: float | None) -> None:
        if start is not None:
            self.record(name, (time.perf_counter() - start) * 1000.0)

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        start = self.start(name)
        try:
            yield
        finally:
            self.stop(name, start)

    def record(self, name: str, elapsed_ms: float) -> None:
        if not self.wants(name):
            return
        self._timings.setdefault(name, _Timing()).add(elapsed_ms)
        now = time.monotonic()
        if now - self._flushed_at >= self._interval_s:
            self.flush(now)

    def event(self, event: PaintEvent) -> None:
        if self.wants("events"):
            logger.info(event.format(), extra={"paint_event": event})

    def flush(self, now: float | None = None) -> None:
        """Write one summary line per category and reset the counters."""
        if self._timings:
            self._out.write(
                "".join(
                    timing.summary(name) + "\n"
                    for name, timing in sorted(self._timings.items())
                )
            )
            self._out.flush()
            self._timings.clear()
        self._flushed_at = time.monotonic() if now is None else now
