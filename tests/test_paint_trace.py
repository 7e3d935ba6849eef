"""Test module for paint event tracing and categorized timing."""

from __future__ import annotations

import io
import logging

import pytest

pytest.importorskip("PySide6")

from gridstyles_py.gui.paint_trace import (  # noqa: E402
    PaintEvent,
    PaintTrace,
    _parse_categories,
)


def test_parse_categories() -> None:
    """Verify env values select trace categories."""
    assert _parse_categories("") == set()
    assert _parse_categories("1") == {"paint", "layout", "events"}
    assert _parse_categories("paint, bogus") == {"paint"}
    assert _parse_categories("layout,ALL") == {"paint", "layout", "events"}


def test_from_env_reads_variable(monkeypatch) -> None:
    """Verify the trace env var and the debug flag enable categories."""
    monkeypatch.delenv("GRIDSTYLES_TRACE", raising=False)
    assert PaintTrace.from_env().enabled is False
    assert PaintTrace.from_env(debug_logging=True).wants("events") is True
    monkeypatch.setenv("GRIDSTYLES_TRACE", "layout")
    trace = PaintTrace.from_env()
    assert trace.wants("layout") is True
    assert trace.wants("paint") is False


def test_disabled_trace_does_not_time() -> None:
    """Verify disabled categories skip the clock entirely."""
    trace = PaintTrace(set())
    assert trace.start("paint") is None
    trace.stop("paint", None)


def test_record_flushes_summary_lines() -> None:
    """Verify buckets flush as one summary line per category."""
    out = io.StringIO()
    trace = PaintTrace({"paint", "layout"}, interval_s=0.0, out=out)
    trace.record("layout", 2.0)
    trace.record("paint", 4.0)
    text = out.getvalue()
    assert "perf layout: 1 calls, 2.0ms total" in text
    assert "perf paint: 1 calls, 4.0ms total" in text


def test_event_logs_structured_record(caplog) -> None:
    """Verify events are logged with the event object attached."""
    trace = PaintTrace({"events"})
    event = PaintEvent("/lib/a.epub", "painted", {"bar_span": (1, 2)})
    with caplog.at_level(logging.INFO, logger="gridstyles_py.gui.paint_trace"):
        trace.event(event)
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.paint_event is event
    assert record.getMessage() == "paint path='/lib/a.epub' outcome=painted bar_span=(1, 2)"


def test_event_skipped_without_category(caplog) -> None:
    """Verify events are silent unless the events category is enabled."""
    trace = PaintTrace({"paint"})
    with caplog.at_level(logging.INFO, logger="gridstyles_py.gui.paint_trace"):
        trace.event(PaintEvent(None, "deferred"))
    assert caplog.records == []


def test_timed_block_records_sample() -> None:
    """Verify the timing context manager records even when the block raises."""
    out = io.StringIO()
    trace = PaintTrace({"layout"}, interval_s=3600.0, out=out)
    with pytest.raises(RuntimeError):
        with trace.timed("layout"):
            raise RuntimeError("boom")
    assert out.getvalue() == ""
    trace.flush()
    assert out.getvalue().startswith("perf layout: 1 calls")
