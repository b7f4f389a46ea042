"""Tests for the stream driver modes."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from stream import LineStamper, Mode, default_format
from tsengine.types import HighResTime


def _clock(*samples: HighResTime):
    it: Iterator[HighResTime] = iter(samples)

    def read(_monotonic: bool) -> HighResTime:
        return next(it)

    return read


def test_default_formats() -> None:
    assert default_format(Mode.ABSOLUTE) == "%b %d %H:%M:%S"
    assert default_format(Mode.RELATIVE) == "%b %d %H:%M:%S"
    assert default_format(Mode.INCREMENTAL) == "%H:%M:%S"
    assert default_format(Mode.SINCE_START) == "%H:%M:%S"


def test_absolute_mode() -> None:
    stamp = HighResTime(1755921813, 0)
    stamper = LineStamper(Mode.ABSOLUTE, clock=_clock(stamp, stamp))
    assert stamper.process("hello\n") == "Aug 23 04:03:33 hello\n"
    assert stamper.metrics.stamped == 1


def test_absolute_mode_with_subseconds() -> None:
    stamp = HighResTime(1755921813, 5_000)
    stamper = LineStamper(Mode.ABSOLUTE, template="%.s", clock=_clock(stamp, stamp))
    assert stamper.process("x\n") == "1755921813.000005 x\n"


def test_incremental_mode_measures_from_previous_line() -> None:
    stamper = LineStamper(
        Mode.INCREMENTAL,
        template="%.s",
        clock=_clock(HighResTime(100, 0), HighResTime(101, 500_000_000), HighResTime(103, 0)),
    )
    assert stamper.process("a\n") == "1.500000 a\n"
    assert stamper.process("b\n") == "1.500000 b\n"


def test_since_start_mode_measures_from_start() -> None:
    stamper = LineStamper(
        Mode.SINCE_START,
        clock=_clock(HighResTime(100, 0), HighResTime(105, 0), HighResTime(3761, 0)),
    )
    assert stamper.process("a\n") == "00:00:05 a\n"
    assert stamper.process("b\n") == "01:01:01 b\n"


def test_unique_skips_repeated_lines() -> None:
    stamp = HighResTime(1755921813, 0)
    stamper = LineStamper(
        Mode.ABSOLUTE, template="%s", unique=True, clock=_clock(stamp, stamp, stamp)
    )
    assert stamper.process("same\n") == "1755921813 same\n"
    assert stamper.process("same\n") is None
    assert stamper.process("other\n") == "1755921813 other\n"
    assert stamper.metrics.skipped == 1


def test_relative_mode_humanizes() -> None:
    stamper = LineStamper(
        Mode.RELATIVE,
        clock=_clock(HighResTime(0, 0)),
        wall_clock=lambda _monotonic: HighResTime(1755921813 + 3600, 0),
    )
    assert stamper.process("1755921813 rest\n") == "1h ago rest\n"
    assert stamper.metrics.converted == 1


def test_relative_mode_with_template() -> None:
    stamper = LineStamper(Mode.RELATIVE, template="%Y", clock=_clock(HighResTime(0, 0)))
    assert stamper.process("2025-12-22T22:25:23 rest\n") == "2025 rest\n"


def test_relative_mode_passes_unknown_lines_through() -> None:
    stamper = LineStamper(Mode.RELATIVE, clock=_clock(HighResTime(0, 0)))
    assert stamper.process("no timestamp\n") == "no timestamp\n"
    assert stamper.metrics.passed_through == 1


def test_engine_failure_passes_line_through() -> None:
    stamp = HighResTime(1755921813, 0)
    stamper = LineStamper(
        Mode.ABSOLUTE, template="%Y-%m-%d", format_capacity=3, clock=_clock(stamp, stamp)
    )
    assert stamper.process("kept\n") == "kept\n"
    assert stamper.metrics.failures_by_reason == {"BufferOverflowError": 1}


def test_unknown_mode() -> None:
    with pytest.raises(ValueError):
        LineStamper("sideways", clock=_clock(HighResTime(0, 0)))


def test_relative_mode_ignores_monotonic_clock() -> None:
    stamper = LineStamper(
        Mode.RELATIVE,
        monotonic=True,
        clock=_clock(HighResTime(42, 0)),
        wall_clock=lambda _monotonic: HighResTime(1755921813 + 90, 0),
    )
    assert stamper.process("at 1755921813: done\n") == "at 1m30s ago: done\n"
