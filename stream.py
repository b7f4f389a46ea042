import logging
from enum import Enum
from typing import Callable, Dict, Optional

from config import DEFAULT_ELAPSED_FORMAT, DEFAULT_FORMAT
from tsengine.buffers import MAX_FORMAT_LENGTH, MAX_LINE_LENGTH
from tsengine.clock import get_high_res_time
from tsengine.convert import convert_line
from tsengine.errors import TimestampError
from tsengine.render import format_duration, format_timestamp_with_subsecond
from tsengine.types import HighResTime


logger = logging.getLogger(__name__)


class Mode(str, Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    INCREMENTAL = "incremental"
    SINCE_START = "since_start"


def default_format(mode: Mode) -> str:
    if mode in (Mode.INCREMENTAL, Mode.SINCE_START):
        return DEFAULT_ELAPSED_FORMAT
    return DEFAULT_FORMAT


# ---------- Metrics ----------

class StampMetrics:
    def __init__(self):
        self.stamped = 0
        self.converted = 0
        self.passed_through = 0
        self.skipped = 0
        self.failures_by_reason: Dict[str, int] = {}

    def record_failure(self, reason: str):
        self.passed_through += 1
        self.failures_by_reason[reason] = (
            self.failures_by_reason.get(reason, 0) + 1
        )


# ---------- Stream driver ----------

class LineStamper:
    """
    Per-stream state around the timestamp engine.

    Owns the only state that crosses lines: the start sample, the
    previous sample (incremental mode) and the previous line (unique
    mode). A line that fails in the engine is emitted unchanged.
    """

    def __init__(
        self,
        mode: Mode = Mode.ABSOLUTE,
        template: Optional[str] = None,
        monotonic: bool = False,
        unique: bool = False,
        line_capacity: int = MAX_LINE_LENGTH,
        format_capacity: int = MAX_FORMAT_LENGTH,
        clock: Optional[Callable[[bool], HighResTime]] = None,
        wall_clock: Optional[Callable[[bool], HighResTime]] = None,
    ):
        self.mode = Mode(mode)
        # relative mode humanizes unless a format was asked for explicitly
        self.explicit_template = template
        self.template = template or default_format(self.mode)
        self.monotonic = monotonic
        self.unique = unique
        self.line_capacity = line_capacity
        self.format_capacity = format_capacity
        self._clock = clock or get_high_res_time
        self._wall_clock = wall_clock or get_high_res_time

        self.metrics = StampMetrics()
        self.start_time = self._clock(self.monotonic)
        self.last_time = self.start_time
        self.last_line: Optional[str] = None

    # ---------- Internal helpers ----------

    def _stamp(self, line: str, now: HighResTime) -> str:
        if self.mode == Mode.ABSOLUTE:
            rendered = format_timestamp_with_subsecond(
                self.template, now, capacity=self.format_capacity
            )
        elif self.mode == Mode.INCREMENTAL:
            rendered = format_duration(
                self.template, now - self.last_time, capacity=self.format_capacity
            )
            self.last_time = now
        else:
            rendered = format_duration(
                self.template, now - self.start_time, capacity=self.format_capacity
            )
        return f"{rendered} {line}"

    def _convert(self, line: str) -> str:
        # Relative output is always measured against the wall clock;
        # a monotonic sample means nothing next to a parsed date.
        now = self._wall_clock(False).seconds

        converted = convert_line(
            line,
            template=self.explicit_template,
            now=now,
            line_capacity=self.line_capacity,
            format_capacity=self.format_capacity,
        )
        if converted is None:
            self.metrics.record_failure("no_convertible_timestamp")
            return line

        self.metrics.converted += 1
        return converted

    # ---------- Public API ----------

    def process(self, line: str) -> Optional[str]:
        """
        Return the output for one input line, or None if it is skipped
        as a duplicate of the previous line.
        """
        if self.unique and line == self.last_line:
            self.metrics.skipped += 1
            return None

        self.last_line = line

        if self.mode == Mode.RELATIVE:
            return self._convert(line)

        now = self._clock(self.monotonic)
        try:
            out = self._stamp(line, now)
        except TimestampError as e:
            logger.debug("stamping failed, passing line through: %s", e)
            self.metrics.record_failure(type(e).__name__)
            return line

        self.metrics.stamped += 1
        return out
