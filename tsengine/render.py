import time
from typing import Callable, Dict

from .buffers import MAX_FORMAT_LENGTH, BoundedBuffer
from .errors import BufferOverflowError, InvalidArgumentError
from .types import HighResTime


# Extension directives, most specific first.
# Everything else (including unknown %-sequences) is copied through
# and left for strftime in the second pass.
SUBSECOND_DIRECTIVES = ("%.S", "%.s", "%.T", "%N", "%s")

Expansions = Dict[str, Callable[[], str]]


# -----------------------------
# HELPERS
# -----------------------------

def _require_template(template: str) -> None:
    if not template:
        raise InvalidArgumentError("format template is required")


def _local_breakdown(seconds: int) -> time.struct_time:
    try:
        return time.localtime(seconds)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidArgumentError(f"time {seconds} out of calendar range") from e


def _expand_directives(template: str, expansions: Expansions, capacity: int) -> str:
    buf = BoundedBuffer(capacity)
    pos = 0
    end = len(template)

    while pos < end:
        for directive in SUBSECOND_DIRECTIVES:
            if template.startswith(directive, pos):
                buf.append(expansions[directive]())
                pos += len(directive)
                break
        else:
            buf.append(template[pos])
            pos += 1

    return buf.getvalue()


def _apply_calendar(text: str, tm: time.struct_time, capacity: int) -> str:
    # Only run strftime when calendar directives survived the first pass.
    if "%" not in text:
        return text

    try:
        rendered = time.strftime(text, tm)
    except ValueError as e:
        raise InvalidArgumentError(f"bad format {text!r}: {e}") from e

    if len(rendered) > capacity:
        raise BufferOverflowError(len(rendered), capacity)
    return rendered


# -----------------------------
# ABSOLUTE TIMES
# -----------------------------

def format_timestamp_with_subsecond(
    template: str,
    timestamp: HighResTime,
    capacity: int = MAX_FORMAT_LENGTH,
) -> str:
    """
    Render `timestamp` with strftime plus the sub-second extensions.

    Extensions (expanded first, left to right):
      %.S  seconds field, dot, microseconds      -> 23.123456
      %.s  epoch seconds, dot, microseconds      -> 1755921813.123456
      %.T  local HH:MM:SS, dot, microseconds     -> 22:25:23.123456
      %N   nanoseconds, 9 digits                 -> 123456789
      %s   epoch seconds                         -> 1755921813

    What remains is handed to strftime once, using the same local
    calendar breakdown. The extensions only ever emit digits, dots and
    colons, so strftime cannot misread them.

    Raises BufferOverflowError if either pass exceeds `capacity`.
    """
    _require_template(template)
    if timestamp is None:
        raise InvalidArgumentError("timestamp is required")

    tm = _local_breakdown(timestamp.seconds)
    micros = timestamp.microseconds

    expansions: Expansions = {
        "%.S": lambda: "%02d.%06d" % (tm.tm_sec, micros),
        "%.s": lambda: "%d.%06d" % (timestamp.seconds, micros),
        "%.T": lambda: "%s.%06d" % (time.strftime("%H:%M:%S", tm), micros),
        "%N": lambda: "%09d" % timestamp.nanoseconds,
        "%s": lambda: "%d" % timestamp.seconds,
    }

    intermediate = _expand_directives(template, expansions, capacity)
    return _apply_calendar(intermediate, tm, capacity)


def format_timestamp(
    template: str,
    seconds: int,
    capacity: int = MAX_FORMAT_LENGTH,
) -> str:
    """Plain strftime of whole epoch seconds in local time."""
    _require_template(template)
    return _apply_calendar(template, _local_breakdown(seconds), capacity)


# -----------------------------
# DURATIONS
# -----------------------------

def format_duration(
    template: str,
    duration: HighResTime,
    capacity: int = MAX_FORMAT_LENGTH,
) -> str:
    """
    Render an elapsed time (incremental and since-start output).

      %.s  total seconds, dot, microseconds
      %.S  seconds within the minute, dot, microseconds
      %.T  HH:MM:SS.micro with hours unbounded
      %N   nanoseconds
      %s   total seconds

    Remaining directives are formatted against the UTC breakdown of the
    elapsed seconds, as `ts` always did: "%H:%M:%S" reads naturally
    below 24h, and longer durations wrap the hour field.
    """
    _require_template(template)
    if duration is None:
        raise InvalidArgumentError("duration is required")

    total = duration.seconds
    micros = duration.microseconds

    expansions: Expansions = {
        "%.S": lambda: "%02d.%06d" % (total % 60, micros),
        "%.s": lambda: "%d.%06d" % (total, micros),
        "%.T": lambda: "%02d:%02d:%02d.%06d" % (
            total // 3600, (total % 3600) // 60, total % 60, micros
        ),
        "%N": lambda: "%09d" % duration.nanoseconds,
        "%s": lambda: "%d" % total,
    }

    intermediate = _expand_directives(template, expansions, capacity)

    try:
        tm = time.gmtime(total)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidArgumentError(f"duration {total}s out of range") from e

    return _apply_calendar(intermediate, tm, capacity)
