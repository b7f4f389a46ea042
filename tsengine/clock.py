import logging
import time

from .errors import SystemClockError
from .types import NANOS_PER_SECOND, HighResTime


logger = logging.getLogger(__name__)


def read_clock(monotonic: bool = False) -> HighResTime:
    """Read the wall clock (or the monotonic clock) at nanosecond resolution."""
    try:
        ns = time.monotonic_ns() if monotonic else time.time_ns()
    except OSError as e:
        raise SystemClockError(f"clock read failed: {e}") from e

    seconds, nanoseconds = divmod(ns, NANOS_PER_SECOND)
    return HighResTime(seconds, nanoseconds)


def get_high_res_time(monotonic: bool = False) -> HighResTime:
    """
    Like read_clock, but a failed read yields a zero sample.

    Used on the per-line path, where one bad clock read must not stop
    the stream.
    """
    try:
        return read_clock(monotonic)
    except SystemClockError as e:
        logger.warning("%s; using zero sample", e)
        return HighResTime.zero()
