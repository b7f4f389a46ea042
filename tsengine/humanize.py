import time
from typing import Optional

from .errors import InvalidArgumentError


MINUTE = 60
HOUR = 3600
DAY = 86400


def _bucket(d: int) -> str:
    # One unit pair at most; a zero remainder is dropped.
    if d < MINUTE:
        return f"{d}s"
    if d < HOUR:
        major, minor = divmod(d, MINUTE)
        return f"{major}m{minor}s" if minor else f"{major}m"
    if d < DAY:
        major, minor = d // HOUR, (d % HOUR) // MINUTE
        return f"{major}h{minor}m" if minor else f"{major}h"
    major, minor = d // DAY, (d % DAY) // HOUR
    return f"{major}d{minor}h" if minor else f"{major}d"


def format_relative_time(timestamp: int, now: Optional[int] = None) -> str:
    """
    Describe `timestamp` relative to `now`:
      59s ago, 1m ago, 1h1m ago, in 1h, 2d3h ago

    `now` defaults to the current wall-clock second.
    """
    if timestamp is None:
        raise InvalidArgumentError("timestamp is required")

    if now is None:
        now = int(time.time())

    diff = int(now) - int(timestamp)

    if diff < 0:
        return "in " + _bucket(-diff)
    return _bucket(diff) + " ago"
