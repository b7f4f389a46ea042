import logging
from typing import Optional

from .buffers import MAX_FORMAT_LENGTH, MAX_LINE_LENGTH
from .errors import TimestampError
from .humanize import format_relative_time
from .locate import find_timestamp_span
from .parsers import parse_timestamp_in_line
from .render import format_timestamp_with_subsecond
from .rewrite import replace_timestamp_in_line


logger = logging.getLogger(__name__)


def convert_line(
    line: str,
    template: Optional[str] = None,
    now: Optional[float] = None,
    line_capacity: int = MAX_LINE_LENGTH,
    format_capacity: int = MAX_FORMAT_LENGTH,
) -> Optional[str]:
    """
    Rewrite the timestamp already present in a line.

    Pipeline:
      raw line
        → locate leftmost timestamp-shaped span
          → parse first convertible registry entry
            → render with `template`, or humanize when there is none
              → splice into the located span

    Location and parsing are separate steps and may disagree on which
    text they look at; the span always decides where the new text goes.

    This function must:
      - never raise for a bad line
      - return None when the line should pass through unchanged
    """
    try:
        found = find_timestamp_span(line)
        if found is None:
            return None
        span, _ = found

        parsed = parse_timestamp_in_line(line, now=now)

        if template:
            replacement = format_timestamp_with_subsecond(
                template, parsed.to_high_res(), capacity=format_capacity
            )
        else:
            replacement = format_relative_time(
                parsed.seconds, now=None if now is None else int(now)
            )

        return replace_timestamp_in_line(
            line, replacement, span, capacity=line_capacity
        )

    except TimestampError as e:
        logger.debug("line left unchanged: %s", e)
        return None
