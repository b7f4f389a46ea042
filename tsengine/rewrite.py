import logging
from typing import Optional

from .buffers import MAX_LINE_LENGTH
from .errors import BufferOverflowError, InvalidArgumentError
from .locate import find_timestamp_span
from .types import MatchSpan


logger = logging.getLogger(__name__)


def replace_timestamp_in_line(
    line: str,
    replacement: str,
    span: Optional[MatchSpan],
    capacity: int = MAX_LINE_LENGTH,
) -> str:
    """
    Splice `replacement` over `span`; everything else is kept verbatim.

    With no span the line comes back unchanged. The composed length is
    checked against `capacity` before anything is built.
    """
    if line is None or replacement is None:
        raise InvalidArgumentError("line and replacement are required")

    if span is None:
        return line

    if span.end > len(line):
        raise InvalidArgumentError(
            f"span {span.start}:{span.end} outside line of length {len(line)}"
        )

    required = len(line) - span.length + len(replacement)
    if required > capacity:
        raise BufferOverflowError(required, capacity)

    return line[:span.start] + replacement + line[span.end:]


def rewrite_line(
    line: str,
    replacement: str,
    capacity: int = MAX_LINE_LENGTH,
) -> str:
    """Locate the leftmost timestamp and replace it, or pass the line through."""
    found = find_timestamp_span(line)
    span = found[0] if found else None
    if span is None:
        logger.debug("no timestamp to replace, passing line through")
    return replace_timestamp_in_line(line, replacement, span, capacity=capacity)
