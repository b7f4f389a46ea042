import logging
from typing import Optional, Tuple

from .errors import InvalidArgumentError, NoMatchError
from .registry import TIMESTAMP_FORMATS, FormatSpec
from .types import MatchSpan


logger = logging.getLogger(__name__)


def find_timestamp_span(line: str) -> Optional[Tuple[MatchSpan, FormatSpec]]:
    """
    Leftmost timestamp-shaped span in `line`, and the entry that found it.

    Every pattern is scanned; whether the text would actually convert
    is not considered. On equal start offsets the earlier registry
    entry wins. Returns None when nothing matches.
    """
    if line is None:
        raise InvalidArgumentError("line is required")

    best: Optional[Tuple[MatchSpan, FormatSpec]] = None

    for spec in TIMESTAMP_FORMATS:
        m = spec.pattern.search(line)
        if not m:
            continue

        # strict "<" keeps the earlier entry on ties
        if best is None or m.start() < best[0].start:
            best = (MatchSpan(m.start(), m.end()), spec)

    if best is not None:
        logger.debug("located %s at %d:%d", best[1].name, best[0].start, best[0].end)

    return best


def find_timestamp_match(line: str) -> MatchSpan:
    found = find_timestamp_span(line)
    if found is None:
        raise NoMatchError("no timestamp-shaped text in line")
    return found[0]
