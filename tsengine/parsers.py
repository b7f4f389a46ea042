import logging
import re
import time
from datetime import datetime
from typing import Optional

from .errors import InvalidArgumentError, TimeParseError
from .registry import TIMESTAMP_FORMATS, FormatSpec, ParseStrategy
from .types import ParsedTimestamp


logger = logging.getLogger(__name__)


# A parsed year-less date this far ahead of "now" is taken to be last year's.
FUTURE_TOLERANCE_SECONDS = 86400 * 30

# Largest value a signed 64-bit time_t can hold.
MAX_EPOCH_SECONDS = 2**63 - 1

DIGITS_RE = re.compile(r"[0-9]+")


# -----------------------------
# UNIX EPOCH PARSERS
# -----------------------------

def parse_unix_plain(text: str) -> ParsedTimestamp:
    """
    Parse a run of digits as epoch seconds.

    Rejected:
      - anything that is not purely ASCII digits
      - values a 64-bit time_t or the local calendar cannot hold
      - zero, which has always meant "no timestamp" to these tools
    """
    if text is None:
        raise InvalidArgumentError("timestamp text is required")

    if not DIGITS_RE.fullmatch(text):
        raise TimeParseError(f"not an epoch timestamp: {text!r}")

    value = int(text)
    if value == 0:
        raise TimeParseError("epoch zero is not accepted")
    if value > MAX_EPOCH_SECONDS:
        raise TimeParseError(f"epoch value overflows: {text}")

    try:
        time.localtime(value)
    except (OverflowError, OSError, ValueError) as e:
        raise TimeParseError(f"epoch value out of calendar range: {text}") from e

    return ParsedTimestamp(seconds=value, format_name="unix_plain")


def parse_unix_fractional(text: str) -> ParsedTimestamp:
    """
    Parse logs like:
      1755921813.123456 worker started

    The integer part follows parse_unix_plain. The fraction is kept as
    nanoseconds; it never changes the whole-second value.
    """
    if text is None:
        raise InvalidArgumentError("timestamp text is required")

    whole, dot, fraction = text.partition(".")
    if not dot:
        raise TimeParseError(f"no fractional part: {text!r}")

    if not DIGITS_RE.fullmatch(fraction) or len(fraction) > 9:
        raise TimeParseError(f"bad fractional part: {text!r}")

    seconds = parse_unix_plain(whole).seconds
    nanoseconds = int(fraction.ljust(9, "0"))

    return ParsedTimestamp(
        seconds=seconds,
        nanoseconds=nanoseconds,
        format_name="unix_fractional",
    )


# -----------------------------
# CALENDAR TEMPLATE PARSER
# -----------------------------

def _has_any(template: str, directives) -> bool:
    return any(d in template for d in directives)


def _previous_year(parsed: datetime) -> datetime:
    # Feb 29 has no counterpart a year earlier; mktime rolls it to Mar 1.
    try:
        return parsed.replace(year=parsed.year - 1)
    except ValueError:
        return parsed.replace(year=parsed.year - 1, month=3, day=1)


def parse_calendar(
    text: str,
    template: str,
    now: Optional[float] = None,
) -> ParsedTimestamp:
    """
    Parse `text` with a strptime template into local epoch seconds.

    Fields the template does not carry are filled in before parsing:
    year -> current local year, month -> January, day -> 1.

    If the result is more than 30 days ahead of `now`, it is moved back
    one year. That is the usual case of a year-less syslog line from
    late December read in early January.
    """
    if text is None or not template:
        raise InvalidArgumentError("text and template are required")

    if now is None:
        now = time.time()

    # Missing fields are supplied as extra leading fields, so strptime
    # never has to invent a year (Feb 29 would not parse in 1900).
    prefix_fields = []
    prefix_values = []

    if not _has_any(template, ("%Y", "%y")):
        prefix_fields.append("%Y")
        prefix_values.append(str(datetime.fromtimestamp(now).year))
    if not _has_any(template, ("%b", "%B", "%m", "%h")):
        prefix_fields.append("%m")
        prefix_values.append("01")
    if not _has_any(template, ("%d", "%e")):
        prefix_fields.append("%d")
        prefix_values.append("01")

    full_template = " ".join(prefix_fields + [template])
    full_text = " ".join(prefix_values + [text])

    try:
        parsed = datetime.strptime(full_text, full_template)
        result = int(parsed.timestamp())

        if result > now + FUTURE_TOLERANCE_SECONDS:
            parsed = _previous_year(parsed)
            result = int(parsed.timestamp())

    except (ValueError, OverflowError, OSError) as e:
        raise TimeParseError(f"{text!r} does not fit {template!r}: {e}") from e

    return ParsedTimestamp(seconds=result)


# -----------------------------
# LINE PARSER
# -----------------------------

def convert_match(
    spec: FormatSpec,
    text: str,
    now: Optional[float] = None,
) -> ParsedTimestamp:
    if spec.strategy is ParseStrategy.UNIX_PLAIN:
        return parse_unix_plain(text)

    if spec.strategy is ParseStrategy.UNIX_FRACTIONAL:
        return parse_unix_fractional(text)

    parsed = parse_calendar(text, spec.template, now=now)
    return ParsedTimestamp(seconds=parsed.seconds, format_name=spec.name)


def parse_timestamp_in_line(
    line: str,
    now: Optional[float] = None,
) -> ParsedTimestamp:
    """
    Find and convert the first recognizable timestamp in a line.

    Registry entries are tried in order. An entry whose pattern matches
    but whose text does not convert is skipped, and the next entry
    gets its chance, even if it matches somewhere else in the line.
    """
    if line is None:
        raise InvalidArgumentError("line is required")

    for spec in TIMESTAMP_FORMATS:
        m = spec.pattern.search(line)
        if not m:
            continue

        try:
            parsed = convert_match(spec, m.group(0), now=now)
        except TimeParseError as e:
            logger.debug("%s matched %r but did not convert: %s", spec.name, m.group(0), e)
            continue

        logger.debug("parsed %r as %s", m.group(0), spec.name)
        return parsed

    raise TimeParseError("no recognizable timestamp in line")
