import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


class ParseStrategy(Enum):
    """
    How the matched text is turned into a time value.

    CALENDAR hands the text to strptime with the entry's template;
    the two UNIX strategies read epoch seconds directly.
    """
    CALENDAR = auto()
    UNIX_PLAIN = auto()
    UNIX_FRACTIONAL = auto()


@dataclass(frozen=True)
class FormatSpec:
    name: str
    pattern: re.Pattern
    strategy: ParseStrategy
    template: Optional[str] = None

    def __post_init__(self):
        if self.strategy is ParseStrategy.CALENDAR and not self.template:
            raise ValueError(f"{self.name}: calendar entries need a template")


# Ordered registry.
# Order matters for parsing: the first entry that matches AND converts wins.
# Location ignores this order except to break ties at the same offset.
TIMESTAMP_FORMATS: List[FormatSpec] = [
    # Dec 22 22:25:23
    FormatSpec(
        name="syslog",
        pattern=re.compile(r"[A-Za-z]{3} [0-9]{1,2} [0-9]{2}:[0-9]{2}:[0-9]{2}"),
        strategy=ParseStrategy.CALENDAR,
        template="%b %d %H:%M:%S",
    ),

    # 2025-12-22T22:25:23 (fraction and zone are left as trailing text)
    FormatSpec(
        name="ISO-8601",
        pattern=re.compile(
            r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}"
        ),
        strategy=ParseStrategy.CALENDAR,
        template="%Y-%m-%dT%H:%M:%S",
    ),

    # 16 Jun 94 07:29:35
    FormatSpec(
        name="RFC",
        pattern=re.compile(
            r"[0-9]{1,2} [A-Za-z]{3} [0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}"
        ),
        strategy=ParseStrategy.CALENDAR,
        template="%d %b %y %H:%M:%S",
    ),

    # Mon Dec 22 22:25
    FormatSpec(
        name="lastlog",
        pattern=re.compile(r"[A-Za-z]{3} [A-Za-z]{3} [0-9]{2} [0-9]{2}:[0-9]{2}"),
        strategy=ParseStrategy.CALENDAR,
        template="%a %b %d %H:%M",
    ),

    # 21 dec 17:05
    FormatSpec(
        name="short",
        pattern=re.compile(r"[0-9]{2} [a-z]{3} [0-9]{2}:[0-9]{2}"),
        strategy=ParseStrategy.CALENDAR,
        template="%d %b %H:%M",
    ),

    # 22 dec/93 17:05:30
    FormatSpec(
        name="short_with_year",
        pattern=re.compile(r"[0-9]{2} [a-z]{3}/[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}"),
        strategy=ParseStrategy.CALENDAR,
        template="%d %b/%y %H:%M:%S",
    ),

    # 1755921813.123456
    FormatSpec(
        name="unix_fractional",
        pattern=re.compile(r"[0-9]{10,}\.[0-9]{1,9}"),
        strategy=ParseStrategy.UNIX_FRACTIONAL,
    ),

    # 1755921813 (ten digits minimum so short numbers are never epochs)
    FormatSpec(
        name="unix_plain",
        pattern=re.compile(r"[0-9]{10,}"),
        strategy=ParseStrategy.UNIX_PLAIN,
    ),
]


def get_format(name: str) -> FormatSpec:
    for spec in TIMESTAMP_FORMATS:
        if spec.name == name:
            return spec
    raise KeyError(name)
