from dataclasses import dataclass

from .errors import InvalidArgumentError


NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class HighResTime:
    """
    A clock sample (or a duration) with nanosecond resolution.

    Invariant: 0 <= nanoseconds < 1_000_000_000.
    Seconds are signed, so the difference of two samples is
    representable as another HighResTime.
    """
    seconds: int
    nanoseconds: int = 0

    def __post_init__(self):
        if not 0 <= self.nanoseconds < NANOS_PER_SECOND:
            raise InvalidArgumentError(
                f"nanoseconds out of range: {self.nanoseconds}"
            )

    @classmethod
    def zero(cls) -> "HighResTime":
        return cls(0, 0)

    @property
    def microseconds(self) -> int:
        return self.nanoseconds // 1000

    def __sub__(self, other: "HighResTime") -> "HighResTime":
        if not isinstance(other, HighResTime):
            return NotImplemented

        seconds = self.seconds - other.seconds
        nanoseconds = self.nanoseconds - other.nanoseconds

        # borrow across the nanosecond boundary
        if nanoseconds < 0:
            seconds -= 1
            nanoseconds += NANOS_PER_SECOND

        return HighResTime(seconds, nanoseconds)


@dataclass(frozen=True)
class ParsedTimestamp:
    """
    Absolute time recovered from a line of text.

    This is intentionally minimal:
    - whole epoch seconds (the primary value)
    - a sub-second remainder when the text carried one
    - which registry entry produced it
    """
    seconds: int
    nanoseconds: int = 0
    format_name: str = ""

    def to_high_res(self) -> HighResTime:
        return HighResTime(self.seconds, self.nanoseconds)


@dataclass(frozen=True)
class MatchSpan:
    """
    Location of a timestamp-shaped substring, end exclusive.

    Says nothing about whether the substring converts to a time.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise InvalidArgumentError(
                f"invalid span: start={self.start} end={self.end}"
            )

    @property
    def length(self) -> int:
        return self.end - self.start
