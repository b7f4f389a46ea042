class TimestampError(Exception):
    """
    Base class for every failure the timestamp engine reports.

    Callers that only care about "did this line work" catch this one.
    """


class InvalidArgumentError(TimestampError, ValueError):
    """A required input was None or empty."""


class BufferOverflowError(TimestampError):
    """
    The composed output would not fit its destination capacity.

    Raised before anything is written.
    """

    def __init__(self, required: int, capacity: int):
        super().__init__(
            f"output needs {required} characters, capacity is {capacity}"
        )
        self.required = required
        self.capacity = capacity


class TimeParseError(TimestampError):
    """No registry entry both matched and converted."""


class NoMatchError(TimestampError):
    """No timestamp-shaped span was found in the line."""


class SystemClockError(TimestampError):
    """The underlying clock could not be read."""
