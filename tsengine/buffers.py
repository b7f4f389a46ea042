import logging
from typing import List

from .errors import BufferOverflowError, InvalidArgumentError


logger = logging.getLogger(__name__)


# Capacities mirror the fixed buffers the line tools have always used.
MAX_LINE_LENGTH = 4096
MAX_FORMAT_LENGTH = 256
MAX_TIMESTAMP_LENGTH = 128


def _check_capacity(capacity: int) -> None:
    if capacity is None or capacity <= 0:
        raise InvalidArgumentError(f"capacity must be positive, got {capacity!r}")


class BoundedBuffer:
    """
    Append-only text buffer with a hard capacity.

    Every write is measured first and committed only if the whole
    result fits. On overflow the buffer is left exactly as it was.
    """

    def __init__(self, capacity: int = MAX_FORMAT_LENGTH, initial: str = ""):
        _check_capacity(capacity)
        self.capacity = capacity
        self._parts: List[str] = []
        self._length = 0
        if initial:
            self.append(initial)

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return self.getvalue()

    @property
    def remaining(self) -> int:
        return self.capacity - self._length

    def getvalue(self) -> str:
        return "".join(self._parts)

    def append(self, text: str) -> "BoundedBuffer":
        if text is None:
            raise InvalidArgumentError("cannot append None")

        required = self._length + len(text)
        if required > self.capacity:
            logger.debug(
                "append rejected: %d > %d", required, self.capacity
            )
            raise BufferOverflowError(required, self.capacity)

        self._parts.append(text)
        self._length = required
        return self

    def append_format(self, fmt: str, *args) -> "BoundedBuffer":
        """printf-style formatted append, same all-or-nothing rule."""
        return self.append(safe_format(self.remaining, fmt, *args))


def safe_append(dest: str, src: str, capacity: int) -> str:
    """
    Concatenate two strings, refusing results longer than `capacity`.

    Returns the new string; `dest` itself is never modified.
    """
    if dest is None or src is None:
        raise InvalidArgumentError("safe_append needs both dest and src")
    _check_capacity(capacity)

    required = len(dest) + len(src)
    if required > capacity:
        raise BufferOverflowError(required, capacity)
    return dest + src


def safe_format(capacity: int, fmt: str, *args) -> str:
    if fmt is None:
        raise InvalidArgumentError("format is required")
    if capacity is None or capacity < 0:
        raise InvalidArgumentError(f"capacity must be >= 0, got {capacity!r}")

    text = fmt % args if args else fmt
    if len(text) > capacity:
        raise BufferOverflowError(len(text), capacity)
    return text
