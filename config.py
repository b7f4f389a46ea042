import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from tsengine.buffers import MAX_FORMAT_LENGTH, MAX_LINE_LENGTH

load_dotenv()


DEFAULT_FORMAT = "%b %d %H:%M:%S"
DEFAULT_ELAPSED_FORMAT = "%H:%M:%S"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_log_level(name: str, default: str) -> str:
    level = (os.getenv(name) or "").strip().upper() or default
    if level not in LOG_LEVELS:
        raise ValueError(f"{name} must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    return level


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default

    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e

    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    format: Optional[str]
    line_capacity: int
    format_capacity: int
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            format=os.getenv("TS_FORMAT") or None,
            line_capacity=_env_int("TS_LINE_CAPACITY", MAX_LINE_LENGTH),
            format_capacity=_env_int("TS_FORMAT_CAPACITY", MAX_FORMAT_LENGTH),
            log_level=_env_log_level("TS_LOG_LEVEL", "WARNING"),
        )
