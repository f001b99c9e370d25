"""Generated record ids and millisecond timestamps."""

import secrets
import time

from src.core.config import constants


def now_ms() -> int:
    """Current time as milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def random_suffix(length: int = constants.ID_SUFFIX_LENGTH) -> str:
    """Return a lowercase alphanumeric suffix of the given length."""
    return "".join(secrets.choice(constants.ID_SUFFIX_ALPHABET) for _ in range(length))


def generate_id(prefix: str, *, timestamp_ms: int | None = None) -> str:
    """Build an id shaped like ``{prefix}_{epochMillis}_{suffix}``.

    Uniqueness is probabilistic; nothing in storage enforces it.
    """
    ts = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{prefix}_{ts}_{random_suffix()}"
