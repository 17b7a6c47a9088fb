"""Duration parsing for resolver timeouts."""

import re

from synapse_cache.types import Duration

# "250ms", "1.5s", "2 m" ...
_TIMEOUT_PATTERN = re.compile(r"(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>ms|s|m|h|d)")
_UNIT_MS = {"ms": 1, "s": 1000, "m": 60 * 1000, "h": 3600 * 1000, "d": 86400 * 1000}


def _to_ms(duration: Duration) -> float:
    if isinstance(duration, int) and not isinstance(duration, bool):
        if duration < 0:
            raise ValueError(f"Invalid duration: {duration!r}")
        return float(duration)
    if not isinstance(duration, str):
        raise ValueError(f"Invalid duration: {duration!r}")
    match = _TIMEOUT_PATTERN.fullmatch(duration.strip())
    if match is None:
        raise ValueError(f"Invalid duration: {duration!r}")
    return float(match["amount"]) * _UNIT_MS[match["unit"]]


def to_seconds(duration: Duration | None) -> float | None:
    """Convert a timeout to seconds for asyncio; None means no timeout.

    Integers are milliseconds. Strings carry a unit and may be fractional.
    """
    if duration is None:
        return None
    return _to_ms(duration) / 1000


def parse_duration(duration: Duration) -> int:
    """Parse a duration to whole milliseconds."""
    return round(_to_ms(duration))
