"""
Wall-clock helpers converting between ``HH:MM[:SS]`` and minute-of-day integers.

Every time value entering the engine passes through ``parse_time`` once, so the
rest of the code only deals with plain ints.
"""

import logging
from datetime import time
from typing import Union

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

TimeLike = Union[str, time, None]


def _to_int(part: str) -> int:
    return int(part) if part.isdecimal() else 0


def parse_time(value: TimeLike) -> int:
    """
    Convert a wall-clock value to minutes since midnight.

    Accepts ``"HH:MM"``, ``"HH:MM:SS"``, a ``datetime.time`` or ``None``.
    Missing or unparsable parts count as zero and the function never raises.
    ``"24:00"`` is kept as 1440 so a window may close at midnight.
    """
    if value is None:
        return 0

    if isinstance(value, time):
        return value.hour * 60 + value.minute

    parts = str(value).split(":")
    hours_text = parts[0].strip()
    minutes_text = parts[1].strip() if len(parts) > 1 else ""

    if not hours_text.isdecimal() or (minutes_text and not minutes_text.isdecimal()):
        logger.warning("Unparsable time value %r, missing parts count as zero", value)

    hours = _to_int(hours_text)
    minutes = _to_int(minutes_text)

    if minutes >= 60 or hours * 60 + minutes > MINUTES_PER_DAY:
        logger.warning("Time value %r is outside the day, using 00:00", value)
        return 0

    return hours * 60 + minutes


def format_time(minutes: int) -> str:
    """Format minutes since midnight as zero-padded ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(minutes: int, delta: int) -> int:
    """Add ``delta`` minutes, wrapping around midnight."""
    return (minutes + delta) % MINUTES_PER_DAY
