"""Time helpers. All timestamps are integer epoch milliseconds."""

import math
import time
from datetime import datetime

from mnemo.domain.constants import MS_PER_DAY, MS_PER_SECOND


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * MS_PER_SECOND)


def start_of_day(timestamp: int) -> int:
    """Epoch ms of local midnight for the day containing `timestamp`."""
    dt = datetime.fromtimestamp(timestamp / MS_PER_SECOND)
    midnight = dt.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp() * MS_PER_SECOND)


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Python's round() uses banker's rounding (round(2.5) == 2), which would
    shift intervals and day counts that land exactly on .5.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def days_between(start: int, end: int) -> float:
    return (end - start) / MS_PER_DAY
