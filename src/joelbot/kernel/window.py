from __future__ import annotations

from datetime import datetime
from typing import Tuple
from zoneinfo import ZoneInfo

from ..contracts.v1 import TimeWindowConfig
from ..util.time import ensure_aware


def local_now(now: datetime, config: TimeWindowConfig) -> datetime:
    return ensure_aware(now).astimezone(ZoneInfo(config.timezone))


def is_within_window(now: datetime, config: TimeWindowConfig) -> bool:
    """True iff ``now`` falls on an allowed weekday and inside [start, end] local time.

    Both bounds are inclusive. Naive ``now`` is taken as UTC.
    """
    local = local_now(now, config)
    if local.weekday() not in config.weekdays:
        return False
    clock = local.time()
    return config.start <= clock <= config.end


def window_bounds(now: datetime, config: TimeWindowConfig) -> Tuple[datetime, datetime]:
    """Local start/end datetimes of the window on the calendar day of ``now``."""
    local = local_now(now, config)
    start = local.replace(hour=config.start.hour, minute=config.start.minute, second=config.start.second, microsecond=0)
    end = local.replace(hour=config.end.hour, minute=config.end.minute, second=config.end.second, microsecond=0)
    return start, end
