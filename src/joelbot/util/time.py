from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_hhmm(raw: object) -> Optional[time]:
    s = str(raw or "").strip()
    if not s:
        return None
    parts = s.split(":")
    if len(parts) not in (2, 3):
        return None
    try:
        nums = [int(p) for p in parts]
    except ValueError:
        return None
    hour, minute = nums[0], nums[1]
    second = nums[2] if len(nums) == 3 else 0
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        return None
    return time(hour, minute, second)


def format_clock(dt: datetime) -> str:
    """12-hour console stamp, e.g. ``[9:05:12 AM]``."""
    hour = dt.hour % 12 or 12
    period = "AM" if dt.hour < 12 else "PM"
    return f"[{hour}:{dt.minute:02d}:{dt.second:02d} {period}]"
