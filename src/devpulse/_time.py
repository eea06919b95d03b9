"""Shared time and rounding helpers for derivation and metrics."""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator

_SECONDS_PER_DAY = 86_400


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def iso(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp(lo: float, hi: float, value: float) -> int:
    """Round ``value`` and clamp it into ``[lo, hi]``."""
    return int(max(lo, min(hi, round_half_away(value))))


def days_between(a: datetime, b: datetime) -> float:
    """Absolute distance between two instants in fractional days."""
    return abs((a - b).total_seconds()) / _SECONDS_PER_DAY


def whole_days_between(a: datetime, b: datetime) -> int:
    """Absolute distance between two instants in whole elapsed days."""
    return math.floor(days_between(a, b))


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def day_range(first: date, last: date) -> Iterator[date]:
    """Every calendar day from ``first`` through ``last`` inclusive."""
    day = first
    while day <= last:
        yield day
        day += timedelta(days=1)


def fmt_ago(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "yesterday"
    return f"{days} days ago"
