"""Sync schedules and the intervals they imply."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum


class SyncSchedule(StrEnum):
    REALTIME = "realtime"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MANUAL = "manual"


_STEP: dict[str, timedelta] = {
    SyncSchedule.REALTIME: timedelta(0),
    SyncSchedule.HOURLY: timedelta(hours=1),
    SyncSchedule.DAILY: timedelta(hours=24),
    SyncSchedule.WEEKLY: timedelta(days=7),
}

_EXPECTED_HOURS: dict[str, float] = {
    SyncSchedule.HOURLY: 1,
    SyncSchedule.DAILY: 24,
    SyncSchedule.WEEKLY: 168,
}

DEFAULT_INTERVAL_HOURS = 24.0


def next_sync_time(schedule: str | None, now: datetime) -> datetime | None:
    """When a row on *schedule* is next due after a sync at *now*.

    ``manual``, missing and unrecognised schedules are never due again.
    """
    if schedule is None:
        return None
    step = _STEP.get(schedule)
    return now + step if step is not None else None


def expected_interval_hours(schedule: str) -> float:
    """Nominal hours between syncs; realtime and manual count as daily."""
    return _EXPECTED_HOURS.get(schedule, DEFAULT_INTERVAL_HOURS)
