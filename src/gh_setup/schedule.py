"""Weekly milestone schedule generation.

Each week runs Sunday to Saturday. A milestone is due at 23:59:59 local time
on the Saturday, resolved against the IANA rules of the configured zone for
that specific date, so DST transitions shift the UTC instant as they should.
"""

from __future__ import annotations

import datetime as dt
from typing import Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .models import MilestoneDescriptor

DAYS_PER_WEEK: Final[int] = 7
DUE_TIME: Final[dt.time] = dt.time(23, 59, 59)


def get_zone(timezone: str) -> ZoneInfo:
    """Resolve an IANA zone id.

    Raises:
        ValueError: If the zone is unknown
    """
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        msg = f"Unknown timezone: {timezone}"
        raise ValueError(msg) from e


def due_instant(day: dt.date, timezone: str) -> dt.datetime:
    """Return 23:59:59 wall-clock time on ``day`` in ``timezone``, as a UTC instant."""
    local = dt.datetime.combine(day, DUE_TIME, tzinfo=get_zone(timezone))
    return local.astimezone(dt.UTC)


def local_date_key(instant: dt.datetime, timezone: str) -> str:
    """Return the calendar date of ``instant`` in ``timezone`` as ``YYYY-MM-DD``.

    Naive datetimes are taken to be UTC, which is what the GitHub API returns.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=dt.UTC)
    return instant.astimezone(get_zone(timezone)).date().isoformat()


def generate_schedule(start_date: dt.date, weeks: int, timezone: str = "UTC") -> list[MilestoneDescriptor]:
    """Generate one milestone descriptor per week.

    ``start_date`` is expected to be a Sunday; that is checked where the value
    is read (config document or prompt), not here.

    Args:
        start_date: First day of the first week
        weeks: Number of weeks, at least 1
        timezone: IANA zone id the due time is expressed in

    Returns:
        Descriptors in week order, with strictly increasing due instants

    Raises:
        ValueError: If ``weeks`` is not positive or the zone is unknown
    """
    if weeks < 1:
        msg = f"Number of weeks must be a positive integer, got {weeks}"
        raise ValueError(msg)
    get_zone(timezone)

    descriptors: list[MilestoneDescriptor] = []
    for i in range(weeks):
        week_start = start_date + dt.timedelta(days=DAYS_PER_WEEK * i)
        week_end = week_start + dt.timedelta(days=DAYS_PER_WEEK - 1)
        descriptors.append(
            MilestoneDescriptor(
                title=f"Week {i + 1}: {week_end.isoformat()}",
                description=f"Period: {week_start.isoformat()} - {week_end.isoformat()}",
                week_start=week_start,
                week_end=week_end,
                due_on_utc=due_instant(week_end, timezone),
            )
        )
    return descriptors
