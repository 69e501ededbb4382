"""
Interval progress for recorded maintenance events.

Distance beats time: when an event carries both `intervalKm` and
`intervalTimeMonths`, only the distance axis is reported.

Months are counted as 30.44 days (average Gregorian month), so
`elapsed_months = elapsed_days / 30.44`.
"""

from datetime import date, datetime, time, timezone

from maintrack.schemas.progress import ProgressInfo

DAYS_PER_MONTH = 30.44
SECONDS_PER_DAY = 86400


def _clamp_percent(value: float) -> float:
    return max(0.0, min(value, 100.0))


def _at_midnight(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def elapsed_months(performed_at: date, now: date | datetime) -> float:
    """Months (30.44-day) between the service date and `now`; negative if `now` is earlier."""
    start = _at_midnight(performed_at)
    end = _at_midnight(now)
    if end.tzinfo is not None and start.tzinfo is None:
        # a calendar date is read as midnight UTC
        start = start.replace(tzinfo=timezone.utc)
    elif end.tzinfo is None and start.tzinfo is not None:
        end = end.replace(tzinfo=start.tzinfo)
    days = (end - start).total_seconds() / SECONDS_PER_DAY
    return days / DAYS_PER_MONTH


def compute_progress(event, vehicle_current_km: int, now: date | datetime) -> ProgressInfo | None:
    """
    Progress of `event` toward its next due point.

    Returns None when the event has no interval at all ("not scheduled").
    `consumed` keeps its raw value (negative after an odometer regression or for
    a future-dated event); only `percent` is clamped to 0..100.
    """
    if event.intervalKm:
        consumed = vehicle_current_km - event.kmAtService
        return ProgressInfo(
            axis="distance",
            percent=_clamp_percent(consumed / event.intervalKm * 100),
            consumed=consumed,
            target=event.intervalKm,
        )

    if event.intervalTimeMonths:
        months = elapsed_months(event.performedAt, now)
        return ProgressInfo(
            axis="time",
            percent=_clamp_percent(months / event.intervalTimeMonths * 100),
            consumed=months,
            target=event.intervalTimeMonths,
        )

    return None
