"""Calendar helpers shared by the trackers.

Entry dates and the streak use the UTC calendar day.
"""

from datetime import date, datetime, timedelta, timezone


def today_utc() -> date:
    """Return the current calendar day in UTC."""
    return datetime.now(timezone.utc).date()


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def week_dates(today: date | None = None) -> list[date]:
    """Return the last seven days ending today, oldest first."""
    if today is None:
        today = today_utc()
    return [today - timedelta(days=offset) for offset in range(6, -1, -1)]


def day_of_year(moment: datetime) -> int:
    """Whole days elapsed since "January 0" of the moment's year (Jan 1 -> 1)."""
    return moment.timetuple().tm_yday
