"""Streak Tracker - consecutive-day check-in state machine."""

from datetime import date

from .dates import previous_day
from .models import Streak


def advance_streak(streak: Streak, today: date) -> Streak:
    """Apply one daily check-in.

    Already counted today -> unchanged. Checked in yesterday -> count + 1.
    Anything else (gap or first use) -> count restarts at 1.

    Args:
        streak: Current streak record
        today: The check-in day

    Returns:
        The resulting streak (the same object when nothing changes)
    """
    today_str = today.isoformat()
    if streak.last_date == today_str:
        return streak

    if streak.last_date == previous_day(today).isoformat():
        return Streak(count=streak.count + 1, last_date=today_str)

    return Streak(count=1, last_date=today_str)
