"""Unit tests for daily insight rotation."""

from datetime import datetime

from weightcompanion.core.dates import day_of_year
from weightcompanion.core.insights import FOCUSES, QUOTES, TIPS, get_daily_insight


class TestDayOfYear:
    """Tests for day_of_year."""

    def test_january_first_is_one(self):
        assert day_of_year(datetime(2026, 1, 1, 0, 5)) == 1

    def test_time_of_day_ignored(self):
        assert day_of_year(datetime(2026, 3, 1, 23, 59)) == day_of_year(datetime(2026, 3, 1, 0, 0))

    def test_leap_year(self):
        assert day_of_year(datetime(2024, 12, 31)) == 366


class TestGetDailyInsight:
    """Tests for get_daily_insight."""

    def test_indexes_each_list_by_day(self):
        """Jan 1 is day 1, so the second item of each list."""
        insight = get_daily_insight(datetime(2026, 1, 1, 9, 0))

        assert insight.quote == QUOTES[1][0]
        assert insight.author == "Jim Rohn"
        assert insight.tip == TIPS[1]
        assert insight.focus == FOCUSES[1]

    def test_lists_cycle_independently(self):
        """Day 365 -> quote 5, tip 5, focus 5; day 10 -> quote 0, tip 10."""
        end = get_daily_insight(datetime(2026, 12, 31))
        assert end.quote == QUOTES[365 % len(QUOTES)][0]
        assert end.tip == TIPS[365 % len(TIPS)]

        day_ten = get_daily_insight(datetime(2026, 1, 10))
        assert day_ten.quote == QUOTES[0][0]
        assert day_ten.tip == TIPS[10]
        assert day_ten.focus == FOCUSES[10]

    def test_same_day_same_insight(self):
        morning = get_daily_insight(datetime(2026, 5, 4, 6, 0))
        evening = get_daily_insight(datetime(2026, 5, 4, 22, 0))
        assert morning == evening

    def test_repeats_after_lcm_of_lengths(self):
        """10, 15 and 15 items repeat together every 30 days."""
        assert get_daily_insight(datetime(2026, 1, 5)) == get_daily_insight(datetime(2026, 2, 4))

    def test_defaults_to_now(self):
        insight = get_daily_insight()
        assert insight.tip in TIPS
