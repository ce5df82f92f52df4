"""Tests for streak and monthly stats calculations."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from gymlog.services.streak import calendar_days, current_streak, longest_streak, monthly_stats

TODAY = date(2026, 10, 19)


def days_ago(*offsets: int) -> list[datetime]:
    """Evening check-ins (UTC) `n` days before TODAY."""
    evening = datetime(TODAY.year, TODAY.month, TODAY.day, 18, tzinfo=timezone.utc)
    return [evening - timedelta(days=n) for n in offsets]


class TestCurrentStreak:
    def test_empty_history(self):
        assert current_streak([], today=TODAY) == 0

    def test_run_ending_today(self):
        assert current_streak(days_ago(0, 1, 2), today=TODAY) == 3

    def test_run_ending_yesterday_is_still_alive(self):
        assert current_streak(days_ago(1, 2, 3, 4), today=TODAY) == 4

    def test_gap_of_two_days_breaks_streak(self):
        assert current_streak(days_ago(2, 3, 4), today=TODAY) == 0

    def test_duplicates_and_order_do_not_matter(self):
        stamps = days_ago(2, 0, 1, 0, 1) + [
            datetime(2026, 10, 19, 6, 30, tzinfo=timezone.utc),
        ]
        assert current_streak(stamps, today=TODAY) == 3

    def test_counts_only_the_latest_run(self):
        assert current_streak(days_ago(0, 1, 3, 4, 5, 6), today=TODAY) == 2

    def test_future_days_are_ignored(self):
        assert current_streak(days_ago(-1, 0), today=TODAY) == 1

    def test_plain_dates_accepted(self):
        assert current_streak([TODAY, TODAY - timedelta(days=1)], today=TODAY) == 2

    def test_days_follow_the_given_timezone(self):
        # 23:30 UTC on the 18th is already the 19th in Tokyo
        tokyo = ZoneInfo("Asia/Tokyo")
        stamps = [datetime(2026, 10, 18, 23, 30, tzinfo=timezone.utc)]

        assert current_streak(stamps, today=TODAY, tz=tokyo) == 1
        assert calendar_days(stamps, tokyo) == {TODAY}


class TestLongestStreak:
    def test_empty_history(self):
        assert longest_streak([]) == 0

    def test_single_day(self):
        assert longest_streak(days_ago(40)) == 1

    def test_longest_run_in_the_past(self):
        stamps = days_ago(0, 1, 10, 11, 12, 13, 30)
        assert longest_streak(stamps) == 4

    def test_never_less_than_current(self):
        stamps = days_ago(0, 1, 2, 3, 9)
        assert longest_streak(stamps) >= current_streak(stamps, today=TODAY)

    def test_future_days_count_toward_longest(self):
        stamps = days_ago(-2, -1, 0, 1)

        assert current_streak(stamps, today=TODAY) == 2
        assert longest_streak(stamps) == 4
        assert longest_streak(stamps) >= current_streak(stamps, today=TODAY)

    def test_naive_timestamps_are_utc(self):
        stamps = [datetime(2026, 1, 1, 12), datetime(2026, 1, 2, 8), datetime(2026, 1, 2, 20)]
        assert longest_streak(stamps) == 2


class TestMonthlyStats:
    def test_counts_unique_days_in_current_month(self):
        stamps = days_ago(0, 0, 1, 5) + [datetime(2026, 9, 30, 12, tzinfo=timezone.utc)]
        stats = monthly_stats(stamps, today=TODAY)

        assert stats.total_check_ins == 3
        assert stats.total_days_in_month == 31
        assert stats.percentage == 3 / 31 * 100
        assert stats.formatted_percentage == "10%"

    def test_empty_month(self):
        stats = monthly_stats([], today=date(2026, 2, 10))

        assert stats.total_check_ins == 0
        assert stats.total_days_in_month == 28
        assert stats.formatted_percentage == "0%"
