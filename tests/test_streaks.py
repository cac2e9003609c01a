"""Longest streak and activity calendar."""

from datetime import datetime

import pytz

from dashboard.core.streaks import CalendarDay, build_calendar, build_streak_report, longest_streak
from dashboard.core.window import WindowMode, resolve_window
from tests.conftest import FIXED_NOW, TODAY, day, make_todo


class TestLongestStreak:

    def test_empty(self):
        assert longest_streak([]) == 0

    def test_single_day(self):
        assert longest_streak([TODAY]) == 1

    def test_consecutive(self):
        assert longest_streak([day(-2), day(-1), day(0)]) == 3

    def test_gap_resets_run(self):
        assert longest_streak([day(-2), day(0)]) == 1
        assert longest_streak([day(-9), day(-8), day(-5), day(-4), day(-3), day(0)]) == 3

    def test_unsorted_and_duplicated_input(self):
        assert longest_streak([day(0), day(-1), day(0), day(-2)]) == 3

    def test_month_boundary(self):
        days = [datetime(2026, 1, 31).date(), datetime(2026, 2, 1).date()]
        assert longest_streak(days) == 2


class TestCalendar:

    def test_one_entry_per_day_including_empty_days(self):
        window = resolve_window(6, now=FIXED_NOW)
        calendar = build_calendar(window, [make_todo("u1", day(-3))])

        assert len(calendar) == 7
        assert calendar[0] == CalendarDay(day(-6), active=False, count=0)
        assert calendar[3] == CalendarDay(day(-3), active=True, count=1)

    def test_half_open_window_has_the_same_calendar(self):
        todos = [make_todo("u1", day(0))]
        inclusive = build_calendar(resolve_window(2, now=FIXED_NOW), todos)
        half_open = build_calendar(resolve_window(2, now=FIXED_NOW, mode=WindowMode.HALF_OPEN), todos)
        assert inclusive == half_open

    def test_zero_days(self):
        calendar = build_calendar(resolve_window(0, now=FIXED_NOW), [])
        assert calendar == [CalendarDay(TODAY, active=False, count=0)]


def test_report_summary_counts_all_todos_in_window():
    window = resolve_window(4, now=datetime(2026, 10, 18, 9, 0, tzinfo=pytz.utc))
    todos = [
        make_todo("u1", day(-4), status="completed"),
        make_todo("u1", day(-4)),
        make_todo("u1", day(-1)),
    ]
    report = build_streak_report(window, [day(-4)], todos)

    assert report.summary.total_tasks == 3
    assert report.summary.completed_tasks == 1
    assert report.summary.active_days == 1
    assert report.summary.max_streak == 1
    # Pending-only day is active in the calendar but not part of the streak
    assert [entry.active for entry in report.calendar] == [True, False, False, True, False]
