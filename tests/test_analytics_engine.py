"""AnalyticsEngine over real stores and over a spy store."""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
import pytz

from dashboard.core.analytics import AnalyticsEngine, gather_all
from dashboard.core.exceptions import InvalidInput, StoreUnavailable
from dashboard.core.store import TodoStore
from tests.conftest import FIXED_NOW, day, make_todo, seed


def spy_store() -> AsyncMock:
    store = AsyncMock(spec=TodoStore)
    for name in (
        "find_by_user_and_range",
        "group_by_day_with_completed_count",
        "group_by_day_with_total_and_completed",
        "group_by_tag_count",
        "distinct_completed_days",
    ):
        getattr(store, name).return_value = []
    return store


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestFailFast:

    @pytest.mark.parametrize("days", [None, "abc", "-1", -3, "1.5", True])
    async def test_invalid_days_never_reach_the_store(self, days):
        store = spy_store()
        engine = AnalyticsEngine(store)

        with pytest.raises(InvalidInput):
            await engine.dashboard("u1", days, now=FIXED_NOW)
        with pytest.raises(InvalidInput):
            await engine.streak("u1", days, now=FIXED_NOW)

        store.find_by_user_and_range.assert_not_awaited()
        store.distinct_completed_days.assert_not_awaited()

    async def test_window_before_year_one_without_cap(self):
        store = spy_store()

        with pytest.raises(InvalidInput):
            await AnalyticsEngine(store).streak("u1", "1000000", now=FIXED_NOW)
        store.distinct_completed_days.assert_not_awaited()

    async def test_days_above_cap(self):
        store = spy_store()
        engine = AnalyticsEngine(store, max_days=30)

        with pytest.raises(InvalidInput):
            await engine.dashboard("u1", 31, now=FIXED_NOW)
        store.find_by_user_and_range.assert_not_awaited()

    @pytest.mark.parametrize("user_id", [None, "", "   ", 42])
    async def test_missing_user(self, user_id):
        store = spy_store()
        with pytest.raises(InvalidInput):
            await AnalyticsEngine(store).dashboard(user_id, 7, now=FIXED_NOW)
        store.find_by_user_and_range.assert_not_awaited()


class TestStoreFailures:

    async def test_dashboard_propagates_store_unavailable(self):
        store = spy_store()
        store.group_by_tag_count.side_effect = StoreUnavailable("db down")

        with pytest.raises(StoreUnavailable):
            await AnalyticsEngine(store).dashboard("u1", 7, now=FIXED_NOW)

    async def test_streak_propagates_store_unavailable(self):
        store = spy_store()
        store.distinct_completed_days.side_effect = StoreUnavailable("db down")

        with pytest.raises(StoreUnavailable):
            await AnalyticsEngine(store).streak("u1", 7, now=FIXED_NOW)

    async def test_every_query_is_collected_when_several_fail(self):
        store = spy_store()
        store.find_by_user_and_range.side_effect = StoreUnavailable("db down")
        store.group_by_tag_count.side_effect = StoreUnavailable("db down")

        with pytest.raises(StoreUnavailable):
            await AnalyticsEngine(store).dashboard("u1", 7, now=FIXED_NOW)

        store.group_by_day_with_completed_count.assert_awaited_once()
        store.group_by_day_with_total_and_completed.assert_awaited_once()
        store.group_by_tag_count.assert_awaited_once()

    async def test_gather_all_raises_first_error_after_all_finish(self):
        finished = []

        async def ok():
            await asyncio.sleep(0)
            finished.append("ok")
            return 1

        async def fail(message):
            raise StoreUnavailable(message)

        with pytest.raises(StoreUnavailable, match="first"):
            await gather_all(fail("first"), ok(), fail("second"))
        assert finished == ["ok"]

    async def test_queries_use_window_days_and_user(self):
        store = spy_store()
        await AnalyticsEngine(store).dashboard("u1", "3", now=FIXED_NOW)

        store.find_by_user_and_range.assert_awaited_once_with("u1", day(-3), day(0))
        store.group_by_tag_count.assert_awaited_once_with("u1", day(-3), day(0))


# ---------------------------------------------------------------------------
# Aggregation over real stores
# ---------------------------------------------------------------------------

class TestDashboard:

    async def test_empty_store(self, store):
        result = await AnalyticsEngine(store).dashboard("u1", 7, now=FIXED_NOW)

        assert result.status_breakdown.total_todos == 0
        assert result.priority_breakdown.model_dump() == {"low": 0, "medium": 0, "high": 0}
        assert result.completion_trend == []
        assert result.created_vs_completed_trend == []
        assert result.tag_breakdown == []

    async def test_full_dashboard(self, store):
        await seed(store, [
            make_todo("u1", day(-2), status="completed", priority="high", tag="work"),
            make_todo("u1", day(-2), priority="low", tag="work"),
            make_todo("u1", day(0), status="completed", tag="home"),
            make_todo("u1", day(0), tag="gym"),
            # outside the window
            make_todo("u1", day(-10), status="completed", tag="work"),
            # someone else's
            make_todo("u2", day(0), status="completed", tag="work"),
        ])

        result = await AnalyticsEngine(store).dashboard("u1", 7, now=FIXED_NOW)
        statuses = result.status_breakdown

        assert (statuses.total_todos, statuses.pending_todos, statuses.completed_todos) == (4, 2, 2)
        assert result.priority_breakdown.model_dump() == {"low": 1, "medium": 2, "high": 1}
        assert [(p.date, p.completed) for p in result.completion_trend] == [(day(-2), 1), (day(0), 1)]
        assert [(p.date, p.total, p.completed) for p in result.created_vs_completed_trend] == [
            (day(-2), 2, 1),
            (day(0), 2, 1),
        ]
        assert [(t.tag, t.count) for t in result.tag_breakdown] == [("work", 2), ("gym", 1), ("home", 1)]

    async def test_idempotent(self, store):
        await seed(store, [
            make_todo("u1", day(-1), status="completed", tag="a"),
            make_todo("u1", day(0), tag="b"),
        ])
        engine = AnalyticsEngine(store)

        first = await engine.dashboard("u1", 7, now=FIXED_NOW)
        second = await engine.dashboard("u1", 7, now=FIXED_NOW)
        assert first == second

        assert await engine.streak("u1", 7, now=FIXED_NOW) == await engine.streak("u1", 7, now=FIXED_NOW)

    async def test_serialized_keys(self, json_store):
        result = await AnalyticsEngine(json_store).dashboard("u1", 1, now=FIXED_NOW)
        payload = result.model_dump(by_alias=True, mode="json")

        assert set(payload) == {
            "status_breakdown",
            "priority_breakdown",
            "completion_trend",
            "created_vs_completed_trend",
            "tag_breakdown",
        }
        assert set(payload["status_breakdown"]) == {"totalTodos", "pendingTodos", "completedTodos"}


class TestStreak:

    async def test_five_day_window(self, store):
        # days=4 gives 5 calendar days: completions on days 1, 2, 3 and 5
        await seed(store, [
            make_todo("u1", day(-4), status="completed"),
            make_todo("u1", day(-3), status="completed"),
            make_todo("u1", day(-2), status="completed"),
            make_todo("u1", day(0), status="completed"),
        ])

        result = await AnalyticsEngine(store).streak("u1", 4, now=FIXED_NOW)

        assert result.summary.max_streak == 3
        assert result.summary.active_days == 4
        assert result.summary.completed_tasks == 4
        assert result.summary.total_tasks == 4
        assert len(result.streak_data) == 5

    async def test_calendar_and_streak_disagree_on_pending_days(self, store):
        await seed(store, [
            make_todo("u1", day(-1), status="completed"),
            make_todo("u1", day(0)),
        ])

        result = await AnalyticsEngine(store).streak("u1", 2, now=FIXED_NOW)

        assert result.summary.active_days == 1
        assert result.summary.max_streak == 1
        assert [(d.date, d.active, d.count) for d in result.streak_data] == [
            (day(-2), False, 0),
            (day(-1), True, 1),
            (day(0), True, 1),
        ]

    async def test_completion_trend_omits_day_present_in_calendar(self, store):
        await seed(store, [make_todo("u1", day(-1), status="completed")])
        engine = AnalyticsEngine(store)

        dashboard = await engine.dashboard("u1", 2, now=FIXED_NOW)
        streak = await engine.streak("u1", 2, now=FIXED_NOW)

        assert day(-2) not in [p.date for p in dashboard.completion_trend]
        assert (day(-2), False, 0) in [(d.date, d.active, d.count) for d in streak.streak_data]

    async def test_zero_days(self, store):
        result = await AnalyticsEngine(store).streak("u1", 0, now=FIXED_NOW)

        assert [d.date for d in result.streak_data] == [day(0)]
        assert result.summary.max_streak == 0

    async def test_streak_data_serializes_as_iso_dates(self, json_store):
        result = await AnalyticsEngine(json_store).streak("u1", 1, now=FIXED_NOW)
        payload = result.model_dump(by_alias=True, mode="json")

        assert set(payload) == {"summary", "streakData"}
        assert set(payload["summary"]) == {"completedTasks", "totalTasks", "activeDays", "maxStreak"}
        assert payload["streakData"][-1] == {"date": "2026-10-18", "active": False, "count": 0}

    async def test_configured_timezone(self, store):
        await seed(store, [make_todo("u1", day(1), status="completed")])
        evening = datetime(2026, 10, 18, 20, 0, tzinfo=pytz.utc)

        result = await AnalyticsEngine(store, tz_name="Asia/Tokyo").streak("u1", 0, now=evening)

        assert [(d.date, d.active) for d in result.streak_data] == [(day(1), True)]
        assert result.summary.max_streak == 1
