#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Analytics Engine
Аналитика задач пользователя за окно дат: разбивки, тренды, серии

Каждый вызов - самостоятельное вычисление по снимку хранилища:
окно проверяется до первого запроса, затем запросы идут параллельно,
а агрегация выполняется чистыми функциями. Ошибки хранилища не
перехватываются и выходят наружу как StoreUnavailable.

Версия: 1.0.0
Дата: 2026-10-18
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

from dashboard.core.breakdown import priority_breakdown, status_breakdown
from dashboard.core.exceptions import InvalidInput, StoreUnavailable
from dashboard.core.store import TodoStore
from dashboard.core.streaks import build_streak_report
from dashboard.core.window import DateWindow, WindowMode, resolve_window
from shared.models import (
    CompletionPoint,
    CreatedVsCompletedPoint,
    DashboardAnalytics,
    PriorityBreakdown,
    StatusBreakdown,
    StreakAnalytics,
    StreakDay,
    StreakSummary,
    TagCount,
)
from utils.datetime_utils import DEFAULT_TZ

logger = logging.getLogger(__name__)


async def gather_all(*calls):
    """
    Дождаться всех запросов к хранилищу и поднять первую ошибку.
    Остальные ошибки уже собраны gather и не теряются в фоне.
    """
    results = await asyncio.gather(*calls, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class AnalyticsEngine:
    """Аналитический движок поверх TodoStore"""

    def __init__(
        self,
        store: TodoStore,
        tz_name: str = DEFAULT_TZ,
        max_days: Optional[int] = None,
        mode: WindowMode = WindowMode.INCLUSIVE,
    ):
        self.store = store
        self.tz_name = tz_name
        self.max_days = max_days
        self.mode = mode

    def window(self, days: Any, now: Optional[datetime] = None) -> DateWindow:
        return resolve_window(days, now=now, mode=self.mode, tz_name=self.tz_name, max_days=self.max_days)

    @staticmethod
    def _check_user(user_id: Any) -> str:
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidInput("Не указан пользователь")
        return user_id

    async def dashboard(self, user_id: str, days: Any, now: Optional[datetime] = None) -> DashboardAnalytics:
        """Разбивки по статусу, приоритету и тегам плюс дневные тренды"""
        user_id = self._check_user(user_id)
        window = self.window(days, now)
        first_day, last_day = window.first_day, window.last_day

        try:
            todos, completed_by_day, totals, tags = await gather_all(
                self.store.find_by_user_and_range(user_id, first_day, last_day),
                self.store.group_by_day_with_completed_count(user_id, first_day, last_day),
                self.store.group_by_day_with_total_and_completed(user_id, first_day, last_day),
                self.store.group_by_tag_count(user_id, first_day, last_day),
            )
        except StoreUnavailable as e:
            logger.error(f"❌ Аналитика дашборда для {user_id} недоступна: {e}")
            raise

        statuses = status_breakdown(todos)
        priorities = priority_breakdown(todos)
        logger.debug(
            f"📊 Дашборд {user_id}: {statuses.total} задач за {window.first_day}..{window.last_day}"
        )

        return DashboardAnalytics(
            status_breakdown=StatusBreakdown(
                total_todos=statuses.total,
                pending_todos=statuses.pending,
                completed_todos=statuses.completed,
            ),
            priority_breakdown=PriorityBreakdown(**priorities._asdict()),
            completion_trend=[
                CompletionPoint(date=item.date, completed=item.count) for item in completed_by_day
            ],
            created_vs_completed_trend=[
                CreatedVsCompletedPoint(date=item.date, total=item.total, completed=item.completed)
                for item in totals
            ],
            tag_breakdown=[TagCount(tag=item.tag, count=item.count) for item in tags],
        )

    async def streak(self, user_id: str, days: Any, now: Optional[datetime] = None) -> StreakAnalytics:
        """Самая длинная серия дней с выполненными задачами и календарь активности"""
        user_id = self._check_user(user_id)
        window = self.window(days, now)
        first_day, last_day = window.first_day, window.last_day

        try:
            active_days, todos = await gather_all(
                self.store.distinct_completed_days(user_id, first_day, last_day),
                self.store.find_by_user_and_range(user_id, first_day, last_day),
            )
        except StoreUnavailable as e:
            logger.error(f"❌ Аналитика серий для {user_id} недоступна: {e}")
            raise

        report = build_streak_report(window, active_days, todos)
        logger.debug(f"🔥 Серия {user_id}: max={report.summary.max_streak}, дней={report.summary.active_days}")

        return StreakAnalytics(
            summary=StreakSummary(
                completed_tasks=report.summary.completed_tasks,
                total_tasks=report.summary.total_tasks,
                active_days=report.summary.active_days,
                max_streak=report.summary.max_streak,
            ),
            streak_data=[
                StreakDay(date=day.date, active=day.active, count=day.count)
                for day in report.calendar
            ],
        )
