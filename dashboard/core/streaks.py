#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Streak Calculator
Серии активных дней и календарь активности за окно

Два разных определения "активного" дня:
  - для серии (maxStreak, activeDays) день активен, если в нём есть
    хотя бы одна выполненная задача;
  - для календаря (streakData) день активен, если в нём есть любая задача.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Sequence

from dashboard.core.breakdown import status_breakdown
from dashboard.core.models import Todo
from dashboard.core.window import DateWindow


@dataclass(frozen=True)
class CalendarDay:
    date: date
    active: bool
    count: int


@dataclass(frozen=True)
class StreakSummary:
    completed_tasks: int
    total_tasks: int
    active_days: int
    max_streak: int


@dataclass(frozen=True)
class StreakReport:
    summary: StreakSummary
    calendar: List[CalendarDay]


def longest_streak(active_days: Iterable[date]) -> int:
    """Самая длинная серия подряд идущих дней"""
    days = sorted(set(active_days))
    if not days:
        return 0

    max_streak = 1
    current_streak = 1

    for i in range(1, len(days)):
        if (days[i] - days[i - 1]).days == 1:
            current_streak += 1
            max_streak = max(max_streak, current_streak)
        else:
            # Текущий день сам активен, поэтому серия начинается с 1
            current_streak = 1

    return max_streak


def build_calendar(window: DateWindow, todos: Iterable[Todo]) -> List[CalendarDay]:
    """Одна запись на каждый день окна, включая дни без задач"""
    counts = Counter(todo.selected_date for todo in todos)
    return [
        CalendarDay(date=day, active=counts[day] > 0, count=counts[day])
        for day in window.days()
    ]


def build_streak_report(
    window: DateWindow,
    active_days: Sequence[date],
    todos: Sequence[Todo],
) -> StreakReport:
    """
    Собрать отчёт по серии.

    Args:
        window: окно дат
        active_days: дни с выполненными задачами (по возрастанию)
        todos: все задачи пользователя в окне
    """
    statuses = status_breakdown(todos)
    summary = StreakSummary(
        completed_tasks=statuses.completed,
        total_tasks=statuses.total,
        active_days=len(active_days),
        max_streak=longest_streak(active_days),
    )
    return StreakReport(summary=summary, calendar=build_calendar(window, todos))
