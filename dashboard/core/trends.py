"""
Дневные ряды и гистограмма тегов по окну.

Ключ группировки - selected_date (календарный день), не created_at.
Дни без подходящих задач в ряды не попадают: нулевые точки
добавляет только календарь стриков.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Tuple

from dashboard.core.models import Todo


@dataclass(frozen=True)
class DayCount:
    date: date
    count: int


@dataclass(frozen=True)
class DayTotals:
    date: date
    total: int
    completed: int


@dataclass(frozen=True)
class TagCount:
    tag: str
    count: int


def completed_count_by_day(todos: Iterable[Todo]) -> List[DayCount]:
    """Число выполненных задач по дням; дни без выполненных пропускаются"""
    counts = Counter(todo.selected_date for todo in todos if todo.is_completed)
    return [DayCount(day, counts[day]) for day in sorted(counts)]


def totals_by_day(todos: Iterable[Todo]) -> List[DayTotals]:
    """Все задачи дня против выполненных; дни без задач пропускаются"""
    totals: Dict[date, Tuple[int, int]] = {}
    for todo in todos:
        total, completed = totals.get(todo.selected_date, (0, 0))
        totals[todo.selected_date] = (total + 1, completed + int(todo.is_completed))
    return [DayTotals(day, *totals[day]) for day in sorted(totals)]


def normalize_tag(tag):
    if tag is None:
        return None
    tag = tag.strip()
    return tag or None


def tag_counts(todos: Iterable[Todo]) -> List[TagCount]:
    """Гистограмма тегов по убыванию; при равенстве - по имени тега. Задачи без тега не считаются"""
    counts = Counter(
        tag for tag in (normalize_tag(todo.tag) for todo in todos) if tag is not None
    )
    return sort_tag_counts(TagCount(tag, count) for tag, count in counts.items())


def sort_tag_counts(items: Iterable[TagCount]) -> List[TagCount]:
    return sorted(items, key=lambda item: (-item.count, item.tag))
