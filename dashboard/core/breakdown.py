"""
Разбивка задач окна по статусу и приоритету.

Один проход свёрткой в неизменяемую запись, без общих счётчиков.
"""

from functools import reduce
from typing import Iterable, NamedTuple, Optional

from dashboard.core.models import Todo
from shared.models import TodoPriority

# Корзина для отсутствующего или неизвестного приоритета
FALLBACK_PRIORITY = TodoPriority.MEDIUM.value

_PRIORITIES = {p.value for p in TodoPriority}


class StatusCounts(NamedTuple):
    total: int = 0
    pending: int = 0
    completed: int = 0


class PriorityCounts(NamedTuple):
    low: int = 0
    medium: int = 0
    high: int = 0


def normalize_priority(value: Optional[str]) -> str:
    if value is None:
        return FALLBACK_PRIORITY
    value = value.strip().lower()
    return value if value in _PRIORITIES else FALLBACK_PRIORITY


def _fold_status(acc: StatusCounts, todo: Todo) -> StatusCounts:
    if todo.is_completed:
        return acc._replace(total=acc.total + 1, completed=acc.completed + 1)
    return acc._replace(total=acc.total + 1, pending=acc.pending + 1)


def _fold_priority(acc: PriorityCounts, todo: Todo) -> PriorityCounts:
    key = normalize_priority(todo.priority)
    return acc._replace(**{key: getattr(acc, key) + 1})


def status_breakdown(todos: Iterable[Todo]) -> StatusCounts:
    """Всё, что не completed, считается pending: pending + completed == total"""
    return reduce(_fold_status, todos, StatusCounts())


def priority_breakdown(todos: Iterable[Todo]) -> PriorityCounts:
    return reduce(_fold_priority, todos, PriorityCounts())
