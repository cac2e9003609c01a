"""Status and priority breakdowns."""

import pytest

from dashboard.core.breakdown import (
    FALLBACK_PRIORITY,
    PriorityCounts,
    StatusCounts,
    normalize_priority,
    priority_breakdown,
    status_breakdown,
)
from tests.conftest import TODAY, make_todo


class TestStatusBreakdown:

    def test_empty(self):
        assert status_breakdown([]) == StatusCounts(0, 0, 0)

    def test_partition(self):
        todos = [
            make_todo("u1", TODAY, status="completed"),
            make_todo("u1", TODAY, status="completed"),
            make_todo("u1", TODAY),
        ]
        counts = status_breakdown(todos)

        assert counts == StatusCounts(total=3, pending=1, completed=2)
        assert counts.pending + counts.completed == counts.total

    def test_unknown_status_counts_as_pending(self):
        counts = status_breakdown([make_todo("u1", TODAY, status="archived")])
        assert counts == StatusCounts(total=1, pending=1, completed=0)

    def test_accepts_generator(self):
        counts = status_breakdown(make_todo("u1", TODAY) for _ in range(4))
        assert counts.total == 4


class TestPriorityBreakdown:

    def test_counts_each_bucket(self):
        todos = [
            make_todo("u1", TODAY, priority="low"),
            make_todo("u1", TODAY, priority="high"),
            make_todo("u1", TODAY, priority="high"),
        ]
        assert priority_breakdown(todos) == PriorityCounts(low=1, medium=0, high=2)

    def test_legacy_priorities_fall_back_to_medium(self):
        todos = [
            make_todo("u1", TODAY, priority=None),
            make_todo("u1", TODAY, priority="urgent"),
            make_todo("u1", TODAY, priority="low"),
        ]
        counts = priority_breakdown(todos)

        assert counts == PriorityCounts(low=1, medium=2, high=0)
        assert sum(counts) == status_breakdown(todos).total

    @pytest.mark.parametrize("value, expected", [
        ("HIGH", "high"),
        (" low ", "low"),
        ("", FALLBACK_PRIORITY),
        (None, FALLBACK_PRIORITY),
        ("critical", FALLBACK_PRIORITY),
    ])
    def test_normalize_priority(self, value, expected):
        assert normalize_priority(value) == expected
