#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Store Interface
Контракт хранилища: CRUD записей и запросы аналитики по окну дат

Все запросы аналитики принимают user_id и фильтруют по нему.
Диапазон дней first_day..last_day включительный.
Ошибки драйвера наружу выходят только как StoreUnavailable.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

from dashboard.core.models import Feedback, Goal, Session, Todo, User
from dashboard.core.trends import DayCount, DayTotals, TagCount


class TodoStore(ABC):
    """Абстрактное хранилище задач"""

    backend: str = "abstract"

    async def initialize(self) -> None:
        """Подготовить хранилище к работе"""

    async def cleanup(self) -> None:
        """Освободить ресурсы"""

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        ...

    # === ПОЛЬЗОВАТЕЛИ ===

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """Создать пользователя; ConflictError если username занят"""

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def update_user(self, user: User) -> User:
        ...

    # === СЕССИИ ===

    @abstractmethod
    async def create_session(self, session: Session) -> Session:
        ...

    @abstractmethod
    async def get_session(self, token: str) -> Optional[Session]:
        ...

    @abstractmethod
    async def delete_session(self, token: str) -> bool:
        ...

    # === ЗАДАЧИ ===

    @abstractmethod
    async def create_todo(self, todo: Todo) -> Todo:
        ...

    @abstractmethod
    async def get_todo(self, user_id: str, todo_id: str) -> Optional[Todo]:
        """Задача пользователя; чужая задача считается отсутствующей"""

    @abstractmethod
    async def update_todo(self, todo: Todo) -> Todo:
        ...

    @abstractmethod
    async def delete_todo(self, user_id: str, todo_id: str) -> bool:
        ...

    @abstractmethod
    async def delete_all_todos(self, user_id: str) -> int:
        ...

    @abstractmethod
    async def list_todos(
        self,
        user_id: str,
        tag: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        selected_date: Optional[date] = None,
    ) -> List[Todo]:
        """Задачи пользователя с фильтрами, по дате и времени создания"""

    # === ЗАПРОСЫ АНАЛИТИКИ ===

    @abstractmethod
    async def find_by_user_and_range(
        self,
        user_id: str,
        first_day: date,
        last_day: date,
        tag: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Todo]:
        ...

    @abstractmethod
    async def group_by_day_with_completed_count(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[DayCount]:
        """Выполненные задачи по дням, по возрастанию даты, без нулевых дней"""

    @abstractmethod
    async def group_by_day_with_total_and_completed(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[DayTotals]:
        """Все и выполненные задачи по дням, по возрастанию даты, без пустых дней"""

    @abstractmethod
    async def group_by_tag_count(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[TagCount]:
        """Теги по убыванию числа задач, при равенстве по имени"""

    @abstractmethod
    async def distinct_completed_days(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[date]:
        """Дни с хотя бы одной выполненной задачей, по возрастанию"""

    # === ЦЕЛИ ===

    @abstractmethod
    async def create_goal(self, goal: Goal) -> Goal:
        ...

    @abstractmethod
    async def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        ...

    @abstractmethod
    async def list_goals(self, user_id: str) -> List[Goal]:
        ...

    @abstractmethod
    async def update_goal(self, goal: Goal) -> Goal:
        ...

    @abstractmethod
    async def delete_goal(self, user_id: str, goal_id: str) -> bool:
        ...

    # === ОБРАТНАЯ СВЯЗЬ ===

    @abstractmethod
    async def create_feedback(self, feedback: Feedback) -> Feedback:
        ...

    @abstractmethod
    async def list_feedback(self, user_id: str) -> List[Feedback]:
        ...
