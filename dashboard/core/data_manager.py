#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - JSON Data Manager
Документное хранилище на JSON-файлах: по файлу на коллекцию

Версия: 1.0.0
Дата: 2026-10-18
"""

import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional

from dashboard.core.exceptions import ConflictError, NotFound, StoreCorruptedError, StoreUnavailable
from dashboard.core.models import Feedback, Goal, Session, Todo, User
from dashboard.core.store import TodoStore
from dashboard.core.trends import (
    DayCount,
    DayTotals,
    TagCount,
    completed_count_by_day,
    normalize_tag,
    tag_counts,
    totals_by_day,
)
from utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

Collection = Dict[str, Dict[str, Any]]


class JsonTodoStore(TodoStore):
    """Менеджер для работы с JSON файлами данных"""

    backend = "json"

    COLLECTIONS = ("users", "todos", "sessions", "goals", "feedback")

    def __init__(self, data_dir: str = "data", file_names: Optional[Dict[str, str]] = None):
        self.data_dir = Path(data_dir)
        names = file_names or {}
        self.files: Dict[str, Path] = {
            name: self.data_dir / names.get(name, f"{name}.json")
            for name in self.COLLECTIONS
        }
        # Запись сериализуется, чтение всегда берёт свежий снимок с диска
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Инициализация JSON файлов если они не существуют"""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            for path in self.files.values():
                if not path.exists():
                    self._save_json(path, {})
        except OSError as e:
            logger.error(f"❌ Не удалось подготовить {self.data_dir}: {e}")
            raise StoreUnavailable(f"Директория данных недоступна: {e}") from e
        logger.info(f"✅ JSON хранилище готово: {self.data_dir}")

    async def health_check(self) -> Dict[str, Any]:
        users = self._load("users")
        todos = self._load("todos")
        return {
            "backend": self.backend,
            "data_dir": str(self.data_dir),
            "users": len(users),
            "todos": len(todos),
        }

    # === НИЗКОУРОВНЕВЫЙ ДОСТУП ===

    def _load_json(self, file_path: Path) -> Collection:
        """Загрузка данных из JSON файла"""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.error(f"❌ Повреждён файл {file_path}: {e}")
            raise StoreCorruptedError(f"Повреждён файл {file_path.name}") from e
        except OSError as e:
            logger.error(f"❌ Ошибка чтения {file_path}: {e}")
            raise StoreUnavailable(f"Ошибка чтения {file_path.name}: {e}") from e

        if not isinstance(data, dict):
            raise StoreCorruptedError(f"Ожидался объект в {file_path.name}")
        return data

    def _save_json(self, file_path: Path, data: Collection) -> None:
        """Сохранение данных в JSON файл через временный файл"""
        tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, file_path)
        except OSError as e:
            logger.error(f"❌ Ошибка записи {file_path}: {e}")
            raise StoreUnavailable(f"Ошибка записи {file_path.name}: {e}") from e

    def _load(self, collection: str) -> Collection:
        return self._load_json(self.files[collection])

    @asynccontextmanager
    async def _transaction(self, collection: str) -> AsyncIterator[Collection]:
        """Прочитать коллекцию, изменить и записать; при исключении ничего не пишется"""
        async with self._lock:
            data = self._load(collection)
            yield data
            self._save_json(self.files[collection], data)

    # === РАБОТА С ПОЛЬЗОВАТЕЛЯМИ ===

    async def create_user(self, user: User) -> User:
        async with self._transaction("users") as users:
            if any(u.get("username") == user.username for u in users.values()):
                raise ConflictError("Username already taken")
            users[user.id] = user.to_dict()
        logger.info(f"👤 Зарегистрирован пользователь {user.username}")
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        data = self._load("users").get(str(user_id))
        return User.from_dict(data) if data else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        for data in self._load("users").values():
            if data.get("username") == username:
                return User.from_dict(data)
        return None

    async def update_user(self, user: User) -> User:
        user.updated_at = utc_now()
        async with self._transaction("users") as users:
            if user.id not in users:
                raise NotFound("User not found")
            users[user.id] = user.to_dict()
        return user

    # === РАБОТА С СЕССИЯМИ ===

    async def create_session(self, session: Session) -> Session:
        async with self._transaction("sessions") as sessions:
            sessions[session.token] = session.to_dict()
        return session

    async def get_session(self, token: str) -> Optional[Session]:
        data = self._load("sessions").get(token)
        return Session.from_dict(data) if data else None

    async def delete_session(self, token: str) -> bool:
        async with self._transaction("sessions") as sessions:
            return sessions.pop(token, None) is not None

    # === РАБОТА С ЗАДАЧАМИ ===

    def _user_todos(self, user_id: str) -> List[Todo]:
        todos = [
            Todo.from_dict(data) for data in self._load("todos").values()
            if data.get("user_id") == user_id
        ]
        todos.sort(key=lambda t: (t.selected_date, t.created_at))
        return todos

    @staticmethod
    def _matches(todo: Todo, tag: Optional[str], status: Optional[str], priority: Optional[str]) -> bool:
        if tag is not None and normalize_tag(todo.tag) != tag:
            return False
        if status is not None and todo.status != status:
            return False
        if priority is not None and todo.priority != priority:
            return False
        return True

    async def create_todo(self, todo: Todo) -> Todo:
        async with self._transaction("todos") as todos:
            todos[todo.id] = todo.to_dict()
        return todo

    async def get_todo(self, user_id: str, todo_id: str) -> Optional[Todo]:
        data = self._load("todos").get(todo_id)
        if not data or data.get("user_id") != user_id:
            return None
        return Todo.from_dict(data)

    async def update_todo(self, todo: Todo) -> Todo:
        async with self._transaction("todos") as todos:
            existing = todos.get(todo.id)
            if not existing or existing.get("user_id") != todo.user_id:
                raise NotFound("Todo not found")
            todos[todo.id] = todo.to_dict()
        return todo

    async def delete_todo(self, user_id: str, todo_id: str) -> bool:
        async with self._transaction("todos") as todos:
            existing = todos.get(todo_id)
            if not existing or existing.get("user_id") != user_id:
                return False
            del todos[todo_id]
            return True

    async def delete_all_todos(self, user_id: str) -> int:
        async with self._transaction("todos") as todos:
            owned = [tid for tid, data in todos.items() if data.get("user_id") == user_id]
            for tid in owned:
                del todos[tid]
        logger.info(f"🗑️ Удалено задач: {len(owned)} (user {user_id})")
        return len(owned)

    async def list_todos(
        self,
        user_id: str,
        tag: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        selected_date: Optional[date] = None,
    ) -> List[Todo]:
        return [
            todo for todo in self._user_todos(user_id)
            if self._matches(todo, tag, status, priority)
            and (selected_date is None or todo.selected_date == selected_date)
        ]

    # === ЗАПРОСЫ АНАЛИТИКИ ===

    async def find_by_user_and_range(
        self,
        user_id: str,
        first_day: date,
        last_day: date,
        tag: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Todo]:
        return [
            todo for todo in self._user_todos(user_id)
            if first_day <= todo.selected_date <= last_day
            and self._matches(todo, tag, status, priority)
        ]

    async def group_by_day_with_completed_count(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[DayCount]:
        todos = await self.find_by_user_and_range(user_id, first_day, last_day)
        return completed_count_by_day(todos)

    async def group_by_day_with_total_and_completed(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[DayTotals]:
        todos = await self.find_by_user_and_range(user_id, first_day, last_day)
        return totals_by_day(todos)

    async def group_by_tag_count(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[TagCount]:
        todos = await self.find_by_user_and_range(user_id, first_day, last_day)
        return tag_counts(todos)

    async def distinct_completed_days(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[date]:
        todos = await self.find_by_user_and_range(user_id, first_day, last_day, status="completed")
        return sorted({todo.selected_date for todo in todos})

    # === РАБОТА С ЦЕЛЯМИ ===

    async def create_goal(self, goal: Goal) -> Goal:
        async with self._transaction("goals") as goals:
            goals[goal.id] = goal.to_dict()
        return goal

    async def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        data = self._load("goals").get(goal_id)
        if not data or data.get("user_id") != user_id:
            return None
        return Goal.from_dict(data)

    async def list_goals(self, user_id: str) -> List[Goal]:
        goals = [
            Goal.from_dict(data) for data in self._load("goals").values()
            if data.get("user_id") == user_id
        ]
        goals.sort(key=lambda g: g.created_at)
        return goals

    async def update_goal(self, goal: Goal) -> Goal:
        goal.updated_at = utc_now()
        async with self._transaction("goals") as goals:
            existing = goals.get(goal.id)
            if not existing or existing.get("user_id") != goal.user_id:
                raise NotFound("Goal not found")
            goals[goal.id] = goal.to_dict()
        return goal

    async def delete_goal(self, user_id: str, goal_id: str) -> bool:
        async with self._transaction("goals") as goals:
            existing = goals.get(goal_id)
            if not existing or existing.get("user_id") != user_id:
                return False
            del goals[goal_id]
            return True

    # === ОБРАТНАЯ СВЯЗЬ ===

    async def create_feedback(self, feedback: Feedback) -> Feedback:
        async with self._transaction("feedback") as entries:
            entries[feedback.id] = feedback.to_dict()
        logger.info(f"💬 Новая обратная связь ({feedback.type}) от {feedback.user_id}")
        return feedback

    async def list_feedback(self, user_id: str) -> List[Feedback]:
        entries = [
            Feedback.from_dict(data) for data in self._load("feedback").values()
            if data.get("user_id") == user_id
        ]
        entries.sort(key=lambda f: f.created_at)
        return entries
