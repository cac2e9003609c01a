#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - SQL Store
Хранилище на SQLAlchemy (async) для DATABASE_URL; группировки считаются в SQL

Версия: 1.0.0
Дата: 2026-10-18
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, case, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from dashboard.core.exceptions import ConflictError, NotFound
from dashboard.core.models import Feedback, Goal, Session, Todo, User
from dashboard.core.store import TodoStore
from dashboard.core.trends import DayCount, DayTotals, TagCount
from shared.models import TodoStatus
from utils.datetime_utils import ensure_utc, utc_now
from utils.decorators import translate_errors

logger = logging.getLogger(__name__)

COMPLETED = TodoStatus.COMPLETED.value


class Base(DeclarativeBase):
    pass


# ===== ТАБЛИЦЫ =====

class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(256))
    fullname: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class SessionRow(Base):
    __tablename__ = "sessions"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class TodoRow(Base):
    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(32), index=True)
    text: Mapped[str] = mapped_column(Text)
    tag: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    priority: Mapped[str] = mapped_column(String(16), default="medium")
    status: Mapped[str] = mapped_column(String(16), default="pending")
    selected_date: Mapped[date] = mapped_column(Date, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class GoalRow(Base):
    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(32), index=True)
    title: Mapped[str] = mapped_column(String(200))
    type: Mapped[str] = mapped_column(String(16))
    year: Mapped[int] = mapped_column(Integer)
    month: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    quarter: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class FeedbackRow(Base):
    __tablename__ = "feedback"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(32), index=True)
    type: Mapped[str] = mapped_column(String(16))
    message: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


# ===== ПРЕОБРАЗОВАНИЯ =====

def _user(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        fullname=row.fullname,
        gender=row.gender,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


def _todo(row: TodoRow) -> Todo:
    return Todo(
        id=row.id,
        user_id=row.user_id,
        text=row.text,
        selected_date=row.selected_date,
        priority=row.priority,
        status=row.status,
        tag=row.tag,
        created_at=ensure_utc(row.created_at),
    )


def _goal(row: GoalRow) -> Goal:
    return Goal(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        type=row.type,
        year=row.year,
        month=row.month,
        quarter=row.quarter,
        is_completed=row.is_completed,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


def _feedback(row: FeedbackRow) -> Feedback:
    return Feedback(
        id=row.id,
        user_id=row.user_id,
        type=row.type,
        message=row.message,
        status=row.status,
        created_at=ensure_utc(row.created_at),
    )


class SqlTodoStore(TodoStore):
    """Хранилище поверх SQLAlchemy AsyncEngine"""

    backend = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self._engine = create_async_engine(database_url, echo=echo)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    @translate_errors(SQLAlchemyError, OSError, message="База данных недоступна")
    async def initialize(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"✅ SQL хранилище готово: {self._engine.url.render_as_string(hide_password=True)}")

    async def cleanup(self) -> None:
        await self._engine.dispose()

    @translate_errors(SQLAlchemyError)
    async def health_check(self) -> Dict[str, Any]:
        async with self._session_factory() as session:
            users = await session.scalar(select(func.count()).select_from(UserRow))
            todos = await session.scalar(select(func.count()).select_from(TodoRow))
        return {"backend": self.backend, "users": users or 0, "todos": todos or 0}

    # === ПОЛЬЗОВАТЕЛИ ===

    @translate_errors(SQLAlchemyError)
    async def create_user(self, user: User) -> User:
        async with self._session_factory() as session:
            existing = await session.scalar(select(UserRow.id).where(UserRow.username == user.username))
            if existing is not None:
                raise ConflictError("Username already taken")
            session.add(UserRow(
                id=user.id,
                username=user.username,
                password_hash=user.password_hash,
                fullname=user.fullname,
                gender=user.gender,
                created_at=user.created_at,
                updated_at=user.updated_at,
            ))
            try:
                await session.commit()
            except IntegrityError as e:
                raise ConflictError("Username already taken") from e
        logger.info(f"👤 Зарегистрирован пользователь {user.username}")
        return user

    @translate_errors(SQLAlchemyError)
    async def get_user(self, user_id: str) -> Optional[User]:
        async with self._session_factory() as session:
            row = await session.get(UserRow, user_id)
            return _user(row) if row else None

    @translate_errors(SQLAlchemyError)
    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with self._session_factory() as session:
            row = await session.scalar(select(UserRow).where(UserRow.username == username))
            return _user(row) if row else None

    @translate_errors(SQLAlchemyError)
    async def update_user(self, user: User) -> User:
        user.updated_at = utc_now()
        async with self._session_factory() as session:
            row = await session.get(UserRow, user.id)
            if row is None:
                raise NotFound("User not found")
            row.password_hash = user.password_hash
            row.fullname = user.fullname
            row.gender = user.gender
            row.updated_at = user.updated_at
            await session.commit()
        return user

    # === СЕССИИ ===

    @translate_errors(SQLAlchemyError)
    async def create_session(self, session_record: Session) -> Session:
        async with self._session_factory() as session:
            session.add(SessionRow(
                token=session_record.token,
                user_id=session_record.user_id,
                created_at=session_record.created_at,
            ))
            await session.commit()
        return session_record

    @translate_errors(SQLAlchemyError)
    async def get_session(self, token: str) -> Optional[Session]:
        async with self._session_factory() as session:
            row = await session.get(SessionRow, token)
            if row is None:
                return None
            return Session(token=row.token, user_id=row.user_id, created_at=ensure_utc(row.created_at))

    @translate_errors(SQLAlchemyError)
    async def delete_session(self, token: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(delete(SessionRow).where(SessionRow.token == token))
            await session.commit()
            return result.rowcount > 0

    # === ЗАДАЧИ ===

    @staticmethod
    def _owned(user_id: str, first_day: Optional[date] = None, last_day: Optional[date] = None) -> list:
        conditions = [TodoRow.user_id == user_id]
        if first_day is not None and last_day is not None:
            conditions.append(TodoRow.selected_date.between(first_day, last_day))
        return conditions

    @staticmethod
    def _filters(tag: Optional[str], status: Optional[str], priority: Optional[str]) -> list:
        conditions = []
        if tag is not None:
            conditions.append(func.trim(TodoRow.tag) == tag)
        if status is not None:
            conditions.append(TodoRow.status == status)
        if priority is not None:
            conditions.append(TodoRow.priority == priority)
        return conditions

    @translate_errors(SQLAlchemyError)
    async def create_todo(self, todo: Todo) -> Todo:
        async with self._session_factory() as session:
            session.add(TodoRow(
                id=todo.id,
                user_id=todo.user_id,
                text=todo.text,
                tag=todo.tag,
                priority=todo.priority,
                status=todo.status,
                selected_date=todo.selected_date,
                created_at=todo.created_at,
            ))
            await session.commit()
        return todo

    @translate_errors(SQLAlchemyError)
    async def get_todo(self, user_id: str, todo_id: str) -> Optional[Todo]:
        async with self._session_factory() as session:
            row = await session.get(TodoRow, todo_id)
            if row is None or row.user_id != user_id:
                return None
            return _todo(row)

    @translate_errors(SQLAlchemyError)
    async def update_todo(self, todo: Todo) -> Todo:
        async with self._session_factory() as session:
            row = await session.get(TodoRow, todo.id)
            if row is None or row.user_id != todo.user_id:
                raise NotFound("Todo not found")
            row.text = todo.text
            row.tag = todo.tag
            row.priority = todo.priority
            row.status = todo.status
            row.selected_date = todo.selected_date
            await session.commit()
        return todo

    @translate_errors(SQLAlchemyError)
    async def delete_todo(self, user_id: str, todo_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(TodoRow).where(TodoRow.id == todo_id, TodoRow.user_id == user_id)
            )
            await session.commit()
            return result.rowcount > 0

    @translate_errors(SQLAlchemyError)
    async def delete_all_todos(self, user_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(delete(TodoRow).where(TodoRow.user_id == user_id))
            await session.commit()
        logger.info(f"🗑️ Удалено задач: {result.rowcount} (user {user_id})")
        return result.rowcount

    @translate_errors(SQLAlchemyError)
    async def list_todos(
        self,
        user_id: str,
        tag: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        selected_date: Optional[date] = None,
    ) -> List[Todo]:
        conditions = self._owned(user_id) + self._filters(tag, status, priority)
        if selected_date is not None:
            conditions.append(TodoRow.selected_date == selected_date)
        stmt = select(TodoRow).where(*conditions).order_by(TodoRow.selected_date, TodoRow.created_at)
        async with self._session_factory() as session:
            rows = (await session.scalars(stmt)).all()
        return [_todo(row) for row in rows]

    # === ЗАПРОСЫ АНАЛИТИКИ ===

    @translate_errors(SQLAlchemyError)
    async def find_by_user_and_range(
        self,
        user_id: str,
        first_day: date,
        last_day: date,
        tag: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Todo]:
        conditions = self._owned(user_id, first_day, last_day) + self._filters(tag, status, priority)
        stmt = select(TodoRow).where(*conditions).order_by(TodoRow.selected_date, TodoRow.created_at)
        async with self._session_factory() as session:
            rows = (await session.scalars(stmt)).all()
        return [_todo(row) for row in rows]

    @translate_errors(SQLAlchemyError)
    async def group_by_day_with_completed_count(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[DayCount]:
        stmt = (
            select(TodoRow.selected_date, func.count(TodoRow.id))
            .where(*self._owned(user_id, first_day, last_day), TodoRow.status == COMPLETED)
            .group_by(TodoRow.selected_date)
            .order_by(TodoRow.selected_date)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [DayCount(day, int(count)) for day, count in rows]

    @translate_errors(SQLAlchemyError)
    async def group_by_day_with_total_and_completed(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[DayTotals]:
        completed = func.sum(case((TodoRow.status == COMPLETED, 1), else_=0))
        stmt = (
            select(TodoRow.selected_date, func.count(TodoRow.id), completed)
            .where(*self._owned(user_id, first_day, last_day))
            .group_by(TodoRow.selected_date)
            .order_by(TodoRow.selected_date)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [DayTotals(day, int(total), int(done or 0)) for day, total, done in rows]

    @translate_errors(SQLAlchemyError)
    async def group_by_tag_count(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[TagCount]:
        count = func.count(TodoRow.id)
        # Теги сравниваются без пробелов по краям, как в JsonTodoStore
        tag = func.trim(TodoRow.tag)
        stmt = (
            select(tag, count)
            .where(*self._owned(user_id, first_day, last_day), TodoRow.tag.is_not(None), tag != "")
            .group_by(tag)
            .order_by(count.desc(), tag.asc())
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [TagCount(name, int(total)) for name, total in rows]

    @translate_errors(SQLAlchemyError)
    async def distinct_completed_days(
        self, user_id: str, first_day: date, last_day: date
    ) -> List[date]:
        stmt = (
            select(TodoRow.selected_date)
            .where(*self._owned(user_id, first_day, last_day), TodoRow.status == COMPLETED)
            .distinct()
            .order_by(TodoRow.selected_date)
        )
        async with self._session_factory() as session:
            return list((await session.scalars(stmt)).all())

    # === ЦЕЛИ ===

    @translate_errors(SQLAlchemyError)
    async def create_goal(self, goal: Goal) -> Goal:
        async with self._session_factory() as session:
            session.add(GoalRow(
                id=goal.id,
                user_id=goal.user_id,
                title=goal.title,
                type=goal.type,
                year=goal.year,
                month=goal.month,
                quarter=goal.quarter,
                is_completed=goal.is_completed,
                created_at=goal.created_at,
                updated_at=goal.updated_at,
            ))
            await session.commit()
        return goal

    @translate_errors(SQLAlchemyError)
    async def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        async with self._session_factory() as session:
            row = await session.get(GoalRow, goal_id)
            if row is None or row.user_id != user_id:
                return None
            return _goal(row)

    @translate_errors(SQLAlchemyError)
    async def list_goals(self, user_id: str) -> List[Goal]:
        stmt = select(GoalRow).where(GoalRow.user_id == user_id).order_by(GoalRow.created_at)
        async with self._session_factory() as session:
            rows = (await session.scalars(stmt)).all()
        return [_goal(row) for row in rows]

    @translate_errors(SQLAlchemyError)
    async def update_goal(self, goal: Goal) -> Goal:
        goal.updated_at = utc_now()
        async with self._session_factory() as session:
            row = await session.get(GoalRow, goal.id)
            if row is None or row.user_id != goal.user_id:
                raise NotFound("Goal not found")
            row.title = goal.title
            row.type = goal.type
            row.year = goal.year
            row.month = goal.month
            row.quarter = goal.quarter
            row.is_completed = goal.is_completed
            row.updated_at = goal.updated_at
            await session.commit()
        return goal

    @translate_errors(SQLAlchemyError)
    async def delete_goal(self, user_id: str, goal_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(GoalRow).where(GoalRow.id == goal_id, GoalRow.user_id == user_id)
            )
            await session.commit()
            return result.rowcount > 0

    # === ОБРАТНАЯ СВЯЗЬ ===

    @translate_errors(SQLAlchemyError)
    async def create_feedback(self, feedback: Feedback) -> Feedback:
        async with self._session_factory() as session:
            session.add(FeedbackRow(
                id=feedback.id,
                user_id=feedback.user_id,
                type=feedback.type,
                message=feedback.message,
                status=feedback.status,
                created_at=feedback.created_at,
            ))
            await session.commit()
        logger.info(f"💬 Новая обратная связь ({feedback.type}) от {feedback.user_id}")
        return feedback

    @translate_errors(SQLAlchemyError)
    async def list_feedback(self, user_id: str) -> List[Feedback]:
        stmt = select(FeedbackRow).where(FeedbackRow.user_id == user_id).order_by(FeedbackRow.created_at)
        async with self._session_factory() as session:
            rows = (await session.scalars(stmt)).all()
        return [_feedback(row) for row in rows]
