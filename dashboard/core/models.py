#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Core Data Models
Записи хранилища: пользователи, сессии, задачи, цели, обратная связь

Записи хранят строковые значения статусов и приоритетов: проверка
перечислений выполняется на границе API (shared.models), а старые
документы с произвольным приоритетом должны читаться без ошибок.

Версия: 1.0.0
Дата: 2026-10-18
"""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional

from shared.models import FeedbackStatus, TodoPriority, TodoStatus
from utils.datetime_utils import parse_datetime, utc_now


def new_id() -> str:
    return uuid.uuid4().hex


def _iso(moment: datetime) -> str:
    return moment.isoformat()


# ===== ПОЛЬЗОВАТЕЛИ =====

@dataclass
class User:
    """Пользователь (пароль хранится только в виде хеша)"""
    id: str
    username: str
    password_hash: str
    fullname: Optional[str] = None
    gender: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(
            id=data['id'],
            username=data['username'],
            password_hash=data['password_hash'],
            fullname=data.get('fullname'),
            gender=data.get('gender'),
            created_at=parse_datetime(data['created_at']),
            updated_at=parse_datetime(data.get('updated_at') or data['created_at']),
        )


@dataclass
class Session:
    """Выданный при входе bearer-токен"""
    token: str
    user_id: str
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {'token': self.token, 'user_id': self.user_id, 'created_at': _iso(self.created_at)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Session':
        return cls(token=data['token'], user_id=data['user_id'], created_at=parse_datetime(data['created_at']))

    def is_expired(self, timeout_seconds: int, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return (now - self.created_at).total_seconds() > timeout_seconds


# ===== ЗАДАЧИ =====

@dataclass
class Todo:
    """Задача пользователя на конкретный календарный день"""
    id: str
    user_id: str
    text: str
    selected_date: date
    priority: str = TodoPriority.MEDIUM.value
    status: str = TodoStatus.PENDING.value
    tag: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def is_completed(self) -> bool:
        return self.status == TodoStatus.COMPLETED.value

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['selected_date'] = self.selected_date.isoformat()
        data['created_at'] = _iso(self.created_at)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Todo':
        return cls(
            id=data['id'],
            user_id=data['user_id'],
            text=data['text'],
            selected_date=date.fromisoformat(data['selected_date'][:10]),
            priority=data.get('priority') or TodoPriority.MEDIUM.value,
            status=data.get('status') or TodoStatus.PENDING.value,
            tag=data.get('tag'),
            created_at=parse_datetime(data['created_at']),
        )


# ===== ЦЕЛИ =====

@dataclass
class Goal:
    """Цель на месяц, квартал или год"""
    id: str
    user_id: str
    title: str
    type: str
    year: int
    month: Optional[int] = None
    quarter: Optional[int] = None
    is_completed: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def timeframe(self) -> Dict[str, Optional[int]]:
        return {'month': self.month, 'quarter': self.quarter, 'year': self.year}

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Goal':
        return cls(
            id=data['id'],
            user_id=data['user_id'],
            title=data['title'],
            type=data['type'],
            year=data['year'],
            month=data.get('month'),
            quarter=data.get('quarter'),
            is_completed=bool(data.get('is_completed', False)),
            created_at=parse_datetime(data['created_at']),
            updated_at=parse_datetime(data.get('updated_at') or data['created_at']),
        )


# ===== ОБРАТНАЯ СВЯЗЬ =====

@dataclass
class Feedback:
    id: str
    user_id: str
    type: str
    message: str
    status: str = FeedbackStatus.PENDING.value
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['created_at'] = _iso(self.created_at)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Feedback':
        return cls(
            id=data['id'],
            user_id=data['user_id'],
            type=data['type'],
            message=data['message'],
            status=data.get('status') or FeedbackStatus.PENDING.value,
            created_at=parse_datetime(data['created_at']),
        )
