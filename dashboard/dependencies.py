#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Dashboard Dependencies
Провайдеры хранилища, аналитики и авторизации для FastAPI приложения

Версия: 1.0.0
Дата: 2026-10-18
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dashboard.config import settings
from dashboard.core.analytics import AnalyticsEngine
from dashboard.core.data_manager import JsonTodoStore
from dashboard.core.exceptions import AuthenticationError
from dashboard.core.models import User
from dashboard.core.store import TodoStore

logger = logging.getLogger(__name__)

# ===== ГЛОБАЛЬНЫЕ ПЕРЕМЕННЫЕ =====

# Хранилище задач (синглтон)
_todo_store: Optional[TodoStore] = None

# ===== ИНИЦИАЛИЗАЦИЯ КОМПОНЕНТОВ =====


def create_todo_store() -> TodoStore:
    """SQL хранилище при заданном DATABASE_URL, иначе JSON файлы"""
    if settings.DATABASE_URL:
        # Импорт здесь: без DATABASE_URL драйвер БД не нужен
        from dashboard.core.sql_store import SqlTodoStore
        return SqlTodoStore(settings.DATABASE_URL, echo=settings.DB_ECHO)
    return JsonTodoStore(str(settings.DATA_DIR), settings.DATA_FILES)


async def init_todo_store() -> TodoStore:
    """Инициализация хранилища задач"""
    global _todo_store

    if _todo_store is None:
        store = create_todo_store()
        logger.info(f"🔄 Инициализация хранилища ({store.backend})...")
        await store.initialize()
        _todo_store = store
        logger.info("✅ Хранилище инициализировано")

    return _todo_store

# ===== ПРОВАЙДЕРЫ ЗАВИСИМОСТЕЙ =====


async def get_todo_store() -> TodoStore:
    """Получить экземпляр хранилища"""
    if _todo_store is None:
        return await init_todo_store()
    return _todo_store


async def get_analytics_engine(store: TodoStore = Depends(get_todo_store)) -> AnalyticsEngine:
    """Движок без состояния: новый на каждый запрос"""
    return AnalyticsEngine(store, tz_name=settings.TIMEZONE, max_days=settings.MAX_WINDOW_DAYS)

# ===== АВТОРИЗАЦИЯ =====

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: TodoStore = Depends(get_todo_store),
) -> User:
    """Пользователь по bearer-токену; иначе AuthenticationError"""
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Требуется авторизация")

    session = await store.get_session(credentials.credentials)
    if session is None:
        raise AuthenticationError("Недействительный токен")

    if session.is_expired(settings.SESSION_TIMEOUT):
        await store.delete_session(session.token)
        logger.info(f"⌛ Сессия пользователя {session.user_id} истекла")
        raise AuthenticationError("Срок действия токена истёк")

    user = await store.get_user(session.user_id)
    if user is None:
        raise AuthenticationError("Пользователь не найден")
    return user


async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials else None

# ===== УТИЛИТЫ =====


def get_client_ip(request: Request) -> str:
    """Получить IP адрес клиента"""
    # Проверяем заголовки прокси
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


def get_user_agent(request: Request) -> str:
    """Получить User-Agent клиента"""
    return request.headers.get("User-Agent", "Unknown")


async def log_request(request: Request, response_time: float, status_code: int):
    """Логирование запроса"""
    logger.info(
        f"{request.method} {request.url.path} "
        f"- {status_code} - {response_time:.3f}s "
        f"- {get_client_ip(request)} - {get_user_agent(request)}"
    )

# ===== ОЧИСТКА РЕСУРСОВ =====


async def cleanup_resources():
    """Очистка ресурсов при остановке приложения"""
    global _todo_store

    logger.info("🧹 Очистка ресурсов...")

    if _todo_store:
        await _todo_store.cleanup()
        _todo_store = None

    logger.info("✅ Ресурсы очищены")
