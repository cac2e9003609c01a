#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Exceptions
Иерархия исключений приложения и их HTTP-коды

Версия: 1.0.0
Дата: 2026-10-18
"""

from typing import Any, Dict


class DashboardError(Exception):
    """Базовое исключение приложения"""

    status_code: int = 500

    def __init__(self, message: str = "", **details: Any):
        super().__init__(message)
        self.message = message or self.__class__.__name__
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"detail": self.message, "status_code": self.status_code}
        if self.details:
            payload["errors"] = self.details
        return payload


class InvalidInput(DashboardError):
    """Некорректные входные данные (days, user_id, тело запроса)"""

    status_code = 400


class NotFound(DashboardError):
    """Запись не найдена или принадлежит другому пользователю"""

    status_code = 404


class AuthenticationError(DashboardError):
    """Отсутствующий, неверный или просроченный токен"""

    status_code = 401


class ConflictError(DashboardError):
    """Конфликт с текущим состоянием данных"""

    status_code = 409


class StoreUnavailable(DashboardError):
    """Хранилище недоступно"""

    status_code = 503


class StoreCorruptedError(StoreUnavailable):
    """Файл коллекции повреждён и не читается"""
