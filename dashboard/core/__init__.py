#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Core Package
Хранилища, окно дат, агрегаторы и аналитический движок

Версия: 1.0.0
Дата: 2026-10-18
"""

from .exceptions import (
    DashboardError,
    InvalidInput,
    NotFound,
    AuthenticationError,
    ConflictError,
    StoreUnavailable,
    StoreCorruptedError
)

from .store import TodoStore
from .data_manager import JsonTodoStore
from .analytics import AnalyticsEngine

__all__ = [
    # Exceptions
    'DashboardError',
    'InvalidInput',
    'NotFound',
    'AuthenticationError',
    'ConflictError',
    'StoreUnavailable',
    'StoreCorruptedError',

    # Components
    'TodoStore',
    'JsonTodoStore',
    'AnalyticsEngine'
]
