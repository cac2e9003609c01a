#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - Configuration
Конфигурация API трекера задач с настройками для разных сред

Версия: 1.0.0
Дата: 2026-10-18
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import pytz
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logger import setup_logger


class DashboardSettings(BaseSettings):
    """Настройки Todo Dashboard"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="Todo Dashboard",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия API"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing/staging)"
    )

    DEBUG: bool = Field(
        default=True,
        description="Режим отладки"
    )

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    DASHBOARD_HOST: str = Field(
        default="0.0.0.0",
        description="Хост для запуска API"
    )

    DASHBOARD_PORT: int = Field(
        default=3004,
        description="Порт для запуска API"
    )

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Разрешенные источники для CORS, через запятую"
    )

    # ===== ПУТИ И ФАЙЛЫ =====

    DATA_DIR: Path = Field(
        default=Path("data"),
        description="Директория JSON-хранилища"
    )

    DATA_FILES: Dict[str, str] = Field(
        default={
            "users": "users.json",
            "todos": "todos.json",
            "sessions": "sessions.json",
            "goals": "goals.json",
            "feedback": "feedback.json"
        },
        description="Имена файлов коллекций"
    )

    LOGS_DIR: Path = Field(
        default=Path("logs"),
        description="Директория логов"
    )

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Формат логов"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Формат даты в логах"
    )

    LOG_TO_FILE: bool = Field(
        default=True,
        description="Писать лог в LOGS_DIR/dashboard.log"
    )

    # ===== БАЗА ДАННЫХ (опционально) =====

    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="URL SQLAlchemy (async) вместо JSON-хранилища, например sqlite+aiosqlite:///data/todos.db"
    )

    DB_ECHO: bool = Field(
        default=False,
        description="Логировать SQL-запросы"
    )

    # ===== АНАЛИТИКА =====

    TIMEZONE: str = Field(
        default="UTC",
        description="Единая таймзона для окна дат, группировки и streakData"
    )

    MAX_WINDOW_DAYS: int = Field(
        default=365,
        description="Максимальное значение параметра days"
    )

    # ===== БЕЗОПАСНОСТЬ =====

    SESSION_TIMEOUT: int = Field(
        default=7 * 24 * 3600,
        description="Время жизни токена в секундах (неделя)"
    )

    PASSWORD_HASH_ITERATIONS: int = Field(
        default=200_000,
        description="Итерации PBKDF2 для хеширования паролей"
    )

    # ===== API НАСТРОЙКИ =====

    DOCS_URL: Optional[str] = Field(
        default="/api/docs",
        description="URL документации API (None для отключения)"
    )

    REDOC_URL: Optional[str] = Field(
        default="/api/redoc",
        description="URL ReDoc документации (None для отключения)"
    )

    OPENAPI_URL: Optional[str] = Field(
        default="/api/openapi.json",
        description="URL OpenAPI схемы (None для отключения)"
    )

    # ===== ВАЛИДАТОРЫ =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        """Валидация среды выполнения"""
        allowed_envs = ['development', 'production', 'testing', 'staging']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Валидация уровня логирования"""
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator('DASHBOARD_PORT')
    @classmethod
    def validate_port(cls, v):
        """Валидация порта"""
        if not 1 <= v <= 65535:
            raise ValueError("DASHBOARD_PORT must be between 1 and 65535")
        return v

    @field_validator('TIMEZONE')
    @classmethod
    def validate_timezone(cls, v):
        """Таймзона должна быть известна pytz"""
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown TIMEZONE: {v}")
        return v

    @field_validator('MAX_WINDOW_DAYS', 'SESSION_TIMEOUT', 'PASSWORD_HASH_ITERATIONS')
    @classmethod
    def validate_positive(cls, v, info):
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @model_validator(mode='after')
    def validate_production_settings(self):
        """Валидация настроек для продакшена"""
        if self.ENVIRONMENT == 'production':
            # В продакшене отключаем DEBUG и документацию API
            self.DEBUG = False
            self.DOCS_URL = None
            self.REDOC_URL = None
            self.OPENAPI_URL = None
        return self

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(',') if origin.strip()]

    def get_full_url(self, path: str = "") -> str:
        return f"http://{self.DASHBOARD_HOST}:{self.DASHBOARD_PORT}/{path.lstrip('/')}"

    def setup_logging(self) -> None:
        """Настройка логирования"""
        log_file = str(self.LOGS_DIR / "dashboard.log") if self.LOG_TO_FILE else None
        setup_logger(
            level=self.LOG_LEVEL,
            fmt=self.LOG_FORMAT,
            datefmt=self.LOG_DATE_FORMAT,
            log_file=log_file,
        )

        # Настройка логгеров внешних библиотек
        if not self.DEBUG:
            logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ===== СОЗДАНИЕ ЭКЗЕМПЛЯРА НАСТРОЕК =====

settings = DashboardSettings()


@lru_cache()
def get_settings() -> DashboardSettings:
    """Получить настройки (кэшированные)"""
    return settings
