#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Todo Dashboard - FastAPI Application
API трекера задач: пользователи, задачи, цели, обратная связь и аналитика

Версия: 1.0.0
Дата: 2026-10-18
"""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from dashboard.api import analytics, feedback, goals, todos, users
from dashboard.config import settings
from dashboard.core.exceptions import AuthenticationError, DashboardError, StoreUnavailable
from dashboard.core.store import TodoStore
from dashboard.dependencies import cleanup_resources, get_client_ip, get_todo_store, init_todo_store, log_request
from shared.models import HealthCheck

logger = logging.getLogger(__name__)

app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    global app_start_time

    # Startup
    settings.setup_logging()
    logger.info(f"🚀 Запуск {settings.APP_NAME} ({settings.ENVIRONMENT})...")
    app_start_time = time.time()

    store = await init_todo_store()
    stats = await store.health_check()
    logger.info(f"📊 Загружено пользователей: {stats.get('users', 0)}")
    logger.info(f"📝 Загружено задач: {stats.get('todos', 0)}")
    logger.info(f"🌐 API доступен на: {settings.get_full_url()}")
    logger.info("✅ Dashboard готов к работе")

    yield

    # Shutdown
    logger.info("🛑 Остановка Dashboard...")
    await cleanup_resources()


# Создание FastAPI приложения
app = FastAPI(
    title=settings.APP_NAME,
    description="API трекера задач с аналитикой выполнения и сериями активных дней",
    version=settings.VERSION,
    docs_url=settings.DOCS_URL,
    redoc_url=settings.REDOC_URL,
    openapi_url=settings.OPENAPI_URL,
    lifespan=lifespan
)

# ===== MIDDLEWARE =====

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Gzip compression
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Middleware для логирования запросов"""
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception:
        process_time = time.time() - start_time
        logger.exception(f"❌ Ошибка обработки запроса {request.url.path} ({process_time:.3f}s)")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "status_code": 500}
        )

    process_time = time.time() - start_time
    await log_request(request, process_time, response.status_code)
    response.headers["X-Process-Time"] = f"{process_time:.6f}"
    return response

# ===== API РОУТЕРЫ =====

app.include_router(users.router)
app.include_router(todos.router)
app.include_router(goals.router)
app.include_router(feedback.router)
app.include_router(analytics.router)

# ===== СЛУЖЕБНЫЕ МАРШРУТЫ =====


@app.get("/health", response_model=HealthCheck)
async def health_check(store: TodoStore = Depends(get_todo_store)):
    """Health check для мониторинга"""
    try:
        data = await store.health_check()
    except StoreUnavailable as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "service": "dashboard",
                "error": e.message,
                "timestamp": time.time()
            }
        )

    data["uptime_seconds"] = time.time() - app_start_time
    return HealthCheck(
        status="healthy",
        service="dashboard",
        version=settings.VERSION,
        timestamp=time.time(),
        data=data
    )


@app.get("/api/info")
async def api_info():
    """Информация об API"""
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG,
        "uptime": time.time() - app_start_time,
        "storage": "sql" if settings.DATABASE_URL else "json",
        "timezone": settings.TIMEZONE,
        "endpoints": {
            "users": "/api/users",
            "todos": "/api/todos",
            "goals": "/api/goals",
            "feedback": "/api/feedback",
            "analytics": "/api/analytics"
        }
    }


@app.get("/ping")
async def ping():
    """Простой ping endpoint"""
    return {
        "message": "pong",
        "timestamp": time.time(),
        "service": "dashboard"
    }

# ===== ОБРАБОТЧИКИ ОШИБОК =====


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    """Исключения приложения в JSON с их HTTP-кодом"""
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"⚠️ {request.method} {request.url.path} - {exc.status_code}: {exc.message} - {get_client_ip(request)}")

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Обработчик HTTP исключений"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "status_code": exc.status_code
        },
        headers=getattr(exc, "headers", None)
    )

# ===== ЗАПУСК ПРИЛОЖЕНИЯ =====


def run_dashboard(
    host: str = None,
    port: int = None,
    dev: bool = None,
    reload: bool = None
):
    """Запуск дашборда"""

    # Используем настройки по умолчанию если не переданы
    host = host or settings.DASHBOARD_HOST
    port = port or settings.DASHBOARD_PORT
    dev = dev if dev is not None else settings.DEBUG
    reload = reload if reload is not None else dev

    logger.info(f"🌐 Запуск Dashboard на http://{host}:{port}")
    logger.info(f"📁 Данные: {settings.DATABASE_URL or settings.DATA_DIR}")
    logger.info(f"🔧 Режим отладки: {dev}")
    logger.info(f"🔄 Автоперезагрузка: {reload}")

    try:
        uvicorn.run(
            "dashboard.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level="debug" if dev else "info",
            access_log=dev,
            server_header=False,
            date_header=False
        )
    except KeyboardInterrupt:
        logger.info("👋 Dashboard остановлен")
