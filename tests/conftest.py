"""Shared fixtures: temp JSON/SQLite stores, fixed clock, authenticated API client."""

import os
import tempfile
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

import httpx
import pytest
import pytest_asyncio
import pytz

# Settings are read at import time, so the environment is prepared first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="todo-dashboard-")
os.environ["LOG_TO_FILE"] = "false"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"
os.environ["TIMEZONE"] = "UTC"
os.environ.pop("DATABASE_URL", None)

from dashboard.app import app  # noqa: E402
from dashboard.core.data_manager import JsonTodoStore  # noqa: E402
from dashboard.core.models import Todo, new_id  # noqa: E402
from dashboard.core.sql_store import SqlTodoStore  # noqa: E402
from dashboard.core.store import TodoStore  # noqa: E402
from dashboard.dependencies import get_todo_store  # noqa: E402

FIXED_NOW = datetime(2026, 10, 18, 15, 30, tzinfo=pytz.utc)
TODAY = FIXED_NOW.date()


def day(offset: int, base: date = TODAY) -> date:
    """Calendar day relative to base (negative = past)."""
    return base + timedelta(days=offset)


def make_todo(
    user_id: str,
    selected_date: date,
    status: str = "pending",
    priority: Optional[str] = "medium",
    tag: Optional[str] = None,
    text: str = "task",
) -> Todo:
    return Todo(
        id=new_id(),
        user_id=user_id,
        text=text,
        selected_date=selected_date,
        priority=priority,
        status=status,
        tag=tag,
    )


async def seed(store: TodoStore, todos: Iterable[Todo]) -> List[Todo]:
    created = []
    for todo in todos:
        created.append(await store.create_todo(todo))
    return created


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest_asyncio.fixture()
async def json_store(tmp_path):
    store = JsonTodoStore(str(tmp_path / "data"))
    await store.initialize()
    yield store
    await store.cleanup()


@pytest_asyncio.fixture()
async def sql_store(tmp_path):
    store = SqlTodoStore(f"sqlite+aiosqlite:///{tmp_path / 'todos.db'}")
    await store.initialize()
    yield store
    await store.cleanup()


@pytest_asyncio.fixture(params=["json", "sql"])
async def store(request, tmp_path):
    """Every backend behind the same TodoStore contract."""
    if request.param == "json":
        backend = JsonTodoStore(str(tmp_path / "data"))
    else:
        backend = SqlTodoStore(f"sqlite+aiosqlite:///{tmp_path / 'todos.db'}")
    await backend.initialize()
    yield backend
    await backend.cleanup()


@pytest_asyncio.fixture()
async def client(json_store):
    """Async httpx client bound to the FastAPI app over a temp JSON store."""
    async def override_store():
        return json_store

    app.dependency_overrides[get_todo_store] = override_store
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def register_and_login(client: httpx.AsyncClient, username: str, password: str = "secret123") -> str:
    r = await client.post("/api/users/register", json={"username": username, "password": password})
    assert r.status_code == 201, r.text
    r = await client.post("/api/users/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


@pytest_asyncio.fixture()
async def auth_client(client):
    token = await register_and_login(client, "alice")
    client.headers["Authorization"] = f"Bearer {token}"
    return client
