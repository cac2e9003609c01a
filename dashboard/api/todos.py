import dataclasses
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..config import settings
from ..core.exceptions import InvalidInput, NotFound
from ..core.models import Todo, User, new_id
from ..core.store import TodoStore
from ..dependencies import get_current_user, get_todo_store
from shared.models import TodoCreate, TodoOut, TodoPriority, TodoStatus, TodoUpdate
from utils.datetime_utils import to_calendar_day

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("", response_model=List[TodoOut])
async def list_todos(
    tag: Optional[str] = Query(None),
    todo_status: Optional[TodoStatus] = Query(None, alias="status"),
    priority: Optional[TodoPriority] = Query(None),
    selected_date: Optional[str] = Query(None, alias="selectedDate"),
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    """
    Задачи текущего пользователя; фильтры комбинируются
    """
    day = None
    if selected_date:
        try:
            day = to_calendar_day(selected_date, settings.TIMEZONE)
        except (TypeError, ValueError):
            raise InvalidInput(f"Неверный формат selectedDate: {selected_date}")

    tag = tag.strip() if tag and tag.strip() else None
    return await store.list_todos(
        current_user.id,
        tag=tag,
        status=todo_status.value if todo_status else None,
        priority=priority.value if priority else None,
        selected_date=day,
    )


@router.post("", response_model=TodoOut, status_code=status.HTTP_201_CREATED)
async def create_todo(
    payload: TodoCreate,
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    todo = Todo(
        id=new_id(),
        user_id=current_user.id,
        text=payload.text,
        selected_date=payload.selected_date,
        priority=payload.priority.value,
        tag=payload.tag,
    )
    await store.create_todo(todo)
    logger.info(f"📝 Новая задача {todo.id} на {todo.selected_date} (user {current_user.id})")
    return todo


@router.put("/{todo_id}", response_model=TodoOut)
async def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    """
    Частичное обновление: меняются только переданные поля
    """
    todo = await store.get_todo(current_user.id, todo_id)
    if todo is None:
        raise NotFound("Todo not found")

    changes = payload.model_dump(exclude_unset=True)
    for key in ("priority", "status"):
        if changes.get(key) is not None:
            changes[key] = changes[key].value
        else:
            changes.pop(key, None)
    if changes.get("text") is None:
        changes.pop("text", None)
    if "selected_date" in changes and changes["selected_date"] is None:
        raise InvalidInput("selectedDate не может быть пустым")

    updated = dataclasses.replace(todo, **changes)
    return await store.update_todo(updated)


@router.delete("/{todo_id}", response_model=Dict[str, str])
async def delete_todo(
    todo_id: str,
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    if not await store.delete_todo(current_user.id, todo_id):
        raise NotFound("Todo not found")
    return {"message": "Todo deleted successfully"}


@router.delete("", response_model=Dict[str, int])
async def delete_all_todos(
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    """
    Удалить все задачи текущего пользователя
    """
    deleted = await store.delete_all_todos(current_user.id)
    return {"deleted": deleted}
