import dataclasses
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, status

from ..core.exceptions import InvalidInput, NotFound
from ..core.models import Goal, User, new_id
from ..core.store import TodoStore
from ..dependencies import get_current_user, get_todo_store
from shared.models import GoalCreate, GoalOut, GoalType, GoalUpdate, TimeFrame, check_timeframe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/goals", tags=["goals"])


def goal_out(goal: Goal) -> GoalOut:
    return GoalOut(
        id=goal.id,
        user_id=goal.user_id,
        title=goal.title,
        type=goal.type,
        timeframe=TimeFrame(**goal.timeframe),
        is_completed=goal.is_completed,
        created_at=goal.created_at,
        updated_at=goal.updated_at,
    )


@router.get("", response_model=List[GoalOut])
async def list_goals(
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    return [goal_out(goal) for goal in await store.list_goals(current_user.id)]


@router.post("", response_model=GoalOut, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalCreate,
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    goal = Goal(
        id=new_id(),
        user_id=current_user.id,
        title=payload.title,
        type=payload.type.value,
        year=payload.timeframe.year,
        month=payload.timeframe.month,
        quarter=payload.timeframe.quarter,
    )
    await store.create_goal(goal)
    logger.info(f"🎯 Новая цель {goal.id} ({goal.type}) для {current_user.id}")
    return goal_out(goal)


@router.put("/{goal_id}", response_model=GoalOut)
async def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    """
    Частичное обновление цели; правила timeframe проверяются для итогового состояния
    """
    goal = await store.get_goal(current_user.id, goal_id)
    if goal is None:
        raise NotFound("Goal not found")

    changes = {}
    if payload.title is not None:
        title = payload.title.strip()
        if not title:
            raise InvalidInput("Название цели не может быть пустым")
        changes["title"] = title
    if payload.type is not None:
        changes["type"] = payload.type.value
    if payload.timeframe is not None:
        changes.update(
            year=payload.timeframe.year,
            month=payload.timeframe.month,
            quarter=payload.timeframe.quarter,
        )
    if payload.is_completed is not None:
        changes["is_completed"] = payload.is_completed

    updated = dataclasses.replace(goal, **changes)
    try:
        check_timeframe(GoalType(updated.type), TimeFrame(**updated.timeframe))
    except ValueError as e:
        raise InvalidInput(str(e))

    return goal_out(await store.update_goal(updated))


@router.delete("/{goal_id}", response_model=Dict[str, str])
async def delete_goal(
    goal_id: str,
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    if not await store.delete_goal(current_user.id, goal_id):
        raise NotFound("Goal not found")
    return {"message": "Goal deleted successfully"}
