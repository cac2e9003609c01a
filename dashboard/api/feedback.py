import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..core.models import Feedback, User, new_id
from ..core.store import TodoStore
from ..dependencies import get_current_user, get_todo_store
from shared.models import FeedbackCreate, FeedbackOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    payload: FeedbackCreate,
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    """
    Отправить сообщение об ошибке, предложение или отзыв
    """
    feedback = Feedback(
        id=new_id(),
        user_id=current_user.id,
        type=payload.type.value,
        message=payload.message.strip(),
    )
    return await store.create_feedback(feedback)


@router.get("", response_model=List[FeedbackOut])
async def list_feedback(
    current_user: User = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store)
):
    return await store.list_feedback(current_user.id)
