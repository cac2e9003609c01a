import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, status

from ..config import settings
from ..core.exceptions import AuthenticationError, ConflictError, NotFound
from ..core.models import Session, User, new_id
from ..core.security import generate_token, hash_password, verify_password
from ..core.store import TodoStore
from ..dependencies import get_current_token, get_current_user, get_todo_store
from shared.models import ForgotPasswordRequest, LoginRequest, LoginResponse, RegisterRequest, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    store: TodoStore = Depends(get_todo_store)
):
    """
    Регистрация нового пользователя
    """
    user = User(
        id=new_id(),
        username=payload.username,
        password_hash=hash_password(payload.password, settings.PASSWORD_HASH_ITERATIONS),
        fullname=payload.fullname,
        gender=payload.gender,
    )
    return await store.create_user(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    store: TodoStore = Depends(get_todo_store)
):
    """
    Вход по логину и паролю, возвращает bearer-токен
    """
    user = await store.get_user_by_username(payload.username.strip())
    if user is None:
        raise NotFound("User not found")
    if not verify_password(payload.password, user.password_hash):
        logger.warning(f"⚠️ Неверный пароль для {user.username}")
        raise AuthenticationError("Invalid credentials")

    session = await store.create_session(Session(token=generate_token(), user_id=user.id))
    logger.info(f"🔑 Вход пользователя {user.username}")
    return LoginResponse(message="Login successful", token=session.token)


@router.post("/forgot-password", response_model=Dict[str, str])
async def forgot_password(
    payload: ForgotPasswordRequest,
    store: TodoStore = Depends(get_todo_store)
):
    """
    Сброс пароля; новый пароль должен отличаться от текущего
    """
    user = await store.get_user_by_username(payload.username.strip())
    if user is None:
        raise NotFound("User not found")
    if verify_password(payload.password, user.password_hash):
        raise ConflictError("New password must differ from the current one")

    user.password_hash = hash_password(payload.password, settings.PASSWORD_HASH_ITERATIONS)
    await store.update_user(user)
    logger.info(f"🔄 Пароль пользователя {user.username} обновлён")
    return {"message": "Password updated successfully"}


@router.get("/me", response_model=UserOut)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/logout", response_model=Dict[str, str])
async def logout(
    current_user: User = Depends(get_current_user),
    token: Optional[str] = Depends(get_current_token),
    store: TodoStore = Depends(get_todo_store)
):
    """
    Отзыв текущего токена
    """
    await store.delete_session(token)
    logger.info(f"👋 Выход пользователя {current_user.username}")
    return {"message": "Logged out"}
