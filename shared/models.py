from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from utils.datetime_utils import to_calendar_day
from utils.validators import is_valid_username

# Поля с именем "date" объявляются через псевдоним типа
CalendarDay = date


# Базовые перечисления
class TodoStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class TodoPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GoalType(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class FeedbackType(str, Enum):
    BUG = "bug"
    SUGGESTION = "suggestion"
    FEEDBACK = "feedback"


class FeedbackStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class CamelModel(BaseModel):
    """JSON наружу в camelCase (selectedDate, userId, ...)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _calendar_day(value: Any) -> Any:
    if value is None or isinstance(value, date):
        return value
    from dashboard.config import settings
    try:
        return to_calendar_day(value, settings.TIMEZONE)
    except (TypeError, ValueError):
        raise ValueError(f"Неверный формат даты: {value}")


def _clean_tag(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ===== ПОЛЬЗОВАТЕЛИ =====

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=32)
    password: str = Field(..., min_length=6, max_length=128)
    fullname: Optional[str] = Field(None, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        if not is_valid_username(v):
            raise ValueError('Username: 3-32 символа, буквы, цифры и _.@-')
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class ForgotPasswordRequest(BaseModel):
    username: str
    password: str = Field(..., min_length=6, max_length=128)


class UserOut(CamelModel):
    id: str
    username: str
    fullname: Optional[str] = None
    gender: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    message: str
    token: str


# ===== ЗАДАЧИ =====

class TodoCreate(CamelModel):
    text: str = Field(..., min_length=1, max_length=500, validation_alias=AliasChoices("text", "todo"))
    tag: Optional[str] = Field(None, max_length=50)
    priority: TodoPriority = TodoPriority.MEDIUM
    selected_date: CalendarDay

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        if not v.strip():
            raise ValueError('Текст задачи не может быть пустым')
        return v.strip()

    @field_validator('tag')
    @classmethod
    def validate_tag(cls, v):
        return _clean_tag(v)

    @field_validator('selected_date', mode='before')
    @classmethod
    def validate_selected_date(cls, v):
        return _calendar_day(v)


class TodoUpdate(CamelModel):
    text: Optional[str] = Field(None, min_length=1, max_length=500, validation_alias=AliasChoices("text", "todo"))
    tag: Optional[str] = Field(None, max_length=50)
    priority: Optional[TodoPriority] = None
    status: Optional[TodoStatus] = None
    selected_date: Optional[CalendarDay] = None

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Текст задачи не может быть пустым')
        return v.strip() if v is not None else v

    @field_validator('tag')
    @classmethod
    def validate_tag(cls, v):
        return _clean_tag(v)

    @field_validator('selected_date', mode='before')
    @classmethod
    def validate_selected_date(cls, v):
        return _calendar_day(v)


class TodoOut(CamelModel):
    id: str
    text: str
    tag: Optional[str] = None
    priority: str
    status: str
    user_id: str
    selected_date: CalendarDay
    created_at: datetime


# ===== АНАЛИТИКА =====

class StatusBreakdown(CamelModel):
    total_todos: int
    pending_todos: int
    completed_todos: int


class PriorityBreakdown(BaseModel):
    low: int
    medium: int
    high: int


class CompletionPoint(BaseModel):
    date: CalendarDay
    completed: int


class CreatedVsCompletedPoint(BaseModel):
    date: CalendarDay
    total: int
    completed: int


class TagCount(BaseModel):
    tag: str
    count: int


class DashboardAnalytics(BaseModel):
    status_breakdown: StatusBreakdown
    priority_breakdown: PriorityBreakdown
    completion_trend: List[CompletionPoint]
    created_vs_completed_trend: List[CreatedVsCompletedPoint]
    tag_breakdown: List[TagCount]


class StreakSummary(CamelModel):
    completed_tasks: int
    total_tasks: int
    active_days: int
    max_streak: int


class StreakDay(BaseModel):
    date: CalendarDay
    active: bool
    count: int


class StreakAnalytics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: StreakSummary
    streak_data: List[StreakDay] = Field(..., alias="streakData")


# ===== ЦЕЛИ =====

class TimeFrame(BaseModel):
    month: Optional[int] = Field(None, ge=1, le=12)
    quarter: Optional[int] = Field(None, ge=1, le=4)
    year: int = Field(..., ge=1970, le=9999)


def check_timeframe(goal_type: GoalType, timeframe: TimeFrame) -> None:
    """month обязателен для monthly, quarter для quarterly"""
    if goal_type == GoalType.MONTHLY and timeframe.month is None:
        raise ValueError('timeframe.month обязателен для monthly')
    if goal_type == GoalType.QUARTERLY and timeframe.quarter is None:
        raise ValueError('timeframe.quarter обязателен для quarterly')


class GoalCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    type: GoalType
    timeframe: TimeFrame

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Название цели не может быть пустым')
        return v.strip()

    @model_validator(mode='after')
    def validate_timeframe(self):
        check_timeframe(self.type, self.timeframe)
        return self


class GoalUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[GoalType] = None
    timeframe: Optional[TimeFrame] = None
    is_completed: Optional[bool] = None


class GoalOut(CamelModel):
    id: str
    user_id: str
    title: str
    type: str
    timeframe: TimeFrame
    is_completed: bool
    created_at: datetime
    updated_at: datetime


# ===== ОБРАТНАЯ СВЯЗЬ =====

class FeedbackCreate(BaseModel):
    type: FeedbackType
    message: str = Field(..., min_length=1, max_length=2000)


class FeedbackOut(CamelModel):
    id: str
    user_id: str
    type: str
    message: str
    status: str
    created_at: datetime


# ===== СЛУЖЕБНЫЕ =====

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    data: Dict[str, Any] = {}
