from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.analytics import AnalyticsEngine
from ..core.models import User
from ..dependencies import get_analytics_engine, get_current_user
from shared.models import DashboardAnalytics, StreakAnalytics

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardAnalytics)
async def get_dashboard_analytics(
    days: Optional[str] = Query(None, description="Размер окна в днях, неотрицательное целое"),
    current_user: User = Depends(get_current_user),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """
    Разбивки по статусу, приоритету и тегам, тренды выполнения за окно
    """
    return await engine.dashboard(current_user.id, days)


@router.get("/streak", response_model=StreakAnalytics)
async def get_streak_analytics(
    days: Optional[str] = Query(None, description="Размер окна в днях, неотрицательное целое"),
    current_user: User = Depends(get_current_user),
    engine: AnalyticsEngine = Depends(get_analytics_engine)
):
    """
    Самая длинная серия дней с выполненными задачами и календарь активности
    """
    return await engine.streak(current_user.id, days)
