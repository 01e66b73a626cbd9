"""Analytics, history and dashboard API routes."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from priority_tracker.api.converters import (
    dashboard_to_response,
    history_week_to_response,
    initiative_stats_to_response,
    user_stats_to_response,
)
from priority_tracker.api.dependencies import CurrentPrincipal, get_analytics_service
from priority_tracker.api.schemas import AnalyticsResponse, DashboardResponse, HistoryWeekResponse
from priority_tracker.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse)
def get_analytics(
    principal: CurrentPrincipal,
    service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> AnalyticsResponse:
    """Per-user and per-initiative statistics over all visible priorities."""
    stats = service.get_analytics(principal)
    return AnalyticsResponse(
        users=[user_stats_to_response(s) for s in stats["users"]],
        initiatives=[initiative_stats_to_response(s) for s in stats["initiatives"]],
        total_priorities=stats["total_priorities"],
    )


@router.get("/history", response_model=list[HistoryWeekResponse])
def get_history(
    principal: CurrentPrincipal,
    service: Annotated[AnalyticsService, Depends(get_analytics_service)],
    user_id: int | None = Query(default=None, alias="userId"),
    initiative_id: int | None = Query(default=None, alias="initiativeId"),
) -> list[HistoryWeekResponse]:
    """Priorities grouped by week, newest first."""
    history = service.get_history(principal, user_id=user_id, initiative_id=initiative_id)
    return [history_week_to_response(w) for w in history]


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    principal: CurrentPrincipal,
    service: Annotated[AnalyticsService, Depends(get_analytics_service)],
    day: datetime | None = Query(default=None, alias="date", description="Any day in the week to show"),
) -> DashboardResponse:
    """Summary of one week (the current week by default)."""
    return dashboard_to_response(service.get_dashboard(principal, day))
