"""Week calendar API routes."""

from datetime import datetime

from fastapi import APIRouter, Query

from priority_tracker.api.converters import week_to_response
from priority_tracker.api.dependencies import CurrentPrincipal
from priority_tracker.api.schemas import WeekResponse
from priority_tracker.utils.config import get_config
from priority_tracker.utils.weeks import get_week_dates

router = APIRouter(prefix="/weeks", tags=["weeks"])


@router.get("/current", response_model=WeekResponse)
def get_current_week(
    principal: CurrentPrincipal,
    day: datetime | None = Query(default=None, alias="date"),
) -> WeekResponse:
    """The Monday-Friday week containing ``date`` (today by default)."""
    return week_to_response(get_week_dates(day, get_config().dashboard.zone))
