"""Conversion from ORM models and analytics dicts to response schemas."""

from priority_tracker.api.schemas import (
    DashboardResponse,
    HistoryWeekResponse,
    InitiativeResponse,
    InitiativeStatsResponse,
    PriorityResponse,
    UserResponse,
    UserStatsResponse,
    UserWeekResponse,
    WeekResponse,
    WeekSummary,
)
from priority_tracker.models import Priority, StrategicInitiative, User
from priority_tracker.utils.weeks import WeekRange


def user_to_response(user: User) -> UserResponse:
    """Convert User model to response schema (without the password hash)."""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def initiative_to_response(initiative: StrategicInitiative) -> InitiativeResponse:
    """Convert StrategicInitiative model to response schema."""
    return InitiativeResponse(
        id=initiative.id,
        name=initiative.name,
        description=initiative.description,
        color=initiative.color,
        order=initiative.order,
        is_active=initiative.is_active,
        created_at=initiative.created_at,
        updated_at=initiative.updated_at,
    )


def priority_to_response(priority: Priority) -> PriorityResponse:
    """Convert Priority model to response schema."""
    return PriorityResponse(
        id=priority.id,
        title=priority.title,
        description=priority.description,
        user_id=priority.user_id,
        initiative_id=priority.initiative_id,
        week_start=priority.week_start,
        week_end=priority.week_end,
        completion_percentage=priority.completion_percentage,
        status=priority.status,
        was_edited=priority.was_edited,
        last_edited_at=priority.last_edited_at,
        is_carried_over=priority.is_carried_over,
        created_at=priority.created_at,
        updated_at=priority.updated_at,
    )


def week_to_response(week: WeekRange) -> WeekResponse:
    return WeekResponse(week_start=week.monday, week_end=week.friday, label=week.label)


def user_stats_to_response(stat: dict) -> UserStatsResponse:
    return UserStatsResponse(
        user=user_to_response(stat["user"]),
        total=stat["total"],
        completed=stat["completed"],
        completion_rate=stat["completion_rate"],
        avg_completion=stat["avg_completion"],
    )


def initiative_stats_to_response(stat: dict) -> InitiativeStatsResponse:
    return InitiativeStatsResponse(
        initiative=initiative_to_response(stat["initiative"]),
        count=stat["count"],
        percentage=stat["percentage"],
    )


def history_week_to_response(week: dict) -> HistoryWeekResponse:
    return HistoryWeekResponse(
        week_start=week["week_start"],
        label=week["label"],
        priorities=[priority_to_response(p) for p in week["priorities"]],
        total=week["total"],
        completed=week["completed"],
        avg_completion=week["avg_completion"],
    )


def dashboard_to_response(dashboard: dict) -> DashboardResponse:
    return DashboardResponse(
        week=week_to_response(dashboard["week"]),
        summary=WeekSummary(**dashboard["summary"]),
        users=[
            UserWeekResponse(
                user=user_to_response(item["user"]),
                priorities=[priority_to_response(p) for p in item["priorities"]],
                summary=WeekSummary(**item["summary"]),
                exceeds_limit=item["exceeds_limit"],
            )
            for item in dashboard["users"]
        ],
    )
