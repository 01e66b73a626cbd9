"""Pydantic schemas for API request/response models.

JSON bodies use camelCase keys; requests also accept snake_case.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from priority_tracker.models.priority import TITLE_MAX_LENGTH, PriorityStatus
from priority_tracker.models.user import UserRole


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Generic Schemas
class MessageResponse(BaseModel):
    """Confirmation for operations that return no resource."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: str


# Auth Schemas
class LoginRequest(CamelModel):
    """Credentials for ``POST /api/auth/login``."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


# User Schemas
class UserResponse(CamelModel):
    """Public representation of a user; never includes the password hash."""

    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserCreate(CamelModel):
    """Schema for creating a user."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    # Length is checked by the service so the minimum follows configuration
    password: str | None = Field(default=None, max_length=72)
    role: UserRole = UserRole.USER
    is_active: bool = True


class UserUpdate(CamelModel):
    """Schema for updating a user. Omitted fields stay unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    password: str | None = Field(default=None, max_length=72)
    role: UserRole | None = None
    is_active: bool | None = None


class PasswordReset(CamelModel):
    """Schema for ``POST /api/users/{id}/reset-password``."""

    password: str = Field(..., max_length=72)


class TokenResponse(CamelModel):
    """Returned after a successful login."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# Initiative Schemas
class InitiativeCreate(CamelModel):
    """Schema for creating an initiative."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    color: str | None = Field(default=None, max_length=20)
    is_active: bool | None = None


class InitiativeUpdate(CamelModel):
    """Schema for updating an initiative."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    color: str | None = Field(default=None, max_length=20)
    order: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class InitiativeResponse(CamelModel):
    """Schema for initiative response."""

    id: int
    name: str
    description: str | None
    color: str
    order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ReorderRequest(CamelModel):
    """New display sequence of initiative ids."""

    ids: list[int] = Field(..., min_length=1)


class MoveRequest(CamelModel):
    """Move one initiative a step up or down."""

    direction: Literal["up", "down"]


# Priority Schemas
class PriorityCreate(CamelModel):
    """Schema for creating a priority."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    initiative_id: int
    user_id: int | None = None
    week_start: datetime | None = None
    week_end: datetime | None = None
    completion_percentage: int = Field(default=0, ge=0, le=100)
    status: PriorityStatus = PriorityStatus.EN_TIEMPO


class PriorityUpdate(CamelModel):
    """Schema for a partial priority update."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    initiative_id: int | None = None
    user_id: int | None = None
    week_start: datetime | None = None
    week_end: datetime | None = None
    completion_percentage: int | None = Field(default=None, ge=0, le=100)
    status: PriorityStatus | None = None


class PriorityResponse(CamelModel):
    """Schema for priority response."""

    id: int
    title: str
    description: str | None
    user_id: int
    initiative_id: int
    week_start: datetime
    week_end: datetime
    completion_percentage: int
    status: PriorityStatus
    was_edited: bool
    last_edited_at: datetime | None
    is_carried_over: bool
    created_at: datetime
    updated_at: datetime


# Week Schemas
class WeekResponse(CamelModel):
    """A Monday-Friday tracking week."""

    week_start: datetime
    week_end: datetime
    label: str


# Analytics Schemas
class UserStatsResponse(CamelModel):
    """Per-user statistics."""

    user: UserResponse
    total: int
    completed: int
    completion_rate: float
    avg_completion: float


class InitiativeStatsResponse(CamelModel):
    """Per-initiative statistics."""

    initiative: InitiativeResponse
    count: int
    percentage: float


class AnalyticsResponse(CamelModel):
    """Response for ``GET /api/analytics``."""

    users: list[UserStatsResponse]
    initiatives: list[InitiativeStatsResponse]
    total_priorities: int


class WeekSummary(CamelModel):
    """Totals for a set of priorities."""

    total: int
    completed: int
    avg_completion: float


class HistoryWeekResponse(WeekSummary):
    """One week in the history view."""

    week_start: date
    label: str
    priorities: list[PriorityResponse]


class UserWeekResponse(CamelModel):
    """One user's card on the dashboard."""

    user: UserResponse
    priorities: list[PriorityResponse]
    summary: WeekSummary
    exceeds_limit: bool


class DashboardResponse(CamelModel):
    """Response for ``GET /api/analytics/dashboard``."""

    week: WeekResponse
    summary: WeekSummary
    users: list[UserWeekResponse]
