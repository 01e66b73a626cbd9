"""User API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from priority_tracker.api.converters import user_to_response
from priority_tracker.api.dependencies import AdminPrincipal, CurrentPrincipal, get_user_service
from priority_tracker.api.schemas import (
    MessageResponse,
    PasswordReset,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from priority_tracker.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def list_users(
    principal: CurrentPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
    active_only: bool = Query(default=False, alias="activeOnly", description="Only active users"),
) -> list[UserResponse]:
    """List users by name. Regular users only see themselves."""
    users = service.list_users(principal, active_only=active_only)
    return [user_to_response(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    principal: CurrentPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Get a specific user by ID."""
    return user_to_response(service.get_user_for(principal, user_id))


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    user_data: UserCreate,
    principal: AdminPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Create a new user."""
    user = service.create_user(
        principal,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
        is_active=user_data.is_active,
    )
    return user_to_response(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    principal: CurrentPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Update a user. Regular users may edit their own name, email and password."""
    user = service.update_user(
        principal,
        user_id,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
        is_active=user_data.is_active,
    )
    return user_to_response(user)


@router.post("/{user_id}/reset-password", response_model=MessageResponse)
def reset_password(
    user_id: int,
    payload: PasswordReset,
    principal: CurrentPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> MessageResponse:
    """Set a new password for a user."""
    service.reset_password(principal, user_id, payload.password)
    return MessageResponse(message="Password updated")


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    principal: AdminPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> MessageResponse:
    """Delete a user and their priorities.

    The last active administrator cannot be deleted.
    """
    service.delete_user(principal, user_id)
    return MessageResponse(message="User deleted")
