"""Priority API routes."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from priority_tracker.api.converters import priority_to_response
from priority_tracker.api.dependencies import CurrentPrincipal, get_priority_service
from priority_tracker.api.schemas import (
    MessageResponse,
    PriorityCreate,
    PriorityResponse,
    PriorityUpdate,
)
from priority_tracker.services.priority_service import PriorityService

router = APIRouter(prefix="/priorities", tags=["priorities"])


@router.get("", response_model=list[PriorityResponse])
def list_priorities(
    principal: CurrentPrincipal,
    service: Annotated[PriorityService, Depends(get_priority_service)],
    user_id: int | None = Query(default=None, alias="userId", description="Filter by owner"),
    week_start: datetime | None = Query(default=None, alias="weekStart", description="Any instant in the first week"),
    week_end: datetime | None = Query(default=None, alias="weekEnd", description="Any instant in the last week"),
    initiative_id: int | None = Query(default=None, alias="initiativeId", description="Filter by initiative"),
) -> list[PriorityResponse]:
    """List priorities, most recent week first.

    Regular users only get their own priorities.
    """
    priorities = service.get_priorities(
        principal,
        user_id=user_id,
        week_start=week_start,
        week_end=week_end,
        initiative_id=initiative_id,
    )
    return [priority_to_response(p) for p in priorities]


@router.get("/{priority_id}", response_model=PriorityResponse)
def get_priority(
    priority_id: int,
    principal: CurrentPrincipal,
    service: Annotated[PriorityService, Depends(get_priority_service)],
) -> PriorityResponse:
    """Get a specific priority by ID."""
    return priority_to_response(service.get_priority_for(principal, priority_id))


@router.post("", response_model=PriorityResponse, status_code=201)
def create_priority(
    priority_data: PriorityCreate,
    principal: CurrentPrincipal,
    service: Annotated[PriorityService, Depends(get_priority_service)],
) -> PriorityResponse:
    """Create a priority, by default for the caller in the current week."""
    priority = service.create_priority(
        principal,
        title=priority_data.title,
        description=priority_data.description,
        initiative_id=priority_data.initiative_id,
        user_id=priority_data.user_id,
        week_start=priority_data.week_start,
        week_end=priority_data.week_end,
        completion_percentage=priority_data.completion_percentage,
        status=priority_data.status,
    )
    return priority_to_response(priority)


@router.put("/{priority_id}", response_model=PriorityResponse)
def update_priority(
    priority_id: int,
    priority_data: PriorityUpdate,
    principal: CurrentPrincipal,
    service: Annotated[PriorityService, Depends(get_priority_service)],
) -> PriorityResponse:
    """Update a priority. Only the fields present in the body change."""
    changes = priority_data.model_dump(exclude_unset=True)
    if "description" in changes and changes["description"] is None:
        # An explicit null clears the description
        del changes["description"]
        changes["clear_description"] = True
    priority = service.update_priority(principal, priority_id, **changes)
    return priority_to_response(priority)


@router.delete("/{priority_id}", response_model=MessageResponse)
def delete_priority(
    priority_id: int,
    principal: CurrentPrincipal,
    service: Annotated[PriorityService, Depends(get_priority_service)],
) -> MessageResponse:
    """Delete a priority."""
    service.delete_priority(principal, priority_id)
    return MessageResponse(message="Priority deleted")
