"""Initiative API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from priority_tracker.api.converters import initiative_to_response
from priority_tracker.api.dependencies import AdminPrincipal, CurrentPrincipal, get_initiative_service
from priority_tracker.api.schemas import (
    InitiativeCreate,
    InitiativeResponse,
    InitiativeUpdate,
    MessageResponse,
    MoveRequest,
    ReorderRequest,
)
from priority_tracker.services.initiative_service import InitiativeService

router = APIRouter(prefix="/initiatives", tags=["initiatives"])


@router.get("", response_model=list[InitiativeResponse])
def list_initiatives(
    principal: CurrentPrincipal,
    service: Annotated[InitiativeService, Depends(get_initiative_service)],
    active_only: bool = Query(default=False, alias="activeOnly", description="Only active initiatives"),
) -> list[InitiativeResponse]:
    """List initiatives in display order."""
    initiatives = service.get_initiatives(principal, active_only=active_only)
    return [initiative_to_response(i) for i in initiatives]


@router.post("/reorder", response_model=list[InitiativeResponse])
def reorder_initiatives(
    payload: ReorderRequest,
    principal: AdminPrincipal,
    service: Annotated[InitiativeService, Depends(get_initiative_service)],
) -> list[InitiativeResponse]:
    """Renumber initiatives to follow the given id sequence."""
    initiatives = service.reorder_initiatives(principal, payload.ids)
    return [initiative_to_response(i) for i in initiatives]


@router.get("/{initiative_id}", response_model=InitiativeResponse)
def get_initiative(
    initiative_id: int,
    principal: CurrentPrincipal,
    service: Annotated[InitiativeService, Depends(get_initiative_service)],
) -> InitiativeResponse:
    """Get a specific initiative by ID."""
    return initiative_to_response(service.get_initiative_for(principal, initiative_id))


@router.post("", response_model=InitiativeResponse, status_code=201)
def create_initiative(
    initiative_data: InitiativeCreate,
    principal: AdminPrincipal,
    service: Annotated[InitiativeService, Depends(get_initiative_service)],
) -> InitiativeResponse:
    """Create a new initiative at the end of the display order."""
    initiative = service.create_initiative(
        principal,
        name=initiative_data.name,
        description=initiative_data.description,
        color=initiative_data.color,
        is_active=initiative_data.is_active,
    )
    return initiative_to_response(initiative)


@router.put("/{initiative_id}", response_model=InitiativeResponse)
def update_initiative(
    initiative_id: int,
    initiative_data: InitiativeUpdate,
    principal: AdminPrincipal,
    service: Annotated[InitiativeService, Depends(get_initiative_service)],
) -> InitiativeResponse:
    """Update an existing initiative."""
    initiative = service.update_initiative(
        principal,
        initiative_id,
        name=initiative_data.name,
        description=initiative_data.description,
        color=initiative_data.color,
        order=initiative_data.order,
        is_active=initiative_data.is_active,
        clear_description=(
            "description" in initiative_data.model_fields_set
            and initiative_data.description is None
        ),
    )
    return initiative_to_response(initiative)


@router.post("/{initiative_id}/move", response_model=list[InitiativeResponse])
def move_initiative(
    initiative_id: int,
    payload: MoveRequest,
    principal: AdminPrincipal,
    service: Annotated[InitiativeService, Depends(get_initiative_service)],
) -> list[InitiativeResponse]:
    """Move an initiative one position up or down."""
    initiatives = service.move_initiative(principal, initiative_id, payload.direction)
    return [initiative_to_response(i) for i in initiatives]


@router.delete("/{initiative_id}", response_model=MessageResponse)
def delete_initiative(
    initiative_id: int,
    principal: AdminPrincipal,
    service: Annotated[InitiativeService, Depends(get_initiative_service)],
) -> MessageResponse:
    """Delete an initiative.

    Note: initiatives still used by priorities are rejected; deactivate them instead.
    """
    service.delete_initiative(principal, initiative_id)
    return MessageResponse(message="Initiative deleted")
