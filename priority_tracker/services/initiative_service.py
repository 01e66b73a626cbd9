"""Initiative service with business logic for the strategic initiative registry."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from priority_tracker.exceptions import InvariantViolationError, NotFoundError, ValidationError
from priority_tracker.models.initiative import DEFAULT_INITIATIVE_COLOR, StrategicInitiative
from priority_tracker.models.priority import Priority
from priority_tracker.services.authorization import Action, Principal, Resource, authorize

logger = logging.getLogger(__name__)


class InitiativeService:
    """Service for strategic initiative operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_initiative(self, initiative_id: int) -> StrategicInitiative | None:
        """Get an initiative by ID."""
        return (
            self.db.query(StrategicInitiative)
            .filter(StrategicInitiative.id == initiative_id)
            .first()
        )

    def get_initiatives(
        self, principal: Principal | None, *, active_only: bool = False
    ) -> list[StrategicInitiative]:
        """List initiatives in display order."""
        authorize(principal, Resource.INITIATIVE, Action.READ)

        query = self.db.query(StrategicInitiative)
        if active_only:
            query = query.filter(StrategicInitiative.is_active.is_(True))
        return query.order_by(StrategicInitiative.order.asc(), StrategicInitiative.id.asc()).all()

    def get_initiative_for(self, principal: Principal | None, initiative_id: int) -> StrategicInitiative:
        """Get an initiative or raise NotFoundError."""
        authorize(principal, Resource.INITIATIVE, Action.READ)
        initiative = self.get_initiative(initiative_id)
        if initiative is None:
            raise NotFoundError("Initiative not found")
        return initiative

    def next_order(self) -> int:
        """Order value for a new initiative: one past the current maximum."""
        current = self.db.query(func.max(StrategicInitiative.order)).scalar()
        return (current or 0) + 1

    def create_initiative(
        self,
        principal: Principal | None,
        *,
        name: str,
        description: str | None = None,
        color: str | None = None,
        is_active: bool | None = None,
    ) -> StrategicInitiative:
        """Create an initiative at the end of the display order."""
        authorize(principal, Resource.INITIATIVE, Action.CREATE)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")

        initiative = StrategicInitiative(
            name=name,
            description=description or "",
            color=color or DEFAULT_INITIATIVE_COLOR,
            order=self.next_order(),
            is_active=True if is_active is None else is_active,
        )
        self.db.add(initiative)
        self.db.commit()
        self.db.refresh(initiative)

        logger.info(f"Created initiative {initiative.id} '{initiative.name}' at position {initiative.order}")
        return initiative

    def update_initiative(
        self,
        principal: Principal | None,
        initiative_id: int,
        *,
        name: str | None = None,
        description: str | None = None,
        color: str | None = None,
        order: int | None = None,
        is_active: bool | None = None,
        clear_description: bool = False,
    ) -> StrategicInitiative:
        """Update an initiative. ``clear_description`` empties the description."""
        authorize(principal, Resource.INITIATIVE, Action.UPDATE)
        initiative = self.get_initiative(initiative_id)
        if initiative is None:
            raise NotFoundError("Initiative not found")

        if name is not None:
            if not name.strip():
                raise ValidationError("Name is required")
            initiative.name = name.strip()
        if description is not None:
            initiative.description = description
        elif clear_description:
            initiative.description = ""
        if color is not None:
            initiative.color = color
        if order is not None:
            initiative.order = order
        if is_active is not None:
            initiative.is_active = is_active

        self.db.commit()
        self.db.refresh(initiative)

        return initiative

    def delete_initiative(self, principal: Principal | None, initiative_id: int) -> None:
        """Delete an initiative.

        Initiatives still referenced by priorities cannot be deleted; deactivate
        them instead so that historical priorities keep their tag.
        """
        authorize(principal, Resource.INITIATIVE, Action.DELETE)
        initiative = self.get_initiative(initiative_id)
        if initiative is None:
            raise NotFoundError("Initiative not found")

        in_use = (
            self.db.query(func.count(Priority.id))
            .filter(Priority.initiative_id == initiative_id)
            .scalar()
        )
        if in_use:
            raise InvariantViolationError(
                f"Initiative is used by {in_use} priorities; deactivate it instead"
            )

        self.db.delete(initiative)
        self.db.commit()
        logger.info(f"Deleted initiative {initiative_id}")

    def reorder_initiatives(
        self, principal: Principal | None, initiative_ids: list[int]
    ) -> list[StrategicInitiative]:
        """Renumber initiatives to their 1-based position in ``initiative_ids``.

        Initiatives missing from ``initiative_ids`` follow the listed ones in
        their current relative order, so the result is always 1..n with no
        repeats. All order values are written in one transaction; an unknown
        or repeated id leaves every initiative untouched.

        Returns:
            All initiatives in their new order.
        """
        authorize(principal, Resource.INITIATIVE, Action.UPDATE)

        if len(set(initiative_ids)) != len(initiative_ids):
            raise ValidationError("Initiative ids must not repeat")

        current = self.get_initiatives(principal)
        by_id = {i.id: i for i in current}
        missing = [i for i in initiative_ids if i not in by_id]
        if missing:
            raise NotFoundError(f"Initiative not found: {missing[0]}")

        listed = set(initiative_ids)
        ordered = [by_id[i] for i in initiative_ids] + [i for i in current if i.id not in listed]
        try:
            for position, initiative in enumerate(ordered, start=1):
                initiative.order = position
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Reordered {len(ordered)} initiatives")
        return ordered

    def move_initiative(
        self, principal: Principal | None, initiative_id: int, direction: str
    ) -> list[StrategicInitiative]:
        """Swap an initiative with its neighbour and renumber the whole list.

        Args:
            direction: "up" (towards order 1) or "down".

        Returns:
            All initiatives in their new order. Moving past either end is a no-op.
        """
        authorize(principal, Resource.INITIATIVE, Action.UPDATE)
        if direction not in ("up", "down"):
            raise ValidationError("Direction must be 'up' or 'down'")

        ordered = self.get_initiatives(principal)
        index = next((i for i, item in enumerate(ordered) if item.id == initiative_id), None)
        if index is None:
            raise NotFoundError("Initiative not found")

        target = index - 1 if direction == "up" else index + 1
        if target < 0 or target >= len(ordered):
            return ordered

        ordered[index], ordered[target] = ordered[target], ordered[index]
        return self.reorder_initiatives(principal, [i.id for i in ordered])
