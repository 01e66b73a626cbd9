"""Priority service: weekly priority records scoped by owner and week."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from priority_tracker.exceptions import NotFoundError, UnauthenticatedError, ValidationError
from priority_tracker.models.initiative import StrategicInitiative
from priority_tracker.models.priority import TITLE_MAX_LENGTH, Priority, PriorityStatus
from priority_tracker.models.user import User
from priority_tracker.services.authorization import Action, Principal, Resource, authorize
from priority_tracker.utils.config import Config, get_config
from priority_tracker.utils.weeks import WeekRange, get_week_dates, is_well_formed_week

logger = logging.getLogger(__name__)


class PriorityService:
    """Service for priority record operations."""

    def __init__(self, db: Session, config: Config | None = None):
        self.db = db
        self.config = config or get_config()
        self.tz = self.config.dashboard.zone

    def get_priority(self, priority_id: int) -> Priority | None:
        """Get a priority by ID."""
        return self.db.query(Priority).filter(Priority.id == priority_id).first()

    def get_priority_for(self, principal: Principal | None, priority_id: int) -> Priority:
        """Get a priority the principal owns (or any, for admins)."""
        if principal is None:
            raise UnauthenticatedError("Not authenticated")
        priority = self.get_priority(priority_id)
        if priority is None:
            raise NotFoundError("Priority not found")
        authorize(principal, Resource.PRIORITY, Action.READ, owner_id=priority.user_id)
        return priority

    def get_priorities(
        self,
        principal: Principal | None,
        *,
        user_id: int | None = None,
        week_start: datetime | None = None,
        week_end: datetime | None = None,
        initiative_id: int | None = None,
    ) -> list[Priority]:
        """List priorities, most recent week first.

        Regular users are always limited to their own priorities; asking for
        another user's is forbidden. ``week_start``/``week_end`` select the
        weeks containing them, inclusively, so any instant inside a week
        (in any offset) selects that week.
        """
        if principal is None:
            raise UnauthenticatedError("Not authenticated")

        if not principal.is_admin:
            authorize(
                principal,
                Resource.PRIORITY,
                Action.READ,
                owner_id=principal.id if user_id is None else user_id,
            )
            user_id = principal.id

        query = self.db.query(Priority)
        if user_id is not None:
            query = query.filter(Priority.user_id == user_id)
        if initiative_id is not None:
            query = query.filter(Priority.initiative_id == initiative_id)
        if week_start is not None:
            query = query.filter(Priority.week_start >= get_week_dates(week_start, self.tz).monday)
        if week_end is not None:
            query = query.filter(Priority.week_start <= get_week_dates(week_end, self.tz).monday)

        return query.order_by(
            Priority.week_start.desc(),
            Priority.created_at.desc(),
            Priority.id.desc(),
        ).all()

    def get_week_priorities(
        self, principal: Principal | None, week: WeekRange, *, user_id: int | None = None
    ) -> list[Priority]:
        """Priorities whose week is ``week``."""
        return self.get_priorities(
            principal, user_id=user_id, week_start=week.monday, week_end=week.friday
        )

    def create_priority(
        self,
        principal: Principal | None,
        *,
        title: str,
        initiative_id: int,
        user_id: int | None = None,
        description: str | None = None,
        week_start: datetime | None = None,
        week_end: datetime | None = None,
        completion_percentage: int = 0,
        status: PriorityStatus = PriorityStatus.EN_TIEMPO,
    ) -> Priority:
        """Create a priority for ``user_id`` (defaults to the principal).

        The week is normalized to the Monday-Friday week containing
        ``week_start`` (the current week when omitted).
        """
        if principal is None:
            raise UnauthenticatedError("Not authenticated")
        owner_id = principal.id if user_id is None else user_id
        authorize(principal, Resource.PRIORITY, Action.CREATE, owner_id=owner_id)

        title = self._check_title(title)
        self._check_percentage(completion_percentage)
        self._check_initiative(initiative_id)
        self._check_owner(owner_id)
        week = self._resolve_week(week_start, week_end)

        priority = Priority(
            title=title,
            description=description,
            user_id=owner_id,
            initiative_id=initiative_id,
            week_start=week.monday,
            week_end=week.friday,
            completion_percentage=completion_percentage,
            status=status,
            was_edited=False,
            is_carried_over=False,
        )
        self.db.add(priority)
        self.db.commit()
        self.db.refresh(priority)

        logger.info(f"Created priority {priority.id} for user {owner_id} in week {week.monday.date()}")
        return priority

    def update_priority(
        self,
        principal: Principal | None,
        priority_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        initiative_id: int | None = None,
        user_id: int | None = None,
        week_start: datetime | None = None,
        week_end: datetime | None = None,
        completion_percentage: int | None = None,
        status: PriorityStatus | None = None,
        clear_description: bool = False,
    ) -> Priority:
        """Merge the given fields into a priority.

        Every update marks the priority as edited and stamps
        ``last_edited_at``, even when no value changes. Concurrent updates
        are last-write-wins.
        """
        priority = self.get_priority_for(principal, priority_id)
        authorize(principal, Resource.PRIORITY, Action.UPDATE, owner_id=priority.user_id)

        if user_id is not None and user_id != priority.user_id:
            # Reassigning is creating on behalf of the new owner
            authorize(principal, Resource.PRIORITY, Action.CREATE, owner_id=user_id)
            self._check_owner(user_id)
            priority.user_id = user_id
        if title is not None:
            priority.title = self._check_title(title)
        if description is not None:
            priority.description = description
        elif clear_description:
            priority.description = None
        if initiative_id is not None:
            self._check_initiative(initiative_id)
            priority.initiative_id = initiative_id
        if completion_percentage is not None:
            self._check_percentage(completion_percentage)
            priority.completion_percentage = completion_percentage
        if status is not None:
            priority.status = status
        if week_start is not None or week_end is not None:
            week = self._resolve_week(week_start or priority.week_start, week_end)
            priority.week_start = week.monday
            priority.week_end = week.friday

        priority.was_edited = True
        priority.last_edited_at = datetime.now()

        self.db.commit()
        self.db.refresh(priority)
        return priority

    def delete_priority(self, principal: Principal | None, priority_id: int) -> None:
        """Hard-delete a priority."""
        priority = self.get_priority_for(principal, priority_id)
        authorize(principal, Resource.PRIORITY, Action.DELETE, owner_id=priority.user_id)

        self.db.delete(priority)
        self.db.commit()
        logger.info(f"Deleted priority {priority_id}")

    # --- Validation helpers ---

    @staticmethod
    def _check_title(title: str | None) -> str:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
        return title

    @staticmethod
    def _check_percentage(value: int) -> None:
        if not 0 <= value <= 100:
            raise ValidationError("Completion percentage must be between 0 and 100")

    def _check_initiative(self, initiative_id: int) -> None:
        exists = (
            self.db.query(StrategicInitiative.id)
            .filter(StrategicInitiative.id == initiative_id)
            .first()
        )
        if exists is None:
            raise ValidationError(f"Initiative {initiative_id} does not exist")

    def _check_owner(self, user_id: int) -> None:
        if self.db.query(User.id).filter(User.id == user_id).first() is None:
            raise ValidationError(f"User {user_id} does not exist")

    def _resolve_week(self, week_start: datetime | None, week_end: datetime | None) -> WeekRange:
        week = get_week_dates(week_start, self.tz)
        if week_end is not None and get_week_dates(week_end, self.tz).monday != week.monday:
            raise ValidationError("weekEnd must fall in the same week as weekStart")
        if not is_well_formed_week(week.monday, week.friday):
            raise ValidationError("Week must run from Monday 00:00 to Friday 23:59:59.999")
        return week
