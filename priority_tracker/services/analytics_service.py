"""Read-side statistics for the dashboard, analytics and history views.

The module-level functions are pure: they take already-fetched users,
initiatives and priorities and never touch the database. All percentages
are rounded to one decimal and an empty denominator yields 0.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from priority_tracker.models.initiative import StrategicInitiative
from priority_tracker.models.priority import Priority
from priority_tracker.models.user import User, UserRole
from priority_tracker.services.authorization import Principal
from priority_tracker.services.initiative_service import InitiativeService
from priority_tracker.services.priority_service import PriorityService
from priority_tracker.services.user_service import UserService
from priority_tracker.utils.config import Config, get_config
from priority_tracker.utils.weeks import get_week_dates, get_week_label


def _one_decimal(value: Decimal) -> float:
    # Halves round away from zero: 12.25 -> 12.3
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def percent(part: int, whole: int) -> float:
    """``part / whole * 100`` rounded to one decimal; 0 when ``whole`` is 0."""
    if whole == 0:
        return 0.0
    return _one_decimal(Decimal(part) * 100 / Decimal(whole))


def mean_completion(priorities: Sequence[Priority]) -> float:
    """Average completion percentage, 0 for no priorities."""
    if not priorities:
        return 0.0
    total = sum(p.completion_percentage for p in priorities)
    return _one_decimal(Decimal(total) / Decimal(len(priorities)))


def week_summary(priorities: Sequence[Priority]) -> dict:
    """Totals for one set of priorities (typically one week)."""
    completed = sum(1 for p in priorities if p.is_completed)
    return {
        "total": len(priorities),
        "completed": completed,
        "avg_completion": mean_completion(priorities),
    }


def user_stats(users: Iterable[User], priorities: Sequence[Priority]) -> list[dict]:
    """Per-user totals, completion rate and mean completion."""
    by_user: dict[int, list[Priority]] = defaultdict(list)
    for priority in priorities:
        by_user[priority.user_id].append(priority)

    result = []
    for user in users:
        own = by_user.get(user.id, [])
        summary = week_summary(own)
        result.append({
            "user": user,
            "total": summary["total"],
            "completed": summary["completed"],
            "completion_rate": percent(summary["completed"], summary["total"]),
            "avg_completion": summary["avg_completion"],
        })
    return result


def initiative_stats(
    initiatives: Iterable[StrategicInitiative], priorities: Sequence[Priority]
) -> list[dict]:
    """Priority count and share per initiative, largest first."""
    counts: dict[int, int] = defaultdict(int)
    for priority in priorities:
        counts[priority.initiative_id] += 1

    total = len(priorities)
    stats = [
        {
            "initiative": initiative,
            "count": counts.get(initiative.id, 0),
            "percentage": percent(counts.get(initiative.id, 0), total),
        }
        for initiative in initiatives
    ]
    # Stable: ties keep display order
    stats.sort(key=lambda s: s["count"], reverse=True)
    return stats


def weekly_history(priorities: Iterable[Priority]) -> list[dict]:
    """Group priorities by the date of their week start, newest week first."""
    groups: dict = defaultdict(list)
    for priority in priorities:
        groups[priority.week_start.date()].append(priority)

    history = []
    for week_date in sorted(groups, reverse=True):
        items = groups[week_date]
        history.append({
            "week_start": week_date,
            "label": get_week_label(week_date),
            "priorities": items,
            **week_summary(items),
        })
    return history


def user_week_overview(
    users: Iterable[User], priorities: Sequence[Priority], limit: int
) -> list[dict]:
    """Each user's priorities for a week, flagging users above ``limit``."""
    by_user: dict[int, list[Priority]] = defaultdict(list)
    for priority in priorities:
        by_user[priority.user_id].append(priority)

    overview = []
    for user in users:
        own = by_user.get(user.id, [])
        overview.append({
            "user": user,
            "priorities": own,
            "summary": week_summary(own),
            "exceeds_limit": len(own) > limit,
        })
    return overview


class AnalyticsService:
    """Fetches the collections a view needs and runs the pure computations."""

    def __init__(self, db: Session, config: Config | None = None):
        self.db = db
        self.config = config or get_config()
        self.users = UserService(db, self.config)
        self.initiatives = InitiativeService(db)
        self.priorities = PriorityService(db, self.config)

    def _tracked_users(self, principal: Principal, *, active_only: bool = False) -> list[User]:
        # Admin accounts manage the dashboard and are not listed as contributors
        users = self.users.list_users(principal, active_only=active_only)
        if not principal.is_admin:
            return users
        return [u for u in users if u.role == UserRole.USER]

    def get_analytics(self, principal: Principal) -> dict:
        """Per-user and per-initiative statistics over all visible priorities."""
        priorities = self.priorities.get_priorities(principal)
        return {
            "users": user_stats(self._tracked_users(principal), priorities),
            "initiatives": initiative_stats(self.initiatives.get_initiatives(principal), priorities),
            "total_priorities": len(priorities),
        }

    def get_history(
        self,
        principal: Principal,
        *,
        user_id: int | None = None,
        initiative_id: int | None = None,
    ) -> list[dict]:
        """Week-by-week history, optionally for one user and/or initiative."""
        priorities = self.priorities.get_priorities(
            principal, user_id=user_id, initiative_id=initiative_id
        )
        return weekly_history(priorities)

    def get_dashboard(self, principal: Principal, day: datetime | None = None) -> dict:
        """Summary of the week containing ``day`` (default: this week)."""
        week = get_week_dates(day, self.config.dashboard.zone)
        priorities = self.priorities.get_week_priorities(principal, week)
        users = self._tracked_users(principal, active_only=True)
        return {
            "week": week,
            "summary": week_summary(priorities),
            "users": user_week_overview(
                users, priorities, self.config.dashboard.max_weekly_priorities
            ),
        }
