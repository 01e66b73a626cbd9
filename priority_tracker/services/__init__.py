"""Business logic services."""

from priority_tracker.services.analytics_service import AnalyticsService
from priority_tracker.services.initiative_service import InitiativeService
from priority_tracker.services.priority_service import PriorityService
from priority_tracker.services.user_service import UserService

__all__ = [
    "AnalyticsService",
    "InitiativeService",
    "PriorityService",
    "UserService",
]
