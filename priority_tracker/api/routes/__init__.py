"""API route modules."""

from priority_tracker.api.routes.analytics import router as analytics_router
from priority_tracker.api.routes.auth import router as auth_router
from priority_tracker.api.routes.initiatives import router as initiatives_router
from priority_tracker.api.routes.priorities import router as priorities_router
from priority_tracker.api.routes.users import router as users_router
from priority_tracker.api.routes.weeks import router as weeks_router

__all__ = [
    "analytics_router",
    "auth_router",
    "initiatives_router",
    "priorities_router",
    "users_router",
    "weeks_router",
]
