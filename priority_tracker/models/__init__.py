"""Data models."""

from priority_tracker.models.database import Base, get_db, get_db_session, init_db
from priority_tracker.models.initiative import DEFAULT_INITIATIVE_COLOR, StrategicInitiative
from priority_tracker.models.priority import TITLE_MAX_LENGTH, Priority, PriorityStatus
from priority_tracker.models.user import User, UserRole

__all__ = [
    "Base",
    "DEFAULT_INITIATIVE_COLOR",
    "Priority",
    "PriorityStatus",
    "StrategicInitiative",
    "TITLE_MAX_LENGTH",
    "User",
    "UserRole",
    "get_db",
    "get_db_session",
    "init_db",
]
