"""FastAPI dependency injection helpers.

Every route resolves the caller through ``get_current_principal`` (or
``get_admin_principal``), so authentication is checked the same way
everywhere. The session token is read from the ``Authorization: Bearer``
header or, failing that, from the session cookie.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from priority_tracker.exceptions import UnauthenticatedError
from priority_tracker.models import User, get_db
from priority_tracker.services.analytics_service import AnalyticsService
from priority_tracker.services.authorization import Principal, require_admin
from priority_tracker.services.initiative_service import InitiativeService
from priority_tracker.services.priority_service import PriorityService
from priority_tracker.services.user_service import UserService
from priority_tracker.utils.config import get_config
from priority_tracker.utils.security import verify_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Extract the raw session token, if any."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(get_config().auth.cookie_name)


def get_optional_principal(
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[Session, Depends(get_db)],
) -> Principal | None:
    """Resolve the caller, or None for anonymous requests.

    A token that is present but invalid, or that names a missing or
    deactivated account, is rejected rather than treated as anonymous.
    """
    if not token:
        return None
    try:
        payload = verify_token(token)
        user_id = int(payload["sub"])
    except (ValueError, KeyError, TypeError):
        raise UnauthenticatedError("Invalid or expired session")

    user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    if user is None:
        raise UnauthenticatedError("Invalid or expired session")
    return Principal.from_user(user)


def get_current_principal(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    """Require an authenticated caller."""
    if principal is None:
        raise UnauthenticatedError("Not authenticated")
    return principal


def get_admin_principal(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Require an administrator."""
    return require_admin(principal)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
AdminPrincipal = Annotated[Principal, Depends(get_admin_principal)]


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency to get user service."""
    return UserService(db)


def get_initiative_service(db: Session = Depends(get_db)) -> InitiativeService:
    """Dependency to get initiative service."""
    return InitiativeService(db)


def get_priority_service(db: Session = Depends(get_db)) -> PriorityService:
    """Dependency to get priority service."""
    return PriorityService(db)


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency to get analytics service."""
    return AnalyticsService(db)
