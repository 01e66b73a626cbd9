"""Role and ownership rules for users, initiatives and priorities.

Rules are evaluated in this order:

1. No principal: unauthenticated.
2. Admins may do anything.
3. Regular users may act on their own priorities, read and edit their own
   account (name, email and password only), and read initiatives.
"""

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from priority_tracker.exceptions import ForbiddenError, UnauthenticatedError
from priority_tracker.models.user import User, UserRole


class Action(str, enum.Enum):
    """Operation requested on a resource."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Resource(str, enum.Enum):
    """Kind of record being accessed."""

    USER = "user"
    INITIATIVE = "initiative"
    PRIORITY = "priority"


# Account fields a regular user may change on their own record
SELF_EDITABLE_USER_FIELDS = frozenset({"name", "email", "password"})


@dataclass(frozen=True)
class Principal:
    """The authenticated actor."""

    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, role=user.role)


def authorize(
    principal: Principal | None,
    resource: Resource,
    action: Action,
    owner_id: int | None = None,
) -> Principal:
    """Check that ``principal`` may perform ``action`` on ``resource``.

    Args:
        principal: Acting user, or None when the request is anonymous.
        resource: Kind of record.
        action: Requested operation.
        owner_id: For priorities, the owning user id (the target owner on
            create). For users, the id of the account being accessed.

    Returns:
        The principal, so callers can chain on it.

    Raises:
        UnauthenticatedError: No principal.
        ForbiddenError: The role or ownership rules deny the operation.
    """
    if principal is None:
        raise UnauthenticatedError("Not authenticated")

    if principal.is_admin:
        return principal

    if resource == Resource.PRIORITY:
        if owner_id != principal.id:
            if action == Action.CREATE:
                raise ForbiddenError("You cannot create priorities for other users")
            raise ForbiddenError("You can only access your own priorities")
        return principal

    if resource == Resource.USER:
        if action in (Action.CREATE, Action.DELETE):
            raise ForbiddenError("Only administrators can manage users")
        if owner_id != principal.id:
            raise ForbiddenError("You can only access your own account")
        return principal

    if resource == Resource.INITIATIVE:
        if action != Action.READ:
            raise ForbiddenError("Only administrators can manage initiatives")
        return principal

    raise ForbiddenError("Operation not allowed")


def authorize_user_fields(principal: Principal, changed_fields: Iterable[str]) -> None:
    """Reject account changes outside name/email/password for non-admins."""
    if principal.is_admin:
        return
    restricted = sorted(set(changed_fields) - SELF_EDITABLE_USER_FIELDS)
    if restricted:
        raise ForbiddenError(f"Only administrators can change: {', '.join(restricted)}")


def require_admin(principal: Principal | None) -> Principal:
    """Allow only administrators."""
    if principal is None:
        raise UnauthenticatedError("Not authenticated")
    if not principal.is_admin:
        raise ForbiddenError("Administrator role required")
    return principal


# Used by the command-line tools, which run with direct database access
SYSTEM_PRINCIPAL = Principal(id=0, role=UserRole.ADMIN)
