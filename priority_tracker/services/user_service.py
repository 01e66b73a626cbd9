"""User registry: account management, credentials and the last-admin rule."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from priority_tracker.exceptions import (
    DuplicateEmailError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
    WeakCredentialError,
)
from priority_tracker.models.user import User, UserRole
from priority_tracker.services.authorization import (
    Action,
    Principal,
    Resource,
    authorize,
    authorize_user_fields,
)
from priority_tracker.utils.config import Config, get_config
from priority_tracker.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for user account operations."""

    def __init__(self, db: Session, config: Config | None = None):
        self.db = db
        self.config = config or get_config()

    # --- Reads ---

    def get_user(self, user_id: int) -> User | None:
        """Get a user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email (case-insensitive)."""
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def list_users(self, principal: Principal, *, active_only: bool = False) -> list[User]:
        """List users sorted by name.

        Regular users only see their own account.
        """
        authorize(principal, Resource.USER, Action.READ, owner_id=principal.id if principal else None)

        query = self.db.query(User)
        if not principal.is_admin:
            query = query.filter(User.id == principal.id)
        if active_only:
            query = query.filter(User.is_active.is_(True))
        return query.order_by(User.name.asc(), User.id.asc()).all()

    def get_user_for(self, principal: Principal, user_id: int) -> User:
        """Get a user the principal is allowed to see."""
        authorize(principal, Resource.USER, Action.READ, owner_id=user_id)
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    # --- Writes ---

    def create_user(
        self,
        principal: Principal,
        *,
        name: str,
        email: str,
        password: str | None,
        role: UserRole = UserRole.USER,
        is_active: bool = True,
    ) -> User:
        """Create a user account (admins only)."""
        authorize(principal, Resource.USER, Action.CREATE)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        email = normalize_email(email or "")
        if not email:
            raise ValidationError("Email is required")
        if self.get_user_by_email(email) is not None:
            raise DuplicateEmailError("Email is already registered")
        self._check_password(password)

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Created user {user.id} ({user.email}, {user.role.value})")
        return user

    def update_user(
        self,
        principal: Principal,
        user_id: int,
        *,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
    ) -> User:
        """Update a user account.

        Regular users may only change name, email and password on their own
        record. Demoting or deactivating the last active admin is rejected.
        """
        authorize(principal, Resource.USER, Action.UPDATE, owner_id=user_id)
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        changed = []
        if role is not None and role != user.role:
            changed.append("role")
        if is_active is not None and is_active != user.is_active:
            changed.append("is_active")
        authorize_user_fields(principal, changed)

        if email is not None:
            email = normalize_email(email)
            if not email:
                raise ValidationError("Email is required")
            if email != user.email:
                existing = self.get_user_by_email(email)
                if existing is not None and existing.id != user.id:
                    raise DuplicateEmailError("Email is already registered")
        if password is not None:
            self._check_password(password)
        if name is not None and not name.strip():
            raise ValidationError("Name is required")

        losing_admin = user.is_admin and user.is_active and (
            "role" in changed or (is_active is False)
        )
        if losing_admin:
            self._ensure_other_active_admin(user)

        if name is not None:
            user.name = name.strip()
        if email is not None:
            user.email = email
        if password is not None:
            user.password_hash = hash_password(password)
        if role is not None:
            user.role = role
        if is_active is not None:
            user.is_active = is_active

        self.db.commit()
        self.db.refresh(user)
        return user

    def reset_password(self, principal: Principal, user_id: int, new_password: str) -> User:
        """Set a new password (admins, or the account owner)."""
        authorize(principal, Resource.USER, Action.UPDATE, owner_id=user_id)
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        self._check_password(new_password)

        user.password_hash = hash_password(new_password)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Password reset for user {user.id}")
        return user

    def delete_user(self, principal: Principal, user_id: int) -> None:
        """Delete a user and the priorities they own.

        The last active administrator cannot be deleted.
        """
        authorize(principal, Resource.USER, Action.DELETE, owner_id=user_id)
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if user.role == UserRole.ADMIN:
            self._ensure_other_active_admin(user)

        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {user_id}")

    # --- Authentication ---

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the active user matching the credentials, or None."""
        user = (
            self.db.query(User)
            .filter(User.email == normalize_email(email), User.is_active.is_(True))
            .first()
        )
        if user is None:
            logger.debug(f"Login rejected: unknown or inactive account '{email}'")
            return None
        if not verify_password(password, user.password_hash):
            logger.debug(f"Login rejected: wrong password for '{email}'")
            return None
        return user

    def count_active_admins(self) -> int:
        """Number of active admin accounts."""
        return (
            self.db.query(func.count(User.id))
            .filter(User.role == UserRole.ADMIN, User.is_active.is_(True))
            .scalar()
        )

    # --- Helpers ---

    def _check_password(self, password: str | None) -> None:
        if not password:
            raise ValidationError("Password is required")
        minimum = self.config.auth.min_password_length
        if len(password) < minimum:
            raise WeakCredentialError(f"Password must be at least {minimum} characters")
        # bcrypt only accepts 72 bytes of input
        if len(password.encode("utf-8")) > 72:
            raise ValidationError("Password must be at most 72 bytes")

    def _ensure_other_active_admin(self, user: User) -> None:
        others = (
            self.db.query(func.count(User.id))
            .filter(
                User.role == UserRole.ADMIN,
                User.is_active.is_(True),
                User.id != user.id,
            )
            .scalar()
        )
        if others < 1:
            logger.warning(f"Refused to remove last active administrator (user {user.id})")
            raise InvariantViolationError("Cannot remove the last active administrator")
