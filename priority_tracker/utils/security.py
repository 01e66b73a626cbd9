"""Password hashing and session token helpers.

Passwords are hashed with bcrypt directly; session tokens are signed JWTs
(python-jose) carrying the user id and role. Secrets come from the
``auth`` config section.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from priority_tracker.utils.config import get_config

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a plain-text password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(data: dict[str, Any]) -> str:
    """Create a signed session token.

    The payload is a copy of ``data`` plus ``iat`` and ``exp`` claims.
    Callers set ``sub`` to the user id.
    """
    auth = get_config().auth
    now = datetime.now(UTC)
    payload = data.copy()
    payload["iat"] = now
    payload["exp"] = now + timedelta(minutes=auth.token_expire_minutes)
    return jwt.encode(payload, auth.secret_key, algorithm=auth.algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """Decode and verify a session token.

    Raises:
        ValueError: If the token is invalid or expired.
    """
    auth = get_config().auth
    try:
        return jwt.decode(token, auth.secret_key, algorithms=[auth.algorithm])
    except JWTError as e:
        logger.debug(f"Token verification failed: {e}")
        raise ValueError("Invalid or expired session") from e
