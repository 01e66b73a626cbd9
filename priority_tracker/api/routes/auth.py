"""Authentication API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from priority_tracker.api.converters import user_to_response
from priority_tracker.api.dependencies import CurrentPrincipal, get_user_service
from priority_tracker.api.schemas import LoginRequest, MessageResponse, TokenResponse, UserResponse
from priority_tracker.exceptions import UnauthenticatedError
from priority_tracker.services.user_service import UserService
from priority_tracker.utils.config import get_config
from priority_tracker.utils.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    response: Response,
    service: Annotated[UserService, Depends(get_user_service)],
) -> TokenResponse:
    """Check credentials and start a session.

    The token is returned in the body and also set as an HttpOnly cookie.
    """
    user = service.authenticate(credentials.email, credentials.password)
    if user is None:
        logger.warning(f"Failed login attempt for '{credentials.email}'")
        raise UnauthenticatedError("Invalid credentials or inactive account")

    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    auth = get_config().auth
    response.set_cookie(
        key=auth.cookie_name,
        value=token,
        max_age=auth.token_expire_minutes * 60,
        httponly=True,
        secure=auth.cookie_secure,
        samesite="lax",
    )

    logger.info(f"User {user.id} logged in")
    return TokenResponse(access_token=token, user=user_to_response(user))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """End the session by clearing the cookie."""
    response.delete_cookie(get_config().auth.cookie_name)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
def get_me(
    principal: CurrentPrincipal,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Return the authenticated user's profile."""
    return user_to_response(service.get_user_for(principal, principal.id))
