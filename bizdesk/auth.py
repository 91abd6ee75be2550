"""
Authentication and authorization helpers.

This module provides:
- Credential checks against the stored bcrypt hashes
- JWT token creation and validation
- Permission checking utilities
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Set

import jwt
import sentry_sdk
from sqlalchemy.orm import Session

from .config import JWT_ALGORITHM
from .models import User
from .principal import Principal, principal_from_id
from .repositories.user_repo import get_user_by_username
from .security import verify_password
from .exceptions import (
    AuthenticationError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
    NotAuthenticatedError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TOKEN MANAGEMENT
# =============================================================================

def encode_token(user: User, secret: str, lifetime: timedelta) -> str:
    """Create a signed JWT for the given user."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "username": user.username,  # Include username for debugging
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }

    token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    return token if isinstance(token, str) else token.decode("utf-8")


def decode_token(token: str, secret: str) -> dict:
    """
    Validate a JWT and return its payload.

    Raises:
        TokenExpiredError: If the token has expired.
        TokenInvalidError: If the token is malformed or badly signed.
    """
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError:
        raise TokenInvalidError()


def bearer_token(header_value: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization: Bearer ...`` header.

    Raises:
        NotAuthenticatedError: If the header is missing or not a bearer token.
    """
    if not header_value:
        raise NotAuthenticatedError()

    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise NotAuthenticatedError()
    return token.strip()


# =============================================================================
# AUTHENTICATION
# =============================================================================

def authenticate(db: Session, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Args:
        db: Database session.
        username: Login name.
        password: Plain text password.

    Returns:
        User: The matching user row.

    Raises:
        InvalidCredentialsError: If username or password is incorrect.
    """
    user = get_user_by_username(db, username)

    if user is None:
        # Log failed attempt (without revealing if user exists)
        sentry_sdk.capture_message(
            f"Failed login attempt for username: {username}",
            level="warning",
        )
        logger.warning("Failed login attempt for %s", username)
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        sentry_sdk.capture_message(
            f"Failed login attempt (wrong password) for: {username}",
            level="warning",
        )
        logger.warning("Failed login attempt (wrong password) for %s", username)
        raise InvalidCredentialsError()

    logger.info("User logged in: %s", username)
    return user


def principal_from_token(db: Session, token: str, secret: str) -> Principal:
    """
    Return the authenticated user (Principal) behind a JWT.

    Raises:
        TokenExpiredError: If the token has expired.
        TokenInvalidError: If the token is malformed.
        AuthenticationError: If the user no longer exists.
    """
    payload = decode_token(token, secret)

    principal = principal_from_id(db, str(payload.get("sub", "")))
    if principal is None:
        raise AuthenticationError("The user behind this token no longer exists.")
    return principal


# =============================================================================
# AUTHORIZATION HELPERS
# =============================================================================

def ensure_permission(
    principal: Optional[Principal],
    needed_code: str,
    user_has_codes: Set[str],
) -> None:
    """
    Ensure that the current principal has a specific permission code.

    Args:
        principal: The principal to check.
        needed_code: The permission code required.
        user_has_codes: Set of permission codes the user has.

    Raises:
        NotAuthenticatedError: If principal is None.
        PermissionDeniedError: If permission is missing.
    """
    if not principal:
        raise NotAuthenticatedError()

    if needed_code not in user_has_codes:
        raise PermissionDeniedError(needed_code)
