from __future__ import annotations
from typing import List, Optional
import uuid

from sqlalchemy.orm import Session
import sentry_sdk

from ..models import User
from ..exceptions import InvalidStatusError, UserNotFoundError
from ..repositories import user_repo
from ..schemas import ROLES


def get_user(db: Session, user_id: str) -> User:
    """
    Return a user by id.

    Raises:
        UserNotFoundError: If no user has this id.
    """
    user = user_repo.get_user(db, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Return a user object by username, or None if not found."""
    return user_repo.get_user_by_username(db, username)


def list_users(db: Session) -> List[User]:
    return list(user_repo.list_all_users(db))


def create_user(
    db: Session,
    *,
    username: str,
    password_plain: str,
    role: str,
    name: str,
    user_id: Optional[str] = None,
) -> User:
    """
    Create a new user with a hashed password.

    Notes:
        - If the username is already taken, the existing user is returned.
        - Without an explicit id, a random one is generated.

    Raises:
        InvalidStatusError: If the role is not one of the known roles.
    """
    if role not in ROLES:
        raise InvalidStatusError(role, list(ROLES))

    existing = user_repo.get_user_by_username(db, username)
    if existing:
        return existing

    user = user_repo.create_user(
        db,
        user_id=user_id or uuid.uuid4().hex,
        username=username,
        password_plain=password_plain,
        role=role,
        name=name,
    )

    sentry_sdk.capture_message(
        f"User created: {user.username} ({user.role})",
        level="info",
    )

    return user


def resolve_display_name(db: Session, username: str) -> str:
    """Display name for a username; unknown usernames are returned unchanged."""
    return user_repo.display_name_for(db, username)
