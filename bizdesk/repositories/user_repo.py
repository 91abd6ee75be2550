"""User repository.

This module contains all storage operations related to users.
Users are seeded at startup and never updated afterwards.
"""

from __future__ import annotations
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..models import User
from ..security import hash_password


# Basic lookups
def get_user(db: Session, user_id: str) -> Optional[User]:
    """Return the user with this id, or None if not found."""
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Return a user object matching the username, or None if not found."""
    return db.query(User).filter(User.username == username).one_or_none()


def display_name_for(db: Session, username: str) -> str:
    """Resolve a username to its display name, falling back to the username."""
    user = get_user_by_username(db, username)
    return user.name if user else username


# Write operations
def create_user(
    db: Session,
    *,
    user_id: str,
    username: str,
    password_plain: str,
    role: str,
    name: str,
) -> User:
    """
    Create a new user row with a hashed password.

    Notes:
        - If the username already exists, the existing user is returned.

    Returns:
        The newly created or existing User object.
    """
    existing = get_user_by_username(db, username)
    if existing:
        return existing

    user = User(
        id=user_id,
        username=username,
        password_hash=hash_password(password_plain),
        role=role,
        name=name,
    )

    db.add(user)
    db.commit()
    return user


def list_all_users(db: Session) -> Iterable[User]:
    """Return all users sorted by id for predictable ordering."""
    return db.query(User).order_by(User.id.asc()).all()
