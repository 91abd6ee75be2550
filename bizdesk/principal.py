"""Represents the authenticated user (principal) and helpers to load it."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session

from .models import User


@dataclass
class Principal:
    """
    Simple object representing the current authenticated user.

    Attributes:
        id: The user's id.
        username: The user's login name, used to attribute activities.
        role: The user's role name (e.g., 'admin', 'accountant').
        name: Display name.
    """
    id: str
    username: str
    role: str
    name: str


def principal_from_user(user: User) -> Principal:
    return Principal(id=user.id, username=user.username, role=user.role, name=user.name)


def principal_from_id(db: Session, user_id: str) -> Optional[Principal]:
    """
    Load a Principal object from a user id.

    Args:
        db: The active database session.
        user_id: The id stored in the token subject.

    Returns:
        Principal object if the user exists, otherwise None.
    """
    user = db.get(User, user_id)
    if not user:
        return None
    return principal_from_user(user)
