"""Per-request access to the storage engine and settings."""

from __future__ import annotations

from typing import Optional

from flask import current_app, g
from sqlalchemy.orm import Session

from ..config import Settings
from ..db import Database

DB_EXTENSION = "bizdesk.db"
SETTINGS_KEY = "BIZDESK_SETTINGS"


def get_database() -> Database:
    return current_app.extensions[DB_EXTENSION]


def get_settings() -> Settings:
    return current_app.config[SETTINGS_KEY]


def get_session() -> Session:
    """Return the request's session, opening it on first use."""
    if "db_session" not in g:
        g.db_session = get_database().SessionLocal()
    return g.db_session


def close_session(exc: Optional[BaseException] = None) -> None:
    """Teardown hook: roll back on error, always close."""
    db = g.pop("db_session", None)
    if db is None:
        return
    if exc is not None:
        db.rollback()
    db.close()
