"""Audit trail shown in the dashboard feed."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Activity, utcnow

# The feed only ever shows the most recent entries.
ACTIVITY_FEED_LIMIT = 50


def create_activity(
    db: Session,
    *,
    user: str,
    action: str,
    entity: str,
    entity_id: Optional[int] = None,
    timestamp: Optional[datetime] = None,
) -> Activity:
    """
    Append an activity record to the current transaction.

    The caller owns the commit, so the record is written together with
    the change it describes.
    """
    activity = Activity(
        timestamp=timestamp or utcnow(),
        user=user,
        action=action,
        entity=entity,
        entity_id=entity_id,
    )
    db.add(activity)
    db.flush()
    return activity


def list_activities(db: Session, limit: int = ACTIVITY_FEED_LIMIT) -> List[Activity]:
    """Return the most recent activities, newest first."""
    return (
        db.query(Activity)
        .order_by(Activity.timestamp.desc(), Activity.id.desc())
        .limit(limit)
        .all()
    )
