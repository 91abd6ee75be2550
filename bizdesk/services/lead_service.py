"""
Services for the sales pipeline: leads, their notes, and conversion.

Business rules:
- assignedToName is resolved from the assigned username on every write
  that touches assignedTo (unknown usernames are kept as-is).
- A lead only becomes Converted through convert_lead_to_client(), which
  creates the client and links it back. A converted lead keeps its client
  link and status for good.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session
import sentry_sdk

from ..models import Client, Lead, LeadNote, as_naive_utc, utcnow
from ..exceptions import BusinessRuleError, LeadAlreadyConvertedError, LeadNotFoundError
from ..schemas import ClientCreate, LeadCreate, LeadUpdate, NoteIn, changes
from .activity_service import create_activity
from .client_service import create_client
from .user_service import resolve_display_name

logger = logging.getLogger(__name__)


def list_leads(db: Session) -> List[Lead]:
    """All leads, newest createdDate first."""
    return db.query(Lead).order_by(Lead.created_date.desc(), Lead.id.asc()).all()


def get_lead(db: Session, lead_id: int) -> Lead:
    """
    Retrieve a lead by ID.

    Raises:
        LeadNotFoundError: If the lead does not exist.
    """
    lead = db.get(Lead, lead_id)
    if not lead:
        raise LeadNotFoundError(lead_id)
    return lead


def _note_row(note: NoteIn, default_user: str) -> LeadNote:
    return LeadNote(
        text=note.text,
        timestamp=as_naive_utc(note.timestamp) if note.timestamp else utcnow(),
        user=note.user or default_user,
    )


def create_lead(db: Session, data: LeadCreate) -> Lead:
    """
    Create a new lead.

    Business rules:
    - A lead cannot be created directly in the Converted state.

    Raises:
        BusinessRuleError: If status is Converted.
    """
    if data.status == "Converted":
        raise BusinessRuleError("Leads can only be marked Converted by converting them to a client")

    lead = Lead(
        name=data.name,
        email=str(data.email),
        phone=data.phone,
        company=data.company,
        source=data.source,
        status=data.status,
        assigned_to=data.assigned_to,
        assigned_to_name=resolve_display_name(db, data.assigned_to),
        created_date=data.created_date,
        notes=[_note_row(note, data.assigned_to) for note in data.notes],
    )
    db.add(lead)
    db.flush()

    create_activity(
        db,
        user=lead.assigned_to,
        action="created lead",
        entity=lead.name,
        entity_id=lead.id,
    )
    db.commit()

    logger.info("Lead created: id=%s name=%s", lead.id, lead.name)
    return lead


def update_lead(db: Session, lead_id: int, data: LeadUpdate) -> Lead:
    """
    Merge the provided fields over an existing lead.

    Raises:
        LeadNotFoundError: If the lead does not exist.
        BusinessRuleError: If the update would mark the lead Converted
            or move a converted lead to another status.
    """
    lead = get_lead(db, lead_id)
    fields = changes(data)

    new_status = fields.get("status")
    if new_status is not None and new_status != lead.status:
        if new_status == "Converted":
            raise BusinessRuleError(
                "Leads can only be marked Converted by converting them to a client"
            )
        if lead.converted_to_client_id is not None:
            raise BusinessRuleError("A converted lead cannot change status")

    if "email" in fields:
        fields["email"] = str(fields["email"])

    for key, value in fields.items():
        setattr(lead, key, value)

    if "assigned_to" in fields:
        lead.assigned_to_name = resolve_display_name(db, lead.assigned_to)

    db.commit()
    return lead


def delete_lead(db: Session, lead_id: int) -> bool:
    """Hard-delete a lead. Returns False when there was nothing to delete."""
    lead = db.get(Lead, lead_id)
    if not lead:
        return False

    db.delete(lead)
    db.commit()
    logger.info("Lead deleted: id=%s", lead_id)
    return True


def add_lead_note(db: Session, lead_id: int, note: NoteIn, default_user: str = "system") -> Lead:
    """
    Append a note to a lead.

    Raises:
        LeadNotFoundError: If the lead does not exist.
    """
    lead = get_lead(db, lead_id)
    lead.notes.append(_note_row(note, default_user))
    db.commit()
    return lead


def convert_lead_to_client(db: Session, lead_id: int, today: Optional[date] = None) -> Client:
    """
    Turn a lead into a billable client.

    The client copies the lead's contact fields, starts with an empty
    address and zero revenue, and points back to the lead.

    Raises:
        LeadNotFoundError: If the lead does not exist (no client is created).
        LeadAlreadyConvertedError: If the lead was converted before.
    """
    lead = get_lead(db, lead_id)
    if lead.converted_to_client_id is not None:
        raise LeadAlreadyConvertedError(lead.id, lead.converted_to_client_id)

    client = create_client(
        db,
        ClientCreate(
            name=lead.name,
            email=lead.email,
            phone=lead.phone,
            company=lead.company,
            address="",
            created_date=today or date.today(),
            lead_id=lead.id,
        ),
    )

    lead.status = "Converted"
    lead.converted_to_client_id = client.id

    create_activity(
        db,
        user=lead.assigned_to,
        action="converted lead to client",
        entity=lead.name,
        entity_id=lead.id,
    )
    db.commit()

    sentry_sdk.capture_message(
        f"Lead converted: lead={lead.id} -> client={client.id} ({client.company})",
        level="info",
    )
    return client
