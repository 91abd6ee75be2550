"""
Services for support tickets.

Business rules:
- ticketNumber (TKT-<year>-<id>) is assigned once, at creation.
- resolvedDate and closedDate are stamped the first time the ticket
  reaches Resolved or Closed and never rewritten afterwards.
- Status transitions are not restricted (Closed -> Open is accepted).
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Ticket, TicketNote, as_naive_utc, utcnow
from ..exceptions import TicketNotFoundError
from ..schemas import NoteIn, TicketCreate, TicketUpdate, changes
from .activity_service import create_activity
from .client_service import get_client
from .quotation_service import document_number
from .user_service import resolve_display_name


def _note_row(note: NoteIn, default_user: str) -> TicketNote:
    return TicketNote(
        text=note.text,
        timestamp=as_naive_utc(note.timestamp) if note.timestamp else utcnow(),
        user=note.user or default_user,
    )


def _apply_status(ticket: Ticket, status: str, today: Optional[date] = None) -> None:
    ticket.status = status
    if status == "Resolved" and ticket.resolved_date is None:
        ticket.resolved_date = today or date.today()
    if status == "Closed" and ticket.closed_date is None:
        ticket.closed_date = today or date.today()


def list_tickets(db: Session, client_id: Optional[int] = None) -> List[Ticket]:
    """All tickets, newest createdDate first, optionally for one client."""
    tickets = db.query(Ticket).order_by(Ticket.created_date.desc(), Ticket.id.asc()).all()
    if client_id is not None:
        tickets = [t for t in tickets if t.client_id == client_id]
    return tickets


def get_ticket(db: Session, ticket_id: int) -> Ticket:
    """
    Retrieve a ticket by ID.

    Raises:
        TicketNotFoundError: If the ticket does not exist.
    """
    ticket = db.get(Ticket, ticket_id)
    if not ticket:
        raise TicketNotFoundError(ticket_id)
    return ticket


def create_ticket(db: Session, data: TicketCreate, actor: str = "system") -> Ticket:
    """
    Open a ticket for an existing client.

    Raises:
        ClientNotFoundError: If the client does not exist.
    """
    client = get_client(db, data.client_id)
    created_by = data.created_by or actor

    ticket = Ticket(
        client_id=client.id,
        client_name=client.company,
        title=data.title,
        description=data.description,
        priority=data.priority,
        status="Open",
        assigned_to=data.assigned_to,
        assigned_to_name=resolve_display_name(db, data.assigned_to),
        created_date=data.created_date,
        created_by=created_by,
        notes=[_note_row(note, created_by) for note in data.notes],
    )
    _apply_status(ticket, data.status)

    db.add(ticket)
    db.flush()
    ticket.ticket_number = document_number("TKT", ticket.id)

    create_activity(
        db,
        user=created_by,
        action="created ticket",
        entity=ticket.ticket_number,
        entity_id=ticket.id,
    )
    db.commit()
    return ticket


def update_ticket(db: Session, ticket_id: int, data: TicketUpdate) -> Ticket:
    """
    Merge the provided fields over an existing ticket.

    Raises:
        TicketNotFoundError: If the ticket does not exist.
        ClientNotFoundError: If a new clientId points nowhere.
    """
    ticket = get_ticket(db, ticket_id)
    fields = changes(data)

    if "client_id" in fields:
        client = get_client(db, fields.pop("client_id"))
        ticket.client_id = client.id
        ticket.client_name = client.company

    status = fields.pop("status", None)

    for key, value in fields.items():
        setattr(ticket, key, value)

    if "assigned_to" in fields:
        ticket.assigned_to_name = resolve_display_name(db, ticket.assigned_to)
    if status is not None:
        _apply_status(ticket, status)

    db.commit()
    return ticket


def add_ticket_note(db: Session, ticket_id: int, note: NoteIn, default_user: str = "system") -> Ticket:
    ticket = get_ticket(db, ticket_id)
    ticket.notes.append(_note_row(note, default_user))
    db.commit()
    return ticket


def update_ticket_status(
    db: Session,
    ticket_id: int,
    status: str,
    today: Optional[date] = None,
) -> Ticket:
    """
    Set a ticket's status, stamping resolvedDate/closedDate the first time.

    Raises:
        TicketNotFoundError: If the ticket does not exist.
    """
    ticket = get_ticket(db, ticket_id)
    _apply_status(ticket, status, today)
    db.commit()
    return ticket
