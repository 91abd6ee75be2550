"""
Services for creating, updating and deleting clients.

Business rules:
- clientName on quotations and tickets mirrors the client's company, so
  renaming the company rewrites those copies. Invoices keep the name and
  address captured when they were generated.
- Deleting a client does not touch the documents that reference it.
- totalRevenue only moves through update_client_revenue(), which the
  payment flow calls when an invoice becomes fully paid.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session
import sentry_sdk

from ..models import Client, Quotation, Ticket
from ..exceptions import ClientNotFoundError
from ..schemas import ClientCreate, ClientUpdate, changes
from .activity_service import create_activity

logger = logging.getLogger(__name__)


def list_clients(db: Session) -> List[Client]:
    """All clients, newest createdDate first."""
    return db.query(Client).order_by(Client.created_date.desc(), Client.id.asc()).all()


def get_client(db: Session, client_id: int) -> Client:
    """
    Retrieve a client by ID.

    Raises:
        ClientNotFoundError: If the client does not exist.
    """
    client = db.get(Client, client_id)
    if not client:
        raise ClientNotFoundError(client_id)
    return client


def create_client(db: Session, data: ClientCreate, actor: str = "system") -> Client:
    """
    Create a new client with zero revenue.

    Args:
        db: Database session.
        data: Validated client fields.
        actor: Username recorded on the activity feed.

    Returns:
        The newly created Client object.
    """
    client = Client(
        name=data.name,
        email=str(data.email),
        phone=data.phone,
        company=data.company,
        address=data.address,
        created_date=data.created_date,
        total_revenue=0,
        lead_id=data.lead_id,
    )
    db.add(client)
    db.flush()

    create_activity(
        db,
        user=actor,
        action="created client",
        entity=client.name,
        entity_id=client.id,
    )
    db.commit()

    sentry_sdk.capture_message(
        f"Client created: id={client.id}, company={client.company}",
        level="info",
    )
    return client


def update_client(
    db: Session,
    client_id: int,
    data: ClientUpdate,
    actor: str = "system",
) -> Client:
    """
    Update an existing client.

    Raises:
        ClientNotFoundError: If the client does not exist.
    """
    client = get_client(db, client_id)
    fields = changes(data)

    if "email" in fields:
        fields["email"] = str(fields["email"])

    renamed = "company" in fields and fields["company"] != client.company

    for key, value in fields.items():
        setattr(client, key, value)

    if renamed:
        _propagate_company_name(db, client)

    create_activity(
        db,
        user=actor,
        action="updated client",
        entity=client.company,
        entity_id=client.id,
    )
    db.commit()
    return client


def _propagate_company_name(db: Session, client: Client) -> None:
    """Rewrite the denormalized clientName on live documents of this client."""
    for model in (Quotation, Ticket):
        (
            db.query(model)
            .filter(model.client_id == client.id)
            .update({model.client_name: client.company}, synchronize_session="fetch")
        )
    logger.info("Client %s renamed to %r, documents updated", client.id, client.company)


def delete_client(db: Session, client_id: int, actor: str = "system") -> bool:
    """
    Hard-delete a client.

    Quotations, invoices and tickets that reference it are left as they are.

    Returns:
        True if a client was deleted, False if it did not exist.
    """
    client = db.get(Client, client_id)
    if not client:
        return False

    create_activity(
        db,
        user=actor,
        action="deleted client",
        entity=client.company,
        entity_id=client.id,
    )
    db.delete(client)
    db.commit()

    sentry_sdk.capture_message(f"Client deleted: id={client_id}", level="warning")
    return True


def update_client_revenue(db: Session, client_id: int, amount: float) -> None:
    """
    Add an amount to a client's totalRevenue.

    Missing clients are ignored: an invoice may outlive its client.
    """
    client = db.get(Client, client_id)
    if not client:
        logger.warning("Revenue of %.2f not credited: client %s is gone", amount, client_id)
        return

    client.total_revenue = round((client.total_revenue or 0) + amount, 2)
    db.flush()
