"""
Services for quotations and their line items.

Business rules:
- subtotal, taxAmount and total are derived. They are recomputed from the
  current items and tax rate on every create and update, whatever the
  caller sends.
- A line item's amount is quantity x unit price.
- quotationNumber (QT-<year>-<id>) is assigned once, at creation.
- approve/reject/submit do not look at the previous status.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..models import Quotation, QuotationItem
from ..exceptions import QuotationNotFoundError
from ..schemas import QuotationCreate, QuotationItemIn, QuotationUpdate, changes
from .activity_service import create_activity
from .client_service import get_client
from .user_service import resolve_display_name

# Default validity window for a new quotation.
QUOTATION_VALIDITY_DAYS = 30


def _money(value: float) -> float:
    return round(value, 2)


def document_number(prefix: str, entity_id: int, year: Optional[int] = None) -> str:
    """Format a document number such as QT-2025-007."""
    return f"{prefix}-{year or date.today().year}-{entity_id:03d}"


def _item_rows(items: Iterable[QuotationItemIn]) -> List[QuotationItem]:
    return [
        QuotationItem(
            position=position,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            amount=_money(item.quantity * item.unit_price),
        )
        for position, item in enumerate(items)
    ]


def _recompute_totals(quotation: Quotation) -> None:
    """Derive subtotal, taxAmount and total from items and tax rate."""
    subtotal = _money(sum(item.amount for item in quotation.items))
    tax_amount = _money(subtotal * (quotation.tax_rate or 0) / 100)

    quotation.subtotal = subtotal
    quotation.tax_amount = tax_amount
    quotation.total = _money(subtotal + tax_amount)


def list_quotations(db: Session, client_id: Optional[int] = None) -> List[Quotation]:
    """All quotations, newest createdDate first, optionally for one client."""
    quotations = (
        db.query(Quotation)
        .order_by(Quotation.created_date.desc(), Quotation.id.asc())
        .all()
    )
    if client_id is not None:
        quotations = [q for q in quotations if q.client_id == client_id]
    return quotations


def get_quotation(db: Session, quotation_id: int) -> Quotation:
    """
    Retrieve a quotation by ID.

    Raises:
        QuotationNotFoundError: If the quotation does not exist.
    """
    quotation = db.get(Quotation, quotation_id)
    if not quotation:
        raise QuotationNotFoundError(quotation_id)
    return quotation


def create_quotation(db: Session, data: QuotationCreate, actor: str = "system") -> Quotation:
    """
    Create a quotation for an existing client.

    Args:
        db: Database session.
        data: Validated quotation fields.
        actor: Used as createdBy when the payload does not name one.

    Returns:
        The newly created Quotation object.

    Raises:
        ClientNotFoundError: If the client does not exist.
    """
    client = get_client(db, data.client_id)
    created_by = data.created_by or actor

    quotation = Quotation(
        client_id=client.id,
        client_name=client.company,
        items=_item_rows(data.items),
        tax_rate=data.tax_rate,
        status=data.status,
        created_by=created_by,
        created_by_name=resolve_display_name(db, created_by),
        created_date=data.created_date,
        valid_until=data.valid_until
        or data.created_date + timedelta(days=QUOTATION_VALIDITY_DAYS),
        notes=data.notes,
    )
    _recompute_totals(quotation)

    db.add(quotation)
    db.flush()
    quotation.quotation_number = document_number("QT", quotation.id)

    create_activity(
        db,
        user=created_by,
        action="created quotation",
        entity=quotation.quotation_number,
        entity_id=quotation.id,
    )
    db.commit()
    return quotation


def update_quotation(db: Session, quotation_id: int, data: QuotationUpdate) -> Quotation:
    """
    Merge the provided fields and recompute the totals.

    Raises:
        QuotationNotFoundError: If the quotation does not exist.
        ClientNotFoundError: If a new clientId points nowhere.
    """
    quotation = get_quotation(db, quotation_id)
    fields = changes(data)

    if "client_id" in fields:
        client = get_client(db, fields.pop("client_id"))
        quotation.client_id = client.id
        quotation.client_name = client.company

    if data.items is not None:
        fields.pop("items", None)
        quotation.items = _item_rows(data.items)

    for key, value in fields.items():
        setattr(quotation, key, value)

    _recompute_totals(quotation)
    db.commit()
    return quotation


def approve_quotation(
    db: Session,
    quotation_id: int,
    approved_by: str,
    today: Optional[date] = None,
) -> Quotation:
    """
    Mark a quotation Approved and stamp the approver and date.

    Raises:
        QuotationNotFoundError: If the quotation does not exist.
    """
    quotation = get_quotation(db, quotation_id)
    quotation.status = "Approved"
    quotation.approved_by = approved_by
    quotation.approved_date = today or date.today()

    create_activity(
        db,
        user=approved_by,
        action="approved quotation",
        entity=quotation.quotation_number,
        entity_id=quotation.id,
    )
    db.commit()
    return quotation


def reject_quotation(db: Session, quotation_id: int) -> Quotation:
    quotation = get_quotation(db, quotation_id)
    quotation.status = "Rejected"
    db.commit()
    return quotation


def submit_quotation(db: Session, quotation_id: int) -> Quotation:
    """Send a quotation for approval (status Pending)."""
    return update_quotation(db, quotation_id, QuotationUpdate(status="Pending"))
