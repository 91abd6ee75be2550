"""
Services for invoices and payments.

Business rules:
- An invoice is generated from an Approved quotation, at most once per
  quotation. Items and totals are copied from the quotation verbatim.
- The due date is 30 days after generation.
- Payments accumulate into paidAmount. The latest payment's date, method
  and reference overwrite the previous ones.
- Reaching the invoice total moves it to Paid and credits the full total
  to the client's revenue, once, when the payments first cover the total.
- Paid and Partially Paid only come from payments; a manual update cannot
  set them or move a paid invoice elsewhere.
- Unpaid invoices past their due date are moved to Overdue by the
  reconciliation job (mark_overdue_invoices).
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session
import sentry_sdk

from ..models import Client, Invoice, InvoiceItem
from ..exceptions import (
    BusinessRuleError,
    InvoiceAlreadyGeneratedError,
    InvoiceNotFoundError,
    QuotationNotApprovedError,
)
from ..schemas import InvoiceCreate, InvoiceUpdate, PaymentIn, changes
from .activity_service import create_activity
from .client_service import update_client_revenue
from .quotation_service import document_number, get_quotation

logger = logging.getLogger(__name__)

PAYMENT_TERMS_DAYS = 30

# Statuses the overdue reconciliation may move to Overdue.
OPEN_STATUSES = ("Generated", "Sent", "Partially Paid")

# Statuses only record_payment() may set.
PAYMENT_STATUSES = ("Paid", "Partially Paid")


def list_invoices(db: Session, client_id: Optional[int] = None) -> List[Invoice]:
    """All invoices, newest generatedDate first, optionally for one client."""
    invoices = (
        db.query(Invoice)
        .order_by(Invoice.generated_date.desc(), Invoice.id.asc())
        .all()
    )
    if client_id is not None:
        invoices = [inv for inv in invoices if inv.client_id == client_id]
    return invoices


def get_invoice(db: Session, invoice_id: int) -> Invoice:
    """
    Retrieve an invoice by ID.

    Raises:
        InvoiceNotFoundError: If the invoice does not exist.
    """
    invoice = db.get(Invoice, invoice_id)
    if not invoice:
        raise InvoiceNotFoundError(invoice_id)
    return invoice


def find_invoice_for_quotation(db: Session, quotation_id: int) -> Optional[Invoice]:
    return (
        db.query(Invoice)
        .filter(Invoice.quotation_id == quotation_id)
        .order_by(Invoice.id.asc())
        .first()
    )


def create_invoice(db: Session, data: InvoiceCreate, actor: str = "system") -> Invoice:
    """
    Create an invoice from a quotation without checking its status.

    Items, subtotal, tax and total come from the quotation. The client's
    company and address are captured as they are now.

    Raises:
        QuotationNotFoundError: If the quotation does not exist.
    """
    quotation = get_quotation(db, data.quotation_id)
    client = db.get(Client, data.client_id)

    invoice = Invoice(
        quotation_id=quotation.id,
        client_id=data.client_id,
        client_name=client.company if client else quotation.client_name,
        client_address=client.address if client else "",
        items=[
            InvoiceItem(
                position=item.position,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                amount=item.amount,
            )
            for item in quotation.items
        ],
        subtotal=quotation.subtotal,
        tax_amount=quotation.tax_amount,
        total=quotation.total,
        status=data.status,
        generated_date=data.generated_date,
        due_date=data.due_date,
        paid_amount=data.paid_amount,
        notes=data.notes,
    )
    db.add(invoice)
    db.flush()
    invoice.invoice_number = document_number("INV", invoice.id)

    create_activity(
        db,
        user=actor,
        action="generated invoice",
        entity=invoice.invoice_number,
        entity_id=invoice.id,
    )
    db.commit()
    return invoice


def generate_invoice(
    db: Session,
    quotation_id: int,
    actor: str = "system",
    today: Optional[date] = None,
) -> Invoice:
    """
    Generate the invoice of an approved quotation.

    Raises:
        QuotationNotFoundError: If the quotation does not exist.
        QuotationNotApprovedError: If the quotation is not Approved.
        InvoiceAlreadyGeneratedError: If the quotation was already invoiced.
    """
    quotation = get_quotation(db, quotation_id)
    if quotation.status != "Approved":
        raise QuotationNotApprovedError(quotation.id)

    existing = find_invoice_for_quotation(db, quotation.id)
    if existing:
        raise InvoiceAlreadyGeneratedError(quotation.id, existing.invoice_number)

    generated = today or date.today()
    invoice = create_invoice(
        db,
        InvoiceCreate(
            quotation_id=quotation.id,
            client_id=quotation.client_id,
            status="Generated",
            generated_date=generated,
            due_date=generated + timedelta(days=PAYMENT_TERMS_DAYS),
            paid_amount=0,
            notes=quotation.notes,
        ),
        actor=actor,
    )

    sentry_sdk.capture_message(
        f"Invoice generated: {invoice.invoice_number} from {quotation.quotation_number}, "
        f"total={invoice.total:.2f}",
        level="info",
    )
    return invoice


def update_invoice(db: Session, invoice_id: int, data: InvoiceUpdate) -> Invoice:
    """
    Merge status, due date or notes; amounts are never touched here.

    Raises:
        InvoiceNotFoundError: If the invoice does not exist.
        BusinessRuleError: If the status is one only a payment can set.
    """
    invoice = get_invoice(db, invoice_id)
    fields = changes(data)

    status = fields.get("status")
    if status is not None and status != invoice.status:
        if status in PAYMENT_STATUSES:
            raise BusinessRuleError(f"Status '{status}' is set by recording a payment")
        if invoice.status == "Paid":
            raise BusinessRuleError("A paid invoice cannot change status")

    for key, value in fields.items():
        setattr(invoice, key, value)
    db.commit()
    return invoice


def record_payment(
    db: Session,
    invoice_id: int,
    payment: PaymentIn,
    actor: str = "system",
) -> Invoice:
    """
    Apply a payment to an invoice.

    Raises:
        InvoiceNotFoundError: If the invoice does not exist.
    """
    invoice = get_invoice(db, invoice_id)
    previously_paid = invoice.paid_amount or 0

    invoice.paid_amount = round(previously_paid + payment.payment_amount, 2)
    invoice.paid_date = payment.payment_date
    invoice.payment_method = payment.payment_method
    invoice.transaction_ref = payment.transaction_ref

    if invoice.paid_amount >= invoice.total:
        invoice.status = "Paid"
        # Revenue follows the payments, not the status.
        if previously_paid < invoice.total:
            update_client_revenue(db, invoice.client_id, invoice.total)
    elif invoice.paid_amount > 0:
        invoice.status = "Partially Paid"

    create_activity(
        db,
        user=actor,
        action="recorded payment for invoice",
        entity=invoice.invoice_number,
        entity_id=invoice.id,
    )
    db.commit()

    sentry_sdk.capture_message(
        f"Payment recorded: {invoice.invoice_number} +{payment.payment_amount:.2f} "
        f"({payment.payment_method}), status={invoice.status}",
        level="info",
    )
    return invoice


def mark_invoice_as_sent(db: Session, invoice_id: int, today: Optional[date] = None) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    invoice.status = "Sent"
    invoice.sent_date = today or date.today()
    db.commit()
    return invoice


def mark_overdue_invoices(db: Session, today: Optional[date] = None) -> List[Invoice]:
    """
    Move unpaid invoices past their due date to Overdue.

    Returns:
        The invoices whose status changed.
    """
    today = today or date.today()
    overdue = (
        db.query(Invoice)
        .filter(Invoice.due_date < today, Invoice.status.in_(OPEN_STATUSES))
        .order_by(Invoice.id.asc())
        .all()
    )
    for invoice in overdue:
        invoice.status = "Overdue"
    db.commit()

    if overdue:
        logger.info(
            "Marked %d invoice(s) overdue: %s",
            len(overdue),
            ", ".join(inv.invoice_number for inv in overdue),
        )
    return overdue
