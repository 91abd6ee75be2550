"""SQLAlchemy ORM models.

Design goals:
- Keep model definitions minimal & explicit.
- Every integer-keyed table uses AUTOINCREMENT so ids are never reused,
  even after a row is deleted.
- Client references (quotations, invoices, tickets, converted leads) are
  plain integer columns: deleting a client does not cascade and leaves the
  denormalized name snapshots in place.
- Line items and notes are owned child rows, kept in insertion order.
"""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Date,
    DateTime,
    Text,
    ForeignKey,
)
from sqlalchemy.orm import declarative_base, relationship

# Base class used by all ORM models.
Base = declarative_base()

# Monetary values are kept as floats on the Python side.
Money = Numeric(14, 2, asdecimal=False)

_AUTOINCREMENT = {"sqlite_autoincrement": True}


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Normalize an aware timestamp to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# Users: seeded once, never updated.
class User(Base):
    """Application user (staff member or client portal login)."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String(64), nullable=False, unique=True)

    # Hashed password (never store plain text).
    password_hash = Column(String(255), nullable=False)

    # One of: admin, manager, exec, accountant, engineer, client.
    role = Column(String(32), nullable=False)
    name = Column(String(255), nullable=False)


# Sales pipeline: leads and their notes.
class Lead(Base):
    """Prospective customer, prior to becoming a client."""

    __tablename__ = "leads"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Contact information.
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False, default="")
    company = Column(String(255), nullable=False, default="")

    source = Column(String(32), nullable=False)
    status = Column(String(32), nullable=False, default="New")

    # Username of the owner plus the display name resolved at write time.
    assigned_to = Column(String(64), nullable=False)
    assigned_to_name = Column(String(255), nullable=False)

    created_date = Column(Date, nullable=False)

    # Set once by the conversion operation.
    converted_to_client_id = Column(Integer, nullable=True)

    notes = relationship(
        "LeadNote",
        order_by="LeadNote.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class LeadNote(Base):
    """Free-text note appended to a lead."""

    __tablename__ = "lead_notes"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False)

    text = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow)
    user = Column(String(64), nullable=False)


# Billable customers.
class Client(Base):
    """Converted, billable customer."""

    __tablename__ = "clients"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False, default="")
    company = Column(String(255), nullable=False, default="")
    address = Column(Text, nullable=False, default="")

    created_date = Column(Date, nullable=False)

    # Increased only when an invoice becomes fully paid.
    total_revenue = Column(Money, nullable=False, default=0)

    # Back-reference to the originating lead, if any.
    lead_id = Column(Integer, nullable=True)


# Quotations and their line items.
class Quotation(Base):
    """Priced proposal of line items."""

    __tablename__ = "quotations"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)

    # QT-<year>-<id>, assigned once at creation.
    quotation_number = Column(String(32), unique=True)

    client_id = Column(Integer, nullable=False, index=True)
    client_name = Column(String(255), nullable=False, default="")

    # Derived from the items and tax rate on every write.
    subtotal = Column(Money, nullable=False, default=0)
    tax_rate = Column(Numeric(6, 2, asdecimal=False), nullable=False, default=0)
    tax_amount = Column(Money, nullable=False, default=0)
    total = Column(Money, nullable=False, default=0)

    # Draft -> Pending -> Approved / Rejected
    status = Column(String(32), nullable=False, default="Draft")

    created_by = Column(String(64), nullable=False)
    created_by_name = Column(String(255), nullable=False)
    created_date = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=False)

    approved_by = Column(String(64), nullable=True)
    approved_date = Column(Date, nullable=True)

    notes = Column(Text, nullable=False, default="")

    items = relationship(
        "QuotationItem",
        order_by="QuotationItem.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class QuotationItem(Base):
    """Line item of a quotation; amount is quantity x unit price."""

    __tablename__ = "quotation_items"

    id = Column(Integer, primary_key=True)
    quotation_id = Column(
        Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Money, nullable=False)
    amount = Column(Money, nullable=False)


# Invoices and their copied line items.
class Invoice(Base):
    """Billing document generated from an approved quotation."""

    __tablename__ = "invoices"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)

    # INV-<year>-<id>, assigned once at creation.
    invoice_number = Column(String(32), unique=True)

    quotation_id = Column(Integer, nullable=False, index=True)
    client_id = Column(Integer, nullable=False, index=True)

    # Snapshot of the client at generation time.
    client_name = Column(String(255), nullable=False, default="")
    client_address = Column(Text, nullable=False, default="")

    # Copied verbatim from the quotation.
    subtotal = Column(Money, nullable=False, default=0)
    tax_amount = Column(Money, nullable=False, default=0)
    total = Column(Money, nullable=False, default=0)

    # Generated, Sent, Paid, Overdue, Partially Paid
    status = Column(String(32), nullable=False, default="Generated")

    generated_date = Column(Date, nullable=False)
    sent_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=False)

    # Payment tracking: latest payment details overwrite the previous ones.
    paid_date = Column(Date, nullable=True)
    paid_amount = Column(Money, nullable=False, default=0)
    payment_method = Column(String(32), nullable=True)
    transaction_ref = Column(String(128), nullable=True)

    notes = Column(Text, nullable=False, default="")

    items = relationship(
        "InvoiceItem",
        order_by="InvoiceItem.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class InvoiceItem(Base):
    """Line item copied from the source quotation."""

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Money, nullable=False)
    amount = Column(Money, nullable=False)


# Support tickets and their notes.
class Ticket(Base):
    """Support or service request tied to a client."""

    __tablename__ = "tickets"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)

    # TKT-<year>-<id>, assigned once at creation.
    ticket_number = Column(String(32), unique=True)

    client_id = Column(Integer, nullable=False, index=True)
    client_name = Column(String(255), nullable=False, default="")

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    priority = Column(String(16), nullable=False)
    status = Column(String(32), nullable=False, default="Open")

    assigned_to = Column(String(64), nullable=False)
    assigned_to_name = Column(String(255), nullable=False)

    created_date = Column(Date, nullable=False)
    created_by = Column(String(64), nullable=False)

    # Write-once: stamped the first time the status reaches the value.
    resolved_date = Column(Date, nullable=True)
    closed_date = Column(Date, nullable=True)

    notes = relationship(
        "TicketNote",
        order_by="TicketNote.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class TicketNote(Base):
    """Free-text note appended to a ticket."""

    __tablename__ = "ticket_notes"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False)

    text = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow)
    user = Column(String(64), nullable=False)


# Audit trail shown on the dashboard.
class Activity(Base):
    """Append-only audit record emitted by mutating operations."""

    __tablename__ = "activities"
    __table_args__ = _AUTOINCREMENT

    id = Column(Integer, primary_key=True, autoincrement=True)

    timestamp = Column(DateTime, nullable=False, default=utcnow)
    user = Column(String(64), nullable=False)
    action = Column(String(128), nullable=False)
    entity = Column(String(255), nullable=False)
    entity_id = Column(Integer, nullable=True)
