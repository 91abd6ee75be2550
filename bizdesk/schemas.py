"""
Record shapes and validators for every entity.

Input models validate request payloads before they reach the services;
output models shape ORM rows into the camelCase JSON the API speaks.
Derived fields (quotation totals, item amounts, document numbers,
denormalized names) only exist on the output side.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import MissingFieldError, ValidationError


# ============================================================
# VOCABULARIES
# ============================================================

Role = Literal["admin", "manager", "exec", "accountant", "engineer", "client"]
LeadSource = Literal["Website", "Referral", "Cold Call", "Social Media"]
LeadStatus = Literal["New", "In Progress", "Converted", "Lost"]
QuotationStatus = Literal["Draft", "Pending", "Approved", "Rejected"]
InvoiceStatus = Literal["Generated", "Sent", "Paid", "Overdue", "Partially Paid"]
TicketPriority = Literal["Low", "Medium", "High", "Critical"]
TicketStatus = Literal["Open", "In Progress", "Resolved", "Closed"]
PaymentMethod = Literal["Cash", "Check", "Bank Transfer", "Credit Card", "UPI"]

ROLES = get_args(Role)
LEAD_STATUSES = get_args(LeadStatus)
QUOTATION_STATUSES = get_args(QuotationStatus)
INVOICE_STATUSES = get_args(InvoiceStatus)
TICKET_STATUSES = get_args(TicketStatus)


# Stored timestamps are naive UTC; emit them with an explicit Z.
UtcTimestamp = Annotated[
    datetime,
    PlainSerializer(lambda value: value.isoformat() + "Z", return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrmModel(CamelModel):
    model_config = ConfigDict(from_attributes=True)


# ============================================================
# INPUT MODELS
# ============================================================

class NoteIn(CamelModel):
    text: str = Field(min_length=1)
    user: Optional[str] = None
    timestamp: Optional[datetime] = None


class LeadCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = ""
    company: str = ""
    source: LeadSource
    status: LeadStatus = "New"
    assigned_to: str = Field(min_length=1)
    created_date: date = Field(default_factory=date.today)
    notes: List[NoteIn] = Field(default_factory=list)


class LeadUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    source: Optional[LeadSource] = None
    status: Optional[LeadStatus] = None
    assigned_to: Optional[str] = Field(default=None, min_length=1)
    created_date: Optional[date] = None


class ClientCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = ""
    company: str = ""
    address: str = ""
    created_date: date = Field(default_factory=date.today)
    lead_id: Optional[int] = None


class ClientUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    created_date: Optional[date] = None


class QuotationItemIn(CamelModel):
    """Line item as sent by callers; any ``amount`` they send is ignored."""

    description: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)


class QuotationCreate(CamelModel):
    client_id: int
    items: List[QuotationItemIn] = Field(default_factory=list)
    tax_rate: float = Field(default=0, ge=0, le=100)
    status: QuotationStatus = "Draft"
    created_by: Optional[str] = None
    created_date: date = Field(default_factory=date.today)
    valid_until: Optional[date] = None
    notes: str = ""


class QuotationUpdate(CamelModel):
    client_id: Optional[int] = None
    items: Optional[List[QuotationItemIn]] = None
    tax_rate: Optional[float] = Field(default=None, ge=0, le=100)
    status: Optional[QuotationStatus] = None
    created_date: Optional[date] = None
    valid_until: Optional[date] = None
    notes: Optional[str] = None


class ApproveIn(CamelModel):
    approved_by: Optional[str] = None


class InvoiceCreate(CamelModel):
    """Low-level invoice constructor input; totals come from the quotation."""

    quotation_id: int
    client_id: int
    status: InvoiceStatus = "Generated"
    generated_date: date = Field(default_factory=date.today)
    due_date: date
    paid_amount: float = Field(default=0, ge=0)
    notes: str = ""


class InvoiceUpdate(CamelModel):
    status: Optional[InvoiceStatus] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class PaymentIn(CamelModel):
    payment_date: date = Field(default_factory=date.today)
    payment_amount: float = Field(ge=0)
    payment_method: PaymentMethod
    transaction_ref: str = ""
    notes: str = ""


class TicketCreate(CamelModel):
    client_id: int
    title: str = Field(min_length=1)
    description: str = ""
    priority: TicketPriority
    status: TicketStatus = "Open"
    assigned_to: str = Field(min_length=1)
    created_date: date = Field(default_factory=date.today)
    created_by: Optional[str] = None
    notes: List[NoteIn] = Field(default_factory=list)


class TicketUpdate(CamelModel):
    client_id: Optional[int] = None
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    assigned_to: Optional[str] = Field(default=None, min_length=1)


class TicketStatusIn(CamelModel):
    status: TicketStatus


# ============================================================
# OUTPUT MODELS
# ============================================================

class UserOut(OrmModel):
    id: str
    username: str
    role: Role
    name: str


class NoteOut(OrmModel):
    text: str
    timestamp: UtcTimestamp
    user: str


class LeadOut(OrmModel):
    id: int
    name: str
    email: str
    phone: str
    company: str
    source: LeadSource
    status: LeadStatus
    assigned_to: str
    assigned_to_name: str
    created_date: date
    notes: List[NoteOut]
    converted_to_client_id: Optional[int]


class ClientOut(OrmModel):
    id: int
    name: str
    email: str
    phone: str
    company: str
    address: str
    created_date: date
    total_revenue: float
    lead_id: Optional[int]


class LineItemOut(OrmModel):
    description: str
    quantity: int
    unit_price: float
    amount: float


class QuotationOut(OrmModel):
    id: int
    quotation_number: str
    client_id: int
    client_name: str
    items: List[LineItemOut]
    subtotal: float
    tax_rate: float
    tax_amount: float
    total: float
    status: QuotationStatus
    created_by: str
    created_by_name: str
    created_date: date
    valid_until: date
    approved_by: Optional[str]
    approved_date: Optional[date]
    notes: str


class InvoiceOut(OrmModel):
    id: int
    invoice_number: str
    quotation_id: int
    client_id: int
    client_name: str
    client_address: str
    items: List[LineItemOut]
    subtotal: float
    tax_amount: float
    total: float
    status: InvoiceStatus
    generated_date: date
    sent_date: Optional[date]
    due_date: date
    paid_date: Optional[date]
    paid_amount: float
    payment_method: Optional[str]
    transaction_ref: Optional[str]
    notes: str


class TicketOut(OrmModel):
    id: int
    ticket_number: str
    client_id: int
    client_name: str
    title: str
    description: str
    priority: TicketPriority
    status: TicketStatus
    assigned_to: str
    assigned_to_name: str
    created_date: date
    created_by: str
    notes: List[NoteOut]
    resolved_date: Optional[date]
    closed_date: Optional[date]


class ActivityOut(OrmModel):
    id: int
    timestamp: UtcTimestamp
    user: str
    action: str
    entity: str
    entity_id: Optional[int]


class MonthlyRevenue(CamelModel):
    month: str
    revenue: float


class DashboardMetrics(CamelModel):
    total_leads: int
    total_clients: int
    total_quotations: int
    total_revenue: float
    pending_payments: float
    lead_status_distribution: Dict[str, int]
    quotation_status_distribution: Dict[str, int]
    monthly_revenue: List[MonthlyRevenue]


# ============================================================
# HELPERS
# ============================================================

M = TypeVar("M", bound=BaseModel)


def parse_payload(schema: Type[M], data: Any) -> M:
    """
    Validate a raw payload against an input model.

    Raises:
        ValidationError: with the first offending field, e.g. ``email``.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        if first.get("type") == "missing" and field:
            raise MissingFieldError(field)
        message = first.get("msg", "Invalid value")
        raise ValidationError(f"{field}: {message}" if field else message, field=field)


def changes(payload: BaseModel) -> Dict[str, Any]:
    """Fields explicitly provided in a partial update, as snake_case keys."""
    return payload.model_dump(exclude_unset=True, exclude_none=True)


def dump(schema: Type[BaseModel], obj: Any) -> Dict[str, Any]:
    """Serialize an ORM row (or read model) into its JSON-ready dict."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


def dump_many(schema: Type[BaseModel], rows) -> List[Dict[str, Any]]:
    return [dump(schema, row) for row in rows]
