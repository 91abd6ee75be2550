"""
Bootstrap data.

This module creates the default user accounts and, when enabled, a demo
dataset (leads, clients, quotations, invoices, tickets) that exercises
every workflow of the application.

All sample records go through the same services as API requests, so
derived fields, document numbers and activities are produced the usual way.
"""

from __future__ import annotations

import logging
import secrets
from datetime import date

from sqlalchemy.orm import Session

from .models import Lead
from .schemas import (
    ClientCreate,
    InvoiceCreate,
    LeadCreate,
    PaymentIn,
    QuotationCreate,
    TicketCreate,
)
from .services import (
    approve_quotation,
    convert_lead_to_client,
    create_client,
    create_invoice,
    create_lead,
    create_quotation,
    create_ticket,
    create_user,
    list_clients,
    list_leads,
    list_quotations,
    mark_invoice_as_sent,
    record_payment,
    reject_quotation,
    submit_quotation,
    update_ticket_status,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULT USERS
# =============================================================================
# (id, username, password, role, display name)

DEFAULT_USERS = [
    ("1", "admin", "admin123", "admin", "Administrator"),
    ("2", "manager", "manager123", "manager", "Sales Manager"),
    ("3", "exec", "exec123", "exec", "Sales Executive"),
    ("4", "accountant", "acc123", "accountant", "Accountant"),
    ("5", "engineer", "eng123", "engineer", "Engineer"),
    ("6", "client", "client123", "client", "Client User"),
]


# =============================================================================
# SAMPLE DATA
# =============================================================================

SAMPLE_LEADS = [
    ("John Smith", "john.smith@techcorp.com", "+1-555-0101", "TechCorp Inc", "Website", "New", "exec", "2025-10-15"),
    ("Sarah Johnson", "sarah.j@innovate.com", "+1-555-0102", "Innovate Solutions", "Referral", "In Progress", "exec", "2025-10-16"),
    ("Michael Brown", "mbrown@buildco.com", "+1-555-0103", "BuildCo Ltd", "Cold Call", "In Progress", "exec", "2025-10-18"),
    ("Emily Davis", "emily.d@startupx.io", "+1-555-0104", "StartupX", "Social Media", "Converted", "exec", "2025-10-20"),
    ("Robert Wilson", "rwilson@megasoft.com", "+1-555-0105", "MegaSoft Corp", "Website", "Converted", "manager", "2025-10-21"),
    ("Jennifer Martinez", "jen.m@cloudsys.com", "+1-555-0106", "CloudSys Technologies", "Referral", "New", "exec", "2025-10-22"),
    ("David Lee", "david.lee@dataflow.com", "+1-555-0107", "DataFlow Analytics", "Website", "In Progress", "manager", "2025-10-23"),
    ("Lisa Anderson", "landerson@webdev.io", "+1-555-0108", "WebDev Studio", "Cold Call", "Lost", "exec", "2025-10-24"),
    ("James Taylor", "jtaylor@enterprise.com", "+1-555-0109", "Enterprise Solutions", "Social Media", "New", "exec", "2025-10-25"),
    ("Maria Garcia", "maria.g@biztech.com", "+1-555-0110", "BizTech Consulting", "Referral", "In Progress", "manager", "2025-10-26"),
]

SAMPLE_CLIENTS = [
    {
        "name": "Patricia White",
        "email": "pwhite@globaltech.com",
        "phone": "+1-555-0111",
        "company": "GlobalTech Industries",
        "address": "100 Business Park Dr, Suite 200, San Francisco, CA 94107",
        "created_date": "2025-09-15",
    },
    {
        "name": "Thomas Clark",
        "email": "tclark@innovateinc.com",
        "phone": "+1-555-0112",
        "company": "Innovate Inc",
        "address": "250 Tech Center, Floor 5, Austin, TX 78701",
        "created_date": "2025-09-20",
    },
    {
        "name": "Angela Roberts",
        "email": "aroberts@futuretech.com",
        "phone": "+1-555-0113",
        "company": "FutureTech Solutions",
        "address": "500 Innovation Blvd, Seattle, WA 98101",
        "created_date": "2025-09-25",
    },
]

# client index refers to the client list as returned by list_clients().
SAMPLE_QUOTATIONS = [
    {
        "client": 0,
        "items": [("Web Development - Custom Portal", 1, 15000), ("SEO Optimization Package", 6, 800)],
        "status": "Draft",
        "created_by": "exec",
        "created_date": "2025-10-25",
        "valid_until": "2025-11-25",
        "notes": "Standard payment terms: Net 30",
    },
    {
        "client": 1,
        "items": [("Mobile App Development", 1, 25000), ("Backend API Integration", 1, 8000)],
        "status": "Pending",
        "created_by": "exec",
        "created_date": "2025-10-26",
        "valid_until": "2025-11-26",
        "notes": "Includes 3 months support",
    },
    {
        "client": 2,
        "items": [("Cloud Infrastructure Setup", 1, 12000), ("Security Audit", 1, 5000)],
        "status": "Approved",
        "created_by": "manager",
        "created_date": "2025-10-20",
        "valid_until": "2025-11-20",
        "notes": "Priority project",
    },
    {
        "client": 3,
        "items": [("Digital Marketing Campaign", 3, 2500), ("Content Creation", 10, 300)],
        "status": "Approved",
        "created_by": "exec",
        "created_date": "2025-10-18",
        "valid_until": "2025-11-18",
        "notes": "Quarterly package",
    },
    {
        "client": 4,
        "items": [("CRM Implementation", 1, 18000), ("Training Sessions", 5, 800)],
        "status": "Approved",
        "created_by": "manager",
        "created_date": "2025-10-22",
        "valid_until": "2025-11-22",
        "notes": "Includes onboarding",
    },
    {
        "client": 0,
        "items": [("Website Redesign", 1, 8000)],
        "status": "Draft",
        "created_by": "exec",
        "created_date": "2025-10-27",
        "valid_until": "2025-11-27",
        "notes": "Modern responsive design",
    },
    {
        "client": 2,
        "items": [("E-commerce Platform", 1, 30000), ("Payment Gateway Integration", 1, 3000)],
        "status": "Pending",
        "created_by": "exec",
        "created_date": "2025-10-28",
        "valid_until": "2025-11-28",
        "notes": "Full featured online store",
    },
    {
        "client": 1,
        "items": [("Data Analytics Dashboard", 1, 14000)],
        "status": "Rejected",
        "created_by": "exec",
        "created_date": "2025-10-15",
        "valid_until": "2025-11-15",
        "notes": "Custom reporting",
    },
]

SAMPLE_INVOICE_DATE = date(2025, 10, 27)
SAMPLE_INVOICE_DUE = date(2025, 11, 27)
SAMPLE_PAYMENT_DATE = date(2025, 10, 28)

SAMPLE_TICKETS = [
    {
        "client": 0,
        "title": "Server Setup Required",
        "description": "Need server configuration and deployment for new application",
        "priority": "High",
        "status": "Open",
        "created_date": "2025-10-26",
        "created_by": "admin",
        "notes": [("Ticket created", "2025-10-26T09:00:00Z", "admin")],
    },
    {
        "client": 1,
        "title": "Email Integration Issue",
        "description": "SMTP configuration not working properly",
        "priority": "Medium",
        "status": "In Progress",
        "created_date": "2025-10-25",
        "created_by": "admin",
        "notes": [
            ("Started investigating", "2025-10-25T14:30:00Z", "engineer"),
            ("Found configuration issue", "2025-10-26T10:15:00Z", "engineer"),
        ],
    },
    {
        "client": 2,
        "title": "Database Performance Optimization",
        "description": "Queries are running slow, need optimization",
        "priority": "Critical",
        "status": "In Progress",
        "created_date": "2025-10-24",
        "created_by": "client",
        "notes": [("Analysis in progress", "2025-10-24T16:00:00Z", "engineer")],
    },
    {
        "client": 3,
        "title": "Feature Request: Export to PDF",
        "description": "Add ability to export reports to PDF format",
        "priority": "Low",
        "status": "Resolved",
        "created_date": "2025-10-20",
        "created_by": "admin",
        "notes": [
            ("Feature implemented", "2025-10-23T11:00:00Z", "engineer"),
            ("Deployed to production", "2025-10-24T09:00:00Z", "engineer"),
        ],
    },
    {
        "client": 4,
        "title": "SSL Certificate Renewal",
        "description": "SSL certificate expiring soon, needs renewal",
        "priority": "High",
        "status": "Resolved",
        "created_date": "2025-10-18",
        "created_by": "admin",
        "notes": [("Certificate renewed", "2025-10-19T10:00:00Z", "engineer")],
    },
    {
        "client": 0,
        "title": "Backup System Check",
        "description": "Regular monthly backup system verification",
        "priority": "Medium",
        "status": "Closed",
        "created_date": "2025-10-15",
        "created_by": "admin",
        "notes": [
            ("Verification completed", "2025-10-16T14:00:00Z", "engineer"),
            ("All systems operational", "2025-10-16T15:00:00Z", "engineer"),
        ],
    },
]


# =============================================================================
# SEEDING FUNCTIONS
# =============================================================================

def seed_default_users(db: Session) -> None:
    """
    Ensure the six default accounts exist.

    Existing usernames are left untouched, so this is safe to call on
    every startup.
    """
    for user_id, username, password, role, name in DEFAULT_USERS:
        create_user(
            db,
            user_id=user_id,
            username=username,
            password_plain=password,
            role=role,
            name=name,
        )


def _seed_leads(db: Session) -> None:
    for name, email, phone, company, source, status, assigned_to, created in SAMPLE_LEADS:
        # Converted is reached through the conversion below, not set directly.
        create_lead(
            db,
            LeadCreate(
                name=name,
                email=email,
                phone=phone,
                company=company,
                source=source,
                status="In Progress" if status == "Converted" else status,
                assigned_to=assigned_to,
                created_date=created,
                notes=[
                    {
                        "text": "Initial contact made",
                        "timestamp": f"{created}T10:00:00Z",
                        "user": assigned_to,
                    }
                ],
            ),
        )

    to_convert = {row[0] for row in SAMPLE_LEADS if row[5] == "Converted"}
    converted = 0
    for lead in list_leads(db):
        if lead.name in to_convert:
            convert_lead_to_client(db, lead.id)
            converted += 1
    logger.info("Seeded %d leads, converted %d", len(SAMPLE_LEADS), converted)


def _seed_clients(db: Session) -> None:
    for row in SAMPLE_CLIENTS:
        create_client(db, ClientCreate(**row))


def _seed_quotations(db: Session) -> None:
    clients = list_clients(db)

    for row in SAMPLE_QUOTATIONS:
        quotation = create_quotation(
            db,
            QuotationCreate(
                client_id=clients[row["client"]].id,
                items=[
                    {"description": description, "quantity": quantity, "unit_price": price}
                    for description, quantity, price in row["items"]
                ],
                tax_rate=18,
                status=row["status"],
                created_by=row["created_by"],
                created_date=row["created_date"],
                valid_until=row["valid_until"],
                notes=row["notes"],
            ),
        )

        if row["status"] == "Approved":
            approve_quotation(db, quotation.id, "manager")
        elif row["status"] == "Pending":
            submit_quotation(db, quotation.id)
        elif row["status"] == "Rejected":
            reject_quotation(db, quotation.id)


def _seed_invoices(db: Session) -> None:
    """
    Invoice up to five approved quotations.

    The first two stay Generated, the third is sent, the rest are paid
    in full (which credits the client's revenue).
    """
    approved = [q for q in list_quotations(db) if q.status == "Approved"][:5]

    for index, quotation in enumerate(approved):
        invoice = create_invoice(
            db,
            InvoiceCreate(
                quotation_id=quotation.id,
                client_id=quotation.client_id,
                status="Sent" if index == 2 else "Generated",
                generated_date=SAMPLE_INVOICE_DATE,
                due_date=SAMPLE_INVOICE_DUE,
                paid_amount=0,
                notes=quotation.notes,
            ),
        )

        if index == 2:
            mark_invoice_as_sent(db, invoice.id, today=SAMPLE_INVOICE_DATE)
        elif index >= 3:
            record_payment(
                db,
                invoice.id,
                PaymentIn(
                    payment_date=SAMPLE_PAYMENT_DATE,
                    payment_amount=invoice.total,
                    payment_method="Bank Transfer",
                    transaction_ref=f"TXN{secrets.token_hex(5).upper()[:9]}",
                    notes="Payment received in full",
                ),
            )


def _seed_tickets(db: Session) -> None:
    clients = list_clients(db)

    for row in SAMPLE_TICKETS:
        ticket = create_ticket(
            db,
            TicketCreate(
                client_id=clients[row["client"]].id,
                title=row["title"],
                description=row["description"],
                priority=row["priority"],
                status="Open",
                assigned_to="engineer",
                created_date=row["created_date"],
                created_by=row["created_by"],
                notes=[
                    {"text": text, "timestamp": timestamp, "user": user}
                    for text, timestamp, user in row["notes"]
                ],
            ),
        )
        if row["status"] != "Open":
            update_ticket_status(db, ticket.id, row["status"])


def seed_sample_data(db: Session) -> bool:
    """
    Load the demo dataset into an empty store.

    Returns:
        True if data was loaded, False if leads already existed.
    """
    if db.query(Lead).first() is not None:
        logger.info("Sample data already initialized")
        return False

    logger.info("Initializing sample data...")
    _seed_leads(db)
    _seed_clients(db)
    _seed_quotations(db)
    _seed_invoices(db)
    _seed_tickets(db)
    logger.info("Sample data initialization complete")
    return True


def bootstrap(db: Session, *, sample_data: bool = True) -> None:
    """Create the default users, then the demo dataset if requested."""
    seed_default_users(db)
    if sample_data:
        seed_sample_data(db)
