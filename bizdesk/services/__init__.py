"""
Business logic services for the CRM application.

This package contains all service modules that implement the storage
operations and business rules for users, leads, clients, quotations,
invoices, tickets, activities and the dashboard.
"""

from .user_service import (
    get_user,
    get_user_by_username,
    list_users,
    create_user,
    resolve_display_name,
)

from .activity_service import (
    create_activity,
    list_activities,
)

from .lead_service import (
    list_leads,
    get_lead,
    create_lead,
    update_lead,
    delete_lead,
    add_lead_note,
    convert_lead_to_client,
)

from .client_service import (
    list_clients,
    get_client,
    create_client,
    update_client,
    delete_client,
    update_client_revenue,
)

from .quotation_service import (
    list_quotations,
    get_quotation,
    create_quotation,
    update_quotation,
    approve_quotation,
    reject_quotation,
    submit_quotation,
)

from .invoice_service import (
    list_invoices,
    get_invoice,
    create_invoice,
    generate_invoice,
    update_invoice,
    record_payment,
    mark_invoice_as_sent,
    mark_overdue_invoices,
)

from .ticket_service import (
    list_tickets,
    get_ticket,
    create_ticket,
    update_ticket,
    add_ticket_note,
    update_ticket_status,
)

from .dashboard_service import get_dashboard_metrics

__all__ = [
    # User service
    "get_user",
    "get_user_by_username",
    "list_users",
    "create_user",
    "resolve_display_name",
    # Activity service
    "create_activity",
    "list_activities",
    # Lead service
    "list_leads",
    "get_lead",
    "create_lead",
    "update_lead",
    "delete_lead",
    "add_lead_note",
    "convert_lead_to_client",
    # Client service
    "list_clients",
    "get_client",
    "create_client",
    "update_client",
    "delete_client",
    "update_client_revenue",
    # Quotation service
    "list_quotations",
    "get_quotation",
    "create_quotation",
    "update_quotation",
    "approve_quotation",
    "reject_quotation",
    "submit_quotation",
    # Invoice service
    "list_invoices",
    "get_invoice",
    "create_invoice",
    "generate_invoice",
    "update_invoice",
    "record_payment",
    "mark_invoice_as_sent",
    "mark_overdue_invoices",
    # Ticket service
    "list_tickets",
    "get_ticket",
    "create_ticket",
    "update_ticket",
    "add_ticket_note",
    "update_ticket_status",
    # Dashboard
    "get_dashboard_metrics",
]
