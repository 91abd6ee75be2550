"""
User interface helpers (display) for the CLI.

This module provides table display functions for every entity and for
the dashboard metrics, built on rich.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional

from rich.console import Console
from rich.table import Table

from .schemas import DashboardMetrics

console = Console()


# ============================================================
# FORMATTING
# ============================================================

def _format_date_display(value: Any) -> str:
    """
    Format a date or datetime for table display.

    Returns:
        '2025-10-27' for dates, '2025-10-27 10:00' for timestamps,
        '' when the value is missing.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _format_money(value: Optional[float]) -> str:
    return f"{value or 0:,.2f}"


# Status colors shared by every document table.
STATUS_STYLES = {
    "New": "cyan",
    "In Progress": "yellow",
    "Converted": "green",
    "Lost": "red",
    "Draft": "dim",
    "Pending": "yellow",
    "Approved": "green",
    "Rejected": "red",
    "Generated": "cyan",
    "Sent": "blue",
    "Paid": "green",
    "Partially Paid": "yellow",
    "Overdue": "red",
    "Open": "cyan",
    "Resolved": "green",
    "Closed": "dim",
}


def _status(value: str) -> str:
    style = STATUS_STYLES.get(value)
    return f"[{style}]{value}[/{style}]" if style else value


# ============================================================
# TABLE DISPLAY FUNCTIONS
# ============================================================

def print_users_table(users: Iterable[Any]) -> None:
    """
    Display the user accounts in a table.

    Passwords are never shown for security reasons.
    """
    table = Table(title="Users", expand=True)

    table.add_column("ID", justify="right")
    table.add_column("Username", overflow="fold")
    table.add_column("Name", overflow="fold")
    table.add_column("Role", overflow="fold")

    for u in users:
        table.add_row(str(u.id), u.username, u.name, u.role)

    console.print(table)


def print_leads_table(leads: Iterable[Any]) -> None:
    table = Table(title="Leads", expand=True)

    table.add_column("ID", justify="right")
    table.add_column("Name", overflow="fold")
    table.add_column("Company", overflow="fold")
    table.add_column("Source", overflow="fold")
    table.add_column("Status", overflow="fold")
    table.add_column("Assigned to", overflow="fold")
    table.add_column("Created", overflow="fold")
    table.add_column("Client", justify="right")

    for lead in leads:
        table.add_row(
            str(lead.id),
            lead.name,
            lead.company,
            lead.source,
            _status(lead.status),
            lead.assigned_to_name,
            _format_date_display(lead.created_date),
            str(lead.converted_to_client_id or ""),
        )

    console.print(table)


def print_clients_table(clients: Iterable[Any]) -> None:
    """
    Display a list of clients in a table.
    """
    table = Table(title="Clients", expand=True)

    table.add_column("ID", justify="right")
    table.add_column("Name", overflow="fold")
    table.add_column("Company", overflow="fold")
    table.add_column("Email", overflow="fold")
    table.add_column("Phone", overflow="fold")
    table.add_column("Created", overflow="fold")
    table.add_column("Revenue", justify="right")

    for c in clients:
        table.add_row(
            str(c.id),
            c.name,
            c.company,
            c.email,
            c.phone,
            _format_date_display(c.created_date),
            _format_money(c.total_revenue),
        )

    console.print(table)


def print_quotations_table(quotations: Iterable[Any]) -> None:
    table = Table(title="Quotations", expand=True)

    table.add_column("Number", overflow="fold")
    table.add_column("Client", overflow="fold")
    table.add_column("Status", overflow="fold")
    table.add_column("Subtotal", justify="right")
    table.add_column("Tax", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Created", overflow="fold")
    table.add_column("Valid until", overflow="fold")

    for q in quotations:
        table.add_row(
            q.quotation_number,
            q.client_name,
            _status(q.status),
            _format_money(q.subtotal),
            _format_money(q.tax_amount),
            _format_money(q.total),
            _format_date_display(q.created_date),
            _format_date_display(q.valid_until),
        )

    console.print(table)


def print_invoices_table(invoices: Iterable[Any], title: str = "Invoices") -> None:
    """
    Display invoices with their payment state.

    The balance column is what remains to be paid.
    """
    table = Table(title=title, expand=True)

    table.add_column("Number", overflow="fold")
    table.add_column("Client", overflow="fold")
    table.add_column("Status", overflow="fold")
    table.add_column("Total", justify="right")
    table.add_column("Paid", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Generated", overflow="fold")
    table.add_column("Due", overflow="fold")

    for inv in invoices:
        table.add_row(
            inv.invoice_number,
            inv.client_name,
            _status(inv.status),
            _format_money(inv.total),
            _format_money(inv.paid_amount),
            _format_money(max((inv.total or 0) - (inv.paid_amount or 0), 0)),
            _format_date_display(inv.generated_date),
            _format_date_display(inv.due_date),
        )

    console.print(table)


def print_tickets_table(tickets: Iterable[Any]) -> None:
    table = Table(title="Tickets", expand=True)

    table.add_column("Number", overflow="fold")
    table.add_column("Client", overflow="fold")
    table.add_column("Title", overflow="fold")
    table.add_column("Priority", overflow="fold")
    table.add_column("Status", overflow="fold")
    table.add_column("Assigned to", overflow="fold")
    table.add_column("Created", overflow="fold")

    for t in tickets:
        table.add_row(
            t.ticket_number,
            t.client_name,
            t.title,
            t.priority,
            _status(t.status),
            t.assigned_to_name,
            _format_date_display(t.created_date),
        )

    console.print(table)


def print_activities_table(activities: Iterable[Any]) -> None:
    table = Table(title="Recent activity", expand=True)

    table.add_column("When", overflow="fold")
    table.add_column("User", overflow="fold")
    table.add_column("Action", overflow="fold")
    table.add_column("Entity", overflow="fold")

    for a in activities:
        table.add_row(
            _format_date_display(a.timestamp),
            a.user,
            a.action,
            a.entity,
        )

    console.print(table)


def print_dashboard(metrics: DashboardMetrics) -> None:
    """Display the dashboard figures as three small tables."""
    totals = Table(title="Dashboard", expand=True)
    totals.add_column("Metric")
    totals.add_column("Value", justify="right")
    totals.add_row("Leads", str(metrics.total_leads))
    totals.add_row("Clients", str(metrics.total_clients))
    totals.add_row("Quotations", str(metrics.total_quotations))
    totals.add_row("Revenue", _format_money(metrics.total_revenue))
    totals.add_row("Pending payments", _format_money(metrics.pending_payments))
    console.print(totals)

    statuses = Table(title="Pipeline", expand=True)
    statuses.add_column("Lead status")
    statuses.add_column("Count", justify="right")
    statuses.add_column("Quotation status")
    statuses.add_column("Count", justify="right")
    lead_rows = list(metrics.lead_status_distribution.items())
    quotation_rows = list(metrics.quotation_status_distribution.items())
    for (lead_status, lead_count), (quote_status, quote_count) in zip(lead_rows, quotation_rows):
        statuses.add_row(_status(lead_status), str(lead_count), _status(quote_status), str(quote_count))
    console.print(statuses)

    revenue = Table(title="Monthly revenue", expand=True)
    revenue.add_column("Month")
    revenue.add_column("Revenue", justify="right")
    for point in metrics.monthly_revenue:
        revenue.add_row(point.month, _format_money(point.revenue))
    console.print(revenue)
