"""
Read-side aggregation for the dashboard.

Nothing here writes: the metrics are recomputed from the current rows on
every call.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models import Client, Invoice, Lead, Quotation
from ..schemas import DashboardMetrics, LEAD_STATUSES, MonthlyRevenue, QUOTATION_STATUSES

# Number of calendar months shown in the revenue series.
REVENUE_WINDOW_MONTHS = 6


def _distribution(statuses, keys) -> Dict[str, int]:
    """Count statuses into a fixed, zero-filled set of buckets."""
    counts = {key: 0 for key in keys}
    for status in statuses:
        if status in counts:
            counts[status] += 1
    return counts


def _trailing_months(today: date, count: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the last `count` months, oldest first."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def monthly_revenue(paid_invoices, today: date) -> List[MonthlyRevenue]:
    """
    Revenue of paid invoices per calendar month of their paidDate.

    Months are keyed by (year, month); labels are three-letter month names.
    """
    totals: Dict[Tuple[int, int], float] = defaultdict(float)
    for invoice in paid_invoices:
        if invoice.paid_date:
            totals[(invoice.paid_date.year, invoice.paid_date.month)] += invoice.total

    return [
        MonthlyRevenue(month=calendar.month_abbr[month], revenue=round(totals[(year, month)], 2))
        for year, month in _trailing_months(today, REVENUE_WINDOW_MONTHS)
    ]


def get_dashboard_metrics(db: Session, today: Optional[date] = None) -> DashboardMetrics:
    """
    Compute the dashboard figures.

    - totalRevenue: sum of totals of Paid invoices
    - pendingPayments: outstanding balance of every other invoice
    - status distributions with the four fixed buckets each
    """
    today = today or date.today()

    lead_statuses = [status for (status,) in db.query(Lead.status).all()]
    quotation_statuses = [status for (status,) in db.query(Quotation.status).all()]
    invoices = db.query(Invoice).all()

    paid = [inv for inv in invoices if inv.status == "Paid"]
    unpaid = [inv for inv in invoices if inv.status != "Paid"]

    return DashboardMetrics(
        total_leads=len(lead_statuses),
        total_clients=db.query(Client).count(),
        total_quotations=len(quotation_statuses),
        total_revenue=round(sum(inv.total for inv in paid), 2),
        pending_payments=round(sum(inv.total - inv.paid_amount for inv in unpaid), 2),
        lead_status_distribution=_distribution(lead_statuses, LEAD_STATUSES),
        quotation_status_distribution=_distribution(quotation_statuses, QUOTATION_STATUSES),
        monthly_revenue=monthly_revenue(paid, today),
    )
