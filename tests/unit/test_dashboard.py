"""
Unit tests for the dashboard metrics and the activity feed.
"""
from datetime import date

from bizdesk.schemas import PaymentIn
from bizdesk.services import (
    convert_lead_to_client,
    create_activity,
    get_dashboard_metrics,
    list_activities,
    record_payment,
    reject_quotation,
)
from bizdesk.services.dashboard_service import monthly_revenue


class TestDashboardMetrics:
    """Counts, revenue and distributions."""

    def test_empty_store(self, db):
        metrics = get_dashboard_metrics(db, today=date(2025, 10, 27))

        assert metrics.total_leads == 0
        assert metrics.total_revenue == 0
        assert metrics.lead_status_distribution == {
            "New": 0,
            "In Progress": 0,
            "Converted": 0,
            "Lost": 0,
        }
        assert [p.month for p in metrics.monthly_revenue] == [
            "May", "Jun", "Jul", "Aug", "Sep", "Oct"
        ]
        assert all(p.revenue == 0 for p in metrics.monthly_revenue)

    def test_lead_distribution_sums_to_total(self, db, make_lead):
        make_lead(status="New")
        make_lead(status="In Progress")
        make_lead(status="Lost")
        convert_lead_to_client(db, make_lead().id)

        metrics = get_dashboard_metrics(db)

        assert metrics.total_leads == 4
        assert sum(metrics.lead_status_distribution.values()) == 4
        assert metrics.lead_status_distribution["Converted"] == 1
        assert metrics.total_clients == 1

    def test_quotation_distribution(self, db, make_quotation):
        make_quotation()
        reject_quotation(db, make_quotation().id)

        metrics = get_dashboard_metrics(db)

        assert metrics.total_quotations == 2
        assert metrics.quotation_status_distribution == {
            "Draft": 1,
            "Pending": 0,
            "Approved": 0,
            "Rejected": 1,
        }

    def test_revenue_and_pending_payments(self, db, make_invoice):
        paid = make_invoice()
        partial = make_invoice()
        make_invoice()
        record_payment(
            db,
            paid.id,
            PaymentIn(payment_date=date(2025, 10, 28), payment_amount=236, payment_method="UPI"),
        )
        record_payment(
            db,
            partial.id,
            PaymentIn(payment_date=date(2025, 10, 28), payment_amount=36, payment_method="Cash"),
        )

        metrics = get_dashboard_metrics(db, today=date(2025, 10, 30))

        assert metrics.total_revenue == 236
        assert metrics.pending_payments == 200 + 236
        assert metrics.monthly_revenue[-1].month == "Oct"
        assert metrics.monthly_revenue[-1].revenue == 236

    def test_wire_format_is_camel_case(self, db):
        payload = get_dashboard_metrics(db).model_dump(mode="json", by_alias=True)

        assert set(payload) == {
            "totalLeads",
            "totalClients",
            "totalQuotations",
            "totalRevenue",
            "pendingPayments",
            "leadStatusDistribution",
            "quotationStatusDistribution",
            "monthlyRevenue",
        }


class _PaidInvoice:
    def __init__(self, paid_date, total):
        self.paid_date = paid_date
        self.total = total


class TestMonthlyRevenue:
    """Trailing six-month series."""

    def test_window_crosses_year_boundary(self):
        series = monthly_revenue([], today=date(2026, 2, 10))

        assert [p.month for p in series] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]

    def test_same_month_of_another_year_is_not_counted(self):
        invoices = [
            _PaidInvoice(date(2025, 10, 3), 100),
            _PaidInvoice(date(2025, 10, 20), 50.5),
            _PaidInvoice(date(2024, 10, 3), 999),
            _PaidInvoice(date(2025, 8, 1), 10),
        ]

        series = monthly_revenue(invoices, today=date(2025, 10, 27))

        by_month = {p.month: p.revenue for p in series}
        assert by_month["Oct"] == 150.5
        assert by_month["Aug"] == 10
        assert by_month["Sep"] == 0


class TestActivityFeed:
    """Newest first, capped at 50."""

    def test_limit_and_order(self, db):
        for index in range(60):
            create_activity(db, user="admin", action="created lead", entity=f"Lead {index}")
        db.commit()

        feed = list_activities(db)

        assert len(feed) == 50
        assert feed[0].entity == "Lead 59"
