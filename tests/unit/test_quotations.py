"""
Unit tests for quotation totals, numbering and status changes.
"""
from datetime import date

import pytest

from bizdesk.exceptions import ClientNotFoundError, QuotationNotFoundError
from bizdesk.schemas import QuotationCreate, QuotationUpdate
from bizdesk.services import (
    approve_quotation,
    create_quotation,
    get_quotation,
    list_activities,
    list_quotations,
    reject_quotation,
    submit_quotation,
    update_quotation,
)


class TestQuotationTotals:
    """subtotal, taxAmount and total are always derived."""

    def test_two_units_at_hundred_with_18_percent_tax(self, make_quotation):
        quotation = make_quotation()

        assert [item.amount for item in quotation.items] == [200]
        assert quotation.subtotal == 200
        assert quotation.tax_amount == 36
        assert quotation.total == 236

    def test_several_items_are_summed(self, make_quotation):
        quotation = make_quotation(
            items=[
                {"description": "Web Development", "quantity": 1, "unit_price": 15000},
                {"description": "SEO Package", "quantity": 6, "unit_price": 800},
            ],
        )

        assert quotation.subtotal == 19800
        assert quotation.tax_amount == 3564
        assert quotation.total == 23364

    def test_amounts_are_rounded_to_cents(self, make_quotation):
        quotation = make_quotation(
            items=[{"description": "Licence", "quantity": 3, "unit_price": 33.333}],
            tax_rate=7.5,
        )

        assert quotation.items[0].amount == 100.0
        assert quotation.subtotal == 100.0
        assert quotation.tax_amount == 7.5
        assert quotation.total == 107.5

    def test_no_items_gives_zero_totals(self, make_quotation):
        quotation = make_quotation(items=[])

        assert quotation.subtotal == 0
        assert quotation.tax_amount == 0
        assert quotation.total == 0

    def test_update_items_recomputes_totals(self, db, make_quotation):
        quotation = make_quotation()

        updated = update_quotation(
            db,
            quotation.id,
            QuotationUpdate(items=[{"description": "Audit", "quantity": 1, "unit_price": 500}]),
        )

        assert len(updated.items) == 1
        assert updated.subtotal == 500
        assert updated.tax_amount == 90
        assert updated.total == 590

    def test_tax_rate_zero_is_applied_on_update(self, db, make_quotation):
        quotation = make_quotation()

        updated = update_quotation(db, quotation.id, QuotationUpdate(tax_rate=0))

        assert updated.tax_rate == 0
        assert updated.tax_amount == 0
        assert updated.total == updated.subtotal == 200


class TestQuotationCreation:
    """Numbering, denormalized names and defaults."""

    def test_number_uses_year_and_padded_id(self, make_quotation):
        quotation = make_quotation()

        assert quotation.quotation_number == f"QT-{date.today().year}-{quotation.id:03d}"

    def test_number_survives_updates(self, db, make_quotation):
        quotation = make_quotation()
        number = quotation.quotation_number

        update_quotation(db, quotation.id, QuotationUpdate(notes="Revised", tax_rate=5))

        assert get_quotation(db, quotation.id).quotation_number == number

    def test_client_and_author_names_are_resolved(self, make_client, make_quotation):
        client = make_client(company="Innovate Inc")
        quotation = make_quotation(client=client, created_by="manager")

        assert quotation.client_name == "Innovate Inc"
        assert quotation.created_by_name == "Sales Manager"

    def test_valid_until_defaults_to_thirty_days(self, make_quotation):
        quotation = make_quotation(created_date=date(2025, 10, 25))

        assert quotation.valid_until == date(2025, 11, 24)

    def test_unknown_client_is_rejected(self, db):
        with pytest.raises(ClientNotFoundError):
            create_quotation(db, QuotationCreate(client_id=999, items=[]))

    def test_creation_is_recorded_in_activity_feed(self, db, make_quotation):
        quotation = make_quotation(created_by="exec")

        latest = list_activities(db)[0]
        assert latest.action == "created quotation"
        assert latest.entity == quotation.quotation_number
        assert latest.user == "exec"

    def test_client_filter(self, db, make_client, make_quotation):
        first = make_client(company="First Co")
        second = make_client(company="Second Co")
        make_quotation(client=first)
        make_quotation(client=second)
        make_quotation(client=second)

        assert len(list_quotations(db)) == 3
        assert {q.client_name for q in list_quotations(db, client_id=second.id)} == {"Second Co"}
        assert len(list_quotations(db, client_id=second.id)) == 2


class TestQuotationStatus:
    """approve / reject / submit."""

    def test_approve_stamps_approver_and_date(self, db, make_quotation):
        quotation = make_quotation()

        approved = approve_quotation(db, quotation.id, "manager", today=date(2025, 10, 26))

        assert approved.status == "Approved"
        assert approved.approved_by == "manager"
        assert approved.approved_date == date(2025, 10, 26)
        assert list_activities(db)[0].action == "approved quotation"

    def test_reject(self, db, make_quotation):
        quotation = make_quotation()

        assert reject_quotation(db, quotation.id).status == "Rejected"

    def test_submit_moves_to_pending(self, db, make_quotation):
        quotation = make_quotation()

        assert submit_quotation(db, quotation.id).status == "Pending"

    def test_missing_quotation(self, db):
        with pytest.raises(QuotationNotFoundError):
            approve_quotation(db, 42, "manager")


class TestQuotationListing:
    """Newest createdDate first, ties in creation order."""

    def test_newest_first_with_tie(self, db, make_client, make_quotation):
        client = make_client()
        old = make_quotation(client=client, created_date=date(2025, 10, 15))
        tie_first = make_quotation(client=client, created_date=date(2025, 10, 28))
        middle = make_quotation(client=client, created_date=date(2025, 10, 20))
        tie_second = make_quotation(client=client, created_date=date(2025, 10, 28))

        assert [q.id for q in list_quotations(db)] == [
            tie_first.id,
            tie_second.id,
            middle.id,
            old.id,
        ]
