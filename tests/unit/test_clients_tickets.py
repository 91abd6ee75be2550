"""
Unit tests for clients (rename propagation, deletion) and support tickets.
"""
from datetime import date

import pytest

from bizdesk.exceptions import ClientNotFoundError, TicketNotFoundError
from bizdesk.models import Quotation, Ticket
from bizdesk.schemas import ClientUpdate, NoteIn, TicketCreate, TicketUpdate
from bizdesk.services import (
    add_ticket_note,
    create_ticket,
    delete_client,
    get_client,
    list_clients,
    list_tickets,
    update_client,
    update_ticket,
    update_ticket_status,
)


class TestClients:
    """Company renames and hard deletes."""

    def test_rename_propagates_to_quotations_and_tickets(
        self, db, make_client, make_quotation, make_ticket
    ):
        client = make_client(company="GlobalTech Industries")
        quotation = make_quotation(client=client)
        ticket = make_ticket(client=client)

        update_client(db, client.id, ClientUpdate(company="GlobalTech Group"))

        assert db.get(Quotation, quotation.id).client_name == "GlobalTech Group"
        assert db.get(Ticket, ticket.id).client_name == "GlobalTech Group"

    def test_update_keeps_revenue(self, db, make_client):
        client = make_client()

        updated = update_client(db, client.id, ClientUpdate(phone="+1-555-9999"))

        assert updated.phone == "+1-555-9999"
        assert updated.total_revenue == 0

    def test_delete_leaves_documents(self, db, make_client, make_quotation, make_ticket):
        client = make_client()
        quotation = make_quotation(client=client)
        ticket = make_ticket(client=client)

        assert delete_client(db, client.id) is True

        with pytest.raises(ClientNotFoundError):
            get_client(db, client.id)
        assert db.get(Quotation, quotation.id).client_id == client.id
        assert db.get(Ticket, ticket.id).client_name == client.company

    def test_delete_missing(self, db):
        assert delete_client(db, 123) is False

    def test_list_is_newest_first_with_tie(self, db, make_client):
        old = make_client(company="Old Co", created_date=date(2025, 9, 15))
        tie_first = make_client(company="Tie One", created_date=date(2025, 9, 25))
        middle = make_client(company="Middle Co", created_date=date(2025, 9, 20))
        tie_second = make_client(company="Tie Two", created_date=date(2025, 9, 25))

        assert [c.id for c in list_clients(db)] == [
            tie_first.id,
            tie_second.id,
            middle.id,
            old.id,
        ]

    def test_ids_are_not_reused(self, db, make_client):
        first = make_client()
        delete_client(db, first.id)

        second = make_client()

        assert second.id > first.id


class TestTickets:
    """Numbering, notes and status dates."""

    def test_creation(self, make_client, make_ticket):
        client = make_client(company="Innovate Inc")

        ticket = make_ticket(client=client, assigned_to="engineer")

        assert ticket.ticket_number == f"TKT-{date.today().year}-{ticket.id:03d}"
        assert ticket.client_name == "Innovate Inc"
        assert ticket.assigned_to_name == "Engineer"
        assert ticket.status == "Open"
        assert ticket.resolved_date is None
        assert ticket.closed_date is None

    def test_unknown_client(self, db):
        with pytest.raises(ClientNotFoundError):
            create_ticket(
                db,
                TicketCreate(
                    client_id=77, title="Broken", priority="Low", assigned_to="engineer"
                ),
            )

    def test_resolved_date_is_written_once(self, db, make_ticket):
        ticket = make_ticket()

        update_ticket_status(db, ticket.id, "Resolved", today=date(2025, 10, 27))
        update_ticket_status(db, ticket.id, "Open", today=date(2025, 10, 28))
        reopened = update_ticket_status(db, ticket.id, "Resolved", today=date(2025, 10, 30))

        assert reopened.status == "Resolved"
        assert reopened.resolved_date == date(2025, 10, 27)

    def test_closed_date_is_written_once(self, db, make_ticket):
        ticket = make_ticket()

        update_ticket_status(db, ticket.id, "Closed", today=date(2025, 10, 27))
        updated = update_ticket_status(db, ticket.id, "Closed", today=date(2025, 11, 2))

        assert updated.closed_date == date(2025, 10, 27)
        assert updated.resolved_date is None

    def test_patch_status_stamps_dates(self, db, make_ticket):
        ticket = make_ticket()

        updated = update_ticket(db, ticket.id, TicketUpdate(status="Resolved", priority="Low"))

        assert updated.status == "Resolved"
        assert updated.priority == "Low"
        assert updated.resolved_date == date.today()

    def test_created_resolved(self, make_ticket):
        ticket = make_ticket(status="Resolved")

        assert ticket.resolved_date == date.today()

    def test_notes_are_appended(self, db, make_ticket):
        ticket = make_ticket(notes=[{"text": "Ticket created"}])

        updated = add_ticket_note(db, ticket.id, NoteIn(text="Investigating"), "engineer")

        assert [n.text for n in updated.notes] == ["Ticket created", "Investigating"]
        assert [n.user for n in updated.notes] == ["admin", "engineer"]

    def test_client_filter(self, db, make_client, make_ticket):
        first = make_client()
        second = make_client(company="Innovate Inc")
        make_ticket(client=first)
        make_ticket(client=second)

        assert [t.client_id for t in list_tickets(db, client_id=second.id)] == [second.id]

    def test_missing_ticket(self, db):
        with pytest.raises(TicketNotFoundError):
            update_ticket_status(db, 5, "Closed")
