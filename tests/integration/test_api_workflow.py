"""
Integration tests for the REST resources and the lead-to-cash workflow.
"""
import pytest


@pytest.fixture
def new_client(client, admin_headers):
    response = client.post(
        "/api/clients",
        headers=admin_headers,
        json={
            "name": "Patricia White",
            "email": "pwhite@globaltech.com",
            "phone": "+1-555-0111",
            "company": "GlobalTech Industries",
            "address": "100 Business Park Dr",
        },
    )
    assert response.status_code == 201
    return response.get_json()


class TestLeadsApi:
    """CRUD over /api/leads."""

    def test_create_and_fetch(self, client, admin_headers):
        response = client.post(
            "/api/leads",
            headers=admin_headers,
            json={
                "name": "John Smith",
                "email": "john.smith@techcorp.com",
                "company": "TechCorp Inc",
                "source": "Website",
                "assignedTo": "exec",
            },
        )

        lead = response.get_json()
        assert response.status_code == 201
        assert lead["assignedToName"] == "Sales Executive"
        assert lead["status"] == "New"
        assert lead["notes"] == []
        assert lead["convertedToClientId"] is None

        fetched = client.get(f"/api/leads/{lead['id']}", headers=admin_headers).get_json()
        assert fetched == lead

    def test_missing_field(self, client, admin_headers):
        response = client.post(
            "/api/leads",
            headers=admin_headers,
            json={"name": "No Email", "source": "Website", "assignedTo": "exec"},
        )

        assert response.status_code == 400
        assert response.get_json() == {"message": "Field 'email' is required"}

    def test_invalid_enum(self, client, admin_headers):
        response = client.post(
            "/api/leads",
            headers=admin_headers,
            json={
                "name": "Bad Source",
                "email": "bad@source.com",
                "source": "Carrier Pigeon",
                "assignedTo": "exec",
            },
        )

        assert response.status_code == 400

    def test_note_and_conversion(self, client, login):
        headers = login("exec")
        lead = client.post(
            "/api/leads",
            headers=headers,
            json={
                "name": "Emily Davis",
                "email": "emily.d@startupx.io",
                "company": "StartupX",
                "source": "Social Media",
                "assignedTo": "exec",
            },
        ).get_json()

        noted = client.post(
            f"/api/leads/{lead['id']}/notes", headers=headers, json={"text": "Demo booked"}
        ).get_json()
        assert noted["notes"][0]["user"] == "exec"
        assert noted["notes"][0]["timestamp"].endswith("Z")

        response = client.post(f"/api/leads/{lead['id']}/convert", headers=headers)
        assert response.status_code == 200
        new_client = response.get_json()
        assert new_client["leadId"] == lead["id"]
        assert new_client["totalRevenue"] == 0

        again = client.post(f"/api/leads/{lead['id']}/convert", headers=headers)
        assert again.status_code == 400

    def test_delete(self, client, admin_headers):
        lead = client.post(
            "/api/leads",
            headers=admin_headers,
            json={
                "name": "Lisa Anderson",
                "email": "landerson@webdev.io",
                "source": "Cold Call",
                "assignedTo": "exec",
            },
        ).get_json()

        assert client.delete(f"/api/leads/{lead['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/leads/{lead['id']}", headers=admin_headers).status_code == 404
        assert client.delete(f"/api/leads/{lead['id']}", headers=admin_headers).status_code == 404

    def test_malformed_id(self, client, admin_headers):
        response = client.get("/api/leads/abc", headers=admin_headers)

        assert response.status_code == 404
        assert "message" in response.get_json()


class TestQuotationToCash:
    """Quotation, approval, invoice and payments over HTTP."""

    def test_full_scenario(self, client, login, new_client):
        admin = login("admin")

        quotation = client.post(
            "/api/quotations",
            headers=login("exec"),
            json={
                "clientId": new_client["id"],
                "items": [{"description": "Consulting day", "quantity": 2, "unitPrice": 100}],
                "taxRate": 18,
            },
        ).get_json()
        assert quotation["subtotal"] == 200
        assert quotation["taxAmount"] == 36
        assert quotation["total"] == 236
        assert quotation["items"][0]["amount"] == 200
        assert quotation["createdBy"] == "exec"
        assert quotation["clientName"] == "GlobalTech Industries"

        blocked = client.post(
            f"/api/quotations/{quotation['id']}/generate-invoice", headers=admin
        )
        assert blocked.status_code == 400
        assert blocked.get_json() == {"message": "Quotation must be approved first"}

        approved = client.post(
            f"/api/quotations/{quotation['id']}/approve", headers=login("manager"), json={}
        ).get_json()
        assert approved["status"] == "Approved"
        assert approved["approvedBy"] == "manager"

        accountant = login("accountant")
        response = client.post(
            f"/api/quotations/{quotation['id']}/generate-invoice", headers=accountant
        )
        assert response.status_code == 201
        invoice = response.get_json()
        assert invoice["status"] == "Generated"
        assert invoice["total"] == 236
        assert invoice["clientAddress"] == "100 Business Park Dr"

        duplicate = client.post(
            f"/api/quotations/{quotation['id']}/generate-invoice", headers=accountant
        )
        assert duplicate.status_code == 400

        partial = client.post(
            f"/api/invoices/{invoice['id']}/record-payment",
            headers=accountant,
            json={"paymentAmount": 100, "paymentMethod": "Cash"},
        ).get_json()
        assert partial["status"] == "Partially Paid"

        paid = client.post(
            f"/api/invoices/{invoice['id']}/record-payment",
            headers=accountant,
            json={"paymentAmount": 136, "paymentMethod": "UPI", "transactionRef": "TXN42"},
        ).get_json()
        assert paid["status"] == "Paid"
        assert paid["paidAmount"] == 236
        assert paid["paymentMethod"] == "UPI"

        revenue = client.get(f"/api/clients/{new_client['id']}", headers=admin).get_json()
        assert revenue["totalRevenue"] == 236

        metrics = client.get("/api/dashboard/metrics", headers=admin).get_json()
        assert metrics["totalRevenue"] == 236
        assert metrics["pendingPayments"] == 0
        assert metrics["quotationStatusDistribution"]["Approved"] == 1
        assert metrics["monthlyRevenue"][-1]["revenue"] == 236

        feed = client.get("/api/dashboard/activities", headers=admin).get_json()
        assert feed[0]["action"] == "recorded payment for invoice"
        assert feed[0]["user"] == "accountant"
        assert feed[0]["timestamp"].endswith("Z")

    def test_unknown_client(self, client, admin_headers):
        response = client.post(
            "/api/quotations", headers=admin_headers, json={"clientId": 999, "items": []}
        )

        assert response.status_code == 404
        assert response.get_json() == {"message": "Client not found"}

    def test_client_filter(self, client, admin_headers, new_client):
        other = client.post(
            "/api/clients",
            headers=admin_headers,
            json={"name": "Thomas Clark", "email": "tclark@innovateinc.com", "company": "Innovate Inc"},
        ).get_json()
        for client_id in (new_client["id"], other["id"], other["id"]):
            client.post(
                "/api/quotations",
                headers=admin_headers,
                json={"clientId": client_id, "items": []},
            )

        filtered = client.get(
            f"/api/quotations?clientId={other['id']}", headers=admin_headers
        ).get_json()

        assert len(filtered) == 2
        assert {q["clientName"] for q in filtered} == {"Innovate Inc"}

    @pytest.mark.parametrize("path", ["/api/quotations", "/api/invoices", "/api/tickets"])
    def test_malformed_client_filter(self, client, admin_headers, new_client, path):
        client.post(
            "/api/quotations",
            headers=admin_headers,
            json={"clientId": new_client["id"], "items": []},
        )

        response = client.get(f"{path}?clientId=abc", headers=admin_headers)

        assert response.status_code == 400
        assert response.get_json() == {"message": "clientId must be an integer"}

    def test_rename_and_delete_client(self, client, admin_headers, new_client):
        quotation = client.post(
            "/api/quotations",
            headers=admin_headers,
            json={"clientId": new_client["id"], "items": []},
        ).get_json()

        client.patch(
            f"/api/clients/{new_client['id']}",
            headers=admin_headers,
            json={"company": "GlobalTech Group"},
        )
        renamed = client.get(f"/api/quotations/{quotation['id']}", headers=admin_headers)
        assert renamed.get_json()["clientName"] == "GlobalTech Group"

        deleted = client.delete(f"/api/clients/{new_client['id']}", headers=admin_headers)
        assert deleted.status_code == 204
        still_there = client.get(f"/api/quotations/{quotation['id']}", headers=admin_headers)
        assert still_there.status_code == 200

    def test_reconcile_overdue(self, client, login):
        response = client.post("/api/invoices/reconcile-overdue", headers=login("accountant"))

        assert response.status_code == 200
        assert response.get_json() == []


class TestTicketsApi:
    """Tickets and their status dates."""

    def test_lifecycle(self, client, login, new_client):
        engineer = login("engineer")

        created = client.post(
            "/api/tickets",
            headers=engineer,
            json={
                "clientId": new_client["id"],
                "title": "Email Integration Issue",
                "description": "SMTP configuration not working properly",
                "priority": "Medium",
                "assignedTo": "engineer",
            },
        )
        assert created.status_code == 201
        ticket = created.get_json()
        assert ticket["ticketNumber"].startswith("TKT-")
        assert ticket["createdBy"] == "engineer"
        assert ticket["assignedToName"] == "Engineer"

        resolved = client.post(
            f"/api/tickets/{ticket['id']}/update-status",
            headers=engineer,
            json={"status": "Resolved"},
        ).get_json()
        assert resolved["resolvedDate"] is not None

        reopened = client.post(
            f"/api/tickets/{ticket['id']}/update-status",
            headers=engineer,
            json={"status": "Open"},
        ).get_json()
        assert reopened["status"] == "Open"
        assert reopened["resolvedDate"] == resolved["resolvedDate"]

    def test_invalid_status(self, client, login, new_client):
        engineer = login("engineer")
        ticket = client.post(
            "/api/tickets",
            headers=engineer,
            json={
                "clientId": new_client["id"],
                "title": "Backup System Check",
                "priority": "Low",
                "assignedTo": "engineer",
            },
        ).get_json()

        response = client.post(
            f"/api/tickets/{ticket['id']}/update-status",
            headers=engineer,
            json={"status": "Archived"},
        )

        assert response.status_code == 400
