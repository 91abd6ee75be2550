"""
BizDesk Test Configuration

Shared fixtures for all tests: an isolated in-memory storage engine per
test, the default users, small record factories and a Flask test client
with a token helper.
"""
from datetime import date

import pytest

from bizdesk.config import Settings
from bizdesk.db import Database
from bizdesk.security import configure_hashing
from bizdesk.seeds import seed_default_users
from bizdesk.schemas import ClientCreate, LeadCreate, QuotationCreate, TicketCreate
from bizdesk.services import (
    approve_quotation,
    create_client,
    create_lead,
    create_quotation,
    create_ticket,
    generate_invoice,
)
from bizdesk.web import create_app


# =============================================================================
# FIXTURES: Configuration and storage
# =============================================================================

@pytest.fixture(scope="session", autouse=True)
def fast_hashing():
    """bcrypt at its minimum cost keeps user seeding fast."""
    configure_hashing(4)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        JWT_HOURS=1,
        BCRYPT_ROUNDS=4,
        SEED_SAMPLE_DATA=False,
        ENV="testing",
        LOG_LEVEL="WARNING",
        SENTRY_DSN=None,
    )


@pytest.fixture
def database():
    """A fresh in-memory storage engine."""
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    """Session on the test's storage engine, with the six default users."""
    session = database.SessionLocal()
    seed_default_users(session)
    yield session
    session.close()


# =============================================================================
# FIXTURES: Record factories
# =============================================================================

@pytest.fixture
def make_client(db):
    def _make(**overrides):
        data = {
            "name": "Patricia White",
            "email": "pwhite@globaltech.com",
            "phone": "+1-555-0111",
            "company": "GlobalTech Industries",
            "address": "100 Business Park Dr, San Francisco, CA 94107",
            "created_date": date(2025, 9, 15),
        }
        data.update(overrides)
        return create_client(db, ClientCreate(**data))

    return _make


@pytest.fixture
def make_lead(db):
    def _make(**overrides):
        data = {
            "name": "John Smith",
            "email": "john.smith@techcorp.com",
            "phone": "+1-555-0101",
            "company": "TechCorp Inc",
            "source": "Website",
            "status": "New",
            "assigned_to": "exec",
            "created_date": date(2025, 10, 15),
        }
        data.update(overrides)
        return create_lead(db, LeadCreate(**data))

    return _make


@pytest.fixture
def make_quotation(db, make_client):
    """Quotation with one 2 x 100 item at 18% unless overridden."""

    def _make(client=None, **overrides):
        client = client or make_client()
        data = {
            "client_id": client.id,
            "items": [{"description": "Consulting day", "quantity": 2, "unit_price": 100}],
            "tax_rate": 18,
            "created_by": "exec",
            "created_date": date(2025, 10, 25),
        }
        data.update(overrides)
        return create_quotation(db, QuotationCreate(**data))

    return _make


@pytest.fixture
def make_invoice(db, make_quotation):
    """Invoice generated from a freshly approved quotation."""

    def _make(today=date(2025, 10, 27), **quotation_overrides):
        quotation = make_quotation(**quotation_overrides)
        approve_quotation(db, quotation.id, "manager")
        return generate_invoice(db, quotation.id, today=today)

    return _make


@pytest.fixture
def make_ticket(db, make_client):
    def _make(client=None, **overrides):
        client = client or make_client()
        data = {
            "client_id": client.id,
            "title": "Server Setup Required",
            "description": "Need server configuration",
            "priority": "High",
            "assigned_to": "engineer",
            "created_by": "admin",
            "created_date": date(2025, 10, 26),
        }
        data.update(overrides)
        return create_ticket(db, TicketCreate(**data))

    return _make


# =============================================================================
# FIXTURES: HTTP
# =============================================================================

@pytest.fixture
def app(settings, database):
    app = create_app(settings, database)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Log in as one of the default users and return its auth headers."""

    passwords = {
        "admin": "admin123",
        "manager": "manager123",
        "exec": "exec123",
        "accountant": "acc123",
        "engineer": "eng123",
        "client": "client123",
    }

    def _login(username: str = "admin") -> dict:
        response = client.post(
            "/api/auth/login",
            json={"username": username, "password": passwords[username]},
        )
        assert response.status_code == 200, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    return _login


@pytest.fixture
def admin_headers(login):
    return login("admin")
