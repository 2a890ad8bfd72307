"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read at import time: point them at SQLite before the app loads
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hotel_api.main import app
from hotel_api.models import Base
from shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client):
    """Factory: provision a company through the public signup endpoint."""
    def _signup(company_name="Test Hotel", email="admin@test.com", password=DEFAULT_PASSWORD):
        response = client.post(
            "/api/auth/signup-company",
            json={
                "company_name": company_name,
                "admin_email": email,
                "admin_password": password,
                "first_name": "Test",
                "last_name": "Admin",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _signup


@pytest.fixture
def seed_company(signup):
    """Company A with its ADMIN."""
    return signup()


@pytest.fixture
def other_company(signup):
    """Company B, used for tenant isolation checks."""
    return signup(company_name="Other Hotel", email="admin@other.com")


@pytest.fixture
def auth_headers(seed_company):
    """Authorization headers of company A's ADMIN."""
    return bearer(seed_company["access_token"])


@pytest.fixture
def other_headers(other_company):
    """Authorization headers of company B's ADMIN."""
    return bearer(other_company["access_token"])


@pytest.fixture
def user_headers(client, auth_headers):
    """Factory: create a user of company A with a role and return their headers."""
    def _user_headers(role, email=None):
        email = email or f"{role.lower()}@test.com"
        response = client.post(
            "/api/users",
            json={
                "email": email,
                "password": DEFAULT_PASSWORD,
                "first_name": role.title(),
                "last_name": "User",
                "role": role,
            },
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        login = client.post("/api/auth/login", json={"email": email, "password": DEFAULT_PASSWORD})
        assert login.status_code == 200, login.text
        return bearer(login.json()["access_token"])

    return _user_headers


# =============================================================================
# Domain fixtures (all belong to company A)
# =============================================================================


@pytest.fixture
def seed_room_type(client, auth_headers):
    response = client.post(
        "/api/room-types",
        json={"name": "Suite", "base_price": "150.00", "max_occupancy": 2},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def seed_room(client, auth_headers, seed_room_type):
    response = client.post(
        "/api/rooms",
        json={"room_number": "101", "floor": 1, "room_type_id": seed_room_type["id"]},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def seed_client(client, auth_headers):
    response = client.post(
        "/api/clients",
        json={
            "first_name": "Ana",
            "last_name": "Guest",
            "email": "ana@guest.com",
            "phone": "+15550001",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def seed_category(client, auth_headers):
    response = client.post(
        "/api/categories",
        json={"name": "Mains", "category_type": "RESTAURANT"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def seed_product(client, auth_headers, seed_category):
    response = client.post(
        "/api/products",
        json={
            "name": "Burger",
            "category_id": seed_category["id"],
            "price": "12.50",
            "stock": 5,
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def seed_table(client, auth_headers):
    response = client.post(
        "/api/restaurant-tables",
        json={"table_number": "T1", "capacity": 4, "location": "Terrace"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
