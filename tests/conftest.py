"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Sample employee payloads
"""

import os

# Point the application engine at SQLite before the app is imported, so
# startup never tries to reach PostgreSQL.
os.environ.setdefault("SQLALCHEMY_DATABASE_URL", "sqlite://")

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.models.employee import Employee
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
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


@pytest.fixture
def sample_employee_data():
    """Sample employee payload for testing"""
    return {
        "employee_name": "Alice Johnson",
        "email": "alice@company.com",
        "department": "Engineering",
        "salary": 50000,
        "address1": "12 Market Street",
        "address2": "Suite 4",
        "address3": "",
        "state": "CA",
        "district": "San Mateo",
        "pincode": "94401"
    }


@pytest.fixture
def make_employee(db_session):
    """
    Factory inserting an employee row directly, bypassing the API.

    Usage: make_employee("Bob", department="Sales", salary=42000)
    """
    counter = {"n": 0}

    def _make(name="Employee", department="Engineering", state="CA", salary=50000, **extra):
        counter["n"] += 1
        employee = Employee(
            employee_name=name,
            email=extra.pop("email", f"employee{counter['n']}@company.com"),
            department=department,
            state=state,
            salary=Decimal(str(salary)),
            **extra
        )
        db_session.add(employee)
        db_session.commit()
        db_session.refresh(employee)
        return employee

    return _make
