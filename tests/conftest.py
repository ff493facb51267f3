"""Pytest fixtures for testing"""

import os

# Point settings at the test database before the app (and its engine) is imported
TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

import pytest
from datetime import datetime
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from invoice_service.api.main import create_app
from invoice_service.infrastructure.database.models import Base
from invoice_service.infrastructure.database.session import get_db
from invoice_service.domain.models import InvoiceSnapshot, InvoiceStatus


# Test database
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user_test"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def headers() -> dict:
    """Identity header the upstream gateway would forward"""
    return {"X-User-ID": USER_ID}


@pytest.fixture
def now() -> datetime:
    """Fixed query moment: the 17th, mid-afternoon"""
    return datetime(2026, 10, 17, 15, 30)


@pytest.fixture
def dashboard_snapshot() -> list[InvoiceSnapshot]:
    """
    Current month: 2 paid invoices totaling 500 and 1 overdue invoice (200, 50 paid).
    Previous month (same span): 1 paid invoice of 400.
    """
    return [
        InvoiceSnapshot(total=300.0, amount_paid=300.0, status=InvoiceStatus.PAID, issue_date=datetime(2026, 10, 2)),
        InvoiceSnapshot(total=200.0, amount_paid=200.0, status=InvoiceStatus.PAID, issue_date=datetime(2026, 10, 10)),
        InvoiceSnapshot(total=200.0, amount_paid=50.0, status=InvoiceStatus.OVERDUE, issue_date=datetime(2026, 10, 5)),
        InvoiceSnapshot(total=400.0, amount_paid=400.0, status=InvoiceStatus.PAID, issue_date=datetime(2026, 9, 3)),
    ]
