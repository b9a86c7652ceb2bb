"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from domainfolio.api.main import create_app
from domainfolio.infrastructure.database.models import Base
from domainfolio.infrastructure.database.session import get_db
from domainfolio.domain.models import Domain, DomainStatus, Transaction, TransactionType


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed reporting date so trailing-month windows are deterministic
AS_OF = date(2024, 6, 15)


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
def as_of() -> date:
    return AS_OF


@pytest.fixture
def sample_domains() -> list[Domain]:
    """
    Three domains covering each revenue source:
    - alpha.com: sold for 300 after two renewals (holding cost 140)
    - beta.io: held, estimated at 200 (holding cost 60)
    - gamma.net: lapsed with no revenue (holding cost 80)
    """
    return [
        Domain(
            id="d-alpha",
            domain_name="alpha.com",
            purchase_date=date(2022, 6, 15),
            purchase_cost=100.0,
            renewal_cost=20.0,
            renewal_count=2,
            status=DomainStatus.SOLD,
            sale_date=date(2024, 3, 15),
            sale_price=300.0,
            platform_fee=30.0,
        ),
        Domain(
            id="d-beta",
            domain_name="beta.io",
            purchase_date=date(2023, 1, 10),
            purchase_cost=50.0,
            renewal_cost=10.0,
            renewal_count=1,
            status=DomainStatus.ACTIVE,
            expiry_date=date(2025, 1, 10),
            estimated_value=200.0,
        ),
        Domain(
            id="d-gamma",
            domain_name="gamma.net",
            purchase_date=date(2023, 6, 1),
            purchase_cost=80.0,
            renewal_cost=15.0,
            renewal_count=0,
            status=DomainStatus.EXPIRED,
            expiry_date=date(2024, 6, 1),
        ),
    ]


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Purchase, one sale netting 270 in March 2024, and a renewal"""
    return [
        Transaction(
            id="t-1",
            domain_id="d-alpha",
            type=TransactionType.BUY,
            amount=100.0,
            date=date(2022, 6, 15),
        ),
        Transaction(
            id="t-2",
            domain_id="d-alpha",
            type=TransactionType.SELL,
            amount=300.0,
            platform_fee=30.0,
            net_amount=270.0,
            date=date(2024, 3, 15),
        ),
        Transaction(
            id="t-3",
            domain_id="d-beta",
            type=TransactionType.RENEW,
            amount=10.0,
            date=date(2024, 1, 10),
        ),
    ]
