import os

# Keep the application engine off the working directory during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from retailpos.main import app
from retailpos.database import Base, get_db
from retailpos.models.customer import Customer
from retailpos.models.product import Product
from retailpos.services.cart_service import CartLine
from retailpos.services.checkout_service import CheckoutService


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_product(db_session):
    """Factory inserting a catalog product."""
    def _make(name="Widget", price="10.00", stock=100, threshold=5, reorder=20, sku=None):
        product = Product(
            name=name,
            sku=sku,
            price=Decimal(price),
            currency="USD",
            stock_quantity=stock,
            low_stock_threshold=threshold,
            reorder_quantity=reorder,
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _make


@pytest.fixture
def make_customer(db_session):
    def _make(name="Jordan Lee", email=None):
        customer = Customer(name=name, email=email)
        db_session.add(customer)
        db_session.commit()
        db_session.refresh(customer)
        return customer
    return _make


@pytest.fixture
def sell(db_session):
    """
    Ring up a sale at a fixed time through the checkout coordinator.

    Each line is ``(product, quantity)`` or ``(product, quantity, unit_price)``.
    """
    def _sell(when: datetime, *lines, customer_id=None):
        cart_lines = []
        for line in lines:
            product, quantity = line[0], line[1]
            unit_price = Decimal(line[2]) if len(line) > 2 else None
            cart_lines.append(CartLine(product.id, product.name, unit_price, quantity))
        return CheckoutService(db_session, clock=lambda: when).commit(cart_lines, customer_id=customer_id)
    return _sell


class FakeRedis:
    """Dictionary-backed stand-in for the few Redis commands the cache uses."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    def ping(self):
        return True


@pytest.fixture(autouse=True)
def fake_cache(monkeypatch):
    from retailpos.utils.cache import cache_service

    fake = FakeRedis()
    monkeypatch.setattr(cache_service, "client", fake)
    return fake
