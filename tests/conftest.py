"""Shared fixtures for the storefront test suite.

Environment is set before any storefront import so the global settings and
engine point at an in-memory SQLite database.
"""

from __future__ import annotations

import os
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["FRONTEND_URL"] = "http://localhost:3000"
os.environ["SEED_SAMPLE_PRODUCTS"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from storefront.database import Base, engine, get_db, init_db, SessionLocal
from storefront.models.product import Product
from storefront.services.payment_gateway import StripeGateway, get_payment_gateway

from stripe_helpers import WEBHOOK_SECRET


@pytest.fixture()
def db_session():
    """Fresh schema and session per test."""
    Base.metadata.drop_all(bind=engine)
    init_db(bind=engine, seed=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def make_product(db_session):
    """Factory inserting a product row."""

    def _make(**fields) -> Product:
        values = {
            "name": "Water Blob - Small",
            "description": "Perfect for individual use.",
            "price": Decimal("29.99"),
            "image_url": "https://example.com/blob.png",
            "inventory": 50,
            "active": True,
        }
        values.update(fields)
        product = Product(**values)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture()
def stripe_client():
    """StripeClient double; checkout sessions succeed by default."""
    client = MagicMock()
    client.v1.checkout.sessions.create.return_value = SimpleNamespace(
        id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1"
    )
    return client


@pytest.fixture()
def gateway(stripe_client) -> StripeGateway:
    """Real gateway (real signature checks) around the client double."""
    return StripeGateway(stripe_client, WEBHOOK_SECRET)


@pytest.fixture()
def client(db_session, gateway):
    """TestClient sharing the test session and gateway."""
    from storefront.main import app

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
