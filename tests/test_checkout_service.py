"""Tests for the checkout orchestrator."""

from __future__ import annotations

import json
from decimal import Decimal
from unittest.mock import patch

import pytest
import stripe

from storefront.config import settings
from storefront.exceptions import InternalFailureError, InvalidRequestError
from storefront.schemas.order import CartLine, CartSnapshot
from storefront.services.checkout_service import CheckoutService, merge_cart_lines, to_minor_units


def cart(*pairs):
    return [CartLine(productId=pid, quantity=qty) for pid, qty in pairs]


@pytest.fixture()
def service(db_session, gateway):
    return CheckoutService(db_session, gateway, settings)


def sent_params(stripe_client) -> dict:
    return stripe_client.v1.checkout.sessions.create.call_args.kwargs["params"]


class TestCartValidation:
    def test_empty_cart_rejected(self, service, stripe_client):
        with pytest.raises(InvalidRequestError, match="empty"):
            service.create_session([])
        stripe_client.v1.checkout.sessions.create.assert_not_called()

    def test_unknown_product_rejected_without_session(self, service, make_product, stripe_client):
        product = make_product()

        with pytest.raises(InvalidRequestError, match="not found"):
            service.create_session(cart((product.id, 1), (999, 1)))

        stripe_client.v1.checkout.sessions.create.assert_not_called()

    def test_inactive_product_rejected(self, service, make_product, stripe_client):
        product = make_product(active=False)

        with pytest.raises(InvalidRequestError, match="unavailable"):
            service.create_session(cart((product.id, 1)))

        stripe_client.v1.checkout.sessions.create.assert_not_called()

    def test_quantity_above_inventory_rejected(self, service, make_product):
        product = make_product(inventory=3)

        with pytest.raises(InvalidRequestError, match="Insufficient stock"):
            service.create_session(cart((product.id, 4)))

    def test_duplicate_lines_checked_against_stock_together(self, service, make_product):
        product = make_product(inventory=3)

        with pytest.raises(InvalidRequestError, match="Insufficient stock"):
            service.create_session(cart((product.id, 2), (product.id, 2)))

    @pytest.mark.parametrize("quantity", [1, 500, 1_000_000])
    def test_unlimited_inventory_never_runs_out(self, service, make_product, quantity):
        product = make_product(inventory=None)

        result = service.create_session(cart((product.id, quantity)))

        assert result.session_id == "cs_test_1"


class TestSessionCreation:
    def test_line_item_uses_server_price_in_cents(self, service, make_product, stripe_client):
        product = make_product(price=Decimal("29.99"), inventory=50)

        result = service.create_session(cart((product.id, 2)))

        assert result.session_id == "cs_test_1"
        assert result.url == "https://checkout.stripe.com/c/pay/cs_test_1"
        (line_item,) = sent_params(stripe_client)["line_items"]
        assert line_item["quantity"] == 2
        assert line_item["price_data"]["unit_amount"] == 2999
        assert line_item["price_data"]["currency"] == "usd"
        assert line_item["price_data"]["product_data"]["name"] == product.name

    def test_metadata_carries_versioned_cart(self, service, make_product, stripe_client):
        product = make_product()

        service.create_session(cart((product.id, 2)))

        metadata = sent_params(stripe_client)["metadata"]
        assert metadata["cart_version"] == "1"
        assert json.loads(metadata["cart_0"]) == [{"productId": product.id, "quantity": 2}]

    def test_large_cart_split_across_metadata_keys(self, service, make_product, stripe_client):
        products = [make_product(name=f"Blob {n}") for n in range(20)]

        service.create_session(cart(*[(p.id, 1) for p in products]))

        metadata = sent_params(stripe_client)["metadata"]
        assert len(metadata) > 2
        assert all(len(value) <= 500 for value in metadata.values())
        snapshot = CartSnapshot.from_metadata(metadata)
        assert [line.product_id for line in snapshot.lines] == [p.id for p in products]

    def test_cart_too_large_for_metadata_rejected(self, service, make_product, stripe_client):
        products = [make_product(name=f"Blob {n}") for n in range(20)]

        with patch("storefront.schemas.order.MAX_CART_CHUNKS", 1):
            with pytest.raises(InvalidRequestError, match="too many items"):
                service.create_session(cart(*[(p.id, 1) for p in products]))

        stripe_client.v1.checkout.sessions.create.assert_not_called()

    def test_redirect_urls_use_frontend_origin(self, service, make_product, stripe_client):
        product = make_product()

        service.create_session(cart((product.id, 1)))

        params = sent_params(stripe_client)
        assert params["mode"] == "payment"
        assert params["success_url"] == (
            "http://localhost:3000/success.html?session_id={CHECKOUT_SESSION_ID}"
        )
        assert params["cancel_url"] == "http://localhost:3000/cart.html"

    def test_product_without_description_omits_it(self, service, make_product, stripe_client):
        product = make_product(description=None, image_url=None)

        service.create_session(cart((product.id, 1)))

        (line_item,) = sent_params(stripe_client)["line_items"]
        assert line_item["price_data"]["product_data"] == {"name": product.name}

    def test_stripe_failure_is_internal_failure(self, service, make_product, stripe_client):
        product = make_product()
        stripe_client.v1.checkout.sessions.create.side_effect = stripe.APIConnectionError(
            "network down"
        )

        with pytest.raises(InternalFailureError) as exc_info:
            service.create_session(cart((product.id, 1)))

        assert "network" not in exc_info.value.message


class TestHelpers:
    @pytest.mark.parametrize(
        "amount, cents",
        [(Decimal("29.99"), 2999), (Decimal("0.10"), 10), (Decimal("19.995"), 2000), (Decimal("5"), 500)],
    )
    def test_to_minor_units(self, amount, cents):
        assert to_minor_units(amount) == cents

    def test_merge_cart_lines_sums_quantities(self):
        merged = merge_cart_lines(cart((1, 2), (2, 1), (1, 3)))

        assert [(line.product_id, line.quantity) for line in merged] == [(1, 5), (2, 1)]
