"""Tests for the catalog store (ProductRepository)."""

from __future__ import annotations

from decimal import Decimal

from storefront.models.product import Product
from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.product import ProductCreate, ProductUpdate


class TestCatalogReads:
    def test_get_active_excludes_inactive(self, db_session, make_product):
        make_product(name="Small")
        make_product(name="Retired", active=False)

        names = [p.name for p in ProductRepository(db_session).get_active()]

        assert names == ["Small"]

    def test_get_active_newest_first(self, db_session, make_product):
        first = make_product(name="First")
        second = make_product(name="Second")

        products = ProductRepository(db_session).get_active()

        assert [p.id for p in products] == [second.id, first.id]

    def test_get_by_ids_single_batch(self, db_session, make_product):
        a = make_product(name="A")
        b = make_product(name="B")
        make_product(name="C")

        found = ProductRepository(db_session).get_by_ids([a.id, b.id, a.id, 999])

        assert sorted(p.id for p in found) == sorted([a.id, b.id])

    def test_get_by_ids_empty(self, db_session):
        assert ProductRepository(db_session).get_by_ids([]) == []


class TestCatalogMutations:
    def test_create(self, db_session):
        product = ProductRepository(db_session).create(
            ProductCreate(name="Large", price=Decimal("89.99"), inventory=15)
        )

        assert product.id is not None
        assert product.price == Decimal("89.99")
        assert product.active is True
        assert product.created_at is not None

    def test_update_only_provided_fields(self, db_session, make_product):
        product = make_product(name="Small", inventory=50)

        updated = ProductRepository(db_session).update(
            product.id, ProductUpdate(price=Decimal("24.99"))
        )

        assert updated.price == Decimal("24.99")
        assert updated.name == "Small"
        assert updated.inventory == 50

    def test_update_missing_returns_none(self, db_session):
        assert ProductRepository(db_session).update(404, ProductUpdate(name="x")) is None

    def test_deactivate_keeps_row(self, db_session, make_product):
        product = make_product()

        ProductRepository(db_session).deactivate(product.id)

        row = db_session.get(Product, product.id)
        assert row is not None
        assert row.active is False


class TestInventoryDecrement:
    def test_decrements_finite_stock(self, db_session, make_product):
        product = make_product(inventory=50)

        assert ProductRepository(db_session).decrement_inventory(product.id, 2) is True

        assert db_session.get(Product, product.id).inventory == 48

    def test_refuses_to_go_negative(self, db_session, make_product):
        product = make_product(inventory=1)

        assert ProductRepository(db_session).decrement_inventory(product.id, 2) is False

        assert db_session.get(Product, product.id).inventory == 1

    def test_exact_stock_reaches_zero(self, db_session, make_product):
        product = make_product(inventory=3)

        assert ProductRepository(db_session).decrement_inventory(product.id, 3) is True

        assert db_session.get(Product, product.id).inventory == 0

    def test_unlimited_inventory_untouched(self, db_session, make_product):
        product = make_product(inventory=None)

        assert ProductRepository(db_session).decrement_inventory(product.id, 5) is False

        assert db_session.get(Product, product.id).inventory is None

    def test_missing_product(self, db_session):
        assert ProductRepository(db_session).decrement_inventory(404, 1) is False
