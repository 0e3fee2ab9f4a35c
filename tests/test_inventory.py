"""Tests for the two stock mutators."""

import pytest

from storefront.core.errors import InsufficientStock
from storefront.repositories.product_repo import ProductRepository
from storefront.services.inventory_service import InventoryService


@pytest.fixture
def inventory():
    return InventoryService(ProductRepository())


class TestDecreaseStock:
    def test_partial_decrease_keeps_in_stock(self, session, inventory, make_product):
        product = make_product(stock_quantity=5)
        inventory.decrease_stock(session, product, 3)
        assert product.stock_quantity == 2
        assert product.in_stock is True

    def test_decrease_to_zero_clears_in_stock(self, session, inventory, make_product):
        product = make_product(stock_quantity=2)
        inventory.decrease_stock(session, product, 2)
        assert product.stock_quantity == 0
        assert product.in_stock is False

    def test_decrease_beyond_stock_fails_and_changes_nothing(self, session, inventory, make_product):
        product = make_product(name="Brass Lamp", stock_quantity=2)
        with pytest.raises(InsufficientStock) as exc:
            inventory.decrease_stock(session, product, 3)
        assert "Brass Lamp" in exc.value.detail
        assert exc.value.status_code == 400

        session.refresh(product)
        assert product.stock_quantity == 2
        assert product.in_stock is True

    def test_conditional_update_rejects_oversell(self, session, make_product):
        product = make_product(stock_quantity=1)
        repo = ProductRepository()
        assert repo.decrement_stock(session, product.id, 1) is True
        assert repo.decrement_stock(session, product.id, 1) is False
        session.commit()
        session.refresh(product)
        assert product.stock_quantity == 0


class TestIncreaseStock:
    def test_increase_from_zero_sets_in_stock(self, session, inventory, make_product):
        product = make_product(stock_quantity=0)
        assert product.in_stock is False
        inventory.increase_stock(session, product, 4)
        assert product.stock_quantity == 4
        assert product.in_stock is True

    def test_increase_is_uncapped(self, session, inventory, make_product):
        product = make_product(stock_quantity=10)
        inventory.increase_stock(session, product, 1000)
        assert product.stock_quantity == 1010
