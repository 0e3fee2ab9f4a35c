"""Tests for cart workflows at the service level."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from storefront.core.errors import (
    InsufficientStock,
    InvalidQuantity,
    ItemNotFound,
    ProductNotFound,
)
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartOwner
from storefront.services.cart_service import CartService, new_session_token


@pytest.fixture
def cart_repo():
    return CartRepository()


@pytest.fixture
def service(cart_repo):
    return CartService(cart_repo, ProductRepository())


@pytest.fixture
def guest_cart(session, service):
    return service.resolve_cart(session, CartOwner(session_id="guest-token"))


def quantities(session, cart_repo, cart):
    return {it.product_id: it.quantity for it in cart_repo.list_items(session, cart.id)}


class TestCartOwner:
    def test_requires_exactly_one_owner(self):
        with pytest.raises(ValueError):
            CartOwner()
        with pytest.raises(ValueError):
            CartOwner(user_id=uuid.uuid4(), session_id="abc")

    def test_session_tokens_are_unique(self):
        assert new_session_token() != new_session_token()


class TestResolveCart:
    def test_creates_once_per_owner(self, session, service):
        owner = CartOwner(session_id="tok-1")
        first = service.resolve_cart(session, owner)
        second = service.resolve_cart(session, owner)
        assert first.id == second.id

    def test_user_and_session_carts_are_distinct(self, session, service, customer):
        user_cart = service.resolve_cart(session, CartOwner(user_id=customer.id))
        guest = service.resolve_cart(session, CartOwner(session_id="tok-2"))
        assert user_cart.id != guest.id
        assert user_cart.session_id is None
        assert guest.user_id is None

    def test_expired_cart_is_replaced(self, session, service, cart_repo, guest_cart, make_product):
        product = make_product()
        service.add_item(session, guest_cart, product.id, 1)
        old_id = guest_cart.id

        guest_cart.expires_at = datetime.now(timezone.utc) - timedelta(days=1)
        session.add(guest_cart)
        session.commit()

        fresh = service.resolve_cart(session, CartOwner(session_id="guest-token"))
        assert fresh.id != old_id
        assert cart_repo.list_items(session, fresh.id) == []

    def test_mutation_refreshes_expiry(self, session, service, guest_cart, make_product):
        product = make_product()
        guest_cart.expires_at = datetime.now(timezone.utc) + timedelta(days=1)
        session.add(guest_cart)
        session.commit()

        service.add_item(session, guest_cart, product.id, 1)
        session.refresh(guest_cart)
        expires_at = guest_cart.expires_at.replace(tzinfo=timezone.utc)
        assert expires_at > datetime.now(timezone.utc) + timedelta(days=29)


class TestAddItem:
    def test_adding_twice_sums_quantities(self, session, service, cart_repo, guest_cart, make_product):
        product = make_product(stock_quantity=10)
        service.add_item(session, guest_cart, product.id, 2)
        service.add_item(session, guest_cart, product.id, 3)

        items = cart_repo.list_items(session, guest_cart.id)
        assert len(items) == 1
        assert items[0].quantity == 5

    def test_exceeding_stock_leaves_cart_unchanged(
        self, session, service, cart_repo, guest_cart, make_product
    ):
        product = make_product(stock_quantity=3)
        service.add_item(session, guest_cart, product.id, 2)

        with pytest.raises(InsufficientStock):
            service.add_item(session, guest_cart, product.id, 2)

        assert quantities(session, cart_repo, guest_cart) == {product.id: 2}

    def test_first_add_beyond_stock_adds_nothing(
        self, session, service, cart_repo, guest_cart, make_product
    ):
        product = make_product(stock_quantity=1)
        with pytest.raises(InsufficientStock):
            service.add_item(session, guest_cart, product.id, 2)
        assert cart_repo.list_items(session, guest_cart.id) == []

    def test_out_of_stock_product_rejected(self, session, service, guest_cart, make_product):
        product = make_product(stock_quantity=0)
        with pytest.raises(InsufficientStock):
            service.add_item(session, guest_cart, product.id, 1)

    def test_unknown_product_rejected(self, session, service, guest_cart):
        with pytest.raises(ProductNotFound):
            service.add_item(session, guest_cart, uuid.uuid4(), 1)


class TestUpdateQuantity:
    def test_sets_absolute_quantity(self, session, service, cart_repo, guest_cart, make_product):
        product = make_product(stock_quantity=10)
        service.add_item(session, guest_cart, product.id, 2)
        service.update_quantity(session, guest_cart, product.id, 7)
        assert quantities(session, cart_repo, guest_cart) == {product.id: 7}

    def test_zero_removes_line(self, session, service, cart_repo, guest_cart, make_product):
        product = make_product()
        service.add_item(session, guest_cart, product.id, 2)
        service.update_quantity(session, guest_cart, product.id, 0)
        assert cart_repo.list_items(session, guest_cart.id) == []

    def test_negative_rejected(self, session, service, guest_cart, make_product):
        product = make_product()
        with pytest.raises(InvalidQuantity):
            service.update_quantity(session, guest_cart, product.id, -1)

    def test_absent_product_is_item_not_found(self, session, service, guest_cart, make_product):
        product = make_product()
        with pytest.raises(ItemNotFound):
            service.update_quantity(session, guest_cart, product.id, 1)

    def test_rechecks_stock_against_new_quantity(
        self, session, service, cart_repo, guest_cart, make_product
    ):
        product = make_product(stock_quantity=4)
        service.add_item(session, guest_cart, product.id, 3)

        # 4 is allowed even though 3 are already in the cart
        service.update_quantity(session, guest_cart, product.id, 4)
        with pytest.raises(InsufficientStock):
            service.update_quantity(session, guest_cart, product.id, 5)
        assert quantities(session, cart_repo, guest_cart) == {product.id: 4}


class TestRemoveAndClear:
    def test_remove_absent_is_noop(self, session, service, guest_cart):
        service.remove_item(session, guest_cart, uuid.uuid4())

    def test_clear_empties_cart(self, session, service, cart_repo, guest_cart, make_product):
        service.add_item(session, guest_cart, make_product(name="A item").id, 1)
        service.add_item(session, guest_cart, make_product(name="B item").id, 1)
        service.clear(session, guest_cart)
        assert cart_repo.list_items(session, guest_cart.id) == []
        # clearing again is fine
        service.clear(session, guest_cart)


class TestCartSummary:
    def test_totals_use_live_price(self, session, service, guest_cart, make_product):
        product = make_product(price=10.0)
        service.add_item(session, guest_cart, product.id, 3)

        product.price = 12.5
        session.add(product)
        session.commit()

        summary = service.get_cart_summary(session, guest_cart)
        assert summary.total_items == 3
        assert summary.total_amount == 37.5
        assert summary.items[0].subtotal == 37.5
        assert summary.session_id == "guest-token"

    def test_prunes_deleted_and_out_of_stock_products(
        self, session, service, cart_repo, guest_cart, make_product
    ):
        kept = make_product(name="Kept item", price=5.0)
        sold_out = make_product(name="Sold out item")
        deleted = make_product(name="Deleted item")
        for p in (kept, sold_out, deleted):
            service.add_item(session, guest_cart, p.id, 1)

        sold_out.stock_quantity = 0
        sold_out.in_stock = False
        session.add(sold_out)
        session.delete(deleted)
        session.commit()

        summary = service.get_cart_summary(session, guest_cart)
        assert [i.product_id for i in summary.items] == [kept.id]
        assert summary.total_amount == 5.0
        # the pruning is persisted
        assert quantities(session, cart_repo, guest_cart) == {kept.id: 1}

    def test_count_sums_quantities(self, session, service, guest_cart, make_product):
        service.add_item(session, guest_cart, make_product(name="A item").id, 2)
        service.add_item(session, guest_cart, make_product(name="B item").id, 3)
        assert service.count_items(session, guest_cart).total_items == 5


class TestMerge:
    def test_no_session_cart(self, session, service, customer):
        assert service.merge_session_into_user(session, "missing", customer.id) is None

    def test_empty_session_cart(self, session, service, guest_cart, customer):
        assert service.merge_session_into_user(session, "guest-token", customer.id) is None

    def test_hands_cart_over_when_user_has_none(
        self, session, service, cart_repo, guest_cart, customer, make_product
    ):
        product = make_product()
        service.add_item(session, guest_cart, product.id, 2)

        merged = service.merge_session_into_user(session, "guest-token", customer.id)

        assert merged.id == guest_cart.id
        assert merged.user_id == customer.id
        assert merged.session_id is None
        assert cart_repo.get_for_session(session, "guest-token") is None
        assert cart_repo.get_for_user(session, customer.id).id == guest_cart.id

    def test_folds_into_existing_user_cart(
        self, session, service, cart_repo, guest_cart, customer, make_product
    ):
        shared = make_product(name="Shared item", stock_quantity=10)
        only_guest = make_product(name="Guest item", stock_quantity=10)

        user_cart = service.resolve_cart(session, CartOwner(user_id=customer.id))
        service.add_item(session, user_cart, shared.id, 2)
        service.add_item(session, guest_cart, shared.id, 3)
        service.add_item(session, guest_cart, only_guest.id, 1)

        merged = service.merge_session_into_user(session, "guest-token", customer.id)

        assert merged.id == user_cart.id
        assert quantities(session, cart_repo, user_cart) == {shared.id: 5, only_guest.id: 1}
        assert cart_repo.get_for_session(session, "guest-token") is None

    def test_failed_merge_changes_nothing(
        self, session, service, cart_repo, guest_cart, customer, make_product
    ):
        fine = make_product(name="Fine item", stock_quantity=10)
        scarce = make_product(name="Scarce item", stock_quantity=5)

        user_cart = service.resolve_cart(session, CartOwner(user_id=customer.id))
        service.add_item(session, user_cart, scarce.id, 4)
        service.add_item(session, guest_cart, fine.id, 1)
        service.add_item(session, guest_cart, scarce.id, 3)

        with pytest.raises(InsufficientStock):
            service.merge_session_into_user(session, "guest-token", customer.id)

        user_cart = cart_repo.get_for_user(session, customer.id)
        assert quantities(session, cart_repo, user_cart) == {scarce.id: 4}
        session_cart = cart_repo.get_for_session(session, "guest-token")
        assert session_cart is not None
        assert quantities(session, cart_repo, session_cart) == {fine.id: 1, scarce.id: 3}
