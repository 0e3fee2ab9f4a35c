# storefront/services/cart_service.py
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.errors import (
    InsufficientStock,
    InvalidQuantity,
    ItemNotFound,
    ProductNotFound,
)
from storefront.models.cart import Cart, CartItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartCount, CartItemRead, CartOwner, CartRead

logger = logging.getLogger(__name__)

settings = get_settings()


def new_session_token() -> str:
    """Unguessable token identifying an anonymous shopper's cart."""
    return secrets.token_urlsafe(24)


def _utc(value: datetime) -> datetime:
    # SQLite hands datetimes back naive; they are always stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - resolve one cart per user or per anonymous session token
      - validate product existence and stock before any mutation
      - keep at most one line per product, quantities always >= 1
      - refresh expires_at on every mutation
      - fold an anonymous cart into a user's cart after login
      - compute totals from live product prices
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    @staticmethod
    def _touch(cart: Cart) -> None:
        now = datetime.now(timezone.utc)
        cart.expires_at = now + timedelta(days=settings.CART_TTL_DAYS)
        cart.updated_at = now

    @staticmethod
    def _is_expired(cart: Cart) -> bool:
        return _utc(cart.expires_at) <= datetime.now(timezone.utc)

    def _find_live_cart(self, session: Session, owner: CartOwner) -> Cart | None:
        """
        Look up the owner's cart, dropping it if it has expired.
        """
        if owner.user_id is not None:
            cart = self.cart_repo.get_for_user(session, owner.user_id)
        else:
            cart = self.cart_repo.get_for_session(session, owner.session_id)

        if cart is not None and self._is_expired(cart):
            self.cart_repo.delete(session, cart)
            return None
        return cart

    def _fold_item(
        self,
        session: Session,
        cart: Cart,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartItem:
        """
        Add `quantity` of a product to `cart` without committing.

        Preconditions (checked before anything is written):
          - product exists
          - product is in stock
          - quantity already in cart + quantity <= stock_quantity
        """
        product = self.product_repo.get_by_id(session, product_id)
        if product is None:
            raise ProductNotFound()

        if not product.in_stock:
            raise InsufficientStock(f'"{product.name}" is out of stock')

        existing = self.cart_repo.get_item(session, cart.id, product_id)
        existing_qty = existing.quantity if existing else 0

        if existing_qty + quantity > product.stock_quantity:
            raise InsufficientStock(
                f'Only {product.stock_quantity} units of "{product.name}" available'
            )

        now = datetime.now(timezone.utc)
        if existing:
            existing.quantity = existing_qty + quantity
            existing.added_at = now
            item = self.cart_repo.save_item(session, existing)
        else:
            item = self.cart_repo.save_item(
                session,
                CartItem(
                    cart_id=cart.id,
                    product_id=product_id,
                    quantity=quantity,
                    added_at=now,
                ),
            )

        self._touch(cart)
        self.cart_repo.save(session, cart)
        return item

    # ---- public operations ----

    def resolve_cart(self, session: Session, owner: CartOwner) -> Cart:
        """
        Return the owner's cart, creating an empty one if absent.
        """
        cart = self._find_live_cart(session, owner)
        if cart is None:
            cart = Cart(user_id=owner.user_id, session_id=owner.session_id)
            self._touch(cart)
            cart = self.cart_repo.create(session, cart)
        session.commit()
        return cart

    def get_cart_summary(self, session: Session, cart: Cart) -> CartRead:
        """
        Display view of a cart.

        Lines whose product was deleted or is out of stock are dropped
        (and the drop is persisted); totals use current product prices.
        """
        items = self.cart_repo.list_items(session, cart.id)
        products = self.product_repo.get_many(session, [it.product_id for it in items])

        item_reads: list[CartItemRead] = []
        total_items = 0
        total_amount = 0.0
        pruned = False

        for it in items:
            product = products.get(it.product_id)
            if product is None or not product.in_stock:
                self.cart_repo.delete_item(session, it)
                pruned = True
                continue

            subtotal = product.price * it.quantity
            total_items += it.quantity
            total_amount += subtotal

            item_reads.append(
                CartItemRead(
                    product_id=product.id,
                    name=product.name,
                    price=product.price,
                    image_url=product.image_url,
                    quantity=it.quantity,
                    subtotal=round(subtotal, 2),
                    in_stock=product.in_stock,
                    stock_quantity=product.stock_quantity,
                )
            )

        if pruned:
            session.commit()

        return CartRead(
            items=item_reads,
            total_items=total_items,
            total_amount=round(total_amount, 2),
            session_id=cart.session_id,
        )

    def count_items(self, session: Session, cart: Cart) -> CartCount:
        """
        Sum of quantities without pruning or pricing.
        """
        items = self.cart_repo.list_items(session, cart.id)
        return CartCount(
            total_items=sum(it.quantity for it in items),
            session_id=cart.session_id,
        )

    def add_item(
        self,
        session: Session,
        cart: Cart,
        product_id: uuid.UUID,
        quantity: int,
    ) -> Cart:
        """
        Add a product to the cart; quantities of an existing line are summed.

        Raises:
            ProductNotFound, InsufficientStock: cart left unchanged.
        """
        self._fold_item(session, cart, product_id, quantity)
        session.commit()
        return cart

    def update_quantity(
        self,
        session: Session,
        cart: Cart,
        product_id: uuid.UUID,
        quantity: int,
    ) -> Cart:
        """
        Set the absolute quantity of a line.

          - quantity < 0  => InvalidQuantity
          - quantity == 0 => line removed (no-op if absent)
          - quantity > 0  => stock re-checked against the new quantity;
                             ItemNotFound if the product is not in the cart
        """
        if quantity < 0:
            raise InvalidQuantity()

        if quantity == 0:
            return self.remove_item(session, cart, product_id)

        product = self.product_repo.get_by_id(session, product_id)
        if product is None:
            raise ProductNotFound()

        if not product.in_stock or product.stock_quantity < quantity:
            raise InsufficientStock(
                f'Only {product.stock_quantity} units of "{product.name}" available'
            )

        item = self.cart_repo.get_item(session, cart.id, product_id)
        if item is None:
            raise ItemNotFound()

        item.quantity = quantity
        item.added_at = datetime.now(timezone.utc)
        self.cart_repo.save_item(session, item)

        self._touch(cart)
        self.cart_repo.save(session, cart)
        session.commit()
        return cart

    def remove_item(
        self,
        session: Session,
        cart: Cart,
        product_id: uuid.UUID,
    ) -> Cart:
        """
        Remove a product from the cart. Removing an absent product is a no-op.
        """
        item = self.cart_repo.get_item(session, cart.id, product_id)
        if item is not None:
            self.cart_repo.delete_item(session, item)

        self._touch(cart)
        self.cart_repo.save(session, cart)
        session.commit()
        return cart

    def clear(self, session: Session, cart: Cart) -> Cart:
        """
        Remove every line. Clearing an empty cart is a no-op.
        """
        self.cart_repo.clear_items(session, cart.id)
        self._touch(cart)
        self.cart_repo.save(session, cart)
        session.commit()
        return cart

    def merge_session_into_user(
        self,
        session: Session,
        session_id: str,
        user_id: uuid.UUID,
    ) -> Cart | None:
        """
        Fold the anonymous cart identified by `session_id` into the user's cart.

          - no session cart, or an empty one => None (nothing to merge)
          - user has no cart => the session cart is handed over to the user
          - otherwise every session line is added with add_item semantics
            and the session cart is deleted

        Runs as one transaction: if any line fails its stock check, nothing
        is merged and the error propagates.
        """
        session_cart = self._find_live_cart(session, CartOwner(session_id=session_id))
        if session_cart is None:
            session.commit()
            return None

        session_items = self.cart_repo.list_items(session, session_cart.id)
        if not session_items:
            return None

        try:
            user_cart = self._find_live_cart(session, CartOwner(user_id=user_id))

            if user_cart is None:
                session_cart.user_id = user_id
                session_cart.session_id = None
                self._touch(session_cart)
                merged = self.cart_repo.save(session, session_cart)
            else:
                for it in session_items:
                    self._fold_item(session, user_cart, it.product_id, it.quantity)
                self.cart_repo.delete(session, session_cart)
                merged = user_cart

            session.commit()
        except Exception:
            session.rollback()
            raise

        logger.info("Merged session cart into cart of user %s", user_id)
        session.refresh(merged)
        return merged

    def clear_for_user(self, session: Session, user_id: uuid.UUID) -> None:
        """
        Empty the user's stored cart, if any, without committing.
        Used by checkout inside its own transaction.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if cart is not None:
            self.cart_repo.clear_items(session, cart.id)
            self._touch(cart)
            self.cart_repo.save(session, cart)
