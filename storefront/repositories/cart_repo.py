# storefront/repositories/cart_repo.py
import uuid
from datetime import datetime

from sqlalchemy import delete
from sqlmodel import Session, select

from storefront.models.cart import Cart, CartItem


class CartRepository:
    """
    Data access layer for carts and cart_items.

    NOTE:
      - No commits here; cart mutations are often part of a larger
        workflow (merge, checkout). The service calls session.commit().
    """

    # ---- Carts ----

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def get_for_session(self, session: Session, session_id: str) -> Cart | None:
        stmt = select(Cart).where(Cart.session_id == session_id)
        return session.exec(stmt).first()

    def create(self, session: Session, cart: Cart) -> Cart:
        session.add(cart)
        session.flush()
        session.refresh(cart)
        return cart

    def save(self, session: Session, cart: Cart) -> Cart:
        session.add(cart)
        session.flush()
        return cart

    def delete(self, session: Session, cart: Cart) -> None:
        self.clear_items(session, cart.id)
        session.delete(cart)
        session.flush()

    def delete_expired(self, session: Session, now: datetime) -> int:
        """
        Remove every cart whose expires_at is in the past.

        Returns:
            Number of carts removed.
        """
        expired_ids = list(session.exec(select(Cart.id).where(Cart.expires_at < now)).all())
        if not expired_ids:
            return 0
        session.exec(delete(CartItem).where(CartItem.cart_id.in_(expired_ids)))
        session.exec(delete(Cart).where(Cart.id.in_(expired_ids)))
        session.flush()
        return len(expired_ids)

    # ---- Cart items ----

    def list_items(self, session: Session, cart_id: uuid.UUID) -> list[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id).order_by(CartItem.added_at)
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, cart_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.cart_id == cart_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def save_item(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.flush()
        return item

    def delete_item(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.flush()

    def clear_items(self, session: Session, cart_id: uuid.UUID) -> None:
        for row in self.list_items(session, cart_id):
            session.delete(row)
        session.flush()
