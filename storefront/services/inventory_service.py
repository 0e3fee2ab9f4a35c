# storefront/services/inventory_service.py
import logging

from sqlmodel import Session

from storefront.core.errors import InsufficientStock
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository

logger = logging.getLogger(__name__)


class InventoryService:
    """
    The only two stock mutators. Every higher-level flow (checkout,
    cancellation, manual admin adjustment) goes through these.

    Both keep Product.in_stock == (stock_quantity > 0).

    commit=True persists immediately; workflows that need several writes
    to succeed or fail together pass commit=False and commit themselves.
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    def decrease_stock(
        self,
        session: Session,
        product: Product,
        quantity: int,
        *,
        commit: bool = True,
    ) -> Product:
        """
        Subtract `quantity` units.

        Raises:
            InsufficientStock: if quantity > stock_quantity. Checked by the
            UPDATE itself, so a concurrent checkout cannot push stock below 0.
        """
        if not self.product_repo.decrement_stock(session, product.id, quantity):
            raise InsufficientStock(f'Not enough stock available for "{product.name}"')

        if commit:
            session.commit()
        session.refresh(product)
        return product

    def increase_stock(
        self,
        session: Session,
        product: Product,
        quantity: int,
        *,
        commit: bool = True,
    ) -> Product:
        """
        Add `quantity` units and mark the product in stock. Uncapped.
        """
        self.product_repo.increment_stock(session, product.id, quantity)

        if commit:
            session.commit()
        session.refresh(product)
        logger.debug("Restocked %s by %d (now %d)", product.id, quantity, product.stock_quantity)
        return product
