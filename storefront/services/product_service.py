# storefront/services/product_service.py
import logging
import uuid

from sqlmodel import Session

from storefront.core.errors import BadRequest, ProductNotFound
from storefront.core.storage_utils import delete_from_storage
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.common import Pagination
from storefront.schemas.product import (
    CategorySummary,
    ProductCreate,
    ProductUpdate,
    StockAdjustment,
)
from storefront.services.inventory_service import InventoryService
from storefront.services.upload_service import object_path

logger = logging.getLogger(__name__)


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - filtered / paginated browsing
      - admin create / update / delete (enforced at router via require_admin)
      - keeping in_stock == (stock_quantity > 0) on every write
      - manual stock adjustments through InventoryService
    """

    def __init__(self, repo: ProductRepository, inventory: InventoryService):
        self.repo = repo
        self.inventory = inventory

    # ----- Browsing -----

    def search_products(
        self,
        session: Session,
        *,
        category: str | None = None,
        search: str | None = None,
        featured: bool | None = None,
        in_stock: bool | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
        page: int = 1,
        limit: int = 12,
    ) -> tuple[list[Product], Pagination]:
        if sort_by not in Product.model_fields:
            raise BadRequest(f"Cannot sort by '{sort_by}'")

        products, total = self.repo.search(
            session,
            category=category,
            search=search.strip() if search else None,
            featured=featured,
            in_stock=in_stock,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by,
            descending=descending,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return products, Pagination.build(total, page, limit)

    def list_featured(self, session: Session, limit: int = 9) -> list[Product]:
        return self.repo.list_featured(session, limit=limit)

    def list_categories(self, session: Session) -> list[CategorySummary]:
        return [
            CategorySummary(
                category=category,
                count=int(count),
                in_stock_count=int(in_stock_count or 0),
            )
            for category, count, in_stock_count in self.repo.category_counts(session)
        ]

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise ProductNotFound()
        return product

    # ----- Admin -----

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            category=payload.category,
            stock_quantity=payload.stock_quantity,
            in_stock=payload.stock_quantity > 0,
            featured=payload.featured,
            image_url=payload.image_url,
            image_public_id=payload.image_public_id,
        )
        product = self.repo.create(session, product)
        logger.info("Product %s created", product.id)
        return product

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update. Only fields present in the payload change.
        """
        product = self.get_product(session, product_id)

        if payload.name is not None:
            product.name = payload.name

        if payload.description is not None:
            product.description = payload.description

        if payload.price is not None:
            product.price = payload.price

        if payload.category is not None:
            product.category = payload.category

        if payload.stock_quantity is not None:
            product.stock_quantity = payload.stock_quantity
            product.in_stock = payload.stock_quantity > 0

        if payload.featured is not None:
            product.featured = payload.featured

        if payload.image_url is not None:
            product.image_url = payload.image_url

        if payload.image_public_id is not None:
            product.image_public_id = payload.image_public_id

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product and, best-effort, its hosted image.

        Carts referencing it are pruned on their next read; orders keep
        their snapshots.
        """
        product = self.get_product(session, product_id)

        if product.image_public_id:
            try:
                delete_from_storage(object_path(product.image_public_id))
            except Exception:
                logger.warning(
                    "Could not delete image %s of product %s",
                    product.image_public_id,
                    product.id,
                    exc_info=True,
                )

        self.repo.delete(session, product)
        logger.info("Product %s deleted", product_id)

    def adjust_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: StockAdjustment,
    ) -> Product:
        """
        Manual stock change.

          - add      => increase_stock (uncapped)
          - subtract => decrease_stock, clamped so stock never goes below 0
        """
        product = self.get_product(session, product_id)

        if payload.operation == "add":
            return self.inventory.increase_stock(session, product, payload.quantity)

        amount = min(payload.quantity, product.stock_quantity)
        return self.inventory.decrease_stock(session, product, amount)
