# storefront/repositories/product_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import case, func, or_, update
from sqlmodel import Session, select

from storefront.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    - Stock counters are changed with single conditional UPDATEs and are
      NOT committed here; the caller owns the transaction.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_many(self, session: Session, product_ids: list[uuid.UUID]) -> dict[uuid.UUID, Product]:
        if not product_ids:
            return {}
        stmt = select(Product).where(Product.id.in_(product_ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def search(
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
        skip: int = 0,
        limit: int = 12,
    ) -> tuple[list[Product], int]:
        """
        Filtered, sorted and paginated product listing.

        Returns:
            (page of products, total matching rows)
        """
        conditions = []
        if category is not None:
            conditions.append(Product.category == category)
        if featured is not None:
            conditions.append(Product.featured == featured)
        if in_stock is not None:
            conditions.append(Product.in_stock == in_stock)
        if min_price is not None:
            conditions.append(Product.price >= min_price)
        if max_price is not None:
            conditions.append(Product.price <= max_price)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(Product.description).like(pattern),
                )
            )

        column = getattr(Product, sort_by)
        stmt = (
            select(Product)
            .where(*conditions)
            .order_by(column.desc() if descending else column.asc())
            .offset(skip)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(Product).where(*conditions)

        items = session.exec(stmt).all()
        total = session.exec(count_stmt).one()
        return list(items), int(total or 0)

    def list_featured(self, session: Session, limit: int = 9) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.featured == True, Product.in_stock == True)  # noqa: E712
            .order_by(Product.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def category_counts(self, session: Session) -> list[tuple]:
        """
        Per category: total products and how many are in stock.
        """
        in_stock_count = func.sum(case((Product.in_stock == True, 1), else_=0))  # noqa: E712
        stmt = (
            select(
                Product.category,
                func.count(Product.id),
                in_stock_count,
            )
            .group_by(Product.category)
            .order_by(Product.category)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = datetime.now(timezone.utc)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

    # ----- Stock counters -----

    def decrement_stock(self, session: Session, product_id: uuid.UUID, quantity: int) -> bool:
        """
        Atomically subtract `quantity` if enough stock remains.

        UPDATE products
           SET stock_quantity = stock_quantity - :q,
               in_stock = (stock_quantity - :q) > 0
         WHERE id = :id AND stock_quantity >= :q

        Returns:
            True if a row was updated, False if stock was insufficient
            (or the product does not exist).
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock_quantity >= quantity)
            .values(
                stock_quantity=Product.stock_quantity - quantity,
                in_stock=(Product.stock_quantity - quantity) > 0,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        return result.rowcount == 1

    def increment_stock(self, session: Session, product_id: uuid.UUID, quantity: int) -> bool:
        """
        Atomically add `quantity` and force in_stock = true.

        Returns:
            True if the product exists.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(
                stock_quantity=Product.stock_quantity + quantity,
                in_stock=True,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        return result.rowcount == 1
