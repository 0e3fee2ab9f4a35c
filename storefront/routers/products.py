# storefront/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.common import ApiResponse, SortOrder, ok
from storefront.schemas.product import (
    CategorySummary,
    ProductCategory,
    ProductCreate,
    ProductRead,
    ProductUpdate,
    StockAdjustment,
)
from storefront.services.inventory_service import InventoryService
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo, InventoryService(repo))


def _read(product) -> ProductRead:
    return ProductRead.model_validate(product)


# -------- Public endpoints --------


@router.get("", response_model=ApiResponse[list[ProductRead]])
def list_products(
    session: Session = Depends(get_session),
    category: ProductCategory | None = None,
    search: str | None = None,
    featured: bool | None = None,
    in_stock: bool | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    sort_by: str = "created_at",
    order: SortOrder = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
):
    """
    Browse the catalog.

    - Public endpoint.
    - `search` matches name or description, case-insensitively.
    """
    products, pagination = service.search_products(
        session,
        category=category,
        search=search,
        featured=featured,
        in_stock=in_stock,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        descending=order == "desc",
        page=page,
        limit=limit,
    )
    return ok([_read(p) for p in products], pagination=pagination)


@router.get("/featured", response_model=ApiResponse[list[ProductRead]])
def list_featured_products(
    session: Session = Depends(get_session),
    limit: int = Query(9, ge=1, le=50),
):
    """
    Featured products that are in stock, newest first.
    """
    return ok([_read(p) for p in service.list_featured(session, limit=limit)])


@router.get("/categories", response_model=ApiResponse[list[CategorySummary]])
def list_categories(session: Session = Depends(get_session)):
    """
    Product count and in-stock count per category.
    """
    return ok(service.list_categories(session))


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return ok(_read(service.get_product(session, product_id)))


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    product = service.create_product(session, payload)
    return ok(_read(product), message="Product created successfully")


@router.put(
    "/{product_id}",
    response_model=ApiResponse[ProductRead],
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    product = service.update_product(session, product_id, payload)
    return ok(_read(product), message="Product updated successfully")


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product and its hosted image (admin only).
    """
    service.delete_product(session, product_id)
    return ok(message="Product deleted successfully")


@router.post(
    "/{product_id}/stock",
    response_model=ApiResponse[ProductRead],
    dependencies=[Depends(require_admin)],
)
def adjust_stock(
    product_id: uuid.UUID,
    payload: StockAdjustment,
    session: Session = Depends(get_session),
):
    """
    Add or subtract stock by hand (admin only).

    Subtracting more than is on hand leaves the product at 0.
    """
    product = service.adjust_stock(session, product_id, payload)
    return ok(_read(product), message="Stock updated successfully")
