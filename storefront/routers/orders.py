# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.auth import require_admin, require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.common import ApiResponse, SortOrder, ok
from storefront.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatsSummary,
    OrderStatus,
    OrderStatusUpdate,
)
from storefront.services.cart_service import CartService
from storefront.services.inventory_service import InventoryService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
service = OrderService(
    order_repo,
    product_repo,
    InventoryService(product_repo),
    CartService(CartRepository(), product_repo),
    StatsRepository(),
)


# -------- User-facing endpoints --------


@router.post(
    "",
    response_model=ApiResponse[OrderRead],
    status_code=201,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Place an order for the given items.

    Stock is deducted and the caller's cart is emptied in the same
    transaction.
    """
    order = service.create_order(session, current_user.id, payload)
    return ok(order, message="Order created successfully")


@router.get("", response_model=ApiResponse[list[OrderRead]])
def list_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    status: OrderStatus | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = "created_at",
    order: SortOrder = "desc",
):
    """
    List orders.

    Customers only see their own orders; admins see all of them.
    """
    orders, pagination = service.list_orders(
        session,
        current_user,
        status=status,
        page=page,
        limit=limit,
        sort_by=sort_by,
        descending=order == "desc",
    )
    return ok(orders, pagination=pagination)


# -------- Admin endpoints --------
# Declared before "/{order_id}" so the literal paths win.


@router.get(
    "/stats/summary",
    response_model=ApiResponse[OrderStatsSummary],
    dependencies=[Depends(require_admin)],
)
def order_stats(session: Session = Depends(get_session)):
    """
    Per-status counts and amounts, totals and the latest orders (admin only).
    """
    return ok(service.stats_summary(session))


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[list[OrderRead]],
    dependencies=[Depends(require_admin)],
)
def list_user_orders(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    Orders of a specific customer (admin only).
    """
    orders, pagination = service.list_for_user(session, user_id, page=page, limit=limit)
    return ok(orders, pagination=pagination)


@router.put(
    "/{order_id}/status",
    response_model=ApiResponse[OrderRead],
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Set order status, tracking number and ETA (admin only).

    Moving an order to "cancelled" returns its items to stock.
    """
    order = service.update_status(session, order_id, payload)
    return ok(order, message="Order status updated")


# -------- Single order --------


@router.get("/{order_id}", response_model=ApiResponse[OrderRead])
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get a single order with its items (owner or admin).
    """
    return ok(service.get_order(session, order_id, current_user))


@router.post("/{order_id}/cancel", response_model=ApiResponse[OrderRead])
def cancel_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Cancel a pending or confirmed order (owner or admin).
    """
    order = service.cancel_by_owner(session, order_id, current_user)
    return ok(order, message="Order cancelled successfully")
