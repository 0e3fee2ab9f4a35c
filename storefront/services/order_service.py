# storefront/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.core.errors import (
    BadRequest,
    Forbidden,
    InsufficientStock,
    InvalidTransition,
    OrderNotFound,
    ProductNotFound,
)
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.user import User
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.common import Pagination
from storefront.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderStatsSummary,
    OrderStatusUpdate,
    ShippingAddress,
    StatusBreakdown,
)
from storefront.services.cart_service import CartService
from storefront.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

# Statuses from which the owner may still cancel
SELF_CANCELLABLE = {"pending", "confirmed"}


def format_order_number(day: str, sequence: int) -> str:
    """
    ORD + yymmdd + zero-padded daily sequence, e.g. ORD250314007.
    """
    return f"ORD{day}{sequence:03d}"


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create an order from a requested item list
      - Validate every item against live products before writing anything
      - Freeze name / price / image snapshots and the order total
      - Deduct stock and clear the purchaser's cart in the same transaction
      - Status changes (admin) and self-service cancellation, restoring
        stock exactly once on the way into "cancelled"
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        inventory: InventoryService,
        cart_service: CartService,
        stats_repo: StatsRepository,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.inventory = inventory
        self.cart_service = cart_service
        self.stats_repo = stats_repo

    # -------- User-facing operations --------

    def create_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderRead:
        """
        Create an order for `user_id`.

        Steps:
          1. Merge duplicate product lines of the request.
          2. For each product: must exist, be in stock and hold enough units.
          3. Build frozen line snapshots and the total.
          4. Take the next order number of the day.
          5. Insert Order + OrderItems.
          6. Decrease stock of every product.
          7. Clear the purchaser's stored cart.
          8. Commit; any failure rolls the whole thing back.
        """
        # 1) Aggregate quantities per product, keeping request order
        requested: dict[uuid.UUID, int] = {}
        for line in payload.items:
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

        # 2) Validate against live products
        products: dict[uuid.UUID, Product] = {}
        for product_id, quantity in requested.items():
            product = self.product_repo.get_by_id(session, product_id)
            if product is None:
                raise ProductNotFound(f"Product {product_id} not found")
            if not product.in_stock or product.stock_quantity < quantity:
                raise InsufficientStock(f'Insufficient stock for "{product.name}"')
            products[product_id] = product

        # 3) Freeze snapshots
        snapshots: list[OrderItem] = []
        total_amount = 0.0
        for product_id, quantity in requested.items():
            product = products[product_id]
            total_amount += product.price * quantity
            snapshots.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                    image_url=product.image_url,
                )
            )

        address = payload.shipping_address
        try:
            # 4) Order number (local calendar day)
            day = datetime.now().strftime("%y%m%d")
            sequence = self.order_repo.next_sequence(session, day)

            # 5) Order + items
            order = self.order_repo.create_order(
                session,
                Order(
                    user_id=user_id,
                    order_number=format_order_number(day, sequence),
                    total_amount=round(total_amount, 2),
                    status="pending",
                    shipping_first_name=address.first_name,
                    shipping_last_name=address.last_name,
                    shipping_street=address.street,
                    shipping_city=address.city,
                    shipping_zip_code=address.zip_code,
                    shipping_country=address.country,
                    shipping_phone=address.phone,
                    payment_method=payload.payment_method,
                    payment_status="pending",
                    notes=payload.notes,
                ),
            )
            for item in snapshots:
                item.order_id = order.id
            items = self.order_repo.create_items(session, snapshots)

            # 6) Stock
            for item in items:
                self.inventory.decrease_stock(
                    session, products[item.product_id], item.quantity, commit=False
                )

            # 7) Cart
            self.cart_service.clear_for_user(session, user_id)

            # 8) Commit
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info("Order %s created for user %s", order.order_number, user_id)
        return self.build_order_read(order, items)

    def list_orders(
        self,
        session: Session,
        requester: User,
        *,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> tuple[list[OrderRead], Pagination]:
        """
        Page through orders. Customers only ever see their own orders,
        whatever filters they pass; admins see everything.
        """
        if sort_by not in Order.model_fields:
            raise BadRequest(f"Cannot sort by '{sort_by}'")

        user_id = None if requester.role == "admin" else requester.id
        return self._page(
            session,
            user_id=user_id,
            status=status,
            page=page,
            limit=limit,
            sort_by=sort_by,
            descending=descending,
        )

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        *,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[OrderRead], Pagination]:
        """
        Orders of one customer (admin view).
        """
        return self._page(session, user_id=user_id, page=page, limit=limit)

    def get_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        requester: User,
    ) -> OrderRead:
        """
        Single order with items. Owner or admin only.
        """
        order = self._get_visible_order(session, order_id, requester)
        items = self.order_repo.list_items_for_order(session, order.id)
        return self.build_order_read(order, items)

    def cancel_by_owner(
        self,
        session: Session,
        order_id: uuid.UUID,
        requester: User,
    ) -> OrderRead:
        """
        Self-service cancellation.

        Allowed only while the order is pending or confirmed; restores the
        stock of every line and marks the order cancelled.
        """
        order = self._get_visible_order(session, order_id, requester)
        if order.status not in SELF_CANCELLABLE:
            raise InvalidTransition(f"Cannot cancel an order that is {order.status}")

        items = self.order_repo.list_items_for_order(session, order.id)
        try:
            self._restore_stock(session, items)
            order.status = "cancelled"
            order.updated_at = datetime.now(timezone.utc)
            self.order_repo.update_order(session, order)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info("Order %s cancelled by user %s", order.order_number, requester.id)
        return self.build_order_read(order, items)

    # -------- Admin operations --------

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin status change. Any of the five states may be set.

          - delivered => delivered_at stamped
          - cancelled (from anything but cancelled) => stock restored once
          - tracking_number / estimated_delivery applied when given
        """
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            raise OrderNotFound()

        items = self.order_repo.list_items_for_order(session, order.id)
        previous = order.status
        now = datetime.now(timezone.utc)

        try:
            if payload.status == "cancelled" and previous != "cancelled":
                self._restore_stock(session, items)

            order.status = payload.status
            if payload.status == "delivered":
                order.delivered_at = now
            if payload.tracking_number is not None:
                order.tracking_number = payload.tracking_number
            if payload.estimated_delivery is not None:
                order.estimated_delivery = payload.estimated_delivery
            order.updated_at = now

            self.order_repo.update_order(session, order)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info("Order %s: %s -> %s", order.order_number, previous, order.status)
        return self.build_order_read(order, items)

    def stats_summary(self, session: Session) -> OrderStatsSummary:
        """
        Dashboard numbers: per-status breakdown, totals, latest orders.
        """
        breakdown = [
            StatusBreakdown(status=status, count=int(count), total_amount=float(amount))
            for status, count, amount in self.stats_repo.orders_by_status(session)
        ]
        recent = self.stats_repo.latest_orders(session, limit=5)
        items_by_order = self.order_repo.list_items_for_orders(session, [o.id for o in recent])

        return OrderStatsSummary(
            status_stats=breakdown,
            total_orders=self.stats_repo.count_orders(session),
            total_revenue=round(self.stats_repo.total_revenue(session), 2),
            recent_orders=[self.build_order_read(o, items_by_order[o.id]) for o in recent],
        )

    # -------- Helpers --------

    def _get_visible_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        requester: User,
    ) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            raise OrderNotFound()
        if requester.role != "admin" and order.user_id != requester.id:
            raise Forbidden("Access denied to this order")
        return order

    def _restore_stock(self, session: Session, items: list[OrderItem]) -> None:
        """
        Put every line's quantity back, skipping products deleted since.
        No commit.
        """
        for item in items:
            product = self.product_repo.get_by_id(session, item.product_id)
            if product is None:
                continue
            self.inventory.increase_stock(session, product, item.quantity, commit=False)

    def _page(
        self,
        session: Session,
        *,
        user_id: uuid.UUID | None = None,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> tuple[list[OrderRead], Pagination]:
        orders, total = self.order_repo.search(
            session,
            user_id=user_id,
            status=status,
            sort_by=sort_by,
            descending=descending,
            skip=(page - 1) * limit,
            limit=limit,
        )
        items_by_order = self.order_repo.list_items_for_orders(session, [o.id for o in orders])
        reads = [self.build_order_read(o, items_by_order[o.id]) for o in orders]
        return reads, Pagination.build(total, page, limit)

    @staticmethod
    def build_order_read(order: Order, items: list[OrderItem]) -> OrderRead:
        """
        Compose OrderRead from ORM rows. Uses only the frozen snapshots.
        """
        item_reads = [
            OrderItemRead(
                product_id=it.product_id,
                product_name=it.product_name,
                quantity=it.quantity,
                unit_price=it.unit_price,
                image_url=it.image_url,
                line_total=round(it.quantity * it.unit_price, 2),
            )
            for it in items
        ]

        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            order_number=order.order_number,
            items=item_reads,
            total_items=sum(it.quantity for it in items),
            total_amount=order.total_amount,
            status=order.status,
            shipping_address=ShippingAddress(
                first_name=order.shipping_first_name,
                last_name=order.shipping_last_name,
                street=order.shipping_street,
                city=order.shipping_city,
                zip_code=order.shipping_zip_code,
                country=order.shipping_country,
                phone=order.shipping_phone,
            ),
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            notes=order.notes,
            tracking_number=order.tracking_number,
            estimated_delivery=order.estimated_delivery,
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
