# storefront/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

ORDER_STATUSES: tuple[str, ...] = (
    "pending",
    "confirmed",
    "shipped",
    "delivered",
    "cancelled",
)

PAYMENT_METHODS: tuple[str, ...] = (
    "credit_card",
    "paypal",
    "bank_transfer",
    "cash_on_delivery",
)

PAYMENT_STATUSES: tuple[str, ...] = ("pending", "paid", "failed", "refunded")


class Order(SQLModel, table=True):
    """
    Customer order.

    Line items and total_amount are frozen at checkout and never
    recomputed from live product data.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # ORD + yymmdd + 3-digit daily sequence
    order_number: str = Field(
        max_length=32,
        unique=True,
        index=True,
    )

    total_amount: float = Field(
        ge=0,
        description="Sum of the line snapshots at order time",
    )

    # pending | confirmed | shipped | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    # Shipping address snapshot
    shipping_first_name: str
    shipping_last_name: str
    shipping_street: str
    shipping_city: str
    shipping_zip_code: str
    shipping_country: str = "Israel"
    shipping_phone: str

    # Stored as a label only; no payment gateway
    payment_method: str
    payment_status: str = Field(default="pending", index=True)

    notes: str | None = Field(default=None, max_length=500)
    tracking_number: str | None = None
    estimated_delivery: datetime | None = None
    delivered_at: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Frozen line item inside an order.

    No FK to products: deleting a product must not touch order history.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)

    product_name: str

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: float = Field(
        ge=0,
        description="Unit price at time of order",
    )

    image_url: str | None = None


class OrderSequence(SQLModel, table=True):
    """
    Per-day counter backing order numbers.

    Bumped with a single upsert so concurrent checkouts on the same day
    never read the same value.
    """

    __tablename__ = "order_sequences"

    day: str = Field(primary_key=True, max_length=6)  # yymmdd
    last_value: int = Field(default=0, ge=0)
