# storefront/schemas/order.py
import re
import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]
PaymentMethod = Literal["credit_card", "paypal", "bank_transfer", "cash_on_delivery"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]

PHONE_PATTERN = r"^05\d{8}$"


class OrderItemCreate(SQLModel):
    product_id: uuid.UUID
    quantity: int = Field(ge=1)


class ShippingAddress(SQLModel):
    """
    Shipping address captured at checkout.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str
    last_name: str
    street: str
    city: str
    zip_code: str
    country: str = "Israel"
    phone: str

    @field_validator("first_name", "last_name", "street", "city", "zip_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str) -> str:
        v = v.strip()
        if not re.match(PHONE_PATTERN, v):
            raise ValueError("invalid phone number")
        return v


class OrderCreate(SQLModel):
    """
    Payload for creating an order.

    Backend derives:
      - user_id from token
      - status = 'pending', payment_status = 'pending'
      - order_number from the daily sequence
      - unit prices, names and images from the live catalog
    """

    model_config = ConfigDict(extra="forbid")

    items: list[OrderItemCreate] = Field(min_length=1)
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderItemRead(SQLModel):
    """
    Representation of a single frozen order line.
    """

    product_id: uuid.UUID
    product_name: str
    quantity: int
    unit_price: float
    image_url: str | None = None
    line_total: float


class OrderRead(SQLModel):
    """
    Full order view including its line snapshots.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    order_number: str
    items: list[OrderItemRead]
    total_items: int
    total_amount: float
    status: OrderStatus
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    notes: str | None = None
    tracking_number: str | None = None
    estimated_delivery: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
    tracking_number: str | None = None
    estimated_delivery: datetime | None = None

    @field_validator("estimated_delivery")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        # Timestamps without an offset are taken as UTC
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class StatusBreakdown(SQLModel):
    status: str
    count: int
    total_amount: float


class OrderStatsSummary(SQLModel):
    """
    Aggregated order numbers for the admin dashboard.
    """

    status_stats: list[StatusBreakdown]
    total_orders: int
    total_revenue: float
    recent_orders: list[OrderRead]
