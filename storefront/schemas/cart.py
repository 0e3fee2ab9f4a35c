# storefront/schemas/cart.py
import uuid
from dataclasses import dataclass

from sqlmodel import SQLModel, Field


@dataclass(frozen=True)
class CartOwner:
    """
    Who a cart belongs to for the current request.

    Exactly one of user_id / session_id is set; user_id wins when the
    caller is authenticated.
    """

    user_id: uuid.UUID | None = None
    session_id: str | None = None

    def __post_init__(self):
        if (self.user_id is None) == (self.session_id is None):
            raise ValueError("CartOwner needs exactly one of user_id or session_id")


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1, le=100)


class CartItemUpdate(SQLModel):
    """
    Payload for setting the absolute quantity of a cart line.

    0 removes the line; negative values are rejected by the service.
    """

    product_id: uuid.UUID
    quantity: int = Field(le=100)


class CartMerge(SQLModel):
    """
    Payload for folding an anonymous cart into the caller's cart.
    """

    session_id: str = Field(min_length=1, max_length=128)


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, priced from the live product.
    """

    product_id: uuid.UUID
    name: str
    price: float
    image_url: str | None = None
    quantity: int
    subtotal: float
    in_stock: bool
    stock_quantity: int


class CartRead(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_items: int
    total_amount: float
    session_id: str | None = None


class CartCount(SQLModel):
    total_items: int
    session_id: str | None = None
