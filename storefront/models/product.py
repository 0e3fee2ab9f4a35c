# storefront/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

# Fixed catalog categories
PRODUCT_CATEGORIES: tuple[str, ...] = (
    "home_goods",
    "lighting",
    "textiles",
    "fragrances",
    "plants",
    "rugs",
    "accessories",
    "art",
)


class Product(SQLModel, table=True):
    """
    Catalog entry.

    Invariant: in_stock == (stock_quantity > 0). Every stock mutator keeps
    the two fields in sync; nothing reconciles them afterwards.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        max_length=1000,
        description="Long description shown on the product page",
    )

    price: float = Field(
        ge=0,
        description="Unit price",
    )

    image_url: str | None = Field(
        default=None,
        description="Public URL on the asset host",
    )

    image_public_id: str | None = Field(
        default=None,
        description="Object id on the asset host (used for deletion)",
    )

    category: str = Field(
        index=True,
        description="One of PRODUCT_CATEGORIES",
    )

    in_stock: bool = Field(
        default=False,
        index=True,
    )

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    featured: bool = Field(
        default=False,
        index=True,
        description="Shown on the storefront home page",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last modification timestamp (UTC)",
    )
