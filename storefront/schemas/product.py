# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

ProductCategory = Literal[
    "home_goods",
    "lighting",
    "textiles",
    "fragrances",
    "plants",
    "rugs",
    "accessories",
    "art",
]

StockOperation = Literal["add", "subtract"]


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    in_stock is derived from stock_quantity and cannot be sent.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=1000)
    price: float = Field(gt=0)
    category: ProductCategory
    stock_quantity: int = Field(ge=0)
    featured: bool = False
    image_url: str | None = None
    image_public_id: str | None = None

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, min_length=10, max_length=1000)
    price: float | None = Field(default=None, gt=0)
    category: ProductCategory | None = None
    stock_quantity: int | None = Field(default=None, ge=0)
    featured: bool | None = None
    image_url: str | None = None
    image_public_id: str | None = None

    @field_validator("name", "description")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    price: float
    image_url: str | None
    image_public_id: str | None
    category: str
    in_stock: bool
    stock_quantity: int
    featured: bool
    created_at: datetime
    updated_at: datetime


class StockAdjustment(SQLModel):
    """
    Admin payload for manual stock changes.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)
    operation: StockOperation


class CategorySummary(SQLModel):
    category: str
    count: int
    in_stock_count: int
