# storefront/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Registered account.

    Role:
      - "customer" | "admin"
      - anonymous shoppers have no row; they are tracked by cart session token.

    password_hash is never part of any read schema.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)

    # Always stored lowercase
    email: str = Field(
        unique=True,
        index=True,
    )

    password_hash: str

    phone: str = Field(max_length=20)

    # Optional home address
    address_street: str | None = None
    address_city: str | None = None
    address_zip_code: str | None = None
    address_country: str | None = None

    # Application role
    role: str = Field(
        default="customer",
        index=True,
        description="Application role: customer | admin",
    )

    is_active: bool = Field(default=True)

    last_login: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
