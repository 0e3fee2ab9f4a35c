# storefront/models/contact.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

MESSAGE_STATUSES: tuple[str, ...] = ("new", "read", "replied", "closed")
MESSAGE_PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "urgent")
MESSAGE_CATEGORIES: tuple[str, ...] = (
    "general",
    "support",
    "complaint",
    "suggestion",
    "order",
    "product",
)


class ContactMessage(SQLModel, table=True):
    """
    Message left through the public contact form.

    Status flow: new -> read -> replied -> closed (direct jumps allowed).
    """

    __tablename__ = "contact_messages"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100)
    email: str = Field(index=True)
    phone: str | None = None
    subject: str = Field(max_length=200)
    message: str = Field(max_length=2000)

    status: str = Field(default="new", index=True)
    priority: str = Field(default="medium", index=True)
    category: str = Field(default="general", index=True)

    admin_notes: str | None = Field(default=None, max_length=1000)
    replied_at: datetime | None = None
    replied_by: uuid.UUID | None = Field(default=None, foreign_key="users.id")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
