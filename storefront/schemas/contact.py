# storefront/schemas/contact.py
import re
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.order import PHONE_PATTERN

MessageStatus = Literal["new", "read", "replied", "closed"]
MessagePriority = Literal["low", "medium", "high", "urgent"]
MessageCategory = Literal["general", "support", "complaint", "suggestion", "order", "product"]


class ContactMessageCreate(SQLModel):
    """
    Public contact form payload.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: str | None = None
    subject: str = Field(min_length=2, max_length=200)
    message: str = Field(min_length=10, max_length=2000)
    category: MessageCategory = "general"

    @field_validator("name", "subject", "message")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if not re.match(PHONE_PATTERN, v):
            raise ValueError("invalid phone number")
        return v


class ContactMessageRead(SQLModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
    subject: str
    message: str
    status: MessageStatus
    priority: MessagePriority
    category: MessageCategory
    admin_notes: str | None = None
    replied_at: datetime | None = None
    replied_by: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime


class ContactSubmitted(SQLModel):
    id: uuid.UUID


class MessageStatusUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    status: MessageStatus
    admin_notes: str | None = Field(default=None, max_length=1000)


class MessagePriorityUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    priority: MessagePriority


class CountByKey(SQLModel):
    key: str
    count: int


class ContactStats(SQLModel):
    status_stats: list[CountByKey]
    priority_stats: list[CountByKey]
    category_stats: list[CountByKey]
    recent_messages: list[ContactMessageRead]
