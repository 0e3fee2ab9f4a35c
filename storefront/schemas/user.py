# storefront/schemas/user.py
import re
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.order import PHONE_PATTERN

# App-level roles. Anonymous shoppers have no account, so no role here.
Role = Literal["customer", "admin"]


def _normalize_phone(v: str) -> str:
    v = v.strip()
    if not re.match(PHONE_PATTERN, v):
        raise ValueError("invalid phone number")
    return v


class Address(SQLModel):
    """
    Home address kept on the profile.
    """

    model_config = ConfigDict(extra="forbid")

    street: str
    city: str
    zip_code: str
    country: str = "Israel"


class UserRegister(SQLModel):
    """
    Payload for creating an account.

    Validation rules:
      - email must be a valid EmailStr (stored lowercase)
      - password at least 6 characters
      - phone must be a mobile number (05XXXXXXXX)
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    phone: str

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str) -> str:
        return _normalize_phone(v)


class UserLogin(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class UserRead(SQLModel):
    """Response schema returned to clients. Never includes the password hash."""

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    address: Address | None = None
    role: Role
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime


class ProfileUpdate(SQLModel):
    """
    Partial profile update for authenticated users.

    Only these fields are editable; email and role are not.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, min_length=2, max_length=50)
    last_name: str | None = Field(default=None, min_length=2, max_length=50)
    phone: str | None = None
    address: Address | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _normalize_phone(v)


class PasswordChange(SQLModel):
    model_config = ConfigDict(extra="forbid")

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class AuthResult(SQLModel):
    user: UserRead
    token: str


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role


class UserActiveUpdate(SQLModel):
    """
    Admin-only account enable/disable schema.
    """

    model_config = ConfigDict(extra="forbid")
    is_active: bool
