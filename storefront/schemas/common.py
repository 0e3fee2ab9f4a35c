# storefront/schemas/common.py
import math
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

SortOrder = Literal["asc", "desc"]


class Pagination(BaseModel):
    """
    Paging metadata returned alongside list payloads.
    """

    current_page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class ApiResponse(BaseModel, Generic[T]):
    """
    Uniform response envelope:

        {success, data?, message?, pagination?}
    """

    success: bool = True
    data: T | None = None
    message: str | None = None
    pagination: Pagination | None = None


def ok(
    data=None,
    message: str | None = None,
    pagination: Pagination | None = None,
) -> ApiResponse:
    """Build a successful envelope."""
    return ApiResponse(success=True, data=data, message=message, pagination=pagination)
