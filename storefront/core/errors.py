# storefront/core/errors.py
"""
Domain errors raised by the service layer.

Each kind is an HTTPException carrying its conventional status code, so
routers never translate errors themselves; the handlers registered in
main.py only reshape them into the response envelope.
"""

from fastapi import HTTPException, status


class StoreError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
        )


# ---- 400 ----


class BadRequest(StoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class InvalidQuantity(BadRequest):
    default_detail = "Quantity cannot be negative"


class InsufficientStock(BadRequest):
    default_detail = "Not enough stock available"


class InvalidTransition(BadRequest):
    default_detail = "Order cannot be changed from its current status"


class InvalidImage(BadRequest):
    default_detail = "Only image files are allowed"


# ---- 401 / 403 ----


class Unauthorized(StoreError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class Forbidden(StoreError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


# ---- 404 ----


class NotFound(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ProductNotFound(NotFound):
    default_detail = "Product not found"


class ItemNotFound(NotFound):
    default_detail = "Item not found in cart"


class OrderNotFound(NotFound):
    default_detail = "Order not found"


class MessageNotFound(NotFound):
    default_detail = "Message not found"


class UserNotFound(NotFound):
    default_detail = "User not found"


class ImageNotFound(NotFound):
    default_detail = "Image not found"


# ---- 409 / 413 ----


class Conflict(StoreError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class PayloadTooLarge(StoreError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_detail = "Image too large (max 5MB)"
