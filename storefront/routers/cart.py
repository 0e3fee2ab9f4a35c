# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, Header, Request, Response
from sqlmodel import Session

from storefront.core.auth import get_current_user, require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartCount,
    CartItemCreate,
    CartItemUpdate,
    CartMerge,
    CartOwner,
    CartRead,
)
from storefront.schemas.common import ApiResponse, ok
from storefront.services.cart_service import CartService, new_session_token

router = APIRouter(prefix="/cart", tags=["Cart"])

# Anonymous shoppers carry their cart token in this header; the server
# mints one when it is missing and echoes it back on every cart response.
SESSION_HEADER = "X-Session-Id"

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


def get_cart_owner(
    request: Request,
    response: Response,
    x_session_id: str | None = Header(default=None),
    current_user: User | None = Depends(get_current_user),
) -> CartOwner:
    """
    Resolve who owns the cart for this request.

      - authenticated => the user (session header ignored)
      - anonymous     => the session token from the header, or a new one
    """
    if current_user is not None:
        return CartOwner(user_id=current_user.id)

    token = x_session_id or new_session_token()
    response.headers[SESSION_HEADER] = token
    # Error responses are built from scratch; main.py copies it from here
    request.state.cart_session_id = token
    return CartOwner(session_id=token)


@router.get("", response_model=ApiResponse[CartRead])
def get_cart(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Get the caller's cart.

    Items whose product was deleted or went out of stock are dropped.
    """
    cart = service.resolve_cart(session, owner)
    return ok(service.get_cart_summary(session, cart))


@router.get("/count", response_model=ApiResponse[CartCount])
def get_cart_count(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Total quantity in the cart, for the header badge.
    """
    cart = service.resolve_cart(session, owner)
    return ok(service.count_items(session, cart))


@router.post("/add", response_model=ApiResponse[CartRead])
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Add a product to the cart.

    Returns the updated cart summary.
    """
    cart = service.resolve_cart(session, owner)
    service.add_item(session, cart, payload.product_id, payload.quantity)
    return ok(service.get_cart_summary(session, cart), message="Item added to cart")


@router.put("/update", response_model=ApiResponse[CartRead])
def update_cart_item(
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Set the quantity of a product in the cart (0 removes it).

    Returns the updated cart summary.
    """
    cart = service.resolve_cart(session, owner)
    service.update_quantity(session, cart, payload.product_id, payload.quantity)
    return ok(service.get_cart_summary(session, cart), message="Cart updated")


@router.delete("/remove/{product_id}", response_model=ApiResponse[CartRead])
def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Remove a product from the cart.

    Returns the updated cart summary.
    """
    cart = service.resolve_cart(session, owner)
    service.remove_item(session, cart, product_id)
    return ok(service.get_cart_summary(session, cart), message="Item removed from cart")


@router.delete("/clear", response_model=ApiResponse[CartRead])
def clear_cart(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Remove all items from the cart.
    """
    cart = service.resolve_cart(session, owner)
    service.clear(session, cart)
    return ok(service.get_cart_summary(session, cart), message="Cart cleared")


@router.post("/merge", response_model=ApiResponse[CartRead])
def merge_cart(
    payload: CartMerge,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Fold an anonymous cart into the authenticated user's cart.

    Typically called right after login with the token the client
    was using while anonymous.
    """
    merged = service.merge_session_into_user(session, payload.session_id, current_user.id)
    if merged is None:
        return ok(message="No session cart to merge")
    return ok(service.get_cart_summary(session, merged), message="Cart merged")
