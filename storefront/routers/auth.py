# storefront/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.common import ApiResponse, ok
from storefront.schemas.user import (
    AuthResult,
    PasswordChange,
    ProfileUpdate,
    UserLogin,
    UserRead,
    UserRegister,
)
from storefront.services.user_service import UserService, to_user_read

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = UserService(repo)


@router.post(
    "/register",
    response_model=ApiResponse[AuthResult],
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: UserRegister,
    session: Session = Depends(get_session),
):
    """
    Create a customer account and return it with a bearer token.
    """
    return ok(service.register(session, payload), message="User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthResult])
def login(
    payload: UserLogin,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for a bearer token.
    """
    return ok(service.login(session, payload), message="Login successful")


@router.post("/logout", response_model=ApiResponse[None])
def logout(current_user: User = Depends(require_auth)):
    """
    Tokens are stateless; the client simply forgets its token.
    """
    return ok(message="Logout successful")


@router.get("/verify-token", response_model=ApiResponse[UserRead])
def verify_token(current_user: User = Depends(require_auth)):
    """
    Check that the bearer token is still valid and return its user.
    """
    return ok(to_user_read(current_user), message="Token is valid")


# -------- Self profile --------


@router.get("/profile", response_model=ApiResponse[UserRead])
def read_profile(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.
    """
    return ok(to_user_read(current_user))


@router.put("/profile", response_model=ApiResponse[UserRead])
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update name, phone or address of the authenticated user.
    """
    user = service.update_profile(session, current_user, payload)
    return ok(to_user_read(user), message="Profile updated successfully")


@router.put("/change-password", response_model=ApiResponse[None])
def change_password(
    payload: PasswordChange,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.change_password(session, current_user, payload)
    return ok(message="Password changed successfully")
