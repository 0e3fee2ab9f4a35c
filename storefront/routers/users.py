# storefront/routers/users.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.common import ApiResponse, ok
from storefront.schemas.user import UserActiveUpdate, UserRead, UserRoleUpdate
from storefront.services.user_service import UserService, to_user_read

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_admin)],
)

repo = UserRepository()
service = UserService(repo)


@router.get("", response_model=ApiResponse[list[UserRead]])
def list_users(
    session: Session = Depends(get_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """
    List users (admin only).
    """
    users = service.list_users(session, skip=skip, limit=limit)
    return ok([to_user_read(u) for u in users])


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single user (admin only).
    """
    return ok(to_user_read(service.get_user(session, user_id)))


@router.patch("/{user_id}/role", response_model=ApiResponse[UserRead])
def update_user_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Promote or demote a user (admin only).
    """
    user = service.update_role(session, user_id, payload)
    return ok(to_user_read(user), message="Role updated")


@router.patch("/{user_id}/active", response_model=ApiResponse[UserRead])
def update_user_active(
    user_id: uuid.UUID,
    payload: UserActiveUpdate,
    session: Session = Depends(get_session),
):
    """
    Enable or disable an account (admin only).

    Disabled accounts can no longer log in or use existing tokens.
    """
    user = service.set_active(session, user_id, payload)
    return ok(to_user_read(user), message="Account updated")
