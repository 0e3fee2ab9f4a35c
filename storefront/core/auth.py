# storefront/core/auth.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.errors import Forbidden, Unauthorized
from storefront.database import get_session
from storefront.models.user import User

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support anonymous shoppers (session-token carts).
bearer_scheme = HTTPBearer(auto_error=False)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user: User) -> str:
    """
    Issue an HS256 access token for `user`.

    Claims:
      - sub: user id
      - role: application role at issue time (informational only;
        authorization always re-reads the user row)
      - iat / exp
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (JWT).

    Verification:
      - signature (JWT_SECRET / JWT_ALG)
      - expiration time (exp)

    Raises:
        Unauthorized: if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except JWTError:
        raise Unauthorized("Invalid or expired token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from a bearer token.

    Flow:
      1. If no Authorization header => anonymous => return None.
      2. Decode JWT => extract 'sub' (user id).
      3. Load the user row; reject unknown or disabled accounts.

    Returns:
        User instance if authenticated, else None for anonymous callers.

    Raises:
        Unauthorized: if token is malformed or the account is unusable.
    """
    if credentials is None:
        return None  # anonymous

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise Unauthorized("Token missing sub")

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise Unauthorized("Invalid sub in token")

    user = session.get(User, user_id)
    if user is None:
        raise Unauthorized("User not found")
    if not user.is_active:
        raise Unauthorized("Account is disabled")

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    If attached to a route, anonymous callers will be rejected with 401.

    Returns:
        The authenticated User.
    """
    if user is None:
        raise Unauthorized("Authentication required")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role.

    Returns:
        The authenticated admin User.

    Raises:
        Forbidden: if role is not admin.
    """
    if user.role != "admin":
        raise Forbidden("Admin access required")
    return user
