# storefront/services/user_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.core.auth import create_access_token, hash_password, verify_password
from storefront.core.errors import BadRequest, Conflict, Unauthorized, UserNotFound
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import (
    Address,
    AuthResult,
    PasswordChange,
    ProfileUpdate,
    UserActiveUpdate,
    UserLogin,
    UserRead,
    UserRegister,
    UserRoleUpdate,
)

logger = logging.getLogger(__name__)


def to_user_read(user: User) -> UserRead:
    """Map a User row to its public shape (address folded into one object)."""
    address = None
    if user.address_street and user.address_city and user.address_zip_code:
        address = Address(
            street=user.address_street,
            city=user.address_city,
            zip_code=user.address_zip_code,
            country=user.address_country or "Israel",
        )

    return UserRead(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        address=address,
        role=user.role,
        is_active=user.is_active,
        last_login=user.last_login,
        created_at=user.created_at,
    )


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - registration / login / token issue
      - profile edits limited to an explicit set of fields
      - admin role and activation management
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Authentication -----

    def register(self, session: Session, payload: UserRegister) -> AuthResult:
        """
        Create a customer account.

        Raises:
            Conflict: if the email is already registered.
        """
        if self.repo.get_by_email(session, payload.email):
            raise Conflict("User with this email already exists")

        user = User(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email.lower(),
            password_hash=hash_password(payload.password),
            phone=payload.phone,
            role="customer",
        )
        user = self.repo.create(session, user)
        logger.info("User %s registered", user.id)
        return AuthResult(user=to_user_read(user), token=create_access_token(user))

    def login(self, session: Session, payload: UserLogin) -> AuthResult:
        """
        Verify credentials and issue a token. Stamps last_login.
        """
        user = self.repo.get_by_email(session, payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise Unauthorized("Invalid email or password")
        if not user.is_active:
            raise Unauthorized("Account is disabled")

        user.last_login = datetime.now(timezone.utc)
        user = self.repo.update(session, user)
        return AuthResult(user=to_user_read(user), token=create_access_token(user))

    # ----- Self profile -----

    def update_profile(
        self,
        session: Session,
        current_user: User,
        payload: ProfileUpdate,
    ) -> User:
        """
        Partial update for profile edits.
        Email, role and password are not editable here.
        """
        if payload.first_name is not None:
            current_user.first_name = payload.first_name

        if payload.last_name is not None:
            current_user.last_name = payload.last_name

        if payload.phone is not None:
            current_user.phone = payload.phone

        if payload.address is not None:
            current_user.address_street = payload.address.street
            current_user.address_city = payload.address.city
            current_user.address_zip_code = payload.address.zip_code
            current_user.address_country = payload.address.country

        return self.repo.update(session, current_user)

    def change_password(
        self,
        session: Session,
        current_user: User,
        payload: PasswordChange,
    ) -> None:
        if not verify_password(payload.current_password, current_user.password_hash):
            raise BadRequest("Current password is incorrect")

        current_user.password_hash = hash_password(payload.new_password)
        self.repo.update(session, current_user)
        logger.info("User %s changed password", current_user.id)

    # ----- Admin operations -----

    def list_users(self, session: Session, skip: int, limit: int) -> list[User]:
        """List users with pagination (admin only)."""
        return self.repo.list(session, skip=skip, limit=limit)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Get a user by id (admin only).

        Raises:
            UserNotFound: if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise UserNotFound()
        return user

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change user's role (admin only).

        Role validation is enforced by the schema (Literal).
        """
        user = self.get_user(session, user_id)
        user.role = payload.role
        return self.repo.update(session, user)

    def set_active(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserActiveUpdate,
    ) -> User:
        """Enable or disable an account (admin only)."""
        user = self.get_user(session, user_id)
        user.is_active = payload.is_active
        return self.repo.update(session, user)
