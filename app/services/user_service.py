"""User service: registration, login and identity lookup."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select

from app.exceptions import (
    AuthenticationError,
    DuplicateRecordError,
    InvalidInputError,
    RecordNotFoundError,
)
from app.models.preferences import UserPreferences
from app.models.user import User
from app.services.base import BaseService
from app.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Authenticated user together with a freshly issued token."""

    user: User
    token: str


class UserService(BaseService[User]):
    """Service for account registration and authentication.

    Usage:
        service = UserService(db_session)
        result = await service.register("a@b.c", "secret", "Ada")
        result = await service.login("a@b.c", "secret")
    """

    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        """Look a user up by e-mail."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        full_name: Optional[str],
    ) -> AuthResult:
        """Create an account with default preferences and issue a token.

        Raises:
            InvalidInputError: If any field is missing or empty.
            DuplicateRecordError: If the e-mail is already registered.
        """
        if not email or not password or not full_name:
            raise InvalidInputError("All fields are required")

        email = email.strip().lower()
        if await self.get_by_email(email) is not None:
            raise DuplicateRecordError("User", "User with this email already exists")

        async with self.transaction("register"):
            user = User(
                email=email,
                password_hash=hash_password(password),
                full_name=full_name,
            )
            self.db.add(user)
            await self.db.flush()
            self.db.add(UserPreferences(user_id=user.id))
            await self.db.flush()

        logger.info("User registered", extra={"user_id": user.id})
        return AuthResult(user=user, token=create_access_token(user.id, user.email))

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """Verify credentials and issue a token.

        Raises:
            InvalidInputError: If e-mail or password is missing.
            AuthenticationError: If the credentials do not match.
        """
        if not email or not password:
            raise InvalidInputError("Email and password are required")

        user = await self.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"email": email})
            raise AuthenticationError("Invalid credentials")

        return AuthResult(user=user, token=create_access_token(user.id, user.email))

    async def get_me(self, user_id: int) -> User:
        """Return the caller's account.

        Raises:
            RecordNotFoundError: If the account no longer exists.
        """
        user = await self.get_by_id(user_id)
        if user is None:
            raise RecordNotFoundError("User", user_id)
        return user
