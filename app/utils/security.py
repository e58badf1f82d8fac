"""Password hashing and bearer token helpers.

Token verification is a pure function of the token and the configured
secret; no server-side session state is kept.
"""

from datetime import timedelta
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.exceptions import AuthenticationError
from app.utils.timeutils import utcnow

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain-text password."""
    return PWD_CTX.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against its stored hash."""
    return PWD_CTX.verify(password, password_hash)


def create_access_token(user_id: int, email: str) -> str:
    """Issue a signed token identifying the user.

    Args:
        user_id: Id of the authenticated user.
        email: User e-mail, carried for client convenience.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": utcnow() + timedelta(hours=settings.JWT_EXPIRE_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a token.

    Raises:
        AuthenticationError: If the token is expired, malformed or lacks a user id.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e

    if not isinstance(payload.get("user_id"), int):
        raise AuthenticationError("Invalid token payload")
    return payload
