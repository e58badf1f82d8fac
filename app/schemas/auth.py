"""Authentication schemas."""

from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """Registration payload. Emptiness is checked by the auth service."""

    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None


class LoginRequest(CamelModel):
    """Login payload."""

    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(CamelModel):
    """Public view of a user."""

    id: int
    email: str
    full_name: str
    created_at: datetime


class AuthResponse(CamelModel):
    """Register/login response with the issued bearer token."""

    message: str
    user: UserResponse
    token: str


class MeResponse(CamelModel):
    """Current user envelope."""

    user: UserResponse
