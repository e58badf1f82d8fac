"""User model representing registered accounts."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class User(BaseModel):
    """Registered account owning subjects, sessions and preferences.

    Attributes:
        email: Unique login e-mail
        password_hash: passlib hash of the password
        full_name: Display name
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        """String representation of the user (never includes the hash)."""
        return f"User(id={self.id}, email={self.email!r})"
