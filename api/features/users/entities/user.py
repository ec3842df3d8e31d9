"""User entity."""
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity


class User(BaseEntity):
    """A chat user, identified externally by a normalized email address.

    Users are created once and never updated or deleted.
    """

    __tablename__ = "users"

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
