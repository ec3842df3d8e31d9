"""Service layer for the Users feature."""
import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.users.entities.user import User
from api.features.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from api.features.users.models import UserModel
from api.features.users.repository import UserRepository
from api.shared.exceptions import ValidationError
from api.shared.utils import normalize_email

logger = logging.getLogger("chat.users.service")


def require_email(email: Any, field: str = "email") -> str:
    """Validate and normalize an email-like identity key."""
    if not isinstance(email, str) or not email.strip():
        raise ValidationError(f"{field} is required", {"field": field})
    return normalize_email(email)


class UserService:
    """Create-or-conflict and lookup operations on users."""

    async def create_user(
        self, *, email: Any, name: Optional[str] = None, db_session: AsyncSession
    ) -> UserModel:
        """Create a new user; an existing email is a conflict, never an update."""
        normalized = require_email(email)
        repository = UserRepository(db_session)

        existing = await repository.get_by_email(normalized)
        if existing:
            raise UserAlreadyExistsError(UserModel.from_entity(existing))

        try:
            entity = await repository.create(User(name=name or None, email=normalized))
            await db_session.commit()
        except IntegrityError:
            # Lost a race against a concurrent insert of the same email
            await db_session.rollback()
            existing = await repository.get_by_email(normalized)
            if existing is None:
                raise
            raise UserAlreadyExistsError(UserModel.from_entity(existing))

        logger.info(f"User created: {entity.id}")
        return UserModel.from_entity(entity)

    async def get_user_by_email(
        self, *, email: Any, db_session: AsyncSession
    ) -> UserModel:
        normalized = require_email(email)
        entity = await UserRepository(db_session).get_by_email(normalized)
        if not entity:
            raise UserNotFoundError(normalized)
        return UserModel.from_entity(entity)
