"""Models for the Users feature."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from api.features.users.entities.user import User as UserEntity
from api.shared.dtos import BaseDTO


class UserModel(BaseDTO):
    """Domain model for User."""

    id: str = Field(description="User identifier")
    name: Optional[str] = Field(default=None, description="Display name")
    email: str = Field(description="Normalized email address")
    created_at: datetime = Field(alias="createdAt", description="Creation timestamp")

    @classmethod
    def from_entity(cls, entity: UserEntity) -> "UserModel":
        """Create model from database entity."""
        return cls(
            id=str(entity.id),
            name=entity.name,
            email=entity.email,
            created_at=entity.created_at,
        )
