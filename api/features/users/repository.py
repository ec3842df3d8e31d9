"""User repository using base repository pattern."""
from typing import Optional

from api.features.users.entities.user import User
from api.shared.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user entities."""

    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get the first user stored under an already-normalized email."""
        entities = await self.get_by_field("email", email, limit=1)
        return entities[0] if entities else None
