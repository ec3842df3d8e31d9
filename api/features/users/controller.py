"""Controller for the Users feature."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.users.dtos import CreateUserResponse, UserResponse
from api.features.users.service import UserService


class UserController:
    """Controller handling user creation and lookup."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def create_user(
        self,
        *,
        name: Optional[str],
        email: Optional[str],
        db_session: AsyncSession,
    ) -> CreateUserResponse:
        user = await self.user_service.create_user(
            email=email, name=name, db_session=db_session
        )
        return CreateUserResponse(message="User created successfully", user=user)

    async def get_user(self, *, email: str, db_session: AsyncSession) -> UserResponse:
        user = await self.user_service.get_user_by_email(
            email=email, db_session=db_session
        )
        return UserResponse(user=user)
