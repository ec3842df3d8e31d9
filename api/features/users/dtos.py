"""DTOs for the Users feature."""
from typing import Optional

from pydantic import Field

from api.features.users.models import UserModel
from api.shared.dtos import BaseDTO


class CreateUserRequest(BaseDTO):
    """Request to create a user."""

    name: Optional[str] = Field(default=None, description="Display name")
    email: Optional[str] = Field(default=None, description="Email address (required)")


class CreateUserResponse(BaseDTO):
    """Response when creating a user."""

    message: str = Field(description="Status message")
    user: UserModel = Field(description="Created user")


class UserResponse(BaseDTO):
    """Single user response."""

    user: UserModel = Field(description="User record")
