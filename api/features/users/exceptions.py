"""Exceptions for the Users feature."""
from api.features.users.models import UserModel
from api.shared.exceptions import ConflictError, NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when no user is stored under an email."""

    def __init__(self, email: str):
        super().__init__("User", email)


class UserAlreadyExistsError(ConflictError):
    """Raised when creating a user whose email is already taken.

    The existing record is returned to the caller alongside the error.
    """

    def __init__(self, existing: UserModel):
        super().__init__("user already exists", {"email": existing.email})
        self.existing = existing
        self.payload = {"user": existing.to_response()}
