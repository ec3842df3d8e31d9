"""Exceptions for the Conversation feature."""
from api.shared.exceptions import ForbiddenError, NotFoundError


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation is absent or soft-deleted."""

    def __init__(self, conversation_id: str):
        super().__init__("Conversation", conversation_id)


class ConversationAccessDeniedError(ForbiddenError):
    """Raised when the caller's email resolves to someone other than the owner."""

    def __init__(self, conversation_id: str):
        super().__init__(
            "forbidden: user does not own this conversation",
            {"conversation_id": conversation_id},
        )
