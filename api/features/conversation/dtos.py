"""DTOs for the Conversation feature."""
from typing import List, Optional

from pydantic import Field

from api.features.conversation.models import ConversationModel, MessageModel
from api.shared.dtos import BaseDTO


class CreateConversationRequest(BaseDTO):
    """Request to open a conversation with its first message."""

    user_email: Optional[str] = Field(default=None, description="Owner email (required)")
    first_message: Optional[str] = Field(default=None, description="Opening user message (required)")
    mode: Optional[str] = Field(default="open", description="open or grounded")
    document_refs: Optional[List[str]] = Field(
        default=None, alias="documentRefs", description="Grounding document references"
    )


class CreateConversationResponse(BaseDTO):
    """Response when creating a conversation."""

    conversation: ConversationModel = Field(description="Created conversation")
    messages: List[MessageModel] = Field(description="The user message and the assistant reply")


class AppendMessageRequest(BaseDTO):
    """Append a message to a conversation."""

    user_email: Optional[str] = Field(default=None, description="Caller email (required)")
    role: Optional[str] = Field(default="user", description="user, assistant or system")
    text: Optional[str] = Field(default=None, description="Message text (required)")


class AppendMessageResponse(BaseDTO):
    """The caller's message followed by the assistant reply."""

    messages: List[MessageModel] = Field(description="Appended messages")


class DeleteConversationRequest(BaseDTO):
    user_email: Optional[str] = Field(default=None, description="Owner email (required)")
