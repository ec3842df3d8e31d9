"""Models for the Conversation feature."""
from typing import Any, Dict, List

from pydantic import Field

from api.features.conversation.entities import (
    Conversation as ConversationEntity,
    ConversationMode,
    ConversationState,
    Message as MessageEntity,
    MessageRole,
)
from api.shared.dtos import BaseDTO, TimestampMixin


class ConversationModel(BaseDTO, TimestampMixin):
    """Domain model for Conversation."""

    id: str = Field(description="Conversation identifier")
    user_id: str = Field(alias="userId", description="Owning user identifier")
    title: str = Field(description="First 80 characters of the opening message")
    mode: ConversationMode = Field(description="open or grounded")
    document_refs: List[str] = Field(
        default_factory=list, alias="documentRefs", description="Grounding document references"
    )
    state: ConversationState = Field(description="Lifecycle state")

    @classmethod
    def from_entity(cls, entity: ConversationEntity) -> "ConversationModel":
        """Create model from database entity."""
        return cls(
            id=str(entity.id),
            user_id=str(entity.user_id),
            title=entity.title,
            mode=entity.mode,
            document_refs=list(entity.document_refs or []),
            state=entity.state,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class MessageModel(BaseDTO, TimestampMixin):
    """Domain model for Message."""

    id: str = Field(description="Message identifier")
    conversation_id: str = Field(alias="conversationId", description="Owning conversation")
    role: MessageRole = Field(description="user, assistant or system")
    text: str = Field(description="Message text")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Provider payload or error flags")
    tokens: int = Field(default=0, description="Token estimate")

    @classmethod
    def from_entity(cls, entity: MessageEntity) -> "MessageModel":
        """Create model from database entity."""
        return cls(
            id=str(entity.id),
            conversation_id=str(entity.conversation_id),
            role=entity.role,
            text=entity.text,
            meta=dict(entity.meta or {}),
            tokens=entity.tokens or 0,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class ConversationPage(BaseDTO):
    """One page of the global conversation listing."""

    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    total: int = Field(description="Non-deleted conversations overall")
    has_more: bool = Field(alias="hasMore", description="Whether later pages exist")
    items: List[ConversationModel] = Field(description="Conversations, most recently updated first")


class UserSummary(BaseDTO):
    id: str
    email: str


class UserConversations(BaseDTO):
    """All non-deleted conversations of one user."""

    user: UserSummary
    total: int
    items: List[ConversationModel]


class ConversationWithMessages(BaseDTO):
    conversation: ConversationModel
    messages: List[MessageModel] = Field(description="Messages in chronological order")
