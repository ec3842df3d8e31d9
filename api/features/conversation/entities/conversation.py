"""Conversation entity."""
from datetime import datetime
from enum import Enum
from typing import List

from sqlalchemy import DateTime, ForeignKey, Index, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity, JSONType
from api.shared.utils import utcnow


class ConversationMode(str, Enum):
    """How the assistant should answer within a conversation."""

    OPEN = "open"
    GROUNDED = "grounded"


class ConversationState(str, Enum):
    """Conversation lifecycle state. Only active -> deleted is used."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


class Conversation(BaseEntity):
    """A thread of messages owned by exactly one user."""

    __tablename__ = "conversations"
    __table_args__ = (
        Index("ix_conversations_user_id_updated_at", "user_id", "updated_at"),
    )

    # Ownership is fixed at creation
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(80), nullable=False)
    mode: Mapped[ConversationMode] = mapped_column(
        SQLEnum(
            ConversationMode,
            name="conversation_mode",
            values_callable=_enum_values,
        ),
        nullable=False,
        default=ConversationMode.OPEN,
    )
    document_refs: Mapped[List[str]] = mapped_column(
        JSONType, nullable=False, default=list
    )
    state: Mapped[ConversationState] = mapped_column(
        SQLEnum(
            ConversationState,
            name="conversation_state",
            values_callable=_enum_values,
        ),
        nullable=False,
        default=ConversationState.ACTIVE,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def is_owned_by(self, user_id: str) -> bool:
        """Compare owner identifiers as opaque strings."""
        return self.user_id is not None and str(self.user_id) == str(user_id)
