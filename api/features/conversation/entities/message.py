"""Message entity."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity, JSONType
from api.shared.utils import utcnow


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


class Message(BaseEntity):
    """A single append-only message within a conversation."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_id_created_at", "conversation_id", "created_at"),
    )

    conversation_id: Mapped[str] = mapped_column(
        ForeignKey("conversations.id"), nullable=False, index=True
    )
    role: Mapped[MessageRole] = mapped_column(
        SQLEnum(
            MessageRole,
            name="message_role",
            values_callable=lambda enum_cls: enum_cls.values(),
        ),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    # Provider payloads and error flags; shape is provider-defined
    meta: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
