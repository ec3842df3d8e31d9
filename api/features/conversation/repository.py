"""Repositories for conversation and message persistence."""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import select

from api.features.conversation.entities import (
    Conversation,
    ConversationState,
    Message,
)
from api.shared.base import BaseRepository

_NOT_DELETED = Conversation.state != ConversationState.DELETED


class ConversationRepository(BaseRepository[Conversation]):
    """Conversation queries. Soft-deleted rows are hidden from every read."""

    model = Conversation

    async def get_visible(self, conversation_id: str) -> Optional[Conversation]:
        stmt = select(Conversation).where(
            Conversation.id == conversation_id, _NOT_DELETED
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_visible(
        self, *, offset: int, limit: int
    ) -> Tuple[List[Conversation], int]:
        """Page through non-deleted conversations, most recently updated first."""
        return await self.list(
            offset=offset,
            limit=limit,
            order_by=("-updated_at", "-id"),
            where=(_NOT_DELETED,),
        )

    async def list_visible_for_user(self, user_id: str) -> List[Conversation]:
        items, _ = await self.list(
            limit=None,
            order_by=("-updated_at", "-id"),
            where=(_NOT_DELETED,),
            user_id=user_id,
        )
        return items


class MessageRepository(BaseRepository[Message]):
    """Message queries; messages are append-only."""

    model = Message

    async def list_for_conversation(self, conversation_id: str) -> List[Message]:
        """All messages of a conversation in chronological order."""
        items, _ = await self.list(
            limit=None, order_by="created_at", conversation_id=conversation_id
        )
        return items

    async def fetch_recent(self, conversation_id: str, limit: int) -> List[Message]:
        """Latest ``limit`` messages, newest first."""
        items, _ = await self.list(
            limit=limit, order_by="-created_at", conversation_id=conversation_id
        )
        return items
