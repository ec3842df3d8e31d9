"""Conversation service: persistence plus one model call per user turn.

Every operation runs sequentially within its request: validate, resolve the
caller and the conversation, read/write, optionally call the model gateway,
write the reply. Writes are committed one at a time; the gateway is never
called while a transaction is open.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.entities import (
    Conversation,
    ConversationMode,
    ConversationState,
    Message,
    MessageRole,
)
from api.features.conversation.exceptions import (
    ConversationAccessDeniedError,
    ConversationNotFoundError,
)
from api.features.conversation.models import (
    ConversationModel,
    ConversationPage,
    ConversationWithMessages,
    MessageModel,
    UserConversations,
    UserSummary,
)
from api.features.conversation.repository import (
    ConversationRepository,
    MessageRepository,
)
from api.features.users.entities.user import User
from api.features.users.exceptions import UserNotFoundError
from api.features.users.repository import UserRepository
from api.features.users.service import require_email
from api.shared.exceptions import ValidationError
from api.shared.utils import is_valid_uuid, parse_int, utcnow
from infra.llm_gateway import ModelGateway, ModelReply

logger = logging.getLogger("chat.conversation.service")

TITLE_LENGTH = 80
CONTEXT_WINDOW = 20
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

FALLBACK_REPLY_TEXT = (
    "Sorry, I'm having trouble reaching the model right now. Please try again later."
)
EMPTY_REPLY_TEXT = "Sorry, no response."


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field} is required and must be a non-empty string", {"field": field}
        )
    return value


def _parse_mode(mode: Any) -> ConversationMode:
    try:
        return ConversationMode(mode)
    except ValueError:
        raise ValidationError(
            "mode must be one of open|grounded", {"field": "mode"}
        ) from None


def _parse_document_refs(document_refs: Any) -> List[str]:
    if document_refs is None:
        return []
    if not isinstance(document_refs, (list, tuple)) or not all(
        isinstance(ref, str) for ref in document_refs
    ):
        raise ValidationError(
            "documentRefs must be a list of strings", {"field": "documentRefs"}
        )
    return list(document_refs)


class ConversationService:
    """Orchestrates conversations, messages and assistant replies."""

    def __init__(self, model_gateway: ModelGateway):
        self.model_gateway = model_gateway

    async def create_conversation(
        self,
        *,
        user_email: Any,
        first_message: Any,
        mode: Any = ConversationMode.OPEN.value,
        document_refs: Any = None,
        db_session: AsyncSession,
    ) -> Tuple[ConversationModel, MessageModel, MessageModel]:
        """Open a conversation with its first user message and the assistant reply."""
        email = require_email(user_email, "user_email")
        first_message = _require_text(first_message, "first_message")
        conv_mode = _parse_mode(mode)
        refs = _parse_document_refs(document_refs)

        user = await UserRepository(db_session).get_by_email(email)
        if not user:
            # Unknown owner is a bad request here, not a 404
            raise ValidationError(
                "user not found for provided email", {"field": "user_email"}
            )

        conversations = ConversationRepository(db_session)
        messages = MessageRepository(db_session)

        conv = await conversations.create(
            Conversation(
                user_id=user.id,
                title=first_message[:TITLE_LENGTH],
                mode=conv_mode,
                document_refs=refs,
            )
        )
        await db_session.commit()

        user_msg = await messages.create(
            Message(
                conversation_id=conv.id,
                role=MessageRole.USER,
                text=first_message,
                tokens=0,
            )
        )
        await db_session.commit()
        logger.info(f"Conversation created: {conv.id} (user {user.id})")

        reply = await self._generate_reply(
            conversation_id=conv.id,
            context=[{"role": MessageRole.USER.value, "text": first_message}],
            mode=conv_mode.value,
            document_refs=refs,
        )
        assistant_msg = await self._store_reply(messages, conv.id, reply)
        await db_session.commit()

        return (
            ConversationModel.from_entity(conv),
            MessageModel.from_entity(user_msg),
            MessageModel.from_entity(assistant_msg),
        )

    async def list_conversations(
        self,
        *,
        page: Optional[Any] = None,
        limit: Optional[Any] = None,
        db_session: AsyncSession,
    ) -> ConversationPage:
        """Page through all non-deleted conversations, most recently updated first."""
        page_num = max(1, parse_int(page, 1))
        page_size = min(MAX_PAGE_SIZE, max(1, parse_int(limit, DEFAULT_PAGE_SIZE)))
        skip = (page_num - 1) * page_size

        items, total = await ConversationRepository(db_session).list_visible(
            offset=skip, limit=page_size
        )
        return ConversationPage(
            page=page_num,
            limit=page_size,
            total=total,
            has_more=skip + len(items) < total,
            items=[ConversationModel.from_entity(c) for c in items],
        )

    async def list_conversations_for_user(
        self, *, email: Any, db_session: AsyncSession
    ) -> UserConversations:
        normalized = require_email(email)
        user = await UserRepository(db_session).get_by_email(normalized)
        if not user:
            raise UserNotFoundError(normalized)

        items = await ConversationRepository(db_session).list_visible_for_user(user.id)
        return UserConversations(
            user=UserSummary(id=str(user.id), email=user.email),
            total=len(items),
            items=[ConversationModel.from_entity(c) for c in items],
        )

    async def get_conversation(
        self, *, conversation_id: Any, user_email: Any, db_session: AsyncSession
    ) -> ConversationWithMessages:
        email = self._validate_target(conversation_id, user_email)
        _, conv = await self._resolve_owned(conversation_id, email, db_session)

        history = await MessageRepository(db_session).list_for_conversation(conv.id)
        return ConversationWithMessages(
            conversation=ConversationModel.from_entity(conv),
            messages=[MessageModel.from_entity(m) for m in history],
        )

    async def add_message(
        self,
        *,
        conversation_id: Any,
        user_email: Any,
        text: Any,
        role: Any = MessageRole.USER.value,
        db_session: AsyncSession,
    ) -> Tuple[MessageModel, MessageModel]:
        """Append the caller's message and the assistant's reply to it."""
        email = self._validate_target(conversation_id, user_email)
        text = _require_text(text, "text")
        if role not in MessageRole.values():
            raise ValidationError(
                "role must be one of user|assistant|system", {"field": "role"}
            )
        msg_role = MessageRole(role)

        _, conv = await self._resolve_owned(conversation_id, email, db_session)
        messages = MessageRepository(db_session)

        msg = await messages.create(
            Message(conversation_id=conv.id, role=msg_role, text=text)
        )
        context = await self._build_context(messages, conv.id, msg_role, text)
        await db_session.commit()

        reply = await self._generate_reply(
            conversation_id=conv.id,
            context=context,
            mode=conv.mode.value,
            document_refs=list(conv.document_refs or []),
        )
        assistant_msg = await self._store_reply(messages, conv.id, reply)

        conv.updated_at = utcnow()
        await ConversationRepository(db_session).update(conv)
        await db_session.commit()

        return MessageModel.from_entity(msg), MessageModel.from_entity(assistant_msg)

    async def delete_conversation(
        self, *, conversation_id: Any, user_email: Any, db_session: AsyncSession
    ) -> None:
        """Soft delete: mark the conversation deleted and leave its messages in place."""
        email = self._validate_target(conversation_id, user_email)
        _, conv = await self._resolve_owned(conversation_id, email, db_session)

        conv.state = ConversationState.DELETED
        await ConversationRepository(db_session).update(conv)
        await db_session.commit()
        logger.info(f"Conversation soft-deleted: {conv.id}")

    # Helpers

    @staticmethod
    def _validate_target(conversation_id: Any, user_email: Any) -> str:
        if not is_valid_uuid(conversation_id):
            raise ValidationError(
                "Invalid conversation ID", {"conversation_id": conversation_id}
            )
        return require_email(user_email, "user_email")

    @staticmethod
    async def _resolve_owned(
        conversation_id: str, email: str, db_session: AsyncSession
    ) -> Tuple[User, Conversation]:
        user = await UserRepository(db_session).get_by_email(email)
        if not user:
            raise UserNotFoundError(email)

        conv = await ConversationRepository(db_session).get_visible(conversation_id)
        if not conv:
            raise ConversationNotFoundError(conversation_id)

        if not conv.is_owned_by(user.id):
            raise ConversationAccessDeniedError(conversation_id)
        return user, conv

    @staticmethod
    async def _build_context(
        messages: MessageRepository,
        conversation_id: str,
        role: MessageRole,
        text: str,
    ) -> List[Dict[str, str]]:
        """Sliding window of the latest messages, oldest first.

        The triggering message always closes the window, even when it is not
        among the rows read back.
        """
        recent = await messages.fetch_recent(conversation_id, CONTEXT_WINDOW)
        context = [
            {"role": m.role.value, "text": m.text} for m in reversed(recent)
        ]
        if not context or context[-1]["text"] != text:
            context.append({"role": role.value, "text": text})
        return context

    async def _generate_reply(
        self,
        *,
        conversation_id: str,
        context: List[Dict[str, str]],
        mode: str,
        document_refs: Sequence[str],
    ) -> ModelReply:
        try:
            return await self.model_gateway.call_model(
                conversation_id=conversation_id,
                messages=context,
                mode=mode,
                document_refs=document_refs,
            )
        except Exception:
            logger.exception(f"Model gateway raised for conversation {conversation_id}")
            return ModelReply(text=FALLBACK_REPLY_TEXT, meta={"error": True})

    @staticmethod
    async def _store_reply(
        messages: MessageRepository, conversation_id: str, reply: ModelReply
    ) -> Message:
        tokens = reply.meta.get("tokensEstimate")
        return await messages.create(
            Message(
                conversation_id=conversation_id,
                role=MessageRole.ASSISTANT,
                text=reply.text or EMPTY_REPLY_TEXT,
                meta=reply.meta or {},
                tokens=tokens if isinstance(tokens, int) else 0,
            )
        )
