"""Controller for the Conversation feature."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.dtos import (
    AppendMessageRequest,
    AppendMessageResponse,
    CreateConversationRequest,
    CreateConversationResponse,
)
from api.features.conversation.models import (
    ConversationPage,
    ConversationWithMessages,
    UserConversations,
)
from api.features.conversation.service import ConversationService


class ConversationController:
    """Controller handling conversation CRUD and message operations."""

    def __init__(self, conversation_service: ConversationService) -> None:
        self.conversation_service = conversation_service

    async def create_conversation(
        self,
        *,
        request: CreateConversationRequest,
        db_session: AsyncSession,
    ) -> CreateConversationResponse:
        conv, user_msg, assistant_msg = await self.conversation_service.create_conversation(
            user_email=request.user_email,
            first_message=request.first_message,
            mode=request.mode,
            document_refs=request.document_refs,
            db_session=db_session,
        )
        return CreateConversationResponse(
            conversation=conv, messages=[user_msg, assistant_msg]
        )

    async def list_conversations(
        self,
        *,
        page: Optional[str],
        limit: Optional[str],
        db_session: AsyncSession,
    ) -> ConversationPage:
        return await self.conversation_service.list_conversations(
            page=page, limit=limit, db_session=db_session
        )

    async def list_user_conversations(
        self, *, email: str, db_session: AsyncSession
    ) -> UserConversations:
        return await self.conversation_service.list_conversations_for_user(
            email=email, db_session=db_session
        )

    async def get_conversation(
        self,
        *,
        conversation_id: str,
        user_email: Optional[str],
        db_session: AsyncSession,
    ) -> ConversationWithMessages:
        return await self.conversation_service.get_conversation(
            conversation_id=conversation_id,
            user_email=user_email,
            db_session=db_session,
        )

    async def append_message(
        self,
        *,
        conversation_id: str,
        request: AppendMessageRequest,
        db_session: AsyncSession,
    ) -> AppendMessageResponse:
        caller_msg, assistant_msg = await self.conversation_service.add_message(
            conversation_id=conversation_id,
            user_email=request.user_email,
            text=request.text,
            role=request.role,
            db_session=db_session,
        )
        return AppendMessageResponse(messages=[caller_msg, assistant_msg])

    async def delete_conversation(
        self,
        *,
        conversation_id: str,
        user_email: Optional[str],
        db_session: AsyncSession,
    ) -> None:
        await self.conversation_service.delete_conversation(
            conversation_id=conversation_id,
            user_email=user_email,
            db_session=db_session,
        )
