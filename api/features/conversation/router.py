"""Router for the Conversation feature."""
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from di.container import ApplicationContainer as DependencyContainer
from api.features.conversation.controller import ConversationController
from api.features.conversation.dtos import (
    AppendMessageRequest,
    AppendMessageResponse,
    CreateConversationRequest,
    CreateConversationResponse,
    DeleteConversationRequest,
)
from api.features.conversation.models import (
    ConversationPage,
    ConversationWithMessages,
    UserConversations,
)
from api.shared.db import get_db_session
from api.shared.exceptions import ValidationError
from api.shared.utils import is_valid_uuid

router = APIRouter()


def valid_conversation_id(conversation_id: str) -> str:
    """Reject malformed identifiers before any lookup happens."""
    if not is_valid_uuid(conversation_id):
        raise ValidationError("Invalid conversation ID", {"conversation_id": conversation_id})
    return conversation_id


@router.post("", status_code=201, response_model=CreateConversationResponse)
@inject
async def create_conversation(
    request: CreateConversationRequest,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Create a conversation with its first message and the assistant reply."""
    return await controller.create_conversation(request=request, db_session=db_session)


@router.get("", response_model=ConversationPage)
@inject
async def list_conversations(
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size, at most 100"),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    return await controller.list_conversations(
        page=page, limit=limit, db_session=db_session
    )


@router.get("/user/{email}", response_model=UserConversations)
@inject
async def list_user_conversations(
    email: str,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    return await controller.list_user_conversations(email=email, db_session=db_session)


@router.get("/{conversation_id}", response_model=ConversationWithMessages)
@inject
async def get_conversation(
    conversation_id: str = Depends(valid_conversation_id),
    user_email: Optional[str] = Query(None, description="Owner email (required)"),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Conversation plus its full history; only the owner may read it."""
    return await controller.get_conversation(
        conversation_id=conversation_id, user_email=user_email, db_session=db_session
    )


@router.post(
    "/{conversation_id}/messages",
    status_code=201,
    response_model=AppendMessageResponse,
)
@inject
async def append_message(
    request: AppendMessageRequest,
    conversation_id: str = Depends(valid_conversation_id),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    return await controller.append_message(
        conversation_id=conversation_id, request=request, db_session=db_session
    )


@router.delete("/{conversation_id}", status_code=204, response_class=Response)
@inject
async def delete_conversation(
    request: Optional[DeleteConversationRequest] = Body(default=None),
    conversation_id: str = Depends(valid_conversation_id),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Soft-delete a conversation owned by the caller."""
    await controller.delete_conversation(
        conversation_id=conversation_id,
        user_email=request.user_email if request else None,
        db_session=db_session,
    )
    return Response(status_code=204)
