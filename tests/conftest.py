from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

from api.features.conversation.service import ConversationService
from api.features.users.service import UserService
from api.shared.entities.registry import BaseEntity
from infra.llm_gateway import ModelReply
from infra.resources import DatabaseResource


class FakeGateway:
    """Records every call and answers with a canned reply (or raises)."""

    def __init__(
        self,
        reply: Optional[ModelReply] = None,
        error: Optional[Exception] = None,
    ):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def is_configured(self) -> bool:
        return True

    async def call_model(self, *, conversation_id, messages, mode="open", document_refs=None):
        self.calls.append(
            {
                "conversation_id": conversation_id,
                "messages": [dict(m) for m in messages],
                "mode": mode,
                "document_refs": list(document_refs or []),
            }
        )
        if self.error is not None:
            raise self.error
        if self.reply is not None:
            return self.reply
        return ModelReply(
            text=f"echo: {messages[-1]['text']}", meta={"tokensEstimate": 3}
        )


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture
async def database(tmp_path):
    db = DatabaseResource(f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}")
    await db.init()
    await db.create_tables(BaseEntity.metadata)
    yield db
    await db.shutdown()


@pytest_asyncio.fixture
async def db_session(database):
    session = database.get_session()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def user_service() -> UserService:
    return UserService()


@pytest.fixture
def conversation_service(gateway) -> ConversationService:
    return ConversationService(model_gateway=gateway)
