"""Conversation entities module."""
from .conversation import Conversation, ConversationMode, ConversationState
from .message import Message, MessageRole

__all__ = [
    "Conversation",
    "ConversationMode",
    "ConversationState",
    "Message",
    "MessageRole",
]
