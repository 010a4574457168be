# chainloom/memory/__init__.py
from .base import Memory
from .conversation_buffer import ConversationBuffer, ConversationBufferConfig, ConversationMessage

__all__ = ["Memory", "ConversationBuffer", "ConversationBufferConfig", "ConversationMessage"]
