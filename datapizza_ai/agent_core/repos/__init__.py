"""Repository Protocols and in-memory implementations used by the engines."""

from .in_memory import InMemoryConversationRepository, InMemoryEventRepository
from .interfaces import ConversationRepository, EventRepository

__all__ = [
    "ConversationRepository",
    "EventRepository",
    "InMemoryConversationRepository",
    "InMemoryEventRepository",
]
