from __future__ import annotations

"""Repository interface contracts.

The engines depend on these Protocols instead of concrete storage
implementations.

Contract guidelines
-------------------

- All methods are async.
- The event repository is append-only and forms the timeline of a run
  (completions, dispatched tools, observations, pipeline modules).
- The conversation repository stores the messages of a session in order.
"""

from typing import List, Protocol

from ...core.events import EventRepository
from ..schemas.domain import Message

__all__ = ["ConversationRepository", "EventRepository"]


class ConversationRepository(Protocol):
    """Persist the message history of conversation sessions."""

    async def get(self, session_id: str) -> List[Message]:
        """
        Retrieve the stored messages of a session, oldest first.

        Returns an empty list for an unknown session.
        """
        ...

    async def add(self, session_id: str, message: Message) -> None:
        """Append a message to a session."""
        ...

    async def clear(self, session_id: str) -> None:
        """Forget a session. Unknown sessions are a no-op."""
        ...
