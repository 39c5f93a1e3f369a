"""In-memory repository implementations.

Both repositories keep everything in process memory. They are the defaults for
examples and tests; anything durable plugs in through the Protocols in
``interfaces``. The event timeline lives in ``datapizza_ai.core.events`` and
is re-exported here.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional

from ...core.events import InMemoryEventRepository
from ..schemas.domain import Message

__all__ = ["InMemoryConversationRepository", "InMemoryEventRepository"]


class InMemoryConversationRepository:
    """Session histories kept in a dict.

    ``max_messages`` bounds each session to its most recent messages so the
    context prompt stays within the model's window.
    """

    def __init__(self, *, max_messages: Optional[int] = None) -> None:
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be positive")
        self._max_messages = max_messages
        self._sessions: Dict[str, List[Message]] = defaultdict(list)

    async def get(self, session_id: str) -> List[Message]:
        return list(self._sessions.get(session_id, []))

    async def add(self, session_id: str, message: Message) -> None:
        history = self._sessions[session_id]
        history.append(message)
        if self._max_messages is not None and len(history) > self._max_messages:
            del history[: len(history) - self._max_messages]

    async def clear(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
