from __future__ import annotations

"""Conversation-aware orchestration service.

``AgentService`` wraps a ``ReActEngine`` so that successive queries in the
same session see what was said before.

Workflow
--------

- ``run``:

  1. Loads the session history from the ``ConversationRepository``.
  2. Builds a context prompt (transcript + new question) when history exists.
  3. Runs the engine with that prompt.
  4. Stores the raw user query and the answer in the session.

``AgentService`` is intentionally thin: the engine does not know about
sessions, and the service does not know about tools or parsing.
"""

import logging
from typing import Sequence

from .repos import ConversationRepository
from .runtime.engine import ReActEngine
from .schemas.domain import Message

logger = logging.getLogger(__name__)


def build_context_prompt(history: Sequence[Message], query: str) -> str:
    """Fold a session transcript and a new question into one prompt.

    Returns ``query`` unchanged when there is no history.
    """
    if not history:
        return query

    lines = ["Previous conversation:"]
    for message in history:
        lines.append(f"{message.role.value.upper()}: {message.content}")
    lines.append("")
    lines.append(f"NEW QUESTION: {query}")
    lines.append("Please respond taking into account the previous conversation.")
    return "\n".join(lines)


class AgentService:
    """Run ReAct queries inside persistent conversation sessions."""

    def __init__(self, *, engine: ReActEngine, conversations: ConversationRepository) -> None:
        self._engine = engine
        self._conversations = conversations

    async def run(self, *, session_id: str, query: str) -> str:
        """Answer ``query`` with the session's history as context.

        Returns
        -------
        str
            The engine's answer (or its exhausted-budget fallback).
        """
        history = await self._conversations.get(session_id)
        logger.debug(f"Session {session_id}: {len(history)} message(s) of history")

        answer = await self._engine.run(build_context_prompt(history, query))

        await self._conversations.add(session_id, Message.user(query))
        await self._conversations.add(session_id, Message.assistant(answer))
        return answer

    async def reset(self, *, session_id: str) -> None:
        """Forget the history of a session."""
        await self._conversations.clear(session_id)
