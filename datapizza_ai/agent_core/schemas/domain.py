from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import Field

from ...core.events import AgentEvent, AgentEventType
from ...core.schemas import BaseSchema

__all__ = [
    "AgentEvent",
    "AgentEventType",
    "Message",
    "MessageRole",
    "ReActRunResult",
    "RunOutcome",
]


class MessageRole(str, Enum):
    system = "system"
    user = "user"
    assistant = "assistant"


class RunOutcome(str, Enum):
    final_answer = "final_answer"
    exhausted = "exhausted"


class Message(BaseSchema):
    role: MessageRole
    content: str

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.system, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.user, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=MessageRole.assistant, content=content)

    def to_payload(self) -> Dict[str, str]:
        """Render the message the way chat completion APIs expect it."""
        return {"role": self.role.value, "content": self.content}


class ReActRunResult(BaseSchema):
    """Summary of a finished ReAct run, returned by ``ReActEngine.execute``."""

    run_id: str
    answer: str
    outcome: RunOutcome
    iterations: int
    messages: List[Message] = Field(default_factory=list)
