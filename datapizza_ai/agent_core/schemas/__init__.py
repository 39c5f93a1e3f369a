"""Schemas and DTOs for the agent core."""

from .domain import (
    AgentEvent,
    AgentEventType,
    Message,
    MessageRole,
    ReActRunResult,
    RunOutcome,
)

__all__ = [
    "AgentEvent",
    "AgentEventType",
    "Message",
    "MessageRole",
    "ReActRunResult",
    "RunOutcome",
]
