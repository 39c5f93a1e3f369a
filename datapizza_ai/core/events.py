from __future__ import annotations

"""Run event timeline shared by the ReAct engine and the pipeline.

Both engines accept an optional ``EventRepository`` and append one
``AgentEvent`` per lifecycle step. The module only depends on pydantic, so the
pipeline can emit events without importing the agent runtime.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol
from uuid import uuid4

from pydantic import Field

from .schemas import BaseSchema


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AgentEventType(str, Enum):
    run_started = "run.started"
    run_completed = "run.completed"
    run_exhausted = "run.exhausted"
    completion_requested = "completion.requested"
    completion_received = "completion.received"
    response_malformed = "response.malformed"
    tool_dispatched = "tool.dispatched"
    observation_recorded = "observation.recorded"
    pipeline_started = "pipeline.started"
    pipeline_completed = "pipeline.completed"
    pipeline_failed = "pipeline.failed"
    module_started = "module.started"
    module_completed = "module.completed"
    module_failed = "module.failed"


class AgentEvent(BaseSchema):
    id: str = Field(default_factory=lambda: str(uuid4()))
    run_id: str

    type: AgentEventType
    created_at: datetime = Field(default_factory=_utc_now)

    payload: Dict[str, Any] = Field(default_factory=dict)


class EventRepository(Protocol):
    """Append-only store for run events."""

    async def append(self, event: AgentEvent) -> None:
        """
        Append an event to the timeline.

        Args:
            event: The event to persist.
        """
        ...

    async def list(self, run_id: Optional[str] = None, type: Optional[AgentEventType] = None) -> List[AgentEvent]:
        """
        List events in insertion order.

        Args:
            run_id: Only return events of this run.
            type: Only return events of this type.
        """
        ...


class InMemoryEventRepository:
    """Event timeline kept in a list."""

    def __init__(self) -> None:
        self.events: List[AgentEvent] = []

    async def append(self, event: AgentEvent) -> None:
        self.events.append(event)

    async def list(self, run_id: Optional[str] = None, type: Optional[AgentEventType] = None) -> List[AgentEvent]:
        return [
            e
            for e in self.events
            if (run_id is None or e.run_id == run_id) and (type is None or e.type == type)
        ]
