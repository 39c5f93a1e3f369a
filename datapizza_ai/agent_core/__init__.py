"""ReAct agent runtime, capabilities and collaborator contracts.

This package contains the reasoning half of the orchestration engine.

Design overview
---------------

A run alternates between *thinking* and *acting*:

- Thinking is one completion call. The completion is parsed into a final
  answer, a tool call, or a malformed response.
- Acting dispatches the tool call through ``CapabilityRegistry``. Whatever
  happens (success, unknown tool, raised exception) comes back to the model as
  an ``Observation`` message.

The loop is bounded by ``max_iterations`` completion calls and is executed by
``agent_core.runtime.ReActEngine`` using LangGraph.

Typical usage
-------------

1. Build a registry of capabilities (``factory.build_default_registry``).
2. Build an engine with a completion client (``factory.build_engine``).
3. ``await engine.run(query)``, or wrap the engine in ``AgentService`` for
   conversation sessions.
"""

from .capabilities import Capability, CapabilityRegistry
from .completion import ChatCompletionClient, CompletionClient
from .errors import (
    AgentCoreError,
    CompletionError,
    IterationBudgetExhaustedError,
    MalformedModelOutputError,
    ToolExecutionError,
    ToolNotFoundError,
)
from .runtime import EngineDeps, ReActEngine
from .schemas.domain import (
    AgentEvent,
    AgentEventType,
    Message,
    MessageRole,
    ReActRunResult,
    RunOutcome,
)
from .service import AgentService

__all__ = [
    "Capability",
    "CapabilityRegistry",
    "ChatCompletionClient",
    "CompletionClient",
    "EngineDeps",
    "ReActEngine",
    "AgentService",
    # Schemas
    "AgentEvent",
    "AgentEventType",
    "Message",
    "MessageRole",
    "ReActRunResult",
    "RunOutcome",
    # Errors
    "AgentCoreError",
    "CompletionError",
    "IterationBudgetExhaustedError",
    "MalformedModelOutputError",
    "ToolExecutionError",
    "ToolNotFoundError",
]
