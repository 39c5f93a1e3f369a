from __future__ import annotations

"""Capability protocol.

A capability (a "tool" from the model's point of view) is a named,
schema-described unit of work the ReAct loop can invoke by name.

The registry renders ``name``, ``description`` and ``parameter_schema`` into
the system prompt so the model knows what it may call, and dispatches parsed
``Action:`` requests to ``execute``.

Capabilities should:

- be stateless across invocations,
- return plain text, which becomes the model's ``Observation``,
- raise on failure rather than returning sentinel values; the registry turns
  exceptions into error observations.
"""

from typing import Any, Dict, Protocol, runtime_checkable

ParameterSchema = Dict[str, Any]


@runtime_checkable
class Capability(Protocol):
    """Protocol for capability implementations."""

    name: str
    description: str
    parameter_schema: ParameterSchema

    async def execute(self, params: Dict[str, Any]) -> str: ...
