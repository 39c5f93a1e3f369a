"""Error types for the agent core.

Only ``CompletionError`` ever escapes a ReAct run. The other errors describe
conditions the loop recovers from locally: the registry renders tool errors as
observation text, the engine renders malformed output as a corrective message
and an exhausted budget as the fallback answer.
"""

from __future__ import annotations

from typing import Iterable


class AgentCoreError(Exception):
    """Base error for all agent core exceptions."""


class ToolNotFoundError(AgentCoreError):
    """Raised when a requested capability is not registered."""

    def __init__(self, name: str, available: Iterable[str]) -> None:
        self.name = name
        self.available = list(available)
        super().__init__(f"Error: Tool '{name}' not found. Available tools: {', '.join(self.available)}")


class ToolExecutionError(AgentCoreError):
    """Raised when a capability fails while executing."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Error executing tool '{name}': {message}")


class MalformedModelOutputError(AgentCoreError):
    """The completion followed neither the action format nor the final answer format."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__("Please follow the correct format: Thought/Action/Input or Final Answer")


class IterationBudgetExhaustedError(AgentCoreError):
    """The loop used every iteration without reaching a final answer."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"I'm sorry, I couldn't find an answer after {max_iterations} attempts.")


class CompletionError(AgentCoreError):
    """Raised when the completion collaborator cannot produce a completion."""
