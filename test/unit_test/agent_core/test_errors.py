from __future__ import annotations

import pytest

from datapizza_ai.agent_core.errors import (
    AgentCoreError,
    CompletionError,
    IterationBudgetExhaustedError,
    MalformedModelOutputError,
    ToolExecutionError,
    ToolNotFoundError,
)


@pytest.mark.parametrize(
    "error",
    [
        ToolNotFoundError("x", ["a"]),
        ToolExecutionError("x", "m"),
        MalformedModelOutputError("text"),
        IterationBudgetExhaustedError(1),
        CompletionError("down"),
    ],
)
def test_agent_errors_share_base(error: Exception) -> None:
    assert isinstance(error, AgentCoreError)


def test_messages() -> None:
    assert str(ToolNotFoundError("fly", ["calculator", "datetime"])) == (
        "Error: Tool 'fly' not found. Available tools: calculator, datetime"
    )
    assert str(ToolExecutionError("calculator", "bad input")) == "Error executing tool 'calculator': bad input"
    assert str(MalformedModelOutputError("??")) == (
        "Please follow the correct format: Thought/Action/Input or Final Answer"
    )
    assert str(IterationBudgetExhaustedError(5)) == "I'm sorry, I couldn't find an answer after 5 attempts."


def test_errors_keep_context() -> None:
    err = ToolNotFoundError("fly", ("a", "b"))
    assert err.name == "fly"
    assert err.available == ["a", "b"]
    assert MalformedModelOutputError("raw").text == "raw"
    assert IterationBudgetExhaustedError(3).max_iterations == 3
