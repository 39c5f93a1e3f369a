from __future__ import annotations

"""LangGraph ReAct engine.

``ReActEngine`` drives a completion collaborator through bounded
Thought → Action → Observation cycles until it produces a final answer or
runs out of iterations.

Execution model
--------------

The engine runs a LangGraph state machine over a per-run ``_ReActState``::

    start → think ─┬─ final answer ─────────────→ finish
                   ├─ tool call ──→ act ────┐
                   └─ malformed ──→ correct ┤
                                            ├─ budget left → think
                                            └─ exhausted ──→ finish

- ``think`` makes exactly one completion call and parses it. A final answer
  wins over an action in the same completion.
- ``act`` dispatches the tool call through the registry and appends the
  result as an ``Observation:`` message. Tool failures come back as text, so
  the model gets a chance to correct itself.
- ``correct`` appends a format reminder. It costs one iteration, the same as a
  tool call.
- ``finish`` produces the final answer, or the fallback message when the
  budget is exhausted. Exhaustion is a normal return.

Only ``CompletionError`` escapes a run.
"""

import logging
from typing import Any, Dict, List
from uuid import uuid4

from langgraph.graph import END, StateGraph

from ..errors import CompletionError, IterationBudgetExhaustedError, MalformedModelOutputError
from ..planning.parser import ReActTextParser, ResponseParser
from ..planning.prompts import build_system_prompt
from ..planning.steps import FinalAnswer, ToolCall, load_response
from ..schemas.domain import (
    AgentEvent,
    AgentEventType,
    Message,
    ReActRunResult,
    RunOutcome,
)
from .models import EngineDeps, _ReActState

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 5


class ReActEngine:
    """Run the ReAct loop against injected collaborators.

    The engine holds no per-run state: every ``run``/``execute`` call builds its
    own message sequence and iteration counter.
    """

    def __init__(self, *, deps: EngineDeps, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> None:
        """
        Initialize the ReActEngine.

        Args:
            deps: The completion client, capability registry and optional parser/event sink.
            max_iterations: Upper bound on completion calls per run.

        Raises:
            ValueError: If ``max_iterations`` is smaller than 1.
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self._deps = deps
        self._max_iterations = max_iterations
        self._parser: ResponseParser = deps.parser or ReActTextParser()
        self._graph = self._build_graph()

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    def _build_graph(self):
        """Build and compile the LangGraph state machine."""
        g: StateGraph = StateGraph(_ReActState)
        g.add_node("start", self._node_start)
        g.add_node("think", self._node_think)
        g.add_node("act", self._node_act)
        g.add_node("correct", self._node_correct)
        g.add_node("finish", self._node_finish)

        g.set_entry_point("start")
        g.add_edge("start", "think")

        g.add_conditional_edges(
            "think",
            self._route_after_think,
            {
                "final": "finish",
                "act": "act",
                "correct": "correct",
            },
        )
        for node in ("act", "correct"):
            g.add_conditional_edges(
                node,
                self._route_after_observation,
                {
                    "continue": "think",
                    "exhausted": "finish",
                },
            )
        g.add_edge("finish", END)
        return g.compile()

    def system_prompt(self) -> str:
        """The system message describing every registered capability and the format."""
        return build_system_prompt(self._deps.capabilities.describe())

    async def run(self, query: str) -> str:
        """Answer ``query``; returns the fallback message when the budget runs out."""
        result = await self.execute(query)
        return result.answer

    async def execute(self, query: str) -> ReActRunResult:
        """Run the loop and return the answer together with the run transcript.

        Raises
        ------
        CompletionError
            When the completion collaborator fails. There is no retry.
        """
        run_id = str(uuid4())
        state: _ReActState = {
            "run_id": run_id,
            "messages": [Message.system(self.system_prompt()), Message.user(query)],
            "iteration": 0,
            "decision": None,
        }
        logger.info(f"ReAct run {run_id} started (max_iterations={self._max_iterations})")
        final = await self._graph.ainvoke(state, config={"recursion_limit": 2 * self._max_iterations + 5})
        return ReActRunResult(
            run_id=run_id,
            answer=str(final["answer"]),
            outcome=RunOutcome(final["outcome"]),
            iterations=int(final["iteration"]),
            messages=list(final["messages"]),
        )

    async def _emit(self, run_id: str, type: AgentEventType, payload: Dict[str, Any]) -> None:
        if self._deps.events is not None:
            await self._deps.events.append(AgentEvent(run_id=run_id, type=type, payload=payload))

    async def _node_start(self, state: _ReActState) -> _ReActState:
        """Graph entry node. Records the run start."""
        messages: List[Message] = state["messages"]
        await self._emit(
            state["run_id"],
            AgentEventType.run_started,
            {"query": messages[-1].content, "tools": self._deps.capabilities.names()},
        )
        return state

    async def _node_think(self, state: _ReActState) -> _ReActState:
        """Make one completion call and parse it."""
        run_id = state["run_id"]
        iteration = int(state["iteration"]) + 1
        messages = list(state["messages"])
        logger.debug(f"Iteration {iteration}/{self._max_iterations}")

        await self._emit(run_id, AgentEventType.completion_requested, {"iteration": iteration})
        try:
            text = await self._deps.completion.complete(messages)
            if not isinstance(text, str):
                raise CompletionError(f"Unexpected LLM response: expected text, got {type(text).__name__}")
        except CompletionError:
            raise
        except Exception as e:
            raise CompletionError(f"LLM call error: {e}") from e
        logger.debug(f"LLM response:\n{text}")

        messages.append(Message.assistant(text))
        decision = self._parser.parse(text)
        await self._emit(
            run_id,
            AgentEventType.completion_received,
            {"iteration": iteration, "kind": decision.kind},
        )

        state["messages"] = messages
        state["iteration"] = iteration
        state["decision"] = decision.model_dump()
        return state

    async def _node_act(self, state: _ReActState) -> _ReActState:
        """Dispatch the parsed tool call and record the observation."""
        run_id = state["run_id"]
        call = load_response(dict(state.get("decision") or {}))
        if not isinstance(call, ToolCall):
            raise ValueError(f"act node reached with decision kind: {call.kind}")

        logger.info(f"Executing tool: {call.name} with params: {call.args}")
        await self._emit(run_id, AgentEventType.tool_dispatched, {"tool": call.name, "args": call.args})
        observation = await self._deps.capabilities.dispatch(call.name, call.args)
        logger.debug(f"Observation: {observation}")
        await self._emit(run_id, AgentEventType.observation_recorded, {"tool": call.name, "observation": observation})

        state["messages"] = [*state["messages"], Message.user(f"Observation: {observation}")]
        return state

    async def _node_correct(self, state: _ReActState) -> _ReActState:
        """Ask the model to follow the format again."""
        text = str((state.get("decision") or {}).get("text") or "")
        reminder = MalformedModelOutputError(text)
        logger.info("Invalid response format, requesting correction")
        await self._emit(state["run_id"], AgentEventType.response_malformed, {"iteration": state["iteration"]})

        state["messages"] = [*state["messages"], Message.user(str(reminder))]
        return state

    async def _node_finish(self, state: _ReActState) -> _ReActState:
        """Finish node.

        Sets the answer and outcome: the final answer when the last decision was
        one, otherwise the exhausted-budget fallback.
        """
        run_id = state["run_id"]
        raw = state.get("decision")
        decision = load_response(dict(raw)) if raw else None

        if isinstance(decision, FinalAnswer):
            logger.info(f"Final Answer found after {state['iteration']} iteration(s)")
            state["answer"] = decision.text
            state["outcome"] = RunOutcome.final_answer.value
            await self._emit(run_id, AgentEventType.run_completed, {"iterations": state["iteration"]})
            return state

        exhausted = IterationBudgetExhaustedError(self._max_iterations)
        logger.warning(f"ReAct run {run_id} exhausted its budget of {self._max_iterations} iteration(s)")
        state["answer"] = str(exhausted)
        state["outcome"] = RunOutcome.exhausted.value
        await self._emit(run_id, AgentEventType.run_exhausted, {"iterations": state["iteration"]})
        return state

    def _route_after_think(self, state: _ReActState) -> str:
        """Route to finish/act/correct depending on the parsed completion."""
        kind = (state.get("decision") or {}).get("kind")
        if kind == "final_answer":
            return "final"
        if kind == "tool_call":
            return "act"
        return "correct"

    def _route_after_observation(self, state: _ReActState) -> str:
        """Loop back to think while iterations remain."""
        if int(state["iteration"]) >= self._max_iterations:
            return "exhausted"
        return "continue"
