from __future__ import annotations

"""Runtime dependency bundle and LangGraph state types.

The ReAct engine is designed to be dependency-injected.

- ``EngineDeps`` collects the collaborators the engine needs.
- ``_ReActState`` is the mutable state passed between LangGraph nodes.

The state lives for a single run; nothing in it is shared between runs.
"""

from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    List,
    NotRequired,
    Optional,
    Required,
    TypedDict,
)

from ..capabilities import CapabilityRegistry
from ..completion import CompletionClient
from ..planning.parser import ResponseParser
from ..repos import EventRepository
from ..schemas.domain import Message


@dataclass(frozen=True)
class EngineDeps:
    """Dependency bundle for ``ReActEngine``.

    - ``completion``: the language model collaborator.
    - ``capabilities``: the tools the model may call; treated as read-only
      while a run executes.
    - ``parser``: completion parser, ``ReActTextParser`` when omitted.
    - ``events``: optional timeline sink for tracing a run.
    """

    completion: CompletionClient
    capabilities: CapabilityRegistry

    parser: Optional[ResponseParser] = None
    events: Optional[EventRepository] = None


class _ReActState(TypedDict):
    """Mutable LangGraph state for a single ReAct run.

    Required keys:

    - ``run_id``: current run identifier.
    - ``messages``: the completion context, append-only.
    - ``iteration``: completion calls made so far.

    Optional keys:

    - ``decision``: ``model_dump`` of the last parsed completion.
    - ``outcome`` / ``answer``: set by the finish node.
    """

    run_id: Required[str]
    messages: Required[List[Message]]
    iteration: Required[int]
    decision: NotRequired[Optional[Dict[str, Any]]]
    outcome: NotRequired[str]
    answer: NotRequired[str]
