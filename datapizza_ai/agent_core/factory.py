from __future__ import annotations

"""Convenience factories for wiring the agent core.

This module contains small helpers to build the default capability registry,
the default completion client and a ``ReActEngine`` from ``Settings``.

The intent is to keep application wiring and tests concise, while still
allowing callers to provide their own registry, completion client, parser or
event repository.
"""

from typing import Optional

from ..core.config import Settings, settings as default_settings
from .capabilities.builtin import (
    CalculatorCapability,
    DateTimeCapability,
    FileReaderCapability,
    WebSearchCapability,
)
from .capabilities.registry import CapabilityRegistry
from .completion import ChatCompletionClient, CompletionClient
from .planning.parser import ResponseParser
from .repos import ConversationRepository, EventRepository, InMemoryConversationRepository
from .runtime import EngineDeps
from .runtime.engine import ReActEngine
from .service import AgentService


def build_default_registry(settings: Optional[Settings] = None) -> CapabilityRegistry:
    """Build the default ``CapabilityRegistry``.

    The default registry includes the built-in capabilities shipped with the
    package: calculator, datetime, file reader and the offline web search.
    """
    cfg = settings or default_settings
    return CapabilityRegistry(
        [
            CalculatorCapability(),
            DateTimeCapability(),
            FileReaderCapability(root=cfg.file_reader_root),
            WebSearchCapability(),
        ]
    )


def build_completion_client(settings: Optional[Settings] = None) -> ChatCompletionClient:
    """Construct the OpenAI-compatible completion client from settings."""
    cfg = settings or default_settings
    return ChatCompletionClient(config=cfg.llm)


def build_engine(
    *,
    settings: Optional[Settings] = None,
    completion: Optional[CompletionClient] = None,
    registry: Optional[CapabilityRegistry] = None,
    parser: Optional[ResponseParser] = None,
    events: Optional[EventRepository] = None,
    max_iterations: Optional[int] = None,
) -> ReActEngine:
    """Construct a ``ReActEngine``; anything not supplied comes from settings."""
    cfg = settings or default_settings
    deps = EngineDeps(
        completion=completion if completion is not None else build_completion_client(cfg),
        capabilities=registry if registry is not None else build_default_registry(cfg),
        parser=parser,
        events=events,
    )
    return ReActEngine(
        deps=deps,
        max_iterations=max_iterations if max_iterations is not None else cfg.agent_max_iterations,
    )


def build_service(
    *,
    engine: ReActEngine,
    conversations: Optional[ConversationRepository] = None,
) -> AgentService:
    """Wrap an engine in an ``AgentService`` with in-memory sessions by default."""
    return AgentService(
        engine=engine,
        conversations=conversations if conversations is not None else InMemoryConversationRepository(),
    )
