"""datapizza-ai.

This package contains a small orchestration engine for language-model driven
applications.

High-level architecture
-----------------------

The codebase is organized around two independent engines:

- **Reasoning loop**: a ReAct (Thought -> Action -> Observation) loop that
  drives a completion model through a bounded number of iterations, letting it
  call registered capabilities (tools) by name until it produces a final
  answer.
- **Dependency graph**: a pipeline executor that runs named stages in an order
  consistent with their declared dependencies, feeding stage results into
  later stages.

Core subpackages
----------------

- ``datapizza_ai.agent_core``:

  - Capability protocol, registry and built-in capabilities.
  - Response parsing (text format to a discriminated step union) and prompts.
  - A LangGraph-based ReAct engine and a conversation-aware service.
  - Repository interfaces and in-memory implementations for events and
    conversation history.

- ``datapizza_ai.pipeline``:

  - ``DagPipeline`` with graph and linear modes, typed ``ModuleRef``
    parameters and optional concurrent execution of ready modules.

- ``datapizza_ai.core``:

  - Settings (``pydantic-settings``) and logging configuration.

Typical workflow
----------------

1. ``engine = agent_core.factory.build_engine()`` and
   ``await engine.run("What is 2 + 2?")``.
2. ``pipeline = pipeline.create()``, ``add_module(...)`` for every stage and
   ``await pipeline.run({...})``.
"""
