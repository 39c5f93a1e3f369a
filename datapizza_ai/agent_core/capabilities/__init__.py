"""Capability registry and built-in capabilities.

A *capability* is a named tool the ReAct loop can invoke.

- The system prompt lists every registered capability with its description
  and parameter schema.
- The parser turns ``Action:``/``Input:`` lines into a tool call.
- The registry dispatches the call and always returns observation text,
  converting unknown names and raised exceptions into error observations.

This package exports:

- ``Capability``: protocol for async capability execution.
- ``CapabilityRegistry``: name → capability implementation mapping.
- the built-in calculator, datetime, file reader and mock web search tools.
"""

from .base import Capability, ParameterSchema
from .builtin import (
    CalculatorCapability,
    DateTimeCapability,
    FileReaderCapability,
    WebSearchCapability,
)
from .registry import CapabilityRegistry

__all__ = [
    "Capability",
    "ParameterSchema",
    "CapabilityRegistry",
    "CalculatorCapability",
    "DateTimeCapability",
    "FileReaderCapability",
    "WebSearchCapability",
]
