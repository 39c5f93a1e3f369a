"""Parsing of model completions into ReAct decisions.

- ``steps``: the discriminated result types (``FinalAnswer``, ``ToolCall``,
  ``MalformedResponse``).
- ``parser``: the ``ResponseParser`` protocol and the text-format parser.
- ``prompts``: the system prompt teaching the model the format.
"""

from .parser import ReActTextParser, ResponseParser
from .prompts import build_system_prompt
from .steps import FinalAnswer, MalformedResponse, ParsedResponse, ToolCall, load_response

__all__ = [
    "FinalAnswer",
    "MalformedResponse",
    "ParsedResponse",
    "ToolCall",
    "load_response",
    "ReActTextParser",
    "ResponseParser",
    "build_system_prompt",
]
