from __future__ import annotations

"""Completion text parsing for the ReAct loop.

The loop never inspects completion text itself. It hands the text to a
``ResponseParser`` and branches on the kind of the returned result:

- ``FinalAnswer``: the run terminates successfully.
- ``ToolCall``: the named capability is dispatched with ``args``.
- ``MalformedResponse``: the model is asked to follow the format again.

``ReActTextParser`` implements the classic text wire format::

    Thought: <reasoning>
    Action: <tool name>
    Input: {"json": "object"}

or ``Final Answer: <text>``. A parser for a structured function-calling API
only has to return the same three result types.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Protocol, Union

from .steps import FinalAnswer, MalformedResponse, ToolCall

logger = logging.getLogger(__name__)

ParseResult = Union[FinalAnswer, ToolCall, MalformedResponse]


class ResponseParser(Protocol):
    """Turn one completion into a terminal answer, a tool call, or a malformed marker."""

    def parse(self, text: str) -> ParseResult: ...


class ReActTextParser:
    """Tolerant parser for the ``Thought``/``Action``/``Input``/``Final Answer`` format.

    - Markers are matched case-insensitively.
    - ``Final Answer:`` wins over ``Action:`` when both are present.
    - An action whose ``Input:`` block is missing, is not valid JSON, or is not a
      JSON object is dispatched with empty arguments.
    - The ``Input:`` object is decoded with ``json.JSONDecoder.raw_decode`` so
      nested objects and trailing prose are handled.
    """

    _FINAL = re.compile(r"Final Answer:", re.IGNORECASE)
    _ACTION = re.compile(r"Action:\s*`?(\w[\w\-]*)", re.IGNORECASE)
    _INPUT = re.compile(r"Input:", re.IGNORECASE)
    _THOUGHT = re.compile(r"Thought:\s*(.*)", re.IGNORECASE)

    def __init__(self) -> None:
        self._decoder = json.JSONDecoder()

    def parse(self, text: str) -> ParseResult:
        final = self._FINAL.search(text)
        if final is not None:
            answer = text[final.end() :].strip()
            return FinalAnswer(text=answer or text.strip())

        action = self._ACTION.search(text)
        if action is None:
            return MalformedResponse(text=text)

        return ToolCall(
            name=action.group(1),
            args=self._parse_input(text, action.end()),
            thought=self._parse_thought(text),
        )

    def _parse_input(self, text: str, start: int) -> Dict[str, Any]:
        marker = self._INPUT.search(text, start) or self._INPUT.search(text)
        if marker is None:
            return {}

        brace = text.find("{", marker.end())
        if brace < 0:
            return {}

        try:
            value, _ = self._decoder.raw_decode(text, brace)
        except json.JSONDecodeError as e:
            logger.debug(f"Ignoring unparsable action input: {e}")
            return {}
        if not isinstance(value, dict):
            return {}
        return value

    def _parse_thought(self, text: str) -> Optional[str]:
        match = self._THOUGHT.search(text)
        if match is None:
            return None
        return match.group(1).strip() or None
