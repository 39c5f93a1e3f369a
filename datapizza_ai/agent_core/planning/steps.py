from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from ...core.schemas import BaseSchema


class FinalAnswer(BaseSchema):
    kind: Literal["final_answer"] = "final_answer"
    text: str


class ToolCall(BaseSchema):
    kind: Literal["tool_call"] = "tool_call"
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    thought: Optional[str] = None


class MalformedResponse(BaseSchema):
    kind: Literal["malformed"] = "malformed"
    text: str


ParsedResponse = Annotated[Union[FinalAnswer, ToolCall, MalformedResponse], Field(discriminator="kind")]

_PARSED_RESPONSE = TypeAdapter(ParsedResponse)


def load_response(raw: Dict[str, Any]) -> Union[FinalAnswer, ToolCall, MalformedResponse]:
    """Rebuild a parsed response from its ``model_dump`` form.

    Raises ``pydantic.ValidationError`` (a ``ValueError``) for an unknown ``kind``.
    """
    return _PARSED_RESPONSE.validate_python(raw)
