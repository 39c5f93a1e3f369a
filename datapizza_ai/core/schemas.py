"""Shared pydantic base model for datapizza-ai schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base model for messages, parsed steps and events.

    - ``populate_by_name=True``: fields can be set by name or alias.
    - ``extra="forbid"``: unknown keys are rejected, so a parsed completion or
      a stored event never carries fields the engines do not understand.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )
