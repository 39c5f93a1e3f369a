"""ReAct runtime: the LangGraph engine and its dependency bundle."""

from .engine import DEFAULT_MAX_ITERATIONS, ReActEngine
from .models import EngineDeps

__all__ = ["DEFAULT_MAX_ITERATIONS", "EngineDeps", "ReActEngine"]
