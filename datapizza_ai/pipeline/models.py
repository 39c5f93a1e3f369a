from __future__ import annotations

"""Pipeline data model.

- ``PipelineModule`` is the build-time definition of a stage.
- ``ModuleState`` is the per-run status of a stage; each ``run`` call owns a
  fresh set, so a pipeline definition can be run repeatedly.
- ``ModuleRef`` marks a parameter whose value is another module's result.
  Every other parameter value is passed through as a literal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class PipelineMode(str, Enum):
    graph = "graph"
    linear = "linear"


class ModuleStatus(str, Enum):
    pending = "pending"
    running = "running"
    complete = "complete"
    failed = "failed"


@dataclass(frozen=True)
class ModuleRef:
    """Typed reference to the result of another module (or an initial context key)."""

    module_id: str


def ref(module_id: str) -> ModuleRef:
    return ModuleRef(module_id)


@dataclass
class PipelineModule:
    id: str
    fn: Callable[..., Any]
    params: Dict[str, Any] = field(default_factory=dict)
    deps: List[str] = field(default_factory=list)


@dataclass
class ModuleState:
    status: ModuleStatus = ModuleStatus.pending
    result: Any = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of a successful pipeline run.

    Attributes
    ----------
    run_id:
        Identifier of the run, shared with emitted events.
    results:
        Initial context entries plus every module result, keyed by id.
    execution_order:
        Module ids in the order they completed.
    statuses:
        Final status of every module.
    """

    run_id: str
    results: Dict[str, Any]
    execution_order: List[str]
    statuses: Dict[str, ModuleStatus]

    @property
    def output(self) -> Any:
        """Result of the last module that completed, ``None`` for an empty pipeline."""
        if not self.execution_order:
            return None
        return self.results[self.execution_order[-1]]

    def __getitem__(self, key: str) -> Any:
        return self.results[key]
