"""Error types for the pipeline package.

Unlike tool errors in the ReAct loop, pipeline errors are never recovered
locally: stages have hard data dependencies on each other, so any failure
aborts the whole run and propagates to the caller of ``run``.
"""

from __future__ import annotations

from typing import Iterable, Optional


class PipelineError(Exception):
    """Base error for all pipeline exceptions."""


class PipelineConfigurationError(PipelineError):
    """Raised when a pipeline is built or invoked inconsistently."""


class PipelineReferenceError(PipelineConfigurationError):
    """Raised when a module parameter references a result that is not available."""

    def __init__(self, module_id: str, target: str, reason: str) -> None:
        self.module_id = module_id
        self.target = target
        super().__init__(f"Module '{module_id}' references '{target}', which {reason}")


class PipelineUnresolvedDependencyError(PipelineError):
    """Raised when pending modules remain but none of them can run."""

    def __init__(self, pending: Iterable[str], message: Optional[str] = None) -> None:
        self.pending = list(pending)
        super().__init__(
            message
            or f"Unresolved or circular dependency among pending modules: {', '.join(self.pending)}"
        )


class PipelineCycleError(PipelineUnresolvedDependencyError):
    """Raised when scheduling exceeds its step bound or a linear chain loops."""


class PipelineModuleError(PipelineError):
    """Raised when a module callable fails; the run is aborted."""

    def __init__(self, module_id: str, message: str) -> None:
        self.module_id = module_id
        super().__init__(f"Module '{module_id}' failed: {message}")
