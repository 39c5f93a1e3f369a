"""Dependency-graph pipeline engine.

Build a pipeline with ``create``, register modules with ``add_module``, wire
them with ``connect`` (or ``deps``) and ``await pipeline.run(...)``.
"""

from .dag import DagPipeline, create, preview
from .errors import (
    PipelineConfigurationError,
    PipelineCycleError,
    PipelineError,
    PipelineModuleError,
    PipelineReferenceError,
    PipelineUnresolvedDependencyError,
)
from .models import (
    ModuleRef,
    ModuleState,
    ModuleStatus,
    PipelineMode,
    PipelineModule,
    PipelineResult,
    ref,
)

__all__ = [
    "DagPipeline",
    "create",
    "preview",
    "ModuleRef",
    "ModuleState",
    "ModuleStatus",
    "PipelineMode",
    "PipelineModule",
    "PipelineResult",
    "ref",
    # Errors
    "PipelineError",
    "PipelineConfigurationError",
    "PipelineReferenceError",
    "PipelineUnresolvedDependencyError",
    "PipelineCycleError",
    "PipelineModuleError",
]
