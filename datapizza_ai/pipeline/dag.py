from __future__ import annotations

"""Dependency-graph pipeline executor.

``DagPipeline`` runs a set of named modules (stages) in an order that respects
their declared dependencies.

Modes
-----

- ``graph``: each module declares dependencies (via ``deps`` or ``connect``)
  and named parameters. A parameter given as ``ModuleRef`` is replaced by the
  referenced module's result (or an initial context entry). Modules run once,
  as soon as all their dependencies are complete. Ties are broken by
  registration order.
- ``linear``: modules form a single chain built with ``connect``. The entry
  module receives the initial input and each next module receives the previous
  module's result as its only argument.

Scheduling is bounded by ``2 * len(modules)`` steps. A graph where no pending
module can become ready fails with ``PipelineUnresolvedDependencyError`` before
that bound is reached.

Any failure aborts the run: the first failing module raises
``PipelineModuleError`` and nothing after it is executed.

With ``max_concurrency > 1`` every scheduling step runs all ready modules with
``asyncio.gather``, at most ``max_concurrency`` at a time. Synchronous
callables are then offloaded with ``asyncio.to_thread``.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union
from uuid import uuid4

from ..core.config import settings
from ..core.events import AgentEvent, AgentEventType, EventRepository
from .errors import (
    PipelineConfigurationError,
    PipelineCycleError,
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
)

logger = logging.getLogger(__name__)


def preview(value: Any, limit: int = 50) -> str:
    """Short human readable description of a module result, for logs and events."""
    if isinstance(value, str):
        return value[:limit] + ("..." if len(value) > limit else "")
    if isinstance(value, (list, tuple, dict, set)):
        return f"{len(value)} items"
    if value is None or isinstance(value, (bool, int, float)):
        return repr(value)
    return type(value).__name__


def _is_async_callable(fn: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


class DagPipeline:
    """A pipeline of named modules executed in dependency order.

    The pipeline definition is reusable: every ``run`` call keeps its own
    module statuses and results.
    """

    def __init__(
        self,
        *,
        mode: Union[PipelineMode, str] = PipelineMode.graph,
        max_concurrency: int = 1,
        events: Optional[EventRepository] = None,
    ) -> None:
        """
        Initialize an empty pipeline.

        Args:
            mode: ``graph`` (dependency sets and named parameters) or ``linear`` (single chain).
            max_concurrency: Upper bound on modules executed together in one scheduling step.
            events: Optional event sink for pipeline and module lifecycle events.

        Raises:
            ValueError: If ``mode`` is unknown or ``max_concurrency`` is smaller than 1.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._mode = PipelineMode(mode)
        self._max_concurrency = max_concurrency
        self._events = events
        self._modules: Dict[str, PipelineModule] = {}
        # Linear chain edges, from -> to and to -> from.
        self._successor: Dict[str, str] = {}
        self._predecessor: Dict[str, str] = {}

    @property
    def mode(self) -> PipelineMode:
        return self._mode

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def modules(self) -> Dict[str, PipelineModule]:
        """Registered modules by id, in registration order."""
        return dict(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def add_module(
        self,
        module_id: str,
        fn: Callable[..., Any],
        params: Optional[Mapping[str, Any]] = None,
        deps: Optional[Iterable[str]] = None,
    ) -> "DagPipeline":
        """Register a module.

        Args:
            module_id: Unique id; also the key of the module's result.
            fn: Sync or async callable. In graph mode it is called with the
                resolved ``params`` as keyword arguments.
            params: Literal values and ``ModuleRef`` references (graph mode only).
            deps: Ids of modules that must complete first (graph mode only).

        Raises:
            PipelineConfigurationError: On a duplicate id, a non-callable, or
                params/deps given to a linear pipeline.
        """
        if module_id in self._modules:
            raise PipelineConfigurationError(f"Module '{module_id}' is already registered")
        if not callable(fn):
            raise PipelineConfigurationError(f"Module '{module_id}' is not callable")
        if self._mode is PipelineMode.linear and (params or deps):
            raise PipelineConfigurationError(
                f"Module '{module_id}': linear pipelines take no params or deps, use connect()"
            )

        ordered_deps: List[str] = []
        for dep in deps or ():
            if dep not in ordered_deps:
                ordered_deps.append(dep)

        self._modules[module_id] = PipelineModule(
            id=module_id,
            fn=fn,
            params=dict(params or {}),
            deps=ordered_deps,
        )
        logger.debug(f"Registered module: {module_id} (deps={ordered_deps})")
        return self

    def connect(self, from_id: str, to_id: str) -> "DagPipeline":
        """Declare that ``to_id`` runs after ``from_id``.

        The edge is added to ``to_id``'s dependency set. In linear mode each
        module accepts at most one incoming and one outgoing edge, and both ends
        must be registered.

        Raises:
            PipelineConfigurationError: If the target is unknown, or a linear
                chain constraint is violated.
        """
        if to_id not in self._modules:
            raise PipelineConfigurationError(f"Cannot connect to unknown module '{to_id}'")

        if self._mode is PipelineMode.linear:
            if from_id not in self._modules:
                raise PipelineConfigurationError(f"Cannot connect from unknown module '{from_id}'")
            if from_id in self._successor:
                raise PipelineConfigurationError(
                    f"Module '{from_id}' already feeds '{self._successor[from_id]}' in this linear pipeline"
                )
            if to_id in self._predecessor:
                raise PipelineConfigurationError(
                    f"Module '{to_id}' is already fed by '{self._predecessor[to_id]}' in this linear pipeline"
                )
            self._successor[from_id] = to_id
            self._predecessor[to_id] = from_id

        target = self._modules[to_id]
        if from_id not in target.deps:
            target.deps.append(from_id)
        return self

    async def run(self, initial: Any = None) -> PipelineResult:
        """Execute the pipeline.

        Args:
            initial: In graph mode, an optional mapping that seeds the results
                (``ModuleRef`` can point at its keys). In linear mode, the input
                of the entry module.

        Returns:
            PipelineResult: Results by id, execution order and statuses.

        Raises:
            PipelineError: Subclasses describe why the run was aborted.
        """
        if self._mode is PipelineMode.linear:
            return await self._run_linear(initial)
        return await self._run_graph(initial)

    # ------------------------------------------------------------------
    # Graph mode
    # ------------------------------------------------------------------

    async def _run_graph(self, initial: Any) -> PipelineResult:
        if initial is not None and not isinstance(initial, Mapping):
            raise PipelineConfigurationError("Graph pipelines take a mapping as initial context")

        run_id = str(uuid4())
        context: Dict[str, Any] = dict(initial or {})
        states = {module_id: ModuleState() for module_id in self._modules}
        order: List[str] = []
        max_steps = 2 * len(self._modules)

        logger.info(f"Pipeline {run_id} started: {len(self._modules)} module(s), mode=graph")
        await self._emit(run_id, AgentEventType.pipeline_started, {"mode": self._mode.value, "modules": list(self._modules)})

        try:
            steps = 0
            while True:
                pending = [mid for mid, state in states.items() if state.status is ModuleStatus.pending]
                if not pending:
                    break
                steps += 1
                # Every step completes a module or raises below, so this only
                # guards against a scheduler regression.
                if steps > max_steps:
                    raise PipelineCycleError(
                        pending,
                        f"Pipeline exceeded {max_steps} scheduling steps; pending modules: {', '.join(pending)}",
                    )

                ready = [self._modules[mid] for mid in pending if self._is_ready(self._modules[mid], states)]
                if not ready:
                    raise PipelineUnresolvedDependencyError(pending)

                batch = ready[:1] if self._max_concurrency == 1 else ready
                await self._run_batch(run_id, batch, states, context, order)
        except Exception as e:
            await self._fail(run_id, e)
            raise

        return await self._complete(run_id, context, order, states)

    def _is_ready(self, module: PipelineModule, states: Mapping[str, ModuleState]) -> bool:
        for dep in module.deps:
            state = states.get(dep)
            if state is None or state.status is not ModuleStatus.complete:
                return False
        return True

    async def _run_batch(
        self,
        run_id: str,
        batch: Sequence[PipelineModule],
        states: Dict[str, ModuleState],
        context: Dict[str, Any],
        order: List[str],
    ) -> None:
        if len(batch) == 1:
            await self._run_graph_module(run_id, batch[0], states, context, order, offload=False)
            return

        logger.debug(f"Running {len(batch)} ready module(s) concurrently: {[m.id for m in batch]}")
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(module: PipelineModule) -> None:
            async with semaphore:
                await self._run_graph_module(run_id, module, states, context, order, offload=True)

        outcomes = await asyncio.gather(*(_bounded(m) for m in batch), return_exceptions=True)
        # Report the first failure in registration order.
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

    async def _run_graph_module(
        self,
        run_id: str,
        module: PipelineModule,
        states: Dict[str, ModuleState],
        context: Dict[str, Any],
        order: List[str],
        *,
        offload: bool,
    ) -> None:
        state = states[module.id]
        try:
            kwargs = self._resolve_params(module, states, context)
        except PipelineReferenceError as e:
            state.status = ModuleStatus.failed
            state.error = str(e)
            raise

        await self._execute(run_id, module, state, (), kwargs, offload=offload)
        context[module.id] = state.result
        order.append(module.id)

    def _resolve_params(
        self,
        module: PipelineModule,
        states: Mapping[str, ModuleState],
        context: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Replace ``ModuleRef`` values with results; literals pass through."""
        resolved: Dict[str, Any] = {}
        for key, value in module.params.items():
            if not isinstance(value, ModuleRef):
                resolved[key] = value
                continue

            target = value.module_id
            if target in self._modules:
                if states[target].status is not ModuleStatus.complete:
                    raise PipelineReferenceError(module.id, target, "has not completed")
                resolved[key] = states[target].result
            elif target in context:
                resolved[key] = context[target]
            else:
                raise PipelineReferenceError(module.id, target, "is neither a module nor an initial context key")
        return resolved

    # ------------------------------------------------------------------
    # Linear mode
    # ------------------------------------------------------------------

    def _linear_chain(self) -> List[str]:
        """Validate the chain shape and return module ids in execution order."""
        entries = [mid for mid in self._modules if mid not in self._predecessor]
        if not entries:
            raise PipelineCycleError(list(self._modules), "Linear pipeline has no entry module (circular chain)")
        if len(entries) > 1:
            raise PipelineConfigurationError(
                f"Linear pipeline has {len(entries)} entry modules: {', '.join(entries)}"
            )

        chain: List[str] = []
        current: Optional[str] = entries[0]
        while current is not None:
            if len(chain) >= 2 * len(self._modules):
                raise PipelineCycleError(chain, "Linear pipeline exceeded its step bound")
            chain.append(current)
            current = self._successor.get(current)

        if len(chain) < len(self._modules):
            unreachable = [mid for mid in self._modules if mid not in chain]
            raise PipelineCycleError(
                unreachable,
                f"Modules not reachable from '{entries[0]}' (circular chain): {', '.join(unreachable)}",
            )
        return chain

    async def _run_linear(self, initial: Any) -> PipelineResult:
        run_id = str(uuid4())
        states = {module_id: ModuleState() for module_id in self._modules}
        results: Dict[str, Any] = {}
        order: List[str] = []

        if not self._modules:
            logger.info(f"Pipeline {run_id} has no modules")
            return PipelineResult(run_id=run_id, results=results, execution_order=order, statuses={})

        logger.info(f"Pipeline {run_id} started: {len(self._modules)} module(s), mode=linear")
        await self._emit(run_id, AgentEventType.pipeline_started, {"mode": self._mode.value, "modules": list(self._modules)})

        try:
            value = initial
            for module_id in self._linear_chain():
                module = self._modules[module_id]
                await self._execute(run_id, module, states[module_id], (value,), {}, offload=False)
                value = states[module_id].result
                results[module_id] = value
                order.append(module_id)
        except Exception as e:
            await self._fail(run_id, e)
            raise

        return await self._complete(run_id, results, order, states)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    async def _execute(
        self,
        run_id: str,
        module: PipelineModule,
        state: ModuleState,
        args: tuple,
        kwargs: Dict[str, Any],
        *,
        offload: bool,
    ) -> None:
        """Invoke one module and record its status and result on ``state``."""
        state.status = ModuleStatus.running
        logger.info(f"Executing: {module.id}")
        await self._emit(run_id, AgentEventType.module_started, {"module": module.id})

        try:
            if offload and not _is_async_callable(module.fn):
                result = await asyncio.to_thread(module.fn, *args, **kwargs)
            else:
                result = module.fn(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            state.status = ModuleStatus.failed
            state.error = str(e)
            logger.error(f"Module {module.id} failed: {e}")
            await self._emit(run_id, AgentEventType.module_failed, {"module": module.id, "error": str(e)})
            raise PipelineModuleError(module.id, str(e)) from e

        state.result = result
        state.status = ModuleStatus.complete
        logger.info(f"Completed: {module.id} -> {preview(result)}")
        await self._emit(run_id, AgentEventType.module_completed, {"module": module.id, "preview": preview(result)})

    async def _complete(
        self,
        run_id: str,
        results: Dict[str, Any],
        order: List[str],
        states: Mapping[str, ModuleState],
    ) -> PipelineResult:
        logger.info(f"Pipeline {run_id} completed: {len(order)} module(s) executed")
        await self._emit(run_id, AgentEventType.pipeline_completed, {"execution_order": list(order)})
        return PipelineResult(
            run_id=run_id,
            results=results,
            execution_order=order,
            statuses={mid: state.status for mid, state in states.items()},
        )

    async def _fail(self, run_id: str, error: Exception) -> None:
        logger.error(f"Pipeline {run_id} aborted: {error}")
        await self._emit(
            run_id,
            AgentEventType.pipeline_failed,
            {"error": str(error), "error_type": type(error).__name__},
        )

    async def _emit(self, run_id: str, type: AgentEventType, payload: Dict[str, Any]) -> None:
        if self._events is not None:
            await self._events.append(AgentEvent(run_id=run_id, type=type, payload=payload))


def create(
    *,
    mode: Union[PipelineMode, str] = PipelineMode.graph,
    max_concurrency: Optional[int] = None,
    events: Optional[EventRepository] = None,
) -> DagPipeline:
    """Create an empty pipeline; ``max_concurrency`` defaults to the configured value."""
    return DagPipeline(
        mode=mode,
        max_concurrency=max_concurrency if max_concurrency is not None else settings.pipeline_max_concurrency,
        events=events,
    )
