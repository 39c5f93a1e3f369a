from __future__ import annotations

from typing import List

import pytest

from datapizza_ai.pipeline import (
    ModuleStatus,
    PipelineConfigurationError,
    PipelineCycleError,
    PipelineMode,
    PipelineModuleError,
    create,
)


def _triple(value: int) -> int:
    return value * 3


def _linear():
    return create(mode=PipelineMode.linear)


def _abc():
    return (
        _linear()
        .add_module("A", _triple)
        .add_module("B", _triple)
        .add_module("C", _triple)
        .connect("A", "B")
        .connect("B", "C")
    )


@pytest.mark.asyncio
async def test_chain_forwards_each_output() -> None:
    result = await _abc().run(2)

    assert result.execution_order == ["A", "B", "C"]
    assert result.results == {"A": 6, "B": 18, "C": 54}
    assert result.output == 54
    assert set(result.statuses.values()) == {ModuleStatus.complete}


@pytest.mark.asyncio
async def test_entry_is_found_regardless_of_registration_order() -> None:
    seen: List[str] = []

    def tag(name: str):
        def _fn(value: str) -> str:
            seen.append(name)
            return f"{value}>{name}"

        return _fn

    pipeline = (
        _linear()
        .add_module("prompt", tag("prompt"))
        .add_module("retriever", tag("retriever"))
        .add_module("embedder", tag("embedder"))
        .connect("embedder", "retriever")
        .connect("retriever", "prompt")
    )

    result = await pipeline.run("query")

    assert seen == ["embedder", "retriever", "prompt"]
    assert result.output == "query>embedder>retriever>prompt"


@pytest.mark.asyncio
async def test_async_module_in_chain() -> None:
    async def double(value: int) -> int:
        return value * 2

    pipeline = _linear().add_module("a", double).add_module("b", _triple).connect("a", "b")
    assert (await pipeline.run(1)).output == 6


@pytest.mark.asyncio
async def test_single_module() -> None:
    assert (await _linear().add_module("only", _triple).run(5)).output == 15


@pytest.mark.asyncio
async def test_empty_linear_pipeline() -> None:
    result = await _linear().run("anything")
    assert result.output is None
    assert result.execution_order == []


def test_linear_rejects_params_and_deps() -> None:
    with pytest.raises(PipelineConfigurationError):
        _linear().add_module("a", _triple, params={"x": 1})
    with pytest.raises(PipelineConfigurationError):
        _linear().add_module("a", _triple, deps=["b"])


def test_linear_rejects_fan_out() -> None:
    pipeline = _linear().add_module("a", _triple).add_module("b", _triple).add_module("c", _triple)
    pipeline.connect("a", "b")
    with pytest.raises(PipelineConfigurationError, match="already feeds 'b'"):
        pipeline.connect("a", "c")


def test_linear_rejects_fan_in() -> None:
    pipeline = _linear().add_module("a", _triple).add_module("b", _triple).add_module("c", _triple)
    pipeline.connect("a", "c")
    with pytest.raises(PipelineConfigurationError, match="already fed by 'a'"):
        pipeline.connect("b", "c")


def test_linear_connect_requires_known_source() -> None:
    with pytest.raises(PipelineConfigurationError, match="unknown module 'ghost'"):
        _linear().add_module("a", _triple).connect("ghost", "a")


@pytest.mark.asyncio
async def test_two_entries_are_a_configuration_error() -> None:
    pipeline = _linear().add_module("a", _triple).add_module("b", _triple)

    with pytest.raises(PipelineConfigurationError, match="2 entry modules"):
        await pipeline.run(1)


@pytest.mark.asyncio
async def test_closed_loop_has_no_entry() -> None:
    pipeline = _linear().add_module("a", _triple).add_module("b", _triple).connect("a", "b").connect("b", "a")

    with pytest.raises(PipelineCycleError, match="no entry"):
        await pipeline.run(1)


@pytest.mark.asyncio
async def test_detached_loop_is_unreachable_and_nothing_runs() -> None:
    calls: List[int] = []

    def record(value: int) -> int:
        calls.append(value)
        return value

    pipeline = (
        _linear()
        .add_module("start", record)
        .add_module("x", record)
        .add_module("y", record)
        .connect("x", "y")
        .connect("y", "x")
    )

    with pytest.raises(PipelineCycleError) as excinfo:
        await pipeline.run(1)

    assert sorted(excinfo.value.pending) == ["x", "y"]
    assert calls == []


@pytest.mark.asyncio
async def test_failure_in_chain_stops_execution() -> None:
    def fail(value: int) -> int:
        raise ArithmeticError("overflow")

    pipeline = (
        _linear()
        .add_module("A", _triple)
        .add_module("B", fail)
        .add_module("C", _triple)
        .connect("A", "B")
        .connect("B", "C")
    )

    with pytest.raises(PipelineModuleError, match="Module 'B' failed: overflow"):
        await pipeline.run(2)
