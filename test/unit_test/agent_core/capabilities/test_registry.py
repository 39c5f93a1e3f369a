from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pytest

from datapizza_ai.agent_core.capabilities.base import Capability
from datapizza_ai.agent_core.capabilities.registry import NO_TOOLS_DESCRIPTION, CapabilityRegistry


@dataclass(frozen=True)
class _EchoCapability(Capability):
    name: str = "echo"
    description: str = "Echoes the text parameter"
    parameter_schema: Dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {"text": {"type": "string"}}}
    )

    async def execute(self, params: Dict[str, Any]) -> str:
        return f"echo: {params.get('text', '')}"


@dataclass(frozen=True)
class _FailingCapability(Capability):
    name: str = "broken"
    description: str = "Always fails"
    parameter_schema: Dict[str, Any] = field(default_factory=dict)

    async def execute(self, params: Dict[str, Any]) -> str:
        raise RuntimeError("disk on fire")


class _RecordingCapability:
    name = "counter"
    description = "Returns an integer"
    parameter_schema: Dict[str, Any] = {}

    def __init__(self) -> None:
        self.received: List[Dict[str, Any]] = []

    async def execute(self, params: Dict[str, Any]) -> Any:
        self.received.append(params)
        return 42


def test_registry_empty_has_false() -> None:
    reg = CapabilityRegistry()
    assert reg.has("echo") is False
    assert len(reg) == 0
    assert reg.names() == []


def test_registry_get_missing_raises_keyerror() -> None:
    reg = CapabilityRegistry()
    with pytest.raises(KeyError):
        reg.get("echo")


def test_registry_register_then_get_returns_same_instance() -> None:
    reg = CapabilityRegistry()
    cap = _EchoCapability()
    reg.register(cap)

    assert reg.has("echo") is True
    assert "echo" in reg
    assert reg.get("echo") is cap


def test_registry_register_overwrites_existing_name() -> None:
    reg = CapabilityRegistry()
    cap1 = _EchoCapability()
    cap2 = _EchoCapability(description="second")

    reg.register(cap1)
    reg.register(cap2)

    assert reg.get("echo") is cap2
    assert reg.names() == ["echo"]


def test_registry_constructor_keeps_registration_order() -> None:
    reg = CapabilityRegistry([_FailingCapability(), _EchoCapability()])
    assert reg.names() == ["broken", "echo"]


def test_capability_protocol_is_runtime_checkable() -> None:
    assert isinstance(_EchoCapability(), Capability)
    assert isinstance(_RecordingCapability(), Capability)


def test_describe_without_capabilities() -> None:
    assert CapabilityRegistry().describe() == NO_TOOLS_DESCRIPTION


def test_describe_lists_name_description_and_schema() -> None:
    cap = _EchoCapability()
    text = CapabilityRegistry([cap]).describe()

    assert text.startswith("You have access to the following tools:")
    assert "Tool: echo" in text
    assert "Description: Echoes the text parameter" in text
    assert json.dumps(cap.parameter_schema, indent=2) in text


@pytest.mark.asyncio
async def test_dispatch_returns_capability_output() -> None:
    reg = CapabilityRegistry([_EchoCapability()])
    assert await reg.dispatch("echo", {"text": "hi"}) == "echo: hi"


@pytest.mark.asyncio
async def test_dispatch_unknown_tool_lists_every_registered_name() -> None:
    reg = CapabilityRegistry([_EchoCapability(), _FailingCapability()])

    result = await reg.dispatch("teleport", {})

    assert result == "Error: Tool 'teleport' not found. Available tools: echo, broken"
    for name in ["teleport", *reg.names()]:
        assert name in result


@pytest.mark.asyncio
async def test_dispatch_unknown_tool_on_empty_registry() -> None:
    result = await CapabilityRegistry().dispatch("anything", {"x": 1})
    assert result.startswith("Error: Tool 'anything' not found.")


@pytest.mark.asyncio
async def test_dispatch_renders_execution_failure_as_observation() -> None:
    reg = CapabilityRegistry([_FailingCapability()])
    assert await reg.dispatch("broken", {}) == "Error executing tool 'broken': disk on fire"


@pytest.mark.asyncio
async def test_dispatch_stringifies_non_string_results_and_copies_params() -> None:
    cap = _RecordingCapability()
    reg = CapabilityRegistry([cap])
    params = {"a": 1}

    assert await reg.dispatch("counter", params) == "42"
    assert cap.received == [{"a": 1}]
    assert cap.received[0] is not params
