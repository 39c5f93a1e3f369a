from __future__ import annotations

from typing import Iterable, List, Sequence

import httpx
import pytest

from datapizza_ai.agent_core.schemas.domain import Message


class ScriptedCompletion:
    """Completion stub replaying canned responses and recording every call."""

    def __init__(self, responses: Sequence[str], *, repeat_last: bool = True) -> None:
        self._responses = list(responses)
        self._repeat_last = repeat_last
        self.calls: List[List[Message]] = []

    async def complete(self, messages: Sequence[Message]) -> str:
        self.calls.append(list(messages))
        index = len(self.calls) - 1
        if index < len(self._responses):
            return self._responses[index]
        if self._repeat_last and self._responses:
            return self._responses[-1]
        raise AssertionError(f"unexpected completion call #{index + 1}")


@pytest.fixture
def scripted_completion():
    """Factory fixture building a ``ScriptedCompletion`` from canned responses."""

    def _make(*responses: str, repeat_last: bool = True) -> ScriptedCompletion:
        return ScriptedCompletion(responses, repeat_last=repeat_last)

    return _make


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
