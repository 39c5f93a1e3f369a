from __future__ import annotations

"""Completion collaborators for the ReAct loop.

The engine only depends on ``CompletionClient``: an object with an async
``complete(messages) -> str``. Failures must surface as ``CompletionError``;
the engine does not retry and the current run is aborted.

``ChatCompletionClient`` is a thin default speaking the OpenAI-compatible
``POST {base_url}/chat/completions`` protocol, which most hosted and local
providers accept.
"""

import json
import logging
from typing import Any, Dict, Optional, Protocol, Sequence

import httpx

from ..core.config import LLMConfig
from .errors import CompletionError
from .schemas.domain import Message

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Produce one text completion for an ordered message sequence."""

    async def complete(self, messages: Sequence[Message]) -> str: ...


class ChatCompletionClient:
    """OpenAI-compatible chat completion client built on ``httpx``.

    Args:
        config: Endpoint, model, temperature, key and timeout.
        client: Optional shared ``httpx.AsyncClient``. When omitted a client is
            opened per request and closed afterwards.
    """

    def __init__(self, *, config: LLMConfig, client: Optional[httpx.AsyncClient] = None) -> None:
        self._config = config
        self._client = client

    @property
    def url(self) -> str:
        return f"{self._config.base_url.rstrip('/')}/chat/completions"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        return headers

    def _payload(self, messages: Sequence[Message]) -> Dict[str, Any]:
        return {
            "model": self._config.model,
            "messages": [m.to_payload() for m in messages],
            "temperature": self._config.temperature,
        }

    async def complete(self, messages: Sequence[Message]) -> str:
        payload = self._payload(messages)
        logger.debug(f"POST {self.url} model={self._config.model} messages={len(messages)}")
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload, headers=self._headers())
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                    response = await client.post(self.url, json=payload, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise CompletionError(f"LLM call error: HTTP {e.response.status_code} from {self.url}") from e
        except httpx.HTTPError as e:
            raise CompletionError(f"LLM call error: {e}") from e
        except ValueError as e:
            raise CompletionError("LLM call error: response is not valid JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionError(f"Unexpected LLM response: {json.dumps(data)[:500]}") from e
        if not isinstance(content, str):
            raise CompletionError(f"Unexpected LLM response: {json.dumps(data)[:500]}")
        return content.strip()
