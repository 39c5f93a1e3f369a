from __future__ import annotations

"""Capability registry.

The registry maps a capability name to an executable capability
implementation.

The ReAct engine uses this registry twice per run: once to describe the
available tools in the system prompt, and once per parsed ``Action:`` to
dispatch the request.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..errors import ToolExecutionError, ToolNotFoundError
from .base import Capability

logger = logging.getLogger(__name__)

NO_TOOLS_DESCRIPTION = "You have no tools available."


class CapabilityRegistry:
    """
    In-memory mapping of capability names to implementations.

    The capability set is owned by the registry instance and injected at
    construction time; there is no module-level table.

    Notes:
        - ``register`` overwrites any existing mapping for the capability name.
        - ``get`` will raise ``KeyError`` if the capability is missing.
        - ``dispatch`` never raises; failures come back as observation text.
        - The registry is expected to stay read-only while a run executes.
    """

    def __init__(self, capabilities: Optional[Iterable[Capability]] = None) -> None:
        """
        Initialize the registry.

        Args:
            capabilities: Optional initial capabilities, registered in order.
        """
        self._caps: Dict[str, Capability] = {}
        for cap in capabilities or ():
            self.register(cap)

    def register(self, cap: Capability) -> None:
        """
        Register a capability implementation.

        Args:
            cap: The capability instance to register. It must expose a ``name`` attribute.
        """
        if cap.name in self._caps:
            logger.debug(f"Replacing capability registered as '{cap.name}'")
        self._caps[cap.name] = cap

    def get(self, name: str) -> Capability:
        """
        Retrieve a registered capability by name.

        Raises:
            KeyError: If no capability is registered with the given name.
        """
        return self._caps[name]

    def has(self, name: str) -> bool:
        """Check if a capability is registered."""
        return name in self._caps

    def names(self) -> List[str]:
        """Registered capability names in registration order."""
        return list(self._caps)

    def __len__(self) -> int:
        return len(self._caps)

    def __contains__(self, name: object) -> bool:
        return name in self._caps

    def describe(self) -> str:
        """
        Render the human-readable tool catalogue embedded in the system prompt.

        Returns:
            One block per capability with its name, description and pretty-printed
            parameter schema, or a short notice when nothing is registered.
        """
        if not self._caps:
            return NO_TOOLS_DESCRIPTION

        blocks = ["You have access to the following tools:"]
        for name, cap in self._caps.items():
            schema = json.dumps(cap.parameter_schema, indent=2, ensure_ascii=False)
            blocks.append(f"Tool: {name}\nDescription: {cap.description}\nParameters: {schema}")
        return "\n\n".join(blocks)

    async def dispatch(self, name: str, params: Mapping[str, Any]) -> str:
        """
        Invoke a capability by name and return its observation text.

        Args:
            name: The capability name parsed from the model output.
            params: The parsed parameters.

        Returns:
            The capability output, or an error observation when the capability is
            unknown or raises while executing.
        """
        if name not in self._caps:
            err = ToolNotFoundError(name, self._caps)
            logger.info(f"Dispatch of unknown tool '{name}'")
            return str(err)

        try:
            result = await self._caps[name].execute(dict(params))
        except Exception as e:
            logger.warning(f"Tool '{name}' raised {type(e).__name__}: {e}")
            return str(ToolExecutionError(name, str(e)))

        return result if isinstance(result, str) else str(result)
