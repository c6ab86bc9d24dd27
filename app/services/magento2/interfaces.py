"""
Interfaces/Protocols for the Magento2 status sync services.

These protocols define the contracts the orchestrator depends on,
allowing for loose coupling and easy testing.
"""

from collections.abc import Mapping
from typing import Any, Protocol


class IOrderKeyResolver(Protocol):
    """Protocol for order key resolution."""

    def resolve(self, cached_input: Mapping[str, Any]) -> str:
        """Return the target order id."""
        ...


class IStatusPayloadBuilder(Protocol):
    """Protocol for status payload building."""

    def build_json(self, cover_response: Mapping[str, Any]) -> str:
        """Build the serialized status update."""
        ...


class IMagento2Client(Protocol):
    """Protocol for the Magento2 transport."""

    async def post(self, url: str, body: str, headers: dict[str, str]) -> Any:
        """POST a body and return the parsed answer."""
        ...
