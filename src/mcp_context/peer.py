"""The abstract peer connection consumed by PeerSession.

The transport (stdio, streamable HTTP, an in-memory pair in tests) implements this
protocol. It owns JSON-RPC framing, request id allocation, response correlation and
timeouts; this package only hands it methods and already-serialized params.
"""

from typing import Any, Protocol, runtime_checkable

from mcp_context.types.json_rpc import RequestId


@runtime_checkable
class PeerConnection(Protocol):
    async def send_notification(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        related_request_id: RequestId | None = None,
    ) -> None:
        """Send a one-way notification to the peer."""
        ...

    async def send_request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        related_request_id: RequestId | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the raw ``result`` object of the response.

        Implementations raise ``McpError`` when the peer answers with an error response.
        """
        ...
