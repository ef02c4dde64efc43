"""Errors raised by the request-context layer."""

from __future__ import annotations

from mcp_context.types.common import PeerCapabilities
from mcp_context.types.json_rpc import ErrorData


class McpContextError(Exception):
    """Base error for the request-context layer."""


class McpError(McpContextError):
    """Exception raised when the peer answers a request with a protocol error.

    Attributes:
        error: The ErrorData object received from the peer containing
               error code, message, and optional additional data
    """

    error: ErrorData

    def __init__(self, error: ErrorData):
        super().__init__(error.message)
        self.error = error


class CapabilityMissingError(McpContextError):
    """A session operation needs a capability the peer never advertised.

    Raised before anything is sent to the peer.
    """

    def __init__(self, capability: str, advertised: PeerCapabilities | None, operation: str | None = None):
        self.capability = capability
        self.advertised = advertised
        self.operation = operation

        if advertised is None:
            seen = "nothing yet: the initialize handshake has not completed"
        else:
            names = advertised.advertised()
            seen = ", ".join(names) if names else "no capabilities"
        action = f" for {operation}" if operation else ""
        super().__init__(
            f"Peer capability '{capability}' is required{action}, but the peer advertised {seen}. "
            f"Check the capability with PeerSession.check_peer_capability() before calling."
        )


class PeerRequestError(McpContextError):
    """A request sent to the peer failed in flight.

    Covers transport failures, peer-side errors and malformed responses. The underlying
    exception is available as ``cause`` and as ``__cause__``.
    """

    def __init__(self, method: str, cause: BaseException):
        self.method = method
        self.cause = cause
        super().__init__(f"Request '{method}' to peer failed: {cause}")


class CompletionRequestError(PeerRequestError):
    """A sampling/createMessage request failed after the capability check passed."""


class ElicitationRequestError(PeerRequestError):
    """An elicitation/create request failed after the capability check passed."""


class InvalidNotificationError(McpContextError, ValueError):
    """A notification was requested with invalid input; never sent."""


class InvalidHandlerSignature(McpContextError, TypeError):
    """A handler's signature cannot receive the request context."""
