"""Capture of the peer's capabilities during the initialize handshake."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mcp_context.factory import ContextFactory
from mcp_context.types.base import LATEST_PROTOCOL_VERSION, SUPPORTED_PROTOCOL_VERSIONS
from mcp_context.types.common import Implementation, PeerCapabilities
from mcp_context.types.initialize import InitializeRequestParams, InitializeResult
from mcp_context.utilities.logging import get_logger

logger = get_logger(__name__)


class CapabilityNegotiator:
    """Answers the initialize request and feeds the peer's capabilities to a ContextFactory.

    The capabilities are recorded once per connection. A second initialize on the same
    connection is answered but does not change the recorded snapshot; call ``reset()``
    when the transport reconnects.
    """

    def __init__(
        self,
        factory: ContextFactory,
        *,
        latest_protocol_version: str = LATEST_PROTOCOL_VERSION,
        supported_protocol_versions: tuple[str, ...] = SUPPORTED_PROTOCOL_VERSIONS,
    ) -> None:
        self._factory = factory
        self._latest_protocol_version = latest_protocol_version
        self._supported_protocol_versions = supported_protocol_versions
        self._peer_info: Implementation | None = None
        self._protocol_version: str | None = None

    @property
    def negotiated(self) -> bool:
        return self._protocol_version is not None

    @property
    def peer_info(self) -> Implementation | None:
        return self._peer_info

    @property
    def protocol_version(self) -> str | None:
        return self._protocol_version

    @property
    def peer_capabilities(self) -> PeerCapabilities | None:
        return self._factory.session.peer_capabilities

    def negotiate_version(self, requested_version: str) -> str:
        if requested_version in self._supported_protocol_versions:
            return requested_version
        return self._latest_protocol_version

    def handle_initialize(self, params: InitializeRequestParams | Mapping[str, Any]) -> InitializeResult:
        """Record the peer's declared capabilities and build the initialize result."""
        if not isinstance(params, InitializeRequestParams):
            params = InitializeRequestParams.model_validate(dict(params))

        identity = self._factory.identity
        protocol_version = self.negotiate_version(params.protocol_version)
        if self.negotiated:
            logger.warning(
                "Repeated initialize from %s; keeping the capabilities recorded at the first handshake",
                params.client_info.name,
            )
        else:
            self._factory.record_peer_capabilities(params.capabilities)
            self._peer_info = params.client_info
            self._protocol_version = protocol_version
            logger.info(
                "Initialized session with %s %s (protocol %s)",
                params.client_info.name,
                params.client_info.version,
                protocol_version,
            )

        return InitializeResult(
            protocol_version=protocol_version,
            capabilities=identity.capabilities.to_server_capabilities(),
            server_info=identity.implementation(),
            instructions=identity.instructions,
        )

    def reset(self) -> None:
        """Forget the handshake so the next initialize records capabilities again."""
        self._peer_info = None
        self._protocol_version = None
