"""ContextFactory: the single authority for assembling request contexts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from mcp_context.context import Context, RequestScope
from mcp_context.identity import ServerIdentity
from mcp_context.ids import RequestIdGenerator
from mcp_context.lifespan import LifespanState
from mcp_context.peer import PeerConnection
from mcp_context.session import DEFAULT_MAX_TOKENS, PeerSession
from mcp_context.types.base import RequestMeta
from mcp_context.types.common import PeerCapabilities
from mcp_context.utilities.logging import get_logger

logger = get_logger(__name__)

RequestMetadata = RequestMeta | Mapping[str, Any] | None


class ContextFactory:
    """Holds server identity, the current peer session and the lifespan state.

    ``build_context`` only reads these references, so contexts can be built for any
    number of interleaved requests. Recording new peer capabilities swaps the session
    reference: contexts built earlier keep the session they captured.

    Usage:
        factory = ContextFactory(connection)
        factory.initialize(ServerIdentity(name="demo", version="1.0.0"), state)
        factory.record_peer_capabilities({"sampling": {}})
        context = factory.build_context({"progressToken": "abc"})
    """

    def __init__(
        self,
        connection: PeerConnection | None = None,
        *,
        id_generator: RequestIdGenerator | None = None,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._connection = connection
        self._id_generator = id_generator or RequestIdGenerator()
        self._default_max_tokens = default_max_tokens
        self._identity: ServerIdentity | None = None
        self._lifespan_state: LifespanState | None = None
        # Ungated default until the handshake reports what the peer supports.
        self._session = PeerSession(connection, None, default_max_tokens=default_max_tokens)

    @property
    def initialized(self) -> bool:
        return self._identity is not None

    @property
    def identity(self) -> ServerIdentity:
        if self._identity is None:
            raise RuntimeError("ContextFactory.initialize() has not been called")
        return self._identity

    @property
    def lifespan_state(self) -> LifespanState:
        if self._lifespan_state is None:
            raise RuntimeError("ContextFactory.initialize() has not been called")
        return self._lifespan_state

    @property
    def session(self) -> PeerSession:
        return self._session

    @property
    def id_generator(self) -> RequestIdGenerator:
        return self._id_generator

    def initialize(self, identity: ServerIdentity, lifespan_state: LifespanState | None = None) -> None:
        """Store the static identity and the shared lifespan state. Call exactly once."""
        if self._identity is not None:
            raise RuntimeError("ContextFactory is already initialized")
        self._identity = identity
        self._lifespan_state = lifespan_state if lifespan_state is not None else LifespanState()
        logger.debug("Context factory initialized for %s %s", identity.name, identity.version)

    def record_peer_capabilities(
        self,
        capabilities: PeerCapabilities | Mapping[str, Any],
        *,
        connection: PeerConnection | None = None,
    ) -> PeerSession:
        """Replace the current session with one gated on ``capabilities``.

        Recording a snapshot equal to the current one on the same connection keeps the
        existing session. Passing ``connection`` rebinds the session to a new peer
        connection, e.g. after a reconnect.
        """
        if not isinstance(capabilities, PeerCapabilities):
            capabilities = PeerCapabilities.model_validate(dict(capabilities))

        if connection is not None:
            self._connection = connection
        elif capabilities == self._session.peer_capabilities:
            return self._session

        self._session = PeerSession(self._connection, capabilities, default_max_tokens=self._default_max_tokens)
        logger.info("Peer capabilities recorded: %s", ", ".join(capabilities.advertised()) or "none")
        return self._session

    def build_context(self, request_metadata: RequestMetadata = None) -> Context:
        """Build a fresh Context for one request. Never suspends."""
        identity = self.identity
        scope = RequestScope(
            request_id=self._id_generator.generate(),
            meta=_coerce_meta(request_metadata),
            lifespan_state=self.lifespan_state,
        )
        return Context(identity=identity, session=self._session, scope=scope)


def _coerce_meta(request_metadata: RequestMetadata) -> RequestMeta | None:
    if request_metadata is None or isinstance(request_metadata, RequestMeta):
        return request_metadata
    if not isinstance(request_metadata, Mapping):
        logger.warning("Ignoring request metadata of type %s", type(request_metadata).__name__)
        return None
    try:
        return RequestMeta.model_validate(dict(request_metadata))
    except ValidationError as exc:
        logger.warning("Ignoring malformed progress token in request metadata: %s", exc)
        remaining = {k: v for k, v in request_metadata.items() if k not in ("progressToken", "progress_token")}
        return RequestMeta.model_validate(remaining)
