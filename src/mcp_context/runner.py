"""ContextServer - wires the request-context components together.

The server owns one ContextFactory, CapabilityNegotiator, HandlerDispatcher and
LifecycleManager for a single peer connection. Transports feed it parsed payloads:

```
    server = ContextServer(
        ServerIdentity(name="demo", version="1.0.0"),
        connection=transport,
        on_startup=open_resources,
        on_shutdown=close_resources,
    )
    async with server.run():
        result = server.handle_initialize(initialize_params)
        ...
        value = await server.call(handler, arguments, request_meta)
```
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from typing import Any

import anyio

from mcp_context.dispatch import HandlerDispatcher, ResolvedHandler
from mcp_context.factory import ContextFactory, RequestMetadata
from mcp_context.identity import ServerIdentity
from mcp_context.lifespan import LifecycleManager, LifespanHook, LifespanState
from mcp_context.negotiation import CapabilityNegotiator
from mcp_context.peer import PeerConnection
from mcp_context.settings import Settings
from mcp_context.types.initialize import InitializeRequestParams, InitializeResult
from mcp_context.utilities.logging import configure_logging, get_logger

logger = get_logger(__name__)


class ContextServer:
    def __init__(
        self,
        identity: ServerIdentity,
        *,
        connection: PeerConnection | None = None,
        on_startup: LifespanHook | None = None,
        on_shutdown: LifespanHook | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.identity = identity
        self.settings = settings or Settings()
        self._on_startup = on_startup
        self._on_shutdown = on_shutdown
        self.factory = ContextFactory(connection, default_max_tokens=self.settings.default_max_tokens)
        self.negotiator = CapabilityNegotiator(self.factory, latest_protocol_version=self.settings.protocol_version)
        self.dispatcher = HandlerDispatcher()
        self.lifecycle = LifecycleManager()
        self._running = False
        self._in_flight = 0
        self._idle: anyio.Event | None = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> int:
        """Number of calls currently executing."""
        return self._in_flight

    @asynccontextmanager
    async def run(self) -> AsyncIterator[LifespanState]:
        """Enter the server lifespan and yield the shared lifespan state.

        A server runs once. On exit, new calls are refused and the lifespan is only
        released after every call still executing has completed.
        """
        if self._running:
            raise RuntimeError("ContextServer is already running")
        if self.factory.initialized:
            raise RuntimeError("ContextServer.run() can only be entered once")
        if self.settings.configure_logging_on_start:
            configure_logging("DEBUG" if self.settings.debug else self.settings.log_level)

        async with self.lifecycle.run(self._on_startup, self._on_shutdown) as state:
            self.factory.initialize(self.identity, state)
            self._running = True
            logger.info("%s %s started", self.identity.name, self.identity.version)
            try:
                yield state
            finally:
                self._running = False
                logger.info("%s %s stopping", self.identity.name, self.identity.version)
                with anyio.CancelScope(shield=True):
                    await self._wait_idle()

    def handle_initialize(self, params: InitializeRequestParams | Mapping[str, Any]) -> InitializeResult:
        return self.negotiator.handle_initialize(params)

    def register(self, handler: Callable[..., Any]) -> ResolvedHandler:
        """Classify ``handler`` up front so the first call pays no inspection cost."""
        return self.dispatcher.resolve(handler)

    async def call(
        self,
        handler: Callable[..., Any] | ResolvedHandler,
        args: Any,
        request_metadata: RequestMetadata = None,
    ) -> Any:
        if not self._running:
            raise RuntimeError("ContextServer.run() must be entered before handling requests")
        self._in_flight += 1
        try:
            return await self.dispatcher.invoke(handler, args, self.factory, request_metadata)
        finally:
            self._in_flight -= 1
            if self._in_flight == 0 and self._idle is not None:
                self._idle.set()

    async def _wait_idle(self) -> None:
        if self._in_flight == 0:
            return
        logger.debug("Waiting for %d in-flight calls before releasing the lifespan", self._in_flight)
        self._idle = anyio.Event()
        await self._idle.wait()
        self._idle = None
