"""Request-scoped contexts and peer notifications for MCP servers.

Handlers written against this package receive a Context only when they ask for it:

```python
from mcp_context import ContextServer, Context, ServerIdentity

server = ContextServer(ServerIdentity(name="demo", version="1.0.0"), connection=transport)

def add(args):
    return args["a"] + args["b"]

async def add_logged(args, context: Context):
    await context.info(f"adding for request {context.request_id}")
    return args["a"] + args["b"]

async with server.run():
    server.handle_initialize(initialize_params)
    await server.call(add, {"a": 1, "b": 2})
    await server.call(add_logged, {"a": 1, "b": 2}, {"progressToken": "t-1"})
```
"""

from .context import Context, RequestScope
from .dispatch import HandlerDispatcher, HandlerKind, ResolvedHandler, resolve_handler
from .exceptions import (
    CapabilityMissingError,
    CompletionRequestError,
    ElicitationRequestError,
    InvalidHandlerSignature,
    InvalidNotificationError,
    McpContextError,
    McpError,
    PeerRequestError,
)
from .factory import ContextFactory
from .identity import ServerCapabilityFlags, ServerIdentity
from .ids import RequestIdGenerator
from .lifespan import LifecycleManager, LifespanState
from .negotiation import CapabilityNegotiator
from .peer import PeerConnection
from .progress import ProgressContext, progress
from .runner import ContextServer
from .session import PeerSession
from .settings import Settings

__all__ = [
    "CapabilityMissingError",
    "CapabilityNegotiator",
    "CompletionRequestError",
    "ElicitationRequestError",
    "Context",
    "ContextFactory",
    "ContextServer",
    "HandlerDispatcher",
    "HandlerKind",
    "InvalidHandlerSignature",
    "InvalidNotificationError",
    "LifecycleManager",
    "LifespanState",
    "McpContextError",
    "McpError",
    "PeerConnection",
    "PeerRequestError",
    "PeerSession",
    "ProgressContext",
    "RequestIdGenerator",
    "RequestScope",
    "ResolvedHandler",
    "ServerCapabilityFlags",
    "ServerIdentity",
    "Settings",
    "progress",
    "resolve_handler",
]
