"""Request-scoped context handed to handlers that ask for it."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from mcp_context.identity import ServerIdentity
from mcp_context.lifespan import LifespanState
from mcp_context.session import PeerSession
from mcp_context.types.elicitation import ElicitResult
from mcp_context.types.base import ProgressToken, RequestMeta
from mcp_context.types.notifications import LoggingLevel
from mcp_context.types.sampling import CompletionOptions, CreateMessageResult, SamplingMessage


@dataclass(frozen=True)
class RequestScope:
    """Per-request identifier and metadata.

    ``lifespan_state`` is a reference to the process-wide state, not a copy.
    """

    request_id: str
    meta: RequestMeta | None
    lifespan_state: LifespanState

    @property
    def progress_token(self) -> ProgressToken | None:
        return self.meta.progress_token if self.meta else None


@dataclass(frozen=True, eq=False)
class Context:
    """Everything a handler can see about the request it is serving.

    Context is built fresh for each request by ``ContextFactory.build_context`` and is
    injected as the second argument of handlers that declare one:

    ```python
    async def echo(args: dict[str, Any]) -> str:
        # No context needed
        return args["text"]

    async def slow_echo(args: dict[str, Any], context: Context) -> str:
        await context.info(f"Echoing on {context.identity.name}")
        await context.report_progress(1, 1)
        return args["text"]
    ```

    The convenience methods below forward to ``session`` and tag every message with
    this request's id. Notification helpers never raise; ``request_completion`` does.

    Note:
        Contexts are request-scoped. Don't keep references to them past the end of
        the handler: the session they hold reflects the peer capabilities known when
        the request started.
    """

    identity: ServerIdentity
    session: PeerSession
    scope: RequestScope

    @property
    def request_id(self) -> str:
        return self.scope.request_id

    @property
    def progress_token(self) -> ProgressToken | None:
        return self.scope.progress_token

    @property
    def lifespan_state(self) -> LifespanState:
        return self.scope.lifespan_state

    async def log(self, level: LoggingLevel, message: str, *, logger_name: str | None = None) -> None:
        """Send a log message to the peer.

        Args:
            level: Log level (debug, info, notice, warning, error, critical, alert, emergency)
            message: Log message
            logger_name: Optional logger name, defaults to the server name
        """
        await self.session.send_log_message(
            level,
            message,
            logger_name or self.identity.name,
            related_request_id=self.request_id,
        )

    async def debug(self, message: str, **extra: Any) -> None:
        await self.log("debug", message, **extra)

    async def info(self, message: str, **extra: Any) -> None:
        await self.log("info", message, **extra)

    async def notice(self, message: str, **extra: Any) -> None:
        await self.log("notice", message, **extra)

    async def warning(self, message: str, **extra: Any) -> None:
        await self.log("warning", message, **extra)

    async def error(self, message: str, **extra: Any) -> None:
        await self.log("error", message, **extra)

    async def report_progress(self, progress: float, total: float | None = None, message: str | None = None) -> None:
        """Report progress for the current operation.

        Does nothing when the caller did not supply a progress token with the request.

        Args:
            progress: Current progress value e.g. 24
            total: Optional total value e.g. 100
            message: Optional message e.g. Starting render...
        """
        if self.progress_token is None:
            return
        await self.session.send_progress(
            self.progress_token,
            progress,
            total,
            message,
            related_request_id=self.request_id,
        )

    async def request_completion(
        self,
        messages: Sequence[SamplingMessage | Mapping[str, Any]],
        options: CompletionOptions | Mapping[str, Any] | None = None,
    ) -> CreateMessageResult:
        """Ask the peer for an LLM completion on behalf of this request."""
        return await self.session.request_completion(messages, options, related_request_id=self.request_id)

    async def elicit(self, message: str, requested_schema: Mapping[str, Any]) -> ElicitResult:
        """Ask the peer's user for structured input on behalf of this request.

        Args:
            message: Message to present to the user
            requested_schema: JSON Schema of an object with primitive-typed properties
        """
        return await self.session.elicit(message, requested_schema, related_request_id=self.request_id)
