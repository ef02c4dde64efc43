"""
PeerSession Module

This module provides the PeerSession class, the capability object through which
handler code talks back to the connected peer. It is most commonly reached through
``context.session`` inside a handler:

```
    async def summarize(args: dict[str, Any], context: Context) -> str:
        await context.session.send_log_message("info", "Summarizing document")

        if context.session.supports_sampling:
            result = await context.session.request_completion(
                [SamplingMessage(role="user", content=TextContent(text=args["text"]))],
                CompletionOptions(max_tokens=200),
            )
            return result.content.text
        return args["text"][:200]
```

Sessions are also how handlers ask the peer for structured user input with
``elicit``; that request is gated on the ``elicitation`` capability.

Two failure policies apply:

- Notifications (log messages, progress, resource and list-changed notices) are
  fire-and-forget. They are never gated on a peer capability, and any failure,
  including invalid input, is logged and swallowed so that a side-channel message
  can never abort the handler that issued it.
- Requests (sampling, roots, elicitation) are fail-fast. A missing capability raises
  CapabilityMissingError before anything is sent; a failure in flight raises a
  PeerRequestError subclass wrapping the cause.

A PeerSession is immutable: it is built once per capability snapshot and is
replaced, never updated, when the peer's capabilities change.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError
from typing_extensions import TypeVar

from mcp_context.exceptions import (
    CapabilityMissingError,
    CompletionRequestError,
    ElicitationRequestError,
    InvalidNotificationError,
    PeerRequestError,
)
from mcp_context.peer import PeerConnection
from mcp_context.types.base import NotificationParams, ProgressToken, Result
from mcp_context.types.common import PeerCapabilities
from mcp_context.types.elicitation import ELICIT_METHOD, ElicitRequestParams, ElicitResult
from mcp_context.types.json_rpc import RequestId
from mcp_context.types.notifications import (
    LOG_MESSAGE_METHOD,
    LOGGING_LEVELS,
    PROGRESS_METHOD,
    PROMPT_LIST_CHANGED_METHOD,
    RESOURCE_LIST_CHANGED_METHOD,
    RESOURCE_UPDATED_METHOD,
    TOOL_LIST_CHANGED_METHOD,
    LoggingLevel,
    LoggingMessageNotificationParams,
    ProgressNotificationParams,
    ResourceUpdatedNotificationParams,
)
from mcp_context.types.sampling import (
    CREATE_MESSAGE_METHOD,
    LIST_ROOTS_METHOD,
    CompletionOptions,
    CreateMessageRequestParams,
    CreateMessageResult,
    ListRootsResult,
    SamplingMessage,
)
from mcp_context.utilities.logging import get_logger

logger = get_logger(__name__)

ResultT = TypeVar("ResultT", bound=Result)

DEFAULT_MAX_TOKENS = 1000


class PeerSession:
    def __init__(
        self,
        connection: PeerConnection | None,
        capabilities: PeerCapabilities | None = None,
        *,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._connection = connection
        self._capabilities = capabilities
        self._default_max_tokens = default_max_tokens

    def __repr__(self) -> str:
        advertised = "pending" if self._capabilities is None else self._capabilities.advertised()
        return f"PeerSession(connected={self._connection is not None}, capabilities={advertised})"

    @property
    def peer_capabilities(self) -> PeerCapabilities | None:
        """A copy of the capability snapshot captured at handshake, or None before it completes.

        The snapshot is shared by every context built from this session, so callers get
        their own copy of its nested dicts.
        """
        if self._capabilities is None:
            return None
        return self._capabilities.model_copy(deep=True)

    @property
    def connection(self) -> PeerConnection | None:
        return self._connection

    @property
    def supports_sampling(self) -> bool:
        return self._capabilities is not None and self._capabilities.sampling is not None

    @property
    def supports_roots(self) -> bool:
        return self._capabilities is not None and self._capabilities.roots is not None

    @property
    def supports_elicitation(self) -> bool:
        return self._capabilities is not None and self._capabilities.elicitation is not None

    def check_peer_capability(self, capability: PeerCapabilities) -> bool:
        """Check if the peer supports every capability set on ``capability``."""
        if self._capabilities is None:
            return False

        peer_caps = self._capabilities

        if capability.roots is not None:
            if peer_caps.roots is None:
                return False
            if capability.roots.list_changed and not peer_caps.roots.list_changed:
                return False

        if capability.sampling is not None and peer_caps.sampling is None:
            return False

        if capability.elicitation is not None and peer_caps.elicitation is None:
            return False

        if capability.experimental is not None:
            if peer_caps.experimental is None:
                return False
            for exp_key, exp_value in capability.experimental.items():
                if exp_key not in peer_caps.experimental or peer_caps.experimental[exp_key] != exp_value:
                    return False

        return True

    # Notifications

    async def send_log_message(
        self,
        level: LoggingLevel,
        data: str,
        logger_name: str | None = None,
        *,
        related_request_id: RequestId | None = None,
    ) -> None:
        """Send a log message notification."""
        try:
            if level not in LOGGING_LEVELS:
                raise InvalidNotificationError(f"Unknown log level {level!r}; expected one of {', '.join(LOGGING_LEVELS)}")
            params = LoggingMessageNotificationParams(level=level, data=data, logger=logger_name)
        except (InvalidNotificationError, ValidationError) as exc:
            self._drop_invalid(LOG_MESSAGE_METHOD, exc)
            return
        await self._notify(LOG_MESSAGE_METHOD, params, related_request_id)

    async def send_progress(
        self,
        progress_token: ProgressToken,
        current: float,
        total: float | None = None,
        message: str | None = None,
        *,
        related_request_id: RequestId | None = None,
    ) -> None:
        """Send a progress notification.

        ``current`` must be non-negative and, when ``total`` is given, no greater than
        ``total``. Invalid values are logged and nothing is sent.
        """
        try:
            _validate_progress(current, total)
            params = ProgressNotificationParams(
                progress_token=progress_token,
                progress=current,
                total=total,
                message=message,
            )
        except (InvalidNotificationError, ValidationError) as exc:
            self._drop_invalid(PROGRESS_METHOD, exc)
            return
        await self._notify(PROGRESS_METHOD, params, related_request_id)

    async def send_resource_updated(self, uri: str, *, related_request_id: RequestId | None = None) -> None:
        """Send a resource updated notification."""
        try:
            params = ResourceUpdatedNotificationParams(uri=str(uri))
        except ValidationError as exc:
            self._drop_invalid(RESOURCE_UPDATED_METHOD, exc)
            return
        await self._notify(RESOURCE_UPDATED_METHOD, params, related_request_id)

    async def send_resource_list_changed(self) -> None:
        """Send a resource list changed notification."""
        await self._notify(RESOURCE_LIST_CHANGED_METHOD, None)

    async def send_tool_list_changed(self) -> None:
        """Send a tool list changed notification."""
        await self._notify(TOOL_LIST_CHANGED_METHOD, None)

    async def send_prompt_list_changed(self) -> None:
        """Send a prompt list changed notification."""
        await self._notify(PROMPT_LIST_CHANGED_METHOD, None)

    # Requests

    async def request_completion(
        self,
        messages: Sequence[SamplingMessage | Mapping[str, Any]],
        options: CompletionOptions | Mapping[str, Any] | None = None,
        *,
        related_request_id: RequestId | None = None,
    ) -> CreateMessageResult:
        """Ask the peer to run an LLM completion (sampling/createMessage).

        Raises:
            CapabilityMissingError: the peer did not advertise ``sampling``; nothing was sent.
            CompletionRequestError: the request failed in flight or the response was malformed.
            pydantic.ValidationError: ``messages`` or ``options`` are malformed; nothing was sent.
        """
        if not self.supports_sampling:
            raise CapabilityMissingError("sampling", self.peer_capabilities, operation=CREATE_MESSAGE_METHOD)

        if not isinstance(options, CompletionOptions):
            options = CompletionOptions.model_validate(options or {})

        params = CreateMessageRequestParams(
            messages=[SamplingMessage.model_validate(message) for message in messages],
            max_tokens=options.max_tokens or self._default_max_tokens,
            temperature=options.temperature,
            top_p=options.top_p,
            stop_sequences=options.stop_sequences,
            system_prompt=options.system_prompt,
            include_context=options.include_context,
            model_preferences=options.model_preferences,
            metadata=options.metadata,
        )
        return await self._request(
            CREATE_MESSAGE_METHOD,
            params,
            CreateMessageResult,
            error_type=CompletionRequestError,
            related_request_id=related_request_id,
        )

    async def list_roots(self, *, related_request_id: RequestId | None = None) -> ListRootsResult:
        """Send a roots/list request.

        Raises:
            CapabilityMissingError: the peer did not advertise ``roots``; nothing was sent.
            PeerRequestError: the request failed in flight or the response was malformed.
        """
        if not self.supports_roots:
            raise CapabilityMissingError("roots", self.peer_capabilities, operation=LIST_ROOTS_METHOD)
        return await self._request(LIST_ROOTS_METHOD, None, ListRootsResult, related_request_id=related_request_id)

    async def elicit(
        self,
        message: str,
        requested_schema: Mapping[str, Any],
        *,
        related_request_id: RequestId | None = None,
    ) -> ElicitResult:
        """Send an elicitation/create request.

        Args:
            message: The message to present to the user
            requested_schema: Schema defining the expected response structure

        Returns:
            The peer's response

        Raises:
            CapabilityMissingError: the peer did not advertise ``elicitation``; nothing was sent.
            ElicitationRequestError: the request failed in flight or the response was malformed.
        """
        if not self.supports_elicitation:
            raise CapabilityMissingError("elicitation", self.peer_capabilities, operation=ELICIT_METHOD)

        params = ElicitRequestParams(message=message, requested_schema=dict(requested_schema))
        return await self._request(
            ELICIT_METHOD,
            params,
            ElicitResult,
            error_type=ElicitationRequestError,
            related_request_id=related_request_id,
        )

    # Internals

    async def _notify(
        self,
        method: str,
        params: NotificationParams | None,
        related_request_id: RequestId | None = None,
    ) -> None:
        if self._connection is None:
            logger.debug("No peer connection bound, dropping %s", method)
            return
        try:
            payload = params.model_dump(by_alias=True, mode="json", exclude_none=True) if params else None
            await self._connection.send_notification(method, payload, related_request_id=related_request_id)
        except Exception:
            logger.warning("Failed to send %s to peer, notification dropped", method, exc_info=True)

    async def _request(
        self,
        method: str,
        params: BaseModel | None,
        result_type: type[ResultT],
        *,
        error_type: type[PeerRequestError] = PeerRequestError,
        related_request_id: RequestId | None = None,
    ) -> ResultT:
        if self._connection is None:
            raise error_type(method, ConnectionError("no peer connection is bound to this session"))
        try:
            payload = params.model_dump(by_alias=True, mode="json", exclude_none=True) if params else None
            raw = await self._connection.send_request(method, payload, related_request_id=related_request_id)
            return result_type.model_validate(raw)
        except Exception as exc:
            logger.debug("Request %s to peer failed", method, exc_info=True)
            raise error_type(method, exc) from exc

    @staticmethod
    def _drop_invalid(method: str, exc: Exception) -> None:
        logger.warning("Invalid %s notification dropped: %s", method, exc)


def _validate_progress(current: float, total: float | None) -> None:
    if isinstance(current, bool) or not isinstance(current, int | float) or math.isnan(current) or current < 0:
        raise InvalidNotificationError(f"Progress must be a non-negative number, got {current!r}")
    if total is not None:
        if isinstance(total, bool) or not isinstance(total, int | float) or math.isnan(total):
            raise InvalidNotificationError(f"Progress total must be a number, got {total!r}")
        if total < current:
            raise InvalidNotificationError(f"Progress {current} exceeds total {total}")
