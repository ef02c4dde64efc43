from dataclasses import dataclass
from typing import Any

import pytest

from mcp_context import ContextFactory, ServerIdentity
from mcp_context.types import RequestId


@pytest.fixture
def anyio_backend():
    return "asyncio"


@dataclass
class SentMessage:
    method: str
    params: dict[str, Any] | None
    related_request_id: RequestId | None


class StubPeerConnection:
    """In-memory PeerConnection that records traffic and can be told to fail."""

    def __init__(self) -> None:
        self.notifications: list[SentMessage] = []
        self.requests: list[SentMessage] = []
        self.response: dict[str, Any] = {}
        self.request_error: BaseException | None = None
        self.notification_error: BaseException | None = None

    async def send_notification(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        related_request_id: RequestId | None = None,
    ) -> None:
        if self.notification_error is not None:
            raise self.notification_error
        self.notifications.append(SentMessage(method, params, related_request_id))

    async def send_request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        related_request_id: RequestId | None = None,
    ) -> dict[str, Any]:
        self.requests.append(SentMessage(method, params, related_request_id))
        if self.request_error is not None:
            raise self.request_error
        return self.response


@pytest.fixture
def peer() -> StubPeerConnection:
    return StubPeerConnection()


@pytest.fixture
def identity() -> ServerIdentity:
    return ServerIdentity(name="demo", version="1.0.0")


@pytest.fixture
def factory(peer: StubPeerConnection, identity: ServerIdentity) -> ContextFactory:
    factory = ContextFactory(peer)
    factory.initialize(identity)
    return factory
