"""Static server identity shared by every request context."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from mcp_context.types.common import Icon, Implementation, ServerCapabilities


@dataclass(frozen=True)
class ServerCapabilityFlags:
    """Capabilities the server itself declares in the initialize result."""

    sampling: bool = False  # handlers issue sampling requests to the peer
    logging: bool = True
    tools: bool = True
    prompts: bool = False
    resources: bool = False
    resource_subscriptions: bool = False
    list_changed: bool = False

    def to_server_capabilities(self) -> ServerCapabilities:
        list_changed = {"listChanged": True} if self.list_changed else {}
        caps = ServerCapabilities()
        if self.logging:
            caps.logging = {}
        if self.tools:
            caps.tools = dict(list_changed)
        if self.prompts:
            caps.prompts = dict(list_changed)
        if self.resources:
            caps.resources = dict(list_changed)
            if self.resource_subscriptions:
                caps.resources["subscribe"] = True
        return caps


@dataclass(frozen=True, eq=False)
class ServerIdentity:
    """Immutable server metadata, created once when the server is constructed.

    ``settings`` holds application-defined values exposed read-only to handlers.
    """

    name: str
    version: str
    title: str | None = None
    description: str | None = None
    instructions: str | None = None
    website_url: str | None = None
    icons: tuple[Icon, ...] = ()
    settings: Mapping[str, Any] = field(default_factory=dict)
    capabilities: ServerCapabilityFlags = field(default_factory=ServerCapabilityFlags)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ServerIdentity.name must not be empty")
        if not self.version:
            raise ValueError("ServerIdentity.version must not be empty")
        # Frozen dataclass: bypass __setattr__ to normalize the containers once.
        object.__setattr__(self, "icons", tuple(self.icons))
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

    def implementation(self) -> Implementation:
        """The ``serverInfo`` payload of the initialize result."""
        return Implementation(
            name=self.name,
            version=self.version,
            title=self.title,
            description=self.description,
            icons=list(self.icons) or None,
            website_url=self.website_url,
        )
