"""MCP Common Types - Shared types used across the protocol."""

from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field, field_validator

from mcp_context.types.base import MCPModel


class Icon(MCPModel):
    """An optionally-sized icon that can be displayed in a user interface."""

    src: str
    mime_type: Annotated[str | None, Field(alias="mimeType")] = None
    sizes: list[str] | None = None
    theme: Literal["light", "dark"] | None = None


class Implementation(MCPModel):
    """Describes the name and version of an MCP implementation."""

    name: str
    version: str
    title: str | None = None
    description: str | None = None
    icons: list[Icon] | None = None
    website_url: Annotated[str | None, Field(alias="websiteUrl")] = None


class RootsCapability(MCPModel):
    """Capability for root operations."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    list_changed: Annotated[bool | None, Field(alias="listChanged")] = None


class PeerCapabilities(MCPModel):
    """Capabilities the connected peer declared during the initialize handshake.

    Instances are immutable snapshots; a capability change is represented by a
    new instance, never by mutating an existing one.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    experimental: dict[str, dict[str, Any]] | None = None
    roots: RootsCapability | None = None
    sampling: dict[str, Any] | None = None
    elicitation: dict[str, Any] | None = None

    @field_validator("roots", "sampling", "elicitation", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> Any:
        # Some peers declare these as plain booleans.
        if value is True:
            return {}
        if value is False:
            return None
        return value

    def advertised(self) -> list[str]:
        """Names of the top-level capabilities present in this snapshot."""
        names = [name for name in ("experimental", "roots", "sampling", "elicitation") if getattr(self, name) is not None]
        names.extend(sorted(self.model_extra or {}))
        return names


class ServerCapabilities(MCPModel):
    """Capabilities that a server may support."""

    experimental: dict[str, Any] | None = None
    logging: dict[str, Any] | None = None
    completions: dict[str, Any] | None = None
    prompts: dict[str, Any] | None = None
    resources: dict[str, Any] | None = None
    tools: dict[str, Any] | None = None
