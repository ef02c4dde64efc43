"""Sampling (sampling/createMessage) and roots (roots/list) payloads."""

from typing import Annotated, Any, Final, Literal

from pydantic import Field

from mcp_context.types.base import MCPModel, RequestParams, Result

CREATE_MESSAGE_METHOD: Final = "sampling/createMessage"
LIST_ROOTS_METHOD: Final = "roots/list"

Role = Literal["user", "assistant"]
IncludeContext = Literal["none", "thisServer", "allServers"]


class TextContent(MCPModel):
    """Text provided to or from an LLM."""

    type: Literal["text"] = "text"
    text: str


class ImageContent(MCPModel):
    """An image provided to or from an LLM."""

    type: Literal["image"] = "image"
    data: str  # base64 encoded
    mime_type: Annotated[str, Field(alias="mimeType")]


class AudioContent(MCPModel):
    """Audio provided to or from an LLM."""

    type: Literal["audio"] = "audio"
    data: str  # base64 encoded
    mime_type: Annotated[str, Field(alias="mimeType")]


SamplingContent = Annotated[TextContent | ImageContent | AudioContent, Field(discriminator="type")]


class SamplingMessage(MCPModel):
    """Describes a message issued to or received from an LLM API."""

    role: Role
    content: SamplingContent


class ModelHint(MCPModel):
    """Hints to use for model selection."""

    name: str | None = None


class ModelPreferences(MCPModel):
    """The server's preferences for model selection, requested during sampling."""

    hints: list[ModelHint] | None = None
    cost_priority: Annotated[float | None, Field(alias="costPriority", ge=0.0, le=1.0)] = None
    speed_priority: Annotated[float | None, Field(alias="speedPriority", ge=0.0, le=1.0)] = None
    intelligence_priority: Annotated[float | None, Field(alias="intelligencePriority", ge=0.0, le=1.0)] = None


class CompletionOptions(MCPModel):
    """Optional sampling parameters accepted by ``PeerSession.request_completion``."""

    max_tokens: Annotated[int | None, Field(alias="maxTokens", gt=0)] = None
    temperature: float | None = None
    top_p: Annotated[float | None, Field(alias="topP")] = None
    stop_sequences: Annotated[list[str] | None, Field(alias="stopSequences")] = None
    system_prompt: Annotated[str | None, Field(alias="systemPrompt")] = None
    include_context: Annotated[IncludeContext | None, Field(alias="includeContext")] = None
    model_preferences: Annotated[ModelPreferences | None, Field(alias="modelPreferences")] = None
    metadata: dict[str, Any] | None = None


class CreateMessageRequestParams(RequestParams):
    """Parameters for a sampling/createMessage request."""

    messages: list[SamplingMessage]
    max_tokens: Annotated[int, Field(alias="maxTokens")]
    temperature: float | None = None
    top_p: Annotated[float | None, Field(alias="topP")] = None
    stop_sequences: Annotated[list[str] | None, Field(alias="stopSequences")] = None
    system_prompt: Annotated[str | None, Field(alias="systemPrompt")] = None
    include_context: Annotated[IncludeContext | None, Field(alias="includeContext")] = None
    model_preferences: Annotated[ModelPreferences | None, Field(alias="modelPreferences")] = None
    metadata: dict[str, Any] | None = None


class CreateMessageResult(Result):
    """The peer's response to a sampling/createMessage request."""

    role: Role
    content: SamplingContent
    model: str
    stop_reason: Annotated[str | None, Field(alias="stopReason")] = None


class Root(MCPModel):
    """A root directory or file the peer exposes to the server."""

    uri: str
    name: str | None = None


class ListRootsResult(Result):
    """The peer's response to a roots/list request."""

    roots: list[Root]
