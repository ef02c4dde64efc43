from mcp_context.types.base import (
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    MCPModel,
    ProgressToken,
    RequestMeta,
)
from mcp_context.types.common import (
    Icon,
    Implementation,
    PeerCapabilities,
    RootsCapability,
    ServerCapabilities,
)
from mcp_context.types.elicitation import ElicitRequestParams, ElicitResult
from mcp_context.types.initialize import InitializeRequestParams, InitializeResult
from mcp_context.types.json_rpc import ErrorData, RequestId
from mcp_context.types.notifications import (
    LOGGING_LEVELS,
    LoggingLevel,
    LoggingMessageNotificationParams,
    ProgressNotificationParams,
    ResourceUpdatedNotificationParams,
)
from mcp_context.types.sampling import (
    AudioContent,
    CompletionOptions,
    CreateMessageRequestParams,
    CreateMessageResult,
    ImageContent,
    ListRootsResult,
    ModelHint,
    ModelPreferences,
    Root,
    SamplingMessage,
    TextContent,
)

__all__ = [
    "LATEST_PROTOCOL_VERSION",
    "LOGGING_LEVELS",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "AudioContent",
    "CompletionOptions",
    "CreateMessageRequestParams",
    "CreateMessageResult",
    "ElicitRequestParams",
    "ElicitResult",
    "ErrorData",
    "Icon",
    "ImageContent",
    "Implementation",
    "InitializeRequestParams",
    "InitializeResult",
    "ListRootsResult",
    "LoggingLevel",
    "LoggingMessageNotificationParams",
    "MCPModel",
    "ModelHint",
    "ModelPreferences",
    "PeerCapabilities",
    "ProgressNotificationParams",
    "ProgressToken",
    "RequestId",
    "RequestMeta",
    "ResourceUpdatedNotificationParams",
    "Root",
    "RootsCapability",
    "SamplingMessage",
    "ServerCapabilities",
    "TextContent",
]
