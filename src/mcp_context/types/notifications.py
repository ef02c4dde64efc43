"""Payloads of the notifications a server pushes to its peer."""

from typing import Annotated, Final, Literal, get_args

from pydantic import Field

from mcp_context.types.base import NotificationParams, ProgressToken

LoggingLevel = Literal["debug", "info", "notice", "warning", "error", "critical", "alert", "emergency"]

LOGGING_LEVELS: Final[tuple[str, ...]] = get_args(LoggingLevel)

PROGRESS_METHOD: Final = "notifications/progress"
LOG_MESSAGE_METHOD: Final = "notifications/message"
RESOURCE_UPDATED_METHOD: Final = "notifications/resources/updated"
RESOURCE_LIST_CHANGED_METHOD: Final = "notifications/resources/list_changed"
TOOL_LIST_CHANGED_METHOD: Final = "notifications/tools/list_changed"
PROMPT_LIST_CHANGED_METHOD: Final = "notifications/prompts/list_changed"


class ProgressNotificationParams(NotificationParams):
    """Parameters for a notifications/progress notification."""

    progress_token: Annotated[ProgressToken, Field(alias="progressToken")]
    progress: float
    total: float | None = None
    message: str | None = None


class LoggingMessageNotificationParams(NotificationParams):
    """Parameters for a notifications/message notification."""

    level: LoggingLevel
    data: str
    logger: str | None = None


class ResourceUpdatedNotificationParams(NotificationParams):
    """Parameters for a notifications/resources/updated notification."""

    uri: str
