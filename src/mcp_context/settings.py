"""Environment-driven settings for the request-context layer."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcp_context.types.base import LATEST_PROTOCOL_VERSION


class Settings(BaseSettings):
    """Request-context settings.

    All settings can be configured via environment variables with the prefix MCP_CONTEXT_.
    For example, MCP_CONTEXT_DEFAULT_MAX_TOKENS=512 lowers the sampling default.
    """

    model_config = SettingsConfigDict(
        env_prefix="MCP_CONTEXT_",
        env_file=".env",
        extra="ignore",
    )

    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    configure_logging_on_start: bool = False

    # Sampling
    default_max_tokens: int = Field(default=1000, gt=0)

    # Handshake
    protocol_version: str = LATEST_PROTOCOL_VERSION
