"""Elicitation (elicitation/create) payloads."""

from typing import Annotated, Any, Final, Literal

from pydantic import Field

from mcp_context.types.base import RequestParams, Result

ELICIT_METHOD: Final = "elicitation/create"

# A restricted JSON Schema: an object whose properties are primitive types.
ElicitRequestedSchema = dict[str, Any]


class ElicitRequestParams(RequestParams):
    """Parameters for an elicitation/create request."""

    message: str
    requested_schema: Annotated[ElicitRequestedSchema, Field(alias="requestedSchema")]


class ElicitResult(Result):
    """The peer's response to an elicitation/create request.

    ``content`` is only present when ``action`` is ``"accept"``.
    """

    action: Literal["accept", "decline", "cancel"]
    content: dict[str, str | int | float | bool | list[str] | None] | None = None
