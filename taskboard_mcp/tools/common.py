"""Shared plumbing between MCP tools and the taskboard engine."""

import json
import logging
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import Context
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import BaseModel

from taskboard_mcp.core.results import OperationResult
from taskboard_mcp.core.taskboard import Taskboard
from taskboard_mcp.enums import ResponseFormat

logger = logging.getLogger(__name__)


def _board(ctx: Context) -> Taskboard:
    """The Taskboard opened by the server lifespan."""
    return ctx.request_context.lifespan_context


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_dump(item) for item in data]
    return data


def _respond(
    result: OperationResult,
    render: Callable[[Any], str] | None = None,
    response_format: ResponseFormat = ResponseFormat.MARKDOWN,
) -> str:
    """
    Turn an operation result into tool output.

    Failures (invalid or corrupt) are raised as ToolError so the client sees
    an error result. Everything else, including not-found and no-op outcomes,
    is returned as text.
    """
    if result.is_error:
        logger.info("Tool call failed (%s): %s", result.outcome.value, result.message)
        raise ToolError(result.message)

    if response_format == ResponseFormat.JSON:
        payload: dict[str, Any] = {"outcome": result.outcome.value, "message": result.message}
        if result.data is not None:
            payload["data"] = _dump(result.data)
        return json.dumps(payload, indent=2)

    if render is None or result.data is None or result.data == []:
        return result.message
    return render(result.data)
