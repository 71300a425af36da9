"""Utility functions for Taskboard MCP."""

from taskboard_mcp.utils.db import TaskboardDB
from taskboard_mcp.utils.formatters import (
    _format_board,
    _format_initiative_detail,
    _format_initiatives,
    _format_task_detail,
    _format_tasks,
)
from taskboard_mcp.utils.parsers import CorruptFieldError, _parse_criteria, _row_to_task
from taskboard_mcp.utils.query import _build_set_clause, _build_where_clause

__all__ = [
    "TaskboardDB",
    "CorruptFieldError",
    "_build_where_clause",
    "_build_set_clause",
    "_parse_criteria",
    "_row_to_task",
    "_format_tasks",
    "_format_task_detail",
    "_format_board",
    "_format_initiatives",
    "_format_initiative_detail",
]
