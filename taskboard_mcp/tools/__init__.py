"""MCP tool definitions for Taskboard."""

# Import all tools to register them with the MCP server
from taskboard_mcp.tools.initiatives import (
    taskboard_add_initiative_update,
    taskboard_create_initiative,
    taskboard_get_initiative,
    taskboard_link_task_to_initiative,
    taskboard_list_initiatives,
    taskboard_update_initiative,
)
from taskboard_mcp.tools.tasks import (
    taskboard_add_comment,
    taskboard_add_dependency,
    taskboard_check_criterion,
    taskboard_create_task,
    taskboard_delete_task,
    taskboard_get_board,
    taskboard_get_task,
    taskboard_list_tasks,
    taskboard_remove_dependency,
    taskboard_search_tasks,
    taskboard_set_criteria,
    taskboard_submit_review,
    taskboard_update_task,
)

__all__ = [
    # Task tools
    "taskboard_create_task",
    "taskboard_list_tasks",
    "taskboard_search_tasks",
    "taskboard_get_task",
    "taskboard_update_task",
    "taskboard_delete_task",
    "taskboard_add_comment",
    "taskboard_submit_review",
    "taskboard_set_criteria",
    "taskboard_check_criterion",
    "taskboard_get_board",
    "taskboard_add_dependency",
    "taskboard_remove_dependency",
    # Initiative tools
    "taskboard_create_initiative",
    "taskboard_list_initiatives",
    "taskboard_get_initiative",
    "taskboard_update_initiative",
    "taskboard_link_task_to_initiative",
    "taskboard_add_initiative_update",
]
