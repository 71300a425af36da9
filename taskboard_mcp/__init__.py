"""
MCP Server for a multi-agent taskboard.

Agents share a SQLite-backed sprint board: tasks move through status
pipelines, can be split into subtasks, carry acceptance criteria, reviews
and comments, block each other through a cycle-free dependency graph, and
can be grouped into cross-project initiatives.
"""

# Re-export enums
from taskboard_mcp.enums import CommentType, InitiativeStatus, ResponseFormat, TaskStatus, Verdict

# Re-export models
from taskboard_mcp.models import (
    AddCommentInput,
    AddInitiativeUpdateInput,
    BoardColumn,
    BoardView,
    CheckCriterionInput,
    CreateInitiativeInput,
    CreateTaskInput,
    Criterion,
    DeleteTaskInput,
    DependencyInput,
    GetBoardInput,
    GetInitiativeInput,
    GetTaskInput,
    InitiativeDetail,
    InitiativeModel,
    InitiativeUpdate,
    LinkedTask,
    LinkTaskInput,
    ListInitiativesInput,
    ListTasksInput,
    SearchTasksInput,
    SetCriteriaInput,
    StatusChange,
    SubmitReviewInput,
    TaskComment,
    TaskDetail,
    TaskModel,
    TaskRef,
    UpdateInitiativeInput,
    UpdateTaskInput,
)

# Re-export the engine
from taskboard_mcp.core import OperationResult, Outcome, Taskboard

# Re-export MCP server instance
from taskboard_mcp.server import mcp

# Re-export tools
from taskboard_mcp.tools import (
    taskboard_add_comment,
    taskboard_add_dependency,
    taskboard_add_initiative_update,
    taskboard_check_criterion,
    taskboard_create_initiative,
    taskboard_create_task,
    taskboard_delete_task,
    taskboard_get_board,
    taskboard_get_initiative,
    taskboard_get_task,
    taskboard_link_task_to_initiative,
    taskboard_list_initiatives,
    taskboard_list_tasks,
    taskboard_remove_dependency,
    taskboard_search_tasks,
    taskboard_set_criteria,
    taskboard_submit_review,
    taskboard_update_initiative,
    taskboard_update_task,
)
from taskboard_mcp.utils import TaskboardDB

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "CommentType",
    "Verdict",
    "InitiativeStatus",
    # Record models
    "Criterion",
    "TaskComment",
    "StatusChange",
    "TaskRef",
    "TaskModel",
    "TaskDetail",
    "BoardColumn",
    "BoardView",
    "InitiativeModel",
    "InitiativeUpdate",
    "LinkedTask",
    "InitiativeDetail",
    # Task input models
    "CreateTaskInput",
    "ListTasksInput",
    "SearchTasksInput",
    "GetTaskInput",
    "UpdateTaskInput",
    "DeleteTaskInput",
    "AddCommentInput",
    "SubmitReviewInput",
    "SetCriteriaInput",
    "CheckCriterionInput",
    "GetBoardInput",
    "DependencyInput",
    # Initiative input models
    "CreateInitiativeInput",
    "ListInitiativesInput",
    "GetInitiativeInput",
    "UpdateInitiativeInput",
    "LinkTaskInput",
    "AddInitiativeUpdateInput",
    # Engine
    "Taskboard",
    "TaskboardDB",
    "OperationResult",
    "Outcome",
    # Server
    "mcp",
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
