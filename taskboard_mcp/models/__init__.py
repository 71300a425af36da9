"""Pydantic models for Taskboard MCP."""

from taskboard_mcp.models.initiative import InitiativeDetail, InitiativeModel, InitiativeUpdate, LinkedTask
from taskboard_mcp.models.inputs import (
    AddCommentInput,
    AddInitiativeUpdateInput,
    CheckCriterionInput,
    CreateInitiativeInput,
    CreateTaskInput,
    DeleteTaskInput,
    DependencyInput,
    GetBoardInput,
    GetInitiativeInput,
    GetTaskInput,
    LinkTaskInput,
    ListInitiativesInput,
    ListTasksInput,
    SearchTasksInput,
    SetCriteriaInput,
    SubmitReviewInput,
    UpdateInitiativeInput,
    UpdateTaskInput,
)
from taskboard_mcp.models.task import (
    BoardColumn,
    BoardView,
    CriteriaChecklist,
    Criterion,
    StatusChange,
    TaskComment,
    TaskDetail,
    TaskModel,
    TaskRef,
)

__all__ = [
    # Task models
    "BoardColumn",
    "BoardView",
    "CriteriaChecklist",
    "Criterion",
    "StatusChange",
    "TaskComment",
    "TaskDetail",
    "TaskModel",
    "TaskRef",
    # Initiative models
    "InitiativeDetail",
    "InitiativeModel",
    "InitiativeUpdate",
    "LinkedTask",
    # Task tool inputs
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
    # Initiative tool inputs
    "CreateInitiativeInput",
    "ListInitiativesInput",
    "GetInitiativeInput",
    "UpdateInitiativeInput",
    "LinkTaskInput",
    "AddInitiativeUpdateInput",
]
