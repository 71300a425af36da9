"""Input models for Taskboard MCP tools."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard_mcp.enums import InitiativeStatus, ResponseFormat, TaskStatus, Verdict

# ============================================================================
# Task Tool Input Models
# ============================================================================


class CreateTaskInput(BaseModel):
    """Input model for creating a task or subtask."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Short task title", min_length=1, max_length=200)
    project: str | None = Field(
        default=None,
        description="Project name (required unless parent_task_id is set). Projects named 'ops/...' use the lightweight pipeline",
    )
    description: str = Field(
        default="", description="Detailed description, acceptance notes, etc.", max_length=10000
    )
    priority: int = Field(default=5, description="Priority 1 (highest) to 10 (lowest)", ge=1, le=10)
    status: TaskStatus | None = Field(
        default=None,
        description="Initial status (defaults to 'backlog' for regular projects or 'todo' for ops/* projects)",
    )
    assigned_to: str | None = Field(default=None, description="Agent or person to assign to")
    parent_task_id: str | None = Field(
        default=None, description="Parent task ID to create this as a subtask (max depth 1)"
    )
    due_date: str | None = Field(
        default=None, description="Due date in ISO format (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS)"
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class ListTasksInput(BaseModel):
    """Input model for listing tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str | None = Field(default=None, description="Filter by project name")
    status: TaskStatus | Literal["all"] = Field(default="all", description="Filter by status, or 'all'")
    assigned_to: str | None = Field(default=None, description="Filter by assignee")
    limit: int = Field(default=30, description="Maximum number of tasks to return", ge=1, le=100)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class SearchTasksInput(BaseModel):
    """Input model for full-text task search."""

    model_config = ConfigDict(str_strip_whitespace=True)

    query: str = Field(
        ..., description="Search query (supports FTS5 syntax: AND, OR, NOT, prefix*)", min_length=1
    )
    limit: int = Field(default=20, description="Maximum number of tasks to return", ge=1, le=100)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task ID", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class UpdateTaskInput(BaseModel):
    """
    Input model for updating a task.

    Only fields that are explicitly provided are changed. Passing null clears
    a nullable field (assignee, branch, parent, due date, ...).
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task ID to update", min_length=1)
    status: TaskStatus | None = Field(default=None, description="New status (must be an allowed transition)")
    assigned_to: str | None = Field(default=None, description="Assign to agent")
    branch: str | None = Field(default=None, description="Git branch name")
    spec_file: str | None = Field(default=None, description="Path to spec file")
    design_file: str | None = Field(default=None, description="Path to design doc")
    title: str | None = Field(default=None, description="Updated title", max_length=200)
    description: str | None = Field(default=None, description="Updated description", max_length=10000)
    priority: int | None = Field(default=None, description="Updated priority", ge=1, le=10)
    pr_url: str | None = Field(default=None, description="Pull request URL")
    pr_number: int | None = Field(default=None, description="Pull request number")
    pr_merged: bool | None = Field(default=None, description="Whether the pull request is merged")
    parent_task_id: str | None = Field(default=None, description="Set parent task (null to remove)")
    due_date: str | None = Field(default=None, description="Due date in ISO format (null to remove)")
    expected_status: TaskStatus | None = Field(
        default=None,
        description="Optimistic lock: only update if the current status matches this value. No-ops gracefully on mismatch.",
    )


class DeleteTaskInput(BaseModel):
    """Input model for deleting a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task ID to delete", min_length=1)
    confirm: bool = Field(default=False, description="Must be true to confirm deletion")


class AddCommentInput(BaseModel):
    """Input model for commenting on a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task ID", min_length=1)
    content: str = Field(..., description="Comment text", min_length=1, max_length=10000)


class SubmitReviewInput(BaseModel):
    """Input model for submitting a structured review."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task ID to review", min_length=1)
    verdict: Verdict = Field(..., description="Review verdict: approve or reject")
    content: str = Field(..., description="Review summary / feedback", min_length=1, max_length=10000)
    categories: list[str] = Field(
        default_factory=list,
        description="Issue categories, e.g. ['bug', 'style', 'perf', 'security', 'design', 'testing']",
    )


class SetCriteriaInput(BaseModel):
    """Input model for replacing a task's acceptance criteria."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task ID", min_length=1)
    criteria: list[str] = Field(..., description="List of acceptance criteria text items")

    @field_validator("criteria")
    @classmethod
    def validate_criteria(cls, v: list[str]) -> list[str]:
        return [c.strip() for c in v if c.strip()]


class CheckCriterionInput(BaseModel):
    """Input model for checking or unchecking one criterion."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task ID", min_length=1)
    criterion_id: str = Field(..., description="The criterion ID (e.g. 'c1')", min_length=1)
    checked: bool = Field(default=True, description="true to check, false to uncheck")


class GetBoardInput(BaseModel):
    """Input model for the project board view."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str = Field(..., description="Project name", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class DependencyInput(BaseModel):
    """Input model for adding or removing a dependency edge."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="The task that is blocked", min_length=1)
    depends_on_id: str = Field(..., description="The task it depends on (must complete first)", min_length=1)


# ============================================================================
# Initiative Tool Input Models
# ============================================================================


class CreateInitiativeInput(BaseModel):
    """Input model for creating an initiative."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Short initiative title", min_length=1, max_length=200)
    description: str = Field(default="", description="Detailed description of the shared goal", max_length=10000)
    participants: list[str] = Field(
        default_factory=list, description="Agent names participating in this initiative"
    )
    criteria: list[str] = Field(default_factory=list, description="Success criteria: what 'done' looks like")
    target_date: str | None = Field(default=None, description="Target completion date (ISO format)")


class ListInitiativesInput(BaseModel):
    """Input model for listing initiatives."""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: InitiativeStatus | Literal["all"] = Field(
        default=InitiativeStatus.ACTIVE, description="Filter by status, or 'all'"
    )
    owner: str | None = Field(default=None, description="Filter by owner agent")
    limit: int = Field(default=20, description="Maximum number of initiatives to return", ge=1, le=100)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class GetInitiativeInput(BaseModel):
    """Input model for getting one initiative."""

    model_config = ConfigDict(str_strip_whitespace=True)

    initiative_id: str = Field(..., description="The initiative ID", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class UpdateInitiativeInput(BaseModel):
    """Input model for updating an initiative."""

    model_config = ConfigDict(str_strip_whitespace=True)

    initiative_id: str = Field(..., description="The initiative ID", min_length=1)
    status: InitiativeStatus | None = Field(default=None, description="New status")
    progress_pct: int | None = Field(default=None, description="Progress percentage (0-100)", ge=0, le=100)
    description: str | None = Field(default=None, description="Updated description", max_length=10000)
    title: str | None = Field(default=None, description="Updated title", max_length=200)
    participants: list[str] | None = Field(default=None, description="Updated participant list")
    criteria: list[str] | None = Field(default=None, description="Updated success criteria")
    target_date: str | None = Field(default=None, description="Updated target date")


class LinkTaskInput(BaseModel):
    """Input model for linking a task to an initiative."""

    model_config = ConfigDict(str_strip_whitespace=True)

    initiative_id: str = Field(..., description="The initiative ID", min_length=1)
    task_id: str = Field(..., description="The task ID to link", min_length=1)
    role: str = Field(
        default="",
        description="What this task contributes to the initiative (e.g. 'resume optimization')",
    )


class AddInitiativeUpdateInput(BaseModel):
    """Input model for logging initiative progress."""

    model_config = ConfigDict(str_strip_whitespace=True)

    initiative_id: str = Field(..., description="The initiative ID", min_length=1)
    update_text: str = Field(..., description="Progress note or status update", min_length=1, max_length=5000)
