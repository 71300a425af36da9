"""Core task models for Taskboard MCP."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class Criterion(BaseModel):
    """One acceptance-criteria checklist item."""

    id: str
    text: str
    checked: bool = False
    checked_by: str | None = None


class CriteriaChecklist(BaseModel):
    """Versioned envelope stored in the ``tasks.criteria`` column."""

    version: Literal[1] = 1
    items: list[Criterion] = Field(default_factory=list)


class TaskComment(BaseModel):
    """A comment or review on a task. Reviews carry a verdict and categories."""

    id: str
    task_id: str
    author: str
    content: str
    type: str = "comment"
    verdict: str | None = None
    categories: list[str] = Field(default_factory=list)
    created_at: str | None = None


class StatusChange(BaseModel):
    """Immutable audit record of one status transition."""

    id: str
    task_id: str
    from_status: str | None = None
    to_status: str
    changed_by: str | None = None
    changed_at: str
    duration_seconds: int | None = None


class TaskRef(BaseModel):
    """Lightweight reference to a neighbouring task (parent, child, dependency).

    Contains just enough for a caller to understand the relationship without
    another tool call.
    """

    id: str
    title: str
    status: str
    assigned_to: str | None = None


class TaskModel(BaseModel):
    """A task row with its parsed criteria."""

    id: str
    project: str
    title: str
    description: str = ""
    status: str
    assigned_to: str | None = None
    priority: int = 5
    created_by: str | None = None
    created_at: str
    updated_at: str
    parent_task_id: str | None = None
    branch: str | None = None
    pr_url: str | None = None
    pr_number: int | None = None
    pr_merged: bool = False
    spec_file: str | None = None
    design_file: str | None = None
    due_date: str | None = None
    criteria: list[Criterion] = Field(default_factory=list)

    # Subtask rollup (populated for top-level rows in listings)
    subtasks_done: int = 0
    subtasks_total: int = 0


class TaskDetail(BaseModel):
    """Everything ``get_task`` shows about one task."""

    task: TaskModel
    comments: list[TaskComment] = Field(default_factory=list)
    reviews: list[TaskComment] = Field(default_factory=list)
    history: list[StatusChange] = Field(default_factory=list)
    blocked_by: list[TaskRef] = Field(default_factory=list)
    blocks: list[TaskRef] = Field(default_factory=list)
    parent: TaskRef | None = None
    subtasks: list[TaskRef] = Field(default_factory=list)
    subtasks_done: int = 0


class BoardColumn(BaseModel):
    """One status column of a project board; subtasks nest under their parent."""

    status: str
    tasks: list[TaskModel] = Field(default_factory=list)
    subtasks: dict[str, list[TaskModel]] = Field(default_factory=dict)


class BoardView(BaseModel):
    """Status-grouped overview of one project."""

    project: str
    pipeline: str
    columns: list[BoardColumn] = Field(default_factory=list)
