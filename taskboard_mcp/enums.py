"""Enums for Taskboard MCP."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Every status known to either pipeline."""

    # Full pipeline
    BACKLOG = "backlog"
    SPECCED = "specced"
    DESIGNED = "designed"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    TESTING = "testing"
    ACCEPTANCE = "acceptance"
    DONE = "done"
    # Lightweight pipeline only
    TODO = "todo"
    BLOCKED = "blocked"


class CommentType(str, Enum):
    """Kinds of entries in a task's comment thread."""

    COMMENT = "comment"
    REVIEW = "review"


class Verdict(str, Enum):
    """Review verdicts."""

    APPROVE = "approve"
    REJECT = "reject"


class InitiativeStatus(str, Enum):
    """Initiative lifecycle states."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"
