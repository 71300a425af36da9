"""Parser helpers turning stored rows into models.

JSON columns distinguish "empty" (NULL or blank: no value yet) from
"malformed" (present but not the expected shape). Malformed values raise
``CorruptFieldError``; callers decide whether the field is critical or can
degrade to an empty default via ``_lenient``.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from taskboard_mcp.core.pipelines import is_done
from taskboard_mcp.enums import CommentType
from taskboard_mcp.models.initiative import InitiativeModel, InitiativeUpdate, LinkedTask
from taskboard_mcp.models.task import (
    CriteriaChecklist,
    Criterion,
    StatusChange,
    TaskComment,
    TaskModel,
    TaskRef,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CorruptFieldError(ValueError):
    """A stored structured field could not be parsed as its expected shape."""

    def __init__(self, entity: str, record_id: str, field: str) -> None:
        self.entity = entity
        self.record_id = record_id
        self.field = field
        super().__init__(f"Data corruption: {entity} {record_id} has invalid JSON in {field} field")


def _lenient(parse: Callable[[], list[T]]) -> list[T]:
    """Run a parser for a display-only field; log and fall back to [] on corruption."""
    try:
        return parse()
    except CorruptFieldError as exc:
        logger.warning("%s; showing it as empty", exc)
        return []


def _decode_string_list(raw: str | None, *, entity: str, record_id: str, field: str) -> list[str]:
    """
    Decode a JSON array of strings.

    Returns:
        The list, or [] when the column is NULL/blank

    Raises:
        CorruptFieldError: If the value is not a JSON array of strings
    """
    if raw is None or not str(raw).strip():
        return []
    try:
        value = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise CorruptFieldError(entity, record_id, field) from exc
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CorruptFieldError(entity, record_id, field)
    return value


def _encode_string_list(values: list[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def _parse_criteria(raw: str | None, task_id: str) -> list[Criterion]:
    """
    Decode a task's acceptance criteria.

    Accepts the versioned envelope ``{"version": 1, "items": [...]}`` and the
    older bare list of items.

    Raises:
        CorruptFieldError: If the stored value is not valid criteria
    """
    if raw is None or not str(raw).strip():
        return []
    try:
        value: Any = json.loads(raw)
        if isinstance(value, list):
            value = {"version": 1, "items": value}
        if not isinstance(value, dict):
            raise CorruptFieldError("task", task_id, "criteria")
        return CriteriaChecklist.model_validate(value).items
    except (TypeError, json.JSONDecodeError, ValidationError) as exc:
        raise CorruptFieldError("task", task_id, "criteria") from exc


def _encode_criteria(items: list[Criterion]) -> str:
    return CriteriaChecklist(items=items).model_dump_json()


def _row_to_task(row: sqlite3.Row, *, strict: bool = False) -> TaskModel:
    """
    Parse a ``tasks`` row into a TaskModel.

    Args:
        row: Row from the tasks table
        strict: Raise on corrupt criteria instead of degrading to [];
            set by views that show the checklist itself

    Raises:
        CorruptFieldError: Only when ``strict`` is set
    """
    task_id = row["id"]
    if strict:
        criteria = _parse_criteria(row["criteria"], task_id)
    else:
        criteria = _lenient(lambda: _parse_criteria(row["criteria"], task_id))
    return TaskModel(
        id=task_id,
        project=row["project"],
        title=row["title"],
        description=row["description"] or "",
        status=row["status"],
        assigned_to=row["assigned_to"],
        priority=int(row["priority"] if row["priority"] is not None else 5),
        created_by=row["created_by"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        parent_task_id=row["parent_task_id"],
        branch=row["branch"],
        pr_url=row["pr_url"],
        pr_number=row["pr_number"],
        pr_merged=bool(row["pr_merged"]),
        spec_file=row["spec_file"],
        design_file=row["design_file"],
        due_date=row["due_date"],
        criteria=criteria,
    )


def _row_to_ref(row: sqlite3.Row) -> TaskRef:
    keys = row.keys()
    return TaskRef(
        id=row["id"],
        title=row["title"],
        status=row["status"],
        assigned_to=row["assigned_to"] if "assigned_to" in keys else None,
    )


def _row_to_comment(row: sqlite3.Row) -> TaskComment:
    comment_id = row["id"]
    categories = _lenient(
        lambda: _decode_string_list(row["categories"], entity="review", record_id=comment_id, field="categories")
    )
    return TaskComment(
        id=comment_id,
        task_id=row["task_id"],
        author=row["author"],
        content=row["content"],
        type=row["type"] or CommentType.COMMENT.value,
        verdict=row["verdict"],
        categories=categories,
        created_at=row["created_at"],
    )


def _row_to_status_change(row: sqlite3.Row) -> StatusChange:
    return StatusChange(
        id=row["id"],
        task_id=row["task_id"],
        from_status=row["from_status"],
        to_status=row["to_status"],
        changed_by=row["changed_by"],
        changed_at=row["changed_at"],
        duration_seconds=row["duration_seconds"],
    )


def _row_to_initiative(row: sqlite3.Row, *, strict: bool = False) -> InitiativeModel:
    """
    Parse an ``initiatives`` row.

    Participants always degrade to [] when corrupt. With ``strict`` set, corrupt
    success criteria raise CorruptFieldError instead.
    """
    initiative_id = row["id"]
    participants = _lenient(
        lambda: _decode_string_list(
            row["participating_agents"], entity="initiative", record_id=initiative_id, field="participating_agents"
        )
    )

    def _criteria() -> list[str]:
        return _decode_string_list(
            row["success_criteria"], entity="initiative", record_id=initiative_id, field="success_criteria"
        )

    criteria = _criteria() if strict else _lenient(_criteria)
    return InitiativeModel(
        id=initiative_id,
        title=row["title"],
        description=row["description"] or "",
        status=row["status"] or "active",
        owner=row["owner"],
        participants=participants,
        success_criteria=criteria,
        progress_pct=int(row["progress_pct"] or 0),
        target_date=row["target_date"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_initiative_update(row: sqlite3.Row) -> InitiativeUpdate:
    return InitiativeUpdate(
        id=row["id"],
        initiative_id=row["initiative_id"],
        agent_name=row["agent_name"],
        update_text=row["update_text"],
        created_at=row["created_at"],
    )


def _row_to_linked_task(row: sqlite3.Row) -> LinkedTask:
    return LinkedTask(
        id=row["id"],
        title=row["title"],
        status=row["status"],
        project=row["project"],
        priority=int(row["priority"] if row["priority"] is not None else 5),
        assigned_to=row["assigned_to"],
        role=row["role"] or "",
        linked_by=row["linked_by"],
        done=is_done(row["project"], row["status"]),
    )
