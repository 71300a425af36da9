"""Acceptance-criteria checklists stored on tasks."""

from __future__ import annotations

import logging
from collections.abc import Callable

from taskboard_mcp.config import get_agent_name
from taskboard_mcp.core.results import OperationResult
from taskboard_mcp.models.task import Criterion
from taskboard_mcp.utils.db import TaskboardDB, _to_iso, _utcnow
from taskboard_mcp.utils.parsers import CorruptFieldError, _encode_criteria, _parse_criteria

logger = logging.getLogger(__name__)


class CriteriaChecklistService:
    def __init__(self, db: TaskboardDB, identity: Callable[[], str] = get_agent_name) -> None:
        self._db = db
        self._identity = identity

    def set_criteria(self, task_id: str, criteria: list[str]) -> OperationResult:
        """Replace the checklist with unchecked items ``c1..cN``."""
        items = [Criterion(id=f"c{i}", text=text) for i, text in enumerate(criteria, start=1)]
        with self._db.transaction() as conn:
            cur = conn.execute(
                "UPDATE tasks SET criteria = ?, updated_at = ? WHERE id = ?",
                (_encode_criteria(items), _to_iso(_utcnow()), task_id),
            )
            if cur.rowcount == 0:
                return OperationResult.not_found(f"Task '{task_id}' not found.")
        return OperationResult.ok(f"Set {len(items)} acceptance criteria on task {task_id}", data=items)

    def check_criterion(self, task_id: str, criterion_id: str, checked: bool = True) -> OperationResult:
        """
        Check or uncheck one criterion, recording who checked it.

        The stored checklist is required here, so a corrupt value fails the
        operation instead of being treated as empty.
        """
        agent = self._identity()
        with self._db.transaction() as conn:
            row = conn.execute("SELECT id, criteria FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if row is None:
                return OperationResult.not_found(f"Task '{task_id}' not found.")
            try:
                items = _parse_criteria(row["criteria"], task_id)
            except CorruptFieldError as exc:
                logger.warning("%s", exc)
                return OperationResult.corrupt(str(exc))

            item = next((c for c in items if c.id == criterion_id), None)
            if item is None:
                available = ", ".join(c.id for c in items) or "none"
                return OperationResult.not_found(f"Criterion '{criterion_id}' not found. Available: {available}")

            item.checked = checked
            item.checked_by = agent if checked else None
            conn.execute(
                "UPDATE tasks SET criteria = ?, updated_at = ? WHERE id = ?",
                (_encode_criteria(items), _to_iso(_utcnow()), task_id),
            )

        done = sum(1 for c in items if c.checked)
        verb = "checked" if checked else "unchecked"
        return OperationResult.ok(
            f"Criterion {criterion_id} {verb} on task {task_id} ({done}/{len(items)} done)",
            data=items,
        )
