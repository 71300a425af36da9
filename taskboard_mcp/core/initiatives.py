"""Initiatives: cross-cutting goals grouping tasks from any project."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from taskboard_mcp.config import get_agent_name
from taskboard_mcp.core.results import OperationResult
from taskboard_mcp.models.initiative import InitiativeDetail
from taskboard_mcp.utils.db import TaskboardDB, _new_id, _to_iso, _utcnow
from taskboard_mcp.utils.parsers import (
    CorruptFieldError,
    _encode_string_list,
    _row_to_initiative,
    _row_to_initiative_update,
    _row_to_linked_task,
)
from taskboard_mcp.utils.query import _build_set_clause, _build_where_clause

logger = logging.getLogger(__name__)

INITIATIVE_FILTER_COLUMNS = frozenset({"status", "owner"})
INITIATIVE_SET_COLUMNS = frozenset(
    {
        "status",
        "progress_pct",
        "description",
        "title",
        "participating_agents",
        "success_criteria",
        "target_date",
        "updated_at",
    }
)

# Number of progress notes shown by get_initiative
RECENT_UPDATES_WINDOW = 10

ALL_STATUSES = "all"


def _initiative_not_found(initiative_id: str) -> OperationResult:
    return OperationResult.not_found(f"Initiative '{initiative_id}' not found.")


class InitiativeLinker:
    def __init__(self, db: TaskboardDB, identity: Callable[[], str] = get_agent_name) -> None:
        self._db = db
        self._identity = identity

    def create_initiative(
        self,
        *,
        title: str,
        description: str = "",
        participants: list[str] | None = None,
        criteria: list[str] | None = None,
        target_date: str | None = None,
    ) -> OperationResult:
        """Create an initiative owned by the caller."""
        agent = self._identity()
        initiative_id = _new_id()
        participants = list(participants or [])
        stamp = _to_iso(_utcnow())
        with self._db.transaction() as conn:
            conn.execute(
                """INSERT INTO initiatives
                   (id, title, description, owner, participating_agents, success_criteria,
                    target_date, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    initiative_id,
                    title,
                    description or "",
                    agent,
                    _encode_string_list(participants),
                    _encode_string_list(criteria or []),
                    target_date or None,
                    stamp,
                    stamp,
                ),
            )
        logger.info("Initiative %s created by %s", initiative_id, agent)
        return OperationResult.ok(
            f'Initiative created: {initiative_id} "{title}" '
            f"(owner: {agent}, participants: {', '.join(participants) or 'none yet'})",
            data=initiative_id,
        )

    def list_initiatives(
        self,
        *,
        status: str | None = "active",
        owner: str | None = None,
        limit: int = 20,
    ) -> OperationResult:
        """List initiatives, most recently updated first. ``status="all"`` disables the status filter."""
        filters: list[tuple[str, Any]] = []
        if status and status != ALL_STATUSES:
            filters.append(("status", status))
        if owner:
            filters.append(("owner", owner))
        where, params = _build_where_clause(filters, INITIATIVE_FILTER_COLUMNS)
        sql = "SELECT * FROM initiatives"
        if where:
            sql += f" WHERE {where}"
        sql += " ORDER BY updated_at DESC, rowid DESC LIMIT ?"

        rows = self._db.fetchall(sql, [*params, limit])
        initiatives = [_row_to_initiative(r) for r in rows]
        if not initiatives:
            return OperationResult.ok("No initiatives found matching filters.", data=[])
        return OperationResult.ok(f"{len(initiatives)} initiative(s)", data=initiatives)

    def get_initiative(self, initiative_id: str) -> OperationResult:
        """Initiative with linked tasks and the most recent progress notes (newest first)."""
        with self._db.read() as conn:
            row = conn.execute("SELECT * FROM initiatives WHERE id = ?", (initiative_id,)).fetchone()
            if row is None:
                return _initiative_not_found(initiative_id)
            task_rows = conn.execute(
                """SELECT it.role, it.linked_by, t.id, t.title, t.status, t.assigned_to, t.project, t.priority
                   FROM initiative_tasks it
                   JOIN tasks t ON t.id = it.task_id
                   WHERE it.initiative_id = ?
                   ORDER BY t.priority ASC, t.created_at ASC, t.rowid ASC""",
                (initiative_id,),
            ).fetchall()
            update_rows = conn.execute(
                """SELECT * FROM initiative_updates WHERE initiative_id = ?
                   ORDER BY created_at DESC, rowid DESC LIMIT ?""",
                (initiative_id, RECENT_UPDATES_WINDOW),
            ).fetchall()

        try:
            initiative = _row_to_initiative(row, strict=True)
        except CorruptFieldError as exc:
            logger.warning("%s", exc)
            return OperationResult.corrupt(str(exc))
        detail = InitiativeDetail(
            initiative=initiative,
            tasks=[_row_to_linked_task(r) for r in task_rows],
            updates=[_row_to_initiative_update(r) for r in update_rows],
        )
        return OperationResult.ok(data=detail)

    def update_initiative(
        self,
        initiative_id: str,
        *,
        status: str | None = None,
        progress_pct: int | None = None,
        description: str | None = None,
        title: str | None = None,
        participants: list[str] | None = None,
        criteria: list[str] | None = None,
        target_date: str | None = None,
    ) -> OperationResult:
        updates: dict[str, Any] = {}
        if status is not None:
            updates["status"] = status
        if progress_pct is not None:
            updates["progress_pct"] = progress_pct
        if description is not None:
            updates["description"] = description
        if title is not None:
            updates["title"] = title
        if participants is not None:
            updates["participating_agents"] = _encode_string_list(participants)
        if criteria is not None:
            updates["success_criteria"] = _encode_string_list(criteria)
        if target_date is not None:
            updates["target_date"] = target_date

        with self._db.transaction() as conn:
            if conn.execute("SELECT 1 FROM initiatives WHERE id = ?", (initiative_id,)).fetchone() is None:
                return _initiative_not_found(initiative_id)
            if not updates:
                return OperationResult.noop("No fields to update.")
            changed = list(updates)
            sets, params = _build_set_clause({**updates, "updated_at": _to_iso(_utcnow())}, INITIATIVE_SET_COLUMNS)
            conn.execute(f"UPDATE initiatives SET {sets} WHERE id = ?", [*params, initiative_id])

        return OperationResult.ok(f"Initiative {initiative_id} updated: {', '.join(changed)}")

    def link_task(self, initiative_id: str, task_id: str, role: str = "") -> OperationResult:
        """Link a task to an initiative. Linking an already-linked pair changes nothing and is not an error."""
        agent = self._identity()
        with self._db.transaction() as conn:
            initiative = conn.execute("SELECT id, title FROM initiatives WHERE id = ?", (initiative_id,)).fetchone()
            if initiative is None:
                return _initiative_not_found(initiative_id)
            task = conn.execute("SELECT id, title FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if task is None:
                return OperationResult.not_found(f"Task '{task_id}' not found.")
            cur = conn.execute(
                """INSERT OR IGNORE INTO initiative_tasks (id, initiative_id, task_id, role, linked_by, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (_new_id(), initiative_id, task_id, role or "", agent, _to_iso(_utcnow())),
            )

        if cur.rowcount == 0:
            return OperationResult.ok(f'Task "{task["title"]}" is already linked to initiative "{initiative["title"]}"')
        role_note = f" (role: {role})" if role else ""
        return OperationResult.ok(f'Task "{task["title"]}" linked to initiative "{initiative["title"]}"{role_note}')

    def add_update(self, initiative_id: str, update_text: str) -> OperationResult:
        """Append a progress note."""
        agent = self._identity()
        update_id = _new_id()
        with self._db.transaction() as conn:
            initiative = conn.execute("SELECT id, title FROM initiatives WHERE id = ?", (initiative_id,)).fetchone()
            if initiative is None:
                return _initiative_not_found(initiative_id)
            conn.execute(
                """INSERT INTO initiative_updates (id, initiative_id, agent_name, update_text, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (update_id, initiative_id, agent, update_text, _to_iso(_utcnow())),
            )
        return OperationResult.ok(f'Update logged on "{initiative["title"]}": {update_text}', data=update_id)
