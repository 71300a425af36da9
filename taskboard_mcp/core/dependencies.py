"""Dependency graph: a directed "blocked by" relation kept acyclic on insert.

An edge ``(task_id, depends_on_id)`` means ``task_id`` cannot finish before
``depends_on_id``. The graph is never re-validated as a whole; every edge is
checked when it is added, so the existing graph is always acyclic.
"""

from __future__ import annotations

import logging
import sqlite3
from collections import deque
from collections.abc import Callable

from taskboard_mcp.config import get_agent_name
from taskboard_mcp.core.results import OperationResult
from taskboard_mcp.models.task import TaskRef
from taskboard_mcp.utils.db import TaskboardDB
from taskboard_mcp.utils.parsers import _row_to_ref

logger = logging.getLogger(__name__)


def _blockers(conn: sqlite3.Connection, task_id: str) -> list[TaskRef]:
    """Tasks that ``task_id`` is blocked by."""
    rows = conn.execute(
        """SELECT t.id, t.title, t.status, t.assigned_to FROM tasks t
           JOIN task_deps d ON d.depends_on_id = t.id
           WHERE d.task_id = ?
           ORDER BY t.priority ASC, t.created_at ASC, t.rowid ASC""",
        (task_id,),
    ).fetchall()
    return [_row_to_ref(r) for r in rows]


def _dependents(conn: sqlite3.Connection, task_id: str) -> list[TaskRef]:
    """Tasks blocked by ``task_id``."""
    rows = conn.execute(
        """SELECT t.id, t.title, t.status, t.assigned_to FROM tasks t
           JOIN task_deps d ON d.task_id = t.id
           WHERE d.depends_on_id = ?
           ORDER BY t.priority ASC, t.created_at ASC, t.rowid ASC""",
        (task_id,),
    ).fetchall()
    return [_row_to_ref(r) for r in rows]


def _find_cycle(conn: sqlite3.Connection, task_id: str, depends_on_id: str) -> list[str] | None:
    """
    Check whether the edge ``task_id -> depends_on_id`` would close a cycle.

    Breadth-first walk from ``task_id`` through everything that already
    (transitively) depends on it. Reaching ``depends_on_id`` means
    ``depends_on_id`` already waits on ``task_id``.

    Returns:
        The cycle as a list of IDs in "blocked by" order, starting and ending
        with ``task_id``, or None if the edge is safe
    """
    came_from: dict[str, str | None] = {task_id: None}
    queue: deque[str] = deque([task_id])
    while queue:
        current = queue.popleft()
        if current == depends_on_id:
            path = []
            node: str | None = current
            while node is not None:
                path.append(node)
                node = came_from[node]
            # path runs depends_on_id -> ... -> task_id along "depends on" edges
            return [task_id, *path]
        rows = conn.execute("SELECT task_id FROM task_deps WHERE depends_on_id = ?", (current,)).fetchall()
        for (dependent,) in rows:
            if dependent not in came_from:
                came_from[dependent] = current
                queue.append(dependent)
    return None


class DependencyGraph:
    """Adds and removes "blocked by" edges between tasks."""

    def __init__(self, db: TaskboardDB, identity: Callable[[], str] = get_agent_name) -> None:
        self._db = db
        self._identity = identity

    def add_dependency(self, task_id: str, depends_on_id: str) -> OperationResult:
        """
        Record that ``task_id`` is blocked by ``depends_on_id``.

        The cycle check and the insert share one write transaction, so no
        concurrent insert can slip a conflicting edge in between. Adding an
        edge that already exists is not an error.
        """
        if task_id == depends_on_id:
            return OperationResult.invalid("A task cannot depend on itself.")

        agent = self._identity()
        with self._db.transaction() as conn:
            blocked = conn.execute("SELECT id, title FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if blocked is None:
                return OperationResult.not_found(f"Task '{task_id}' not found.")
            blocker = conn.execute("SELECT id, title FROM tasks WHERE id = ?", (depends_on_id,)).fetchone()
            if blocker is None:
                return OperationResult.not_found(f"Task '{depends_on_id}' not found.")

            cycle = _find_cycle(conn, task_id, depends_on_id)
            if cycle is not None:
                logger.info("Rejected dependency %s -> %s: cycle %s", task_id, depends_on_id, cycle)
                return OperationResult.invalid(
                    "Adding this dependency would create a circular chain: "
                    f"{' → '.join(cycle)} (each task blocked by the next)."
                )

            cur = conn.execute(
                "INSERT OR IGNORE INTO task_deps (task_id, depends_on_id, created_by) VALUES (?, ?, ?)",
                (task_id, depends_on_id, agent),
            )

        if cur.rowcount == 0:
            return OperationResult.ok(f'Dependency already exists: "{blocked["title"]}" is blocked by "{blocker["title"]}"')
        return OperationResult.ok(f'Dependency added: "{blocked["title"]}" is now blocked by "{blocker["title"]}"')

    def remove_dependency(self, task_id: str, depends_on_id: str) -> OperationResult:
        """Delete the exact edge; a missing edge is reported as not found."""
        with self._db.transaction() as conn:
            cur = conn.execute(
                "DELETE FROM task_deps WHERE task_id = ? AND depends_on_id = ?",
                (task_id, depends_on_id),
            )
        if cur.rowcount == 0:
            return OperationResult.not_found(f"Dependency not found: {task_id} is not blocked by {depends_on_id}.")
        return OperationResult.ok(f"Dependency removed: {task_id} no longer blocked by {depends_on_id}")

    def blockers(self, task_id: str) -> list[TaskRef]:
        with self._db.read() as conn:
            return _blockers(conn, task_id)

    def dependents(self, task_id: str) -> list[TaskRef]:
        with self._db.read() as conn:
            return _dependents(conn, task_id)
