"""Task repository: CRUD, status transitions, subtask hierarchy and history."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime
from typing import Any

from taskboard_mcp.config import get_agent_name
from taskboard_mcp.core.dependencies import _blockers, _dependents
from taskboard_mcp.core.pipelines import is_done, pipeline_for
from taskboard_mcp.core.results import OperationResult
from taskboard_mcp.enums import CommentType
from taskboard_mcp.models.task import TaskDetail, TaskModel
from taskboard_mcp.utils.db import TaskboardDB, _from_iso, _new_id, _to_iso, _utcnow
from taskboard_mcp.utils.parsers import (
    CorruptFieldError,
    _row_to_comment,
    _row_to_ref,
    _row_to_status_change,
    _row_to_task,
)
from taskboard_mcp.utils.query import _build_set_clause, _build_where_clause, _like_pattern, _placeholders

logger = logging.getLogger(__name__)

TASK_FILTER_COLUMNS = frozenset({"project", "status", "assigned_to"})

UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "assigned_to",
        "branch",
        "spec_file",
        "design_file",
        "title",
        "description",
        "priority",
        "pr_url",
        "pr_number",
        "pr_merged",
        "parent_task_id",
        "due_date",
    }
)
TASK_UPDATE_COLUMNS = UPDATABLE_FIELDS | {"updated_at"}

# Fields that must always hold a value
UNCLEARABLE_FIELDS = frozenset({"title", "status", "priority", "pr_merged"})

ORDER_BY_PRIORITY = "ORDER BY priority ASC, created_at ASC, rowid ASC"


def _fetch_task_row(conn: sqlite3.Connection, task_id: str) -> sqlite3.Row | None:
    return conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()


def _not_found(task_id: str) -> OperationResult:
    return OperationResult.not_found(f"Task '{task_id}' not found.")


def _record_transition(
    conn: sqlite3.Connection,
    task_id: str,
    from_status: str | None,
    to_status: str,
    agent: str,
    moment: datetime,
) -> None:
    """
    Write the audit trail for a status change.

    Inserts a history row whose duration is the time since the task's newest
    history entry, and (for real transitions, not creation) an audit comment.
    Must run inside the caller's transaction.
    """
    last = conn.execute(
        "SELECT changed_at FROM task_history WHERE task_id = ? ORDER BY changed_at DESC, rowid DESC LIMIT 1",
        (task_id,),
    ).fetchone()
    duration: int | None = None
    if last is not None:
        previous = _from_iso(last["changed_at"])
        if previous is not None:
            duration = max(0, round((moment - previous).total_seconds()))

    stamp = _to_iso(moment)
    if from_status is not None:
        conn.execute(
            "INSERT INTO task_comments (id, task_id, author, content, created_at) VALUES (?, ?, ?, ?, ?)",
            (_new_id(), task_id, agent, f"Status: {from_status} → {to_status}", stamp),
        )
    conn.execute(
        """INSERT INTO task_history (id, task_id, from_status, to_status, changed_by, changed_at, duration_seconds)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (_new_id(), task_id, from_status, to_status, agent, stamp, duration),
    )


def _attach_subtask_counts(conn: sqlite3.Connection, tasks: list[TaskModel]) -> None:
    """Fill subtasks_done/subtasks_total on the top-level tasks of a listing."""
    parent_ids = [t.id for t in tasks if not t.parent_task_id]
    if not parent_ids:
        return
    rows = conn.execute(
        f"SELECT parent_task_id, project, status FROM tasks WHERE parent_task_id IN ({_placeholders(len(parent_ids))})",
        parent_ids,
    ).fetchall()
    counts: dict[str, list[int]] = {}
    for r in rows:
        done_total = counts.setdefault(r["parent_task_id"], [0, 0])
        done_total[1] += 1
        if is_done(r["project"], r["status"]):
            done_total[0] += 1
    for task in tasks:
        if task.id in counts:
            task.subtasks_done, task.subtasks_total = counts[task.id]


class TaskRepository:
    """
    Task CRUD with status-pipeline and hierarchy enforcement.

    Every mutating method runs in a single store transaction, so a task, its
    history row and its audit comment are written together or not at all.
    """

    def __init__(self, db: TaskboardDB, identity: Callable[[], str] = get_agent_name) -> None:
        self._db = db
        self._identity = identity

    # ---- create ----

    def create_task(
        self,
        *,
        title: str,
        project: str | None = None,
        description: str = "",
        priority: int = 5,
        status: str | None = None,
        assigned_to: str | None = None,
        parent_task_id: str | None = None,
        due_date: str | None = None,
    ) -> OperationResult:
        """
        Create a task, or a subtask when ``parent_task_id`` is given.

        Subtasks inherit the parent's project. The status defaults to the
        pipeline's entry status and must belong to that pipeline.

        Returns:
            OperationResult whose data is the new task ID
        """
        agent = self._identity()
        task_id = _new_id()

        with self._db.transaction() as conn:
            resolved_project = project
            if parent_task_id:
                parent = _fetch_task_row(conn, parent_task_id)
                if parent is None:
                    return OperationResult.invalid(f"Parent task '{parent_task_id}' not found.")
                if parent["parent_task_id"]:
                    return OperationResult.invalid(
                        f"Cannot nest subtasks more than one level deep: '{parent_task_id}' "
                        f"is already a subtask of '{parent['parent_task_id']}'."
                    )
                resolved_project = parent["project"]

            if not resolved_project:
                return OperationResult.invalid("'project' is required when not creating a subtask.")

            pipeline = pipeline_for(resolved_project)
            resolved_status = status or pipeline.default_status
            if resolved_status not in pipeline.statuses:
                return OperationResult.invalid(
                    f"Status '{resolved_status}' is not part of the {pipeline.name} pipeline. "
                    f"Valid statuses: {', '.join(pipeline.statuses)}"
                )

            moment = _utcnow()
            stamp = _to_iso(moment)
            conn.execute(
                """INSERT INTO tasks
                   (id, project, title, description, status, assigned_to, priority, created_by,
                    created_at, updated_at, parent_task_id, due_date)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    task_id,
                    resolved_project,
                    title,
                    description or "",
                    resolved_status,
                    assigned_to or None,
                    priority,
                    agent,
                    stamp,
                    stamp,
                    parent_task_id or None,
                    due_date or None,
                ),
            )
            _record_transition(conn, task_id, None, resolved_status, agent, moment)

        logger.info("Task %s created in %s by %s", task_id, resolved_project, agent)
        subtask_note = f" (subtask of {parent_task_id})" if parent_task_id else ""
        return OperationResult.ok(
            f'Task created: {task_id} "{title}" [{resolved_status}] in project {resolved_project}{subtask_note}',
            data=task_id,
        )

    # ---- read ----

    def get_task(self, task_id: str) -> OperationResult:
        """
        Full detail for one task: comments and reviews, status history,
        dependency neighbours, parent and subtasks.

        A missing task is a not-found outcome, not an error. Corrupt stored
        criteria fail the read with a corruption outcome.
        """
        with self._db.read() as conn:
            row = _fetch_task_row(conn, task_id)
            if row is None:
                return _not_found(task_id)

            try:
                task = _row_to_task(row, strict=True)
            except CorruptFieldError as exc:
                logger.warning("%s", exc)
                return OperationResult.corrupt(str(exc))
            comments = [
                _row_to_comment(r)
                for r in conn.execute(
                    "SELECT * FROM task_comments WHERE task_id = ? ORDER BY created_at ASC, rowid ASC",
                    (task_id,),
                ).fetchall()
            ]
            history = [
                _row_to_status_change(r)
                for r in conn.execute(
                    "SELECT * FROM task_history WHERE task_id = ? ORDER BY changed_at ASC, rowid ASC",
                    (task_id,),
                ).fetchall()
            ]
            blocked_by = _blockers(conn, task_id)
            blocks = _dependents(conn, task_id)

            parent = None
            if task.parent_task_id:
                parent_row = conn.execute(
                    "SELECT id, title, status, assigned_to FROM tasks WHERE id = ?",
                    (task.parent_task_id,),
                ).fetchone()
                parent = _row_to_ref(parent_row) if parent_row else None

            child_rows = conn.execute(
                f"SELECT id, title, status, assigned_to, project FROM tasks WHERE parent_task_id = ? {ORDER_BY_PRIORITY}",
                (task_id,),
            ).fetchall()

        detail = TaskDetail(
            task=task,
            comments=[c for c in comments if c.type != CommentType.REVIEW],
            reviews=[c for c in comments if c.type == CommentType.REVIEW],
            history=history,
            blocked_by=blocked_by,
            blocks=blocks,
            parent=parent,
            subtasks=[_row_to_ref(r) for r in child_rows],
            subtasks_done=sum(1 for r in child_rows if is_done(r["project"], r["status"])),
        )
        return OperationResult.ok(data=detail)

    def list_tasks(
        self,
        *,
        project: str | None = None,
        status: str | None = None,
        assigned_to: str | None = None,
        limit: int = 30,
    ) -> OperationResult:
        """List tasks ordered by priority, then creation time."""
        filters = [
            (column, value)
            for column, value in (("project", project), ("status", status), ("assigned_to", assigned_to))
            if value
        ]
        where, params = _build_where_clause(filters, TASK_FILTER_COLUMNS)
        sql = "SELECT * FROM tasks"
        if where:
            sql += f" WHERE {where}"
        sql += f" {ORDER_BY_PRIORITY} LIMIT ?"

        with self._db.read() as conn:
            tasks = [_row_to_task(r) for r in conn.execute(sql, [*params, limit]).fetchall()]
            _attach_subtask_counts(conn, tasks)

        if not tasks:
            return OperationResult.ok("No tasks found matching filters.", data=[])
        return OperationResult.ok(f"{len(tasks)} task(s)", data=tasks)

    def search_tasks(self, query: str, *, limit: int = 20) -> OperationResult:
        """
        Full-text search over title and description, ranked by relevance.

        When the FTS5 index is missing or cannot evaluate the query, falls back
        to a case-insensitive substring match. The fallback is not an error.
        """
        with self._db.read() as conn:
            try:
                rows = conn.execute(
                    """SELECT t.* FROM tasks t
                       JOIN tasks_fts fts ON t.rowid = fts.rowid
                       WHERE tasks_fts MATCH ?
                       ORDER BY rank LIMIT ?""",
                    (query, limit),
                ).fetchall()
            except sqlite3.OperationalError as exc:
                logger.debug("Full-text search failed for %r (%s); using substring match", query, exc)
                pattern = _like_pattern(query)
                rows = conn.execute(
                    f"""SELECT * FROM tasks
                        WHERE title LIKE ? ESCAPE '\\' OR description LIKE ? ESCAPE '\\'
                        {ORDER_BY_PRIORITY} LIMIT ?""",
                    (pattern, pattern, limit),
                ).fetchall()
            tasks = [_row_to_task(r) for r in rows]
            _attach_subtask_counts(conn, tasks)

        if not tasks:
            return OperationResult.ok(f'No tasks found matching "{query}".', data=[])
        return OperationResult.ok(f"{len(tasks)} task(s)", data=tasks)

    # ---- update ----

    def update_task(self, task_id: str, *, expected_status: str | None = None, **changes: Any) -> OperationResult:
        """
        Update task fields and/or move the task along its pipeline.

        Args:
            task_id: Task to update
            expected_status: Optimistic lock; when it differs from the current
                status nothing is written and a no-op outcome reports the
                actual status
            **changes: Fields to set (see UPDATABLE_FIELDS); ``None`` clears a
                nullable field

        Returns:
            OperationResult listing the updated fields
        """
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task field(s): {', '.join(unknown)}")
        for field in sorted(UNCLEARABLE_FIELDS):
            if field in changes and changes[field] is None:
                return OperationResult.invalid(f"Field '{field}' cannot be cleared.")

        agent = self._identity()
        with self._db.transaction() as conn:
            row = _fetch_task_row(conn, task_id)
            if row is None:
                return _not_found(task_id)

            current = row["status"]
            if expected_status and current != expected_status:
                return OperationResult.noop(
                    f"No-op: task {task_id} is now '{current}' (expected '{expected_status}'). "
                    "Another agent already moved it."
                )

            new_status = changes.get("status")
            if new_status == current:
                del changes["status"]
                new_status = None

            if new_status is not None:
                pipeline = pipeline_for(row["project"])
                if not pipeline.can_transition(current, new_status):
                    logger.info("Rejected transition %s: %s -> %s", task_id, current, new_status)
                    return OperationResult.invalid(pipeline.transition_error(current, new_status))
                if pipeline.is_terminal(new_status):
                    pending = self._unfinished_children(conn, task_id)
                    if pending:
                        return OperationResult.invalid(
                            f"Cannot mark task as {new_status}: {len(pending)} subtask(s) are not done yet "
                            f"({', '.join(pending)})."
                        )

            new_parent = changes.get("parent_task_id")
            if new_parent is not None:
                error = self._check_new_parent(conn, task_id, new_parent)
                if error:
                    return OperationResult.invalid(error)

            if "description" in changes and changes["description"] is None:
                changes["description"] = ""
            if "pr_merged" in changes:
                changes["pr_merged"] = int(bool(changes["pr_merged"]))

            if not changes:
                return OperationResult.noop("No fields to update.")

            moment = _utcnow()
            sets, params = _build_set_clause({**changes, "updated_at": _to_iso(moment)}, TASK_UPDATE_COLUMNS)
            conn.execute(f"UPDATE tasks SET {sets} WHERE id = ?", [*params, task_id])

            if new_status is not None:
                _record_transition(conn, task_id, current, new_status, agent, moment)

        if new_status is not None:
            logger.info("Task %s moved %s -> %s by %s", task_id, current, new_status, agent)
        return OperationResult.ok(f"Task {task_id} updated: {', '.join(changes)}")

    @staticmethod
    def _unfinished_children(conn: sqlite3.Connection, task_id: str) -> list[str]:
        rows = conn.execute(
            f"SELECT id, project, status FROM tasks WHERE parent_task_id = ? {ORDER_BY_PRIORITY}",
            (task_id,),
        ).fetchall()
        return [r["id"] for r in rows if not is_done(r["project"], r["status"])]

    @staticmethod
    def _check_new_parent(conn: sqlite3.Connection, task_id: str, parent_task_id: str) -> str | None:
        """Return an error message if ``parent_task_id`` cannot become the task's parent."""
        if parent_task_id == task_id:
            return "A task cannot be its own parent."
        parent = _fetch_task_row(conn, parent_task_id)
        if parent is None:
            return f"Parent task '{parent_task_id}' not found."
        if parent["parent_task_id"]:
            return (
                f"Cannot nest subtasks more than one level deep: '{parent_task_id}' "
                f"is already a subtask of '{parent['parent_task_id']}'."
            )
        (child_count,) = conn.execute("SELECT COUNT(*) FROM tasks WHERE parent_task_id = ?", (task_id,)).fetchone()
        if child_count:
            return f"Cannot make a parent task into a subtask: {task_id} has {child_count} subtask(s)."
        return None

    # ---- delete ----

    def delete_task(self, task_id: str, *, confirm: bool = False) -> OperationResult:
        """
        Delete a task and its direct subtasks.

        Comments, dependency edges (both directions), history and initiative
        links of every deleted task go with them. Without ``confirm`` nothing
        happens.
        """
        if not confirm:
            return OperationResult.noop("Deletion not confirmed. Set confirm: true to proceed.")

        with self._db.transaction() as conn:
            row = conn.execute("SELECT id, title, project FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if row is None:
                return _not_found(task_id)

            child_ids = [r["id"] for r in conn.execute("SELECT id FROM tasks WHERE parent_task_id = ?", (task_id,))]
            doomed = [*child_ids, task_id]
            marks = _placeholders(len(doomed))
            conn.execute(f"DELETE FROM task_comments WHERE task_id IN ({marks})", doomed)
            conn.execute(
                f"DELETE FROM task_deps WHERE task_id IN ({marks}) OR depends_on_id IN ({marks})",
                [*doomed, *doomed],
            )
            conn.execute(f"DELETE FROM task_history WHERE task_id IN ({marks})", doomed)
            conn.execute(f"DELETE FROM initiative_tasks WHERE task_id IN ({marks})", doomed)
            conn.execute(f"DELETE FROM tasks WHERE id IN ({marks})", doomed)

        logger.info("Task %s deleted with %d subtask(s)", task_id, len(child_ids))
        subtask_note = f" and {len(child_ids)} subtask(s)" if child_ids else ""
        return OperationResult.ok(
            f'Deleted task {task_id}: "{row["title"]}" (project: {row["project"]}){subtask_note}',
            data=doomed,
        )
