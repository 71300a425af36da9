"""Status-grouped board view of a project."""

from __future__ import annotations

from taskboard_mcp.core.pipelines import pipeline_for
from taskboard_mcp.core.results import OperationResult
from taskboard_mcp.core.tasks import ORDER_BY_PRIORITY, _attach_subtask_counts
from taskboard_mcp.models.task import BoardColumn, BoardView, TaskModel
from taskboard_mcp.utils.db import TaskboardDB
from taskboard_mcp.utils.parsers import _row_to_task


class ProjectBoard:
    def __init__(self, db: TaskboardDB) -> None:
        self._db = db

    def get_board(self, project: str) -> OperationResult:
        """
        Group a project's top-level tasks into the pipeline's status columns.

        Columns follow pipeline order; statuses outside the pipeline (legacy
        rows) get their own columns at the end. Subtasks are attached to their
        parent rather than shown in a column of their own.
        """
        with self._db.read() as conn:
            rows = conn.execute(f"SELECT * FROM tasks WHERE project = ? {ORDER_BY_PRIORITY}", (project,)).fetchall()
            tasks = [_row_to_task(r) for r in rows]
            _attach_subtask_counts(conn, tasks)

        if not tasks:
            return OperationResult.not_found(f"No tasks found for project '{project}'.")

        pipeline = pipeline_for(project)
        children: dict[str, list[TaskModel]] = {}
        for t in tasks:
            if t.parent_task_id:
                children.setdefault(t.parent_task_id, []).append(t)

        columns: dict[str, BoardColumn] = {s: BoardColumn(status=s) for s in pipeline.statuses}
        for t in tasks:
            if t.parent_task_id:
                continue
            column = columns.setdefault(t.status, BoardColumn(status=t.status))
            column.tasks.append(t)
            if t.id in children:
                column.subtasks[t.id] = children[t.id]

        return OperationResult.ok(
            data=BoardView(project=project, pipeline=pipeline.name, columns=list(columns.values())),
        )
