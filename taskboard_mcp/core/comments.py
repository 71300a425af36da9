"""Append-only comments and structured reviews on tasks."""

from __future__ import annotations

from collections.abc import Callable

from taskboard_mcp.config import get_agent_name
from taskboard_mcp.core.results import OperationResult
from taskboard_mcp.enums import CommentType
from taskboard_mcp.utils.db import TaskboardDB, _new_id, _to_iso, _utcnow
from taskboard_mcp.utils.parsers import _encode_string_list


class CommentLog:
    def __init__(self, db: TaskboardDB, identity: Callable[[], str] = get_agent_name) -> None:
        self._db = db
        self._identity = identity

    def add_comment(self, task_id: str, content: str) -> OperationResult:
        agent = self._identity()
        comment_id = _new_id()
        with self._db.transaction() as conn:
            if conn.execute("SELECT 1 FROM tasks WHERE id = ?", (task_id,)).fetchone() is None:
                return OperationResult.not_found(f"Task '{task_id}' not found.")
            conn.execute(
                "INSERT INTO task_comments (id, task_id, author, content, type, created_at) VALUES (?, ?, ?, ?, ?, ?)",
                (comment_id, task_id, agent, content, CommentType.COMMENT.value, _to_iso(_utcnow())),
            )
        return OperationResult.ok(f"Comment added to task {task_id} (id: {comment_id})", data=comment_id)

    def submit_review(
        self,
        task_id: str,
        verdict: str,
        content: str,
        categories: list[str] | None = None,
    ) -> OperationResult:
        """Record a review: a comment carrying a verdict and issue categories."""
        agent = self._identity()
        review_id = _new_id()
        with self._db.transaction() as conn:
            if conn.execute("SELECT 1 FROM tasks WHERE id = ?", (task_id,)).fetchone() is None:
                return OperationResult.not_found(f"Task '{task_id}' not found.")
            conn.execute(
                """INSERT INTO task_comments (id, task_id, author, content, type, verdict, categories, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    review_id,
                    task_id,
                    agent,
                    content,
                    CommentType.REVIEW.value,
                    verdict,
                    _encode_string_list(categories or []),
                    _to_iso(_utcnow()),
                ),
            )
        return OperationResult.ok(
            f"Review submitted for {task_id}: {verdict.upper()} (id: {review_id})",
            data=review_id,
        )
