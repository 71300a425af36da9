"""Tests for comments, reviews and acceptance criteria."""

import json
import logging

from taskboard_mcp.core.results import Outcome
from taskboard_mcp.enums import CommentType


def _set_raw(db, sql, params):
    with db.transaction() as conn:
        conn.execute(sql, params)


class TestComments:
    """Tests for the append-only comment thread."""

    def test_add_comment(self, board, new_task):
        task_id = new_task()
        result = board.comments.add_comment(task_id, "Started on this")
        assert result.outcome == Outcome.OK
        assert result.message == f"Comment added to task {task_id} (id: {result.data})"

        comment = board.tasks.get_task(task_id).data.comments[0]
        assert comment.id == result.data
        assert comment.author == "test-agent"
        assert comment.type == "comment"

    def test_comments_keep_insertion_order(self, board, new_task):
        task_id = new_task()
        for text in ("one", "two", "three"):
            board.comments.add_comment(task_id, text)
        assert [c.content for c in board.tasks.get_task(task_id).data.comments] == ["one", "two", "three"]

    def test_comment_on_missing_task(self, board):
        assert board.comments.add_comment("nope", "hi").outcome == Outcome.NOT_FOUND


class TestReviews:
    """Tests for structured reviews."""

    def test_submit_review(self, board, new_task):
        task_id = new_task()
        result = board.comments.submit_review(task_id, "approve", "Ship it", ["style"])
        assert result.outcome == Outcome.OK
        assert result.message == f"Review submitted for {task_id}: APPROVE (id: {result.data})"

        review = board.tasks.get_task(task_id).data.reviews[0]
        assert review.type == "review"
        assert review.verdict == "approve"
        assert review.categories == ["style"]
        assert review.author == "test-agent"

    def test_stored_type_matches_comment_type(self, board, db, new_task):
        task_id = new_task()
        board.comments.add_comment(task_id, "note")
        board.comments.submit_review(task_id, "approve", "ok")
        types = {r["type"] for r in db.fetchall("SELECT type FROM task_comments WHERE task_id = ?", (task_id,))}
        assert types == {CommentType.COMMENT.value, CommentType.REVIEW.value}

    def test_review_without_categories(self, board, new_task):
        task_id = new_task()
        board.comments.submit_review(task_id, "reject", "Needs work")
        assert board.tasks.get_task(task_id).data.reviews[0].categories == []

    def test_review_on_missing_task(self, board):
        assert board.comments.submit_review("nope", "approve", "ok").outcome == Outcome.NOT_FOUND

    def test_corrupt_categories_degrade_to_empty(self, board, db, new_task, caplog):
        task_id = new_task()
        review_id = board.comments.submit_review(task_id, "reject", "Bad", ["bug"]).data
        _set_raw(db, "UPDATE task_comments SET categories = ? WHERE id = ?", ("{not json", review_id))

        with caplog.at_level(logging.WARNING, logger="taskboard_mcp"):
            result = board.tasks.get_task(task_id)
        assert result.outcome == Outcome.OK
        assert result.data.reviews[0].categories == []
        assert "invalid JSON in categories field" in caplog.text


class TestSetCriteria:
    """Tests for replacing the acceptance checklist."""

    def test_items_are_numbered_and_unchecked(self, board, new_task):
        task_id = new_task()
        result = board.criteria.set_criteria(task_id, ["Has tests", "Has docs"])
        assert result.outcome == Outcome.OK
        assert result.message == f"Set 2 acceptance criteria on task {task_id}"

        criteria = board.tasks.get_task(task_id).data.task.criteria
        assert [(c.id, c.text, c.checked, c.checked_by) for c in criteria] == [
            ("c1", "Has tests", False, None),
            ("c2", "Has docs", False, None),
        ]

    def test_replacing_resets_progress(self, board, new_task):
        task_id = new_task()
        board.criteria.set_criteria(task_id, ["One"])
        board.criteria.check_criterion(task_id, "c1")
        board.criteria.set_criteria(task_id, ["One", "Two"])
        criteria = board.tasks.get_task(task_id).data.task.criteria
        assert [c.checked for c in criteria] == [False, False]

    def test_stored_as_versioned_envelope(self, board, db, new_task):
        task_id = new_task()
        board.criteria.set_criteria(task_id, ["One"])
        raw = json.loads(db.fetchone("SELECT criteria FROM tasks WHERE id = ?", (task_id,))["criteria"])
        assert raw["version"] == 1
        assert raw["items"][0]["id"] == "c1"

    def test_missing_task(self, board):
        assert board.criteria.set_criteria("nope", ["x"]).outcome == Outcome.NOT_FOUND


class TestCheckCriterion:
    """Tests for checking off acceptance criteria."""

    def test_check_records_agent_and_progress(self, board, new_task):
        task_id = new_task()
        board.criteria.set_criteria(task_id, ["Has tests", "Has docs"])
        result = board.criteria.check_criterion(task_id, "c1")
        assert result.outcome == Outcome.OK
        assert result.message == f"Criterion c1 checked on task {task_id} (1/2 done)"

        first = board.tasks.get_task(task_id).data.task.criteria[0]
        assert first.checked is True
        assert first.checked_by == "test-agent"

    def test_uncheck_clears_checker(self, board, new_task):
        task_id = new_task()
        board.criteria.set_criteria(task_id, ["Has tests"])
        board.criteria.check_criterion(task_id, "c1")
        result = board.criteria.check_criterion(task_id, "c1", checked=False)
        assert "unchecked" in result.message
        assert "(0/1 done)" in result.message
        first = board.tasks.get_task(task_id).data.task.criteria[0]
        assert first.checked is False
        assert first.checked_by is None

    def test_unknown_criterion_lists_available(self, board, new_task):
        task_id = new_task()
        board.criteria.set_criteria(task_id, ["A", "B"])
        result = board.criteria.check_criterion(task_id, "c9")
        assert result.outcome == Outcome.NOT_FOUND
        assert result.message == "Criterion 'c9' not found. Available: c1, c2"

    def test_task_without_criteria(self, board, new_task):
        result = board.criteria.check_criterion(new_task(), "c1")
        assert result.outcome == Outcome.NOT_FOUND
        assert "Available: none" in result.message

    def test_missing_task(self, board):
        assert board.criteria.check_criterion("nope", "c1").outcome == Outcome.NOT_FOUND

    def test_legacy_bare_list_is_read(self, board, db, new_task):
        task_id = new_task()
        legacy = json.dumps([{"id": "c1", "text": "Old item", "checked": False, "checked_by": None}])
        _set_raw(db, "UPDATE tasks SET criteria = ? WHERE id = ?", (legacy, task_id))

        result = board.criteria.check_criterion(task_id, "c1")
        assert result.outcome == Outcome.OK
        raw = json.loads(db.fetchone("SELECT criteria FROM tasks WHERE id = ?", (task_id,))["criteria"])
        assert raw["version"] == 1

    def test_corrupt_criteria_fail_the_check(self, board, db, new_task):
        task_id = new_task()
        _set_raw(db, "UPDATE tasks SET criteria = ? WHERE id = ?", ("{broken", task_id))

        result = board.criteria.check_criterion(task_id, "c1")
        assert result.outcome == Outcome.CORRUPT
        assert result.is_error
        assert result.message == f"Data corruption: task {task_id} has invalid JSON in criteria field"
        # the stored value is left for inspection
        assert db.fetchone("SELECT criteria FROM tasks WHERE id = ?", (task_id,))["criteria"] == "{broken"

    def test_corrupt_criteria_fail_the_detail_view(self, board, db, new_task):
        task_id = new_task()
        _set_raw(db, "UPDATE tasks SET criteria = ? WHERE id = ?", ("{bad", task_id))
        result = board.tasks.get_task(task_id)
        assert result.outcome == Outcome.CORRUPT
        assert result.is_error
        assert result.message == f"Data corruption: task {task_id} has invalid JSON in criteria field"

    def test_malformed_envelope_fails_the_detail_view(self, board, db, new_task):
        task_id = new_task()
        _set_raw(db, "UPDATE tasks SET criteria = ? WHERE id = ?", ('{"version": 1, "items": "x"}', task_id))
        assert board.tasks.get_task(task_id).outcome == Outcome.CORRUPT

    def test_corrupt_criteria_still_list_the_task(self, board, db, new_task, caplog):
        task_id = new_task("Listed")
        _set_raw(db, "UPDATE tasks SET criteria = ? WHERE id = ?", ("{bad", task_id))

        with caplog.at_level(logging.WARNING, logger="taskboard_mcp"):
            result = board.tasks.list_tasks()
        assert result.outcome == Outcome.OK
        assert [(t.id, t.criteria) for t in result.data] == [(task_id, [])]
        assert "invalid JSON in criteria field" in caplog.text
        assert board.projects.get_board("forge/app").outcome == Outcome.OK
