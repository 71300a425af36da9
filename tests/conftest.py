"""Pytest configuration and fixtures for taskboard-mcp tests."""

from types import SimpleNamespace

import pytest

from taskboard_mcp.core.taskboard import Taskboard
from taskboard_mcp.utils.db import TaskboardDB

TEST_AGENT = "test-agent"


@pytest.fixture
def db():
    """Fresh in-memory store per test."""
    store = TaskboardDB(":memory:")
    yield store
    store.close()


@pytest.fixture
def db_no_fts():
    """In-memory store without the full-text index."""
    store = TaskboardDB(":memory:", enable_fts=False)
    yield store
    store.close()


@pytest.fixture
def board(db):
    """Taskboard facade acting as a fixed test agent."""
    return Taskboard(db, identity=lambda: TEST_AGENT)


@pytest.fixture
def ctx(board):
    """Stand-in for the FastMCP request context, exposing the board as lifespan context."""
    return SimpleNamespace(request_context=SimpleNamespace(lifespan_context=board))


@pytest.fixture
def new_task(board):
    """Create a task and return its ID; fails the test if creation does not succeed."""

    def _create(title="Task", project="forge/app", **kwargs):
        result = board.tasks.create_task(title=title, project=project, **kwargs)
        assert not result.is_error, result.message
        assert result.data, result.message
        return result.data

    return _create


@pytest.fixture
def advance(board):
    """Walk a task forward through the given statuses, failing on any rejection."""

    def _advance(task_id, *statuses):
        for status in statuses:
            result = board.tasks.update_task(task_id, status=status)
            assert result.outcome.value == "ok", result.message

    return _advance
