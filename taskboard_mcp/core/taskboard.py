"""Facade wiring every taskboard component to one store and one identity."""

from __future__ import annotations

from collections.abc import Callable

from taskboard_mcp.config import get_agent_name
from taskboard_mcp.core.comments import CommentLog
from taskboard_mcp.core.criteria import CriteriaChecklistService
from taskboard_mcp.core.dependencies import DependencyGraph
from taskboard_mcp.core.initiatives import InitiativeLinker
from taskboard_mcp.core.projects import ProjectBoard
from taskboard_mcp.core.tasks import TaskRepository
from taskboard_mcp.utils.db import TaskboardDB


class Taskboard:
    def __init__(self, db: TaskboardDB, identity: Callable[[], str] = get_agent_name) -> None:
        self.db = db
        self.tasks = TaskRepository(db, identity)
        self.comments = CommentLog(db, identity)
        self.criteria = CriteriaChecklistService(db, identity)
        self.dependencies = DependencyGraph(db, identity)
        self.projects = ProjectBoard(db)
        self.initiatives = InitiativeLinker(db, identity)

    def close(self) -> None:
        self.db.close()
