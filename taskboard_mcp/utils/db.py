"""SQLite store for the taskboard."""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from collections.abc import Iterator, Sequence
from contextlib import AbstractContextManager, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    project TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    status TEXT NOT NULL DEFAULT 'backlog',
    assigned_to TEXT,
    priority INTEGER DEFAULT 5,
    created_by TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    parent_task_id TEXT REFERENCES tasks(id),
    branch TEXT,
    pr_url TEXT,
    pr_number INTEGER,
    pr_merged INTEGER DEFAULT 0,
    spec_file TEXT,
    design_file TEXT,
    criteria TEXT,
    due_date TEXT
);

CREATE TABLE IF NOT EXISTS task_comments (
    id TEXT PRIMARY KEY,
    task_id TEXT NOT NULL REFERENCES tasks(id),
    author TEXT NOT NULL,
    content TEXT NOT NULL,
    type TEXT DEFAULT 'comment',
    verdict TEXT,
    categories TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS task_deps (
    task_id TEXT NOT NULL,
    depends_on_id TEXT NOT NULL,
    created_by TEXT,
    PRIMARY KEY (task_id, depends_on_id)
);

CREATE TABLE IF NOT EXISTS task_history (
    id TEXT PRIMARY KEY,
    task_id TEXT NOT NULL,
    from_status TEXT,
    to_status TEXT NOT NULL,
    changed_by TEXT,
    changed_at TEXT NOT NULL,
    duration_seconds INTEGER
);

CREATE TABLE IF NOT EXISTS initiatives (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    status TEXT DEFAULT 'active',
    owner TEXT,
    participating_agents TEXT DEFAULT '[]',
    success_criteria TEXT DEFAULT '[]',
    progress_pct INTEGER DEFAULT 0,
    target_date TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS initiative_tasks (
    id TEXT PRIMARY KEY,
    initiative_id TEXT NOT NULL REFERENCES initiatives(id),
    task_id TEXT NOT NULL REFERENCES tasks(id),
    role TEXT DEFAULT '',
    linked_by TEXT,
    created_at TEXT NOT NULL,
    UNIQUE(initiative_id, task_id)
);

CREATE TABLE IF NOT EXISTS initiative_updates (
    id TEXT PRIMARY KEY,
    initiative_id TEXT NOT NULL REFERENCES initiatives(id),
    agent_name TEXT NOT NULL,
    update_text TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project);
CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);
CREATE INDEX IF NOT EXISTS idx_tasks_parent ON tasks(parent_task_id);
CREATE INDEX IF NOT EXISTS idx_task_deps_depends_on ON task_deps(depends_on_id);
CREATE INDEX IF NOT EXISTS idx_task_comments_task ON task_comments(task_id);
CREATE INDEX IF NOT EXISTS idx_task_history_task ON task_history(task_id);
"""

FTS_SQL = """
CREATE VIRTUAL TABLE IF NOT EXISTS tasks_fts USING fts5(
    title, description, content=tasks, content_rowid=rowid
);

CREATE TRIGGER IF NOT EXISTS tasks_ai AFTER INSERT ON tasks BEGIN
    INSERT INTO tasks_fts(rowid, title, description) VALUES (new.rowid, new.title, new.description);
END;
CREATE TRIGGER IF NOT EXISTS tasks_ad AFTER DELETE ON tasks BEGIN
    INSERT INTO tasks_fts(tasks_fts, rowid, title, description)
    VALUES ('delete', old.rowid, old.title, old.description);
END;
CREATE TRIGGER IF NOT EXISTS tasks_au AFTER UPDATE ON tasks BEGIN
    INSERT INTO tasks_fts(tasks_fts, rowid, title, description)
    VALUES ('delete', old.rowid, old.title, old.description);
    INSERT INTO tasks_fts(rowid, title, description) VALUES (new.rowid, new.title, new.description);
END;
"""


def _new_id() -> str:
    """Short opaque record ID (first 8 hex chars of a UUID4)."""
    return uuid.uuid4().hex[:8]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds")


def _from_iso(value: str) -> datetime | None:
    """Parse a stored timestamp; values without an offset are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TaskboardDB:
    """
    SQLite-backed persistent store.

    One connection per store handle, shared under a re-entrant lock. Writers
    use ``transaction()``, which starts with ``BEGIN IMMEDIATE`` so the write
    lock is held from the first read; multi-query reads use ``read()``.

    Pass ``":memory:"`` for an isolated throwaway store (tests).
    """

    def __init__(self, db_path: str | Path = MEMORY_DB, *, enable_fts: bool = True) -> None:
        self._db_path = str(db_path)
        if self._db_path != MEMORY_DB:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.RLock()
        self._conn = sqlite3.connect(
            self._db_path,
            timeout=5.0,
            isolation_level=None,
            check_same_thread=False,
        )
        self._conn.row_factory = sqlite3.Row
        if self._db_path != MEMORY_DB:
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA busy_timeout=5000")

        self._conn.executescript(SCHEMA_SQL)
        self.fts_enabled = self._ensure_fts() if enable_fts else False
        logger.info("TaskboardDB ready db=%s fts=%s", self._db_path, self.fts_enabled)

    @property
    def path(self) -> str:
        return self._db_path

    def _ensure_fts(self) -> bool:
        try:
            self._conn.executescript(FTS_SQL)
        except sqlite3.OperationalError as exc:
            # search_tasks falls back to substring matching
            logger.info("FTS5 unavailable (%s); search will use substring matching", exc)
            return False
        return True

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @contextmanager
    def transaction(self, *, immediate: bool = True) -> Iterator[sqlite3.Connection]:
        """
        Run a block atomically.

        Commits when the block exits normally and rolls back on any exception.
        Nested use joins the outer transaction.
        """
        with self._lock:
            if self._conn.in_transaction:
                yield self._conn
                return
            self._conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            try:
                yield self._conn
            except BaseException:
                self._conn.rollback()
                raise
            self._conn.commit()

    def read(self) -> AbstractContextManager[sqlite3.Connection]:
        """Consistent snapshot for several related queries."""
        return self.transaction(immediate=False)

    def fetchone(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Row | None:
        with self._lock:
            return self._conn.execute(sql, tuple(params)).fetchone()

    def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        with self._lock:
            return list(self._conn.execute(sql, tuple(params)).fetchall())
