"""Settings loaded from environment variables.

Every variable uses the ``TASKBOARD_`` prefix. The older ``MCP_DB_PATH`` and
``MCP_AGENT_NAME`` names shared by the rest of the MCP suite are honoured as
fallbacks so existing agent configurations keep working.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKBOARD"

DEFAULT_AGENT_NAME = "default"
DEFAULT_DB_PATH = Path.home() / ".mcp-suite" / "taskboard.db"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v.strip()
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_log_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def get_agent_name() -> str:
    """Return the identity used to attribute writes (created_by, changed_by, ...)."""
    return _first_env(_k("AGENT_NAME"), "MCP_AGENT_NAME", default=DEFAULT_AGENT_NAME) or DEFAULT_AGENT_NAME


@dataclass(frozen=True)
class Settings:
    db_path: Path
    log_level: int = logging.INFO
    log_file: Path | None = None
    enable_fts: bool = True


def load_settings() -> Settings:
    db_raw = _first_env(_k("DB_PATH"), "MCP_DB_PATH")
    log_file_raw = _first_env(_k("LOG_FILE"))
    return Settings(
        db_path=Path(db_raw).expanduser() if db_raw else DEFAULT_DB_PATH,
        log_level=_env_log_level(_k("LOG_LEVEL"), logging.INFO),
        log_file=Path(log_file_raw).expanduser() if log_file_raw else None,
        enable_fts=_env_bool(_k("ENABLE_FTS"), True),
    )
