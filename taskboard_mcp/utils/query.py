"""SQL fragment builders restricted to known column names."""

from collections.abc import Iterable, Mapping
from typing import Any


def _check_columns(columns: Iterable[str], allowed: frozenset[str]) -> None:
    unknown = sorted(set(columns) - allowed)
    if unknown:
        raise ValueError(f"Column(s) not allowed: {', '.join(unknown)}")


def _build_where_clause(
    filters: Iterable[tuple[str, Any]],
    allowed: frozenset[str],
) -> tuple[str, list[Any]]:
    """
    Build an AND-joined WHERE body from (column, value) equality filters.

    Args:
        filters: Column/value pairs; every column must be in ``allowed``
        allowed: Column identifiers permitted for this entity

    Returns:
        Tuple of (sql: str, params: list); sql is empty when there are no filters

    Raises:
        ValueError: If a column is outside the allow-list
    """
    pairs = list(filters)
    if not pairs:
        return "", []
    _check_columns((column for column, _ in pairs), allowed)
    sql = " AND ".join(f"{column} = ?" for column, _ in pairs)
    return sql, [value for _, value in pairs]


def _build_set_clause(
    updates: Mapping[str, Any],
    allowed: frozenset[str],
) -> tuple[str, list[Any]]:
    """
    Build the SET body of an UPDATE from a column -> value mapping.

    Raises:
        ValueError: If a column is outside the allow-list
    """
    if not updates:
        return "", []
    _check_columns(updates.keys(), allowed)
    sql = ", ".join(f"{column} = ?" for column in updates)
    return sql, list(updates.values())


def _placeholders(count: int) -> str:
    """``?, ?, ?`` for an IN (...) list of ``count`` values."""
    return ", ".join("?" for _ in range(count))


def _like_pattern(text: str) -> str:
    """Substring LIKE pattern with wildcards escaped (use with ESCAPE '\\')."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
