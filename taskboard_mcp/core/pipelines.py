"""Status pipelines and the transition table each task follows.

Two fixed pipelines exist. Projects named ``ops/...`` use the lightweight
``ops`` pipeline; every other project uses the full ``forge`` development
lifecycle.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

LIGHTWEIGHT_PREFIX = "ops/"


@dataclass(frozen=True)
class Pipeline:
    """An ordered set of statuses and the allowed next statuses for each."""

    name: str
    statuses: tuple[str, ...]
    transitions: Mapping[str, tuple[str, ...]]
    default_status: str
    terminal_status: str

    def allowed_from(self, status: str) -> tuple[str, ...]:
        return self.transitions.get(status, ())

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.allowed_from(current)

    def is_terminal(self, status: str) -> bool:
        return status == self.terminal_status

    def transition_error(self, current: str, target: str) -> str:
        """Message naming the rejected move and the moves that would be accepted."""
        allowed = self.allowed_from(current)
        if allowed:
            hint = f"Allowed: {current} → {' | '.join(allowed)}"
        else:
            hint = f"No transitions from '{current}'"
        return f"Invalid status transition '{current}' → '{target}' ({self.name} pipeline). {hint}"


# Full software development lifecycle. Forward-only, except that review,
# testing and acceptance can each send work back to in_progress.
FORGE_PIPELINE = Pipeline(
    name="forge",
    statuses=(
        "backlog",
        "specced",
        "designed",
        "ready",
        "in_progress",
        "in_review",
        "testing",
        "acceptance",
        "done",
    ),
    transitions={
        "backlog": ("specced",),
        "specced": ("designed",),
        "designed": ("ready",),
        "ready": ("in_progress",),
        "in_progress": ("in_review",),
        "in_review": ("testing", "in_progress"),
        "testing": ("acceptance", "in_progress"),
        "acceptance": ("done", "in_progress"),
        "done": (),
    },
    default_status="backlog",
    terminal_status="done",
)

# Lightweight flow for non-engineering work
OPS_PIPELINE = Pipeline(
    name="ops",
    statuses=("todo", "in_progress", "blocked", "done"),
    transitions={
        "todo": ("in_progress",),
        "in_progress": ("blocked", "done"),
        "blocked": ("in_progress",),
        "done": (),
    },
    default_status="todo",
    terminal_status="done",
)

PIPELINES: dict[str, Pipeline] = {p.name: p for p in (FORGE_PIPELINE, OPS_PIPELINE)}

VALID_STATUSES: tuple[str, ...] = tuple(dict.fromkeys(FORGE_PIPELINE.statuses + OPS_PIPELINE.statuses))


def pipeline_for(project: str | None) -> Pipeline:
    """Select the pipeline for a project by its name prefix."""
    if project and project.startswith(LIGHTWEIGHT_PREFIX):
        return OPS_PIPELINE
    return FORGE_PIPELINE


def is_done(project: str | None, status: str) -> bool:
    return pipeline_for(project).is_terminal(status)
