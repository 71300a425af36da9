"""Taskboard engine: pipelines, repositories and the facade that wires them."""

from taskboard_mcp.core.results import FAILURES, OperationResult, Outcome
from taskboard_mcp.core.pipelines import FORGE_PIPELINE, OPS_PIPELINE, Pipeline, is_done, pipeline_for
from taskboard_mcp.core.taskboard import Taskboard

__all__ = [
    "FAILURES",
    "Outcome",
    "OperationResult",
    "Pipeline",
    "FORGE_PIPELINE",
    "OPS_PIPELINE",
    "pipeline_for",
    "is_done",
    "Taskboard",
]
