"""Tests for status pipelines and the transition table."""

import pytest

from taskboard_mcp.core.pipelines import (
    FORGE_PIPELINE,
    OPS_PIPELINE,
    PIPELINES,
    VALID_STATUSES,
    is_done,
    pipeline_for,
)
from taskboard_mcp.enums import TaskStatus


class TestPipelineSelection:
    """Tests for choosing a pipeline from the project name."""

    def test_ops_prefix_selects_lightweight_pipeline(self):
        assert pipeline_for("ops/infra") is OPS_PIPELINE

    @pytest.mark.parametrize("project", ["forge/app", "website", "", None])
    def test_other_projects_use_full_pipeline(self, project):
        assert pipeline_for(project) is FORGE_PIPELINE

    def test_prefix_must_lead_the_name(self):
        assert pipeline_for("team/ops/infra") is FORGE_PIPELINE
        assert pipeline_for("ops") is FORGE_PIPELINE

    def test_registry_by_name(self):
        assert PIPELINES == {"forge": FORGE_PIPELINE, "ops": OPS_PIPELINE}


class TestForgeTransitions:
    """Tests for the full development pipeline."""

    def test_each_status_advances_to_the_next(self):
        statuses = FORGE_PIPELINE.statuses
        for current, target in zip(statuses, statuses[1:]):
            assert FORGE_PIPELINE.can_transition(current, target), f"{current} -> {target}"

    @pytest.mark.parametrize("current", ["in_review", "testing", "acceptance"])
    def test_kick_back_to_in_progress(self, current):
        assert FORGE_PIPELINE.can_transition(current, "in_progress")

    def test_skipping_ahead_is_rejected(self):
        assert not FORGE_PIPELINE.can_transition("backlog", "ready")
        assert not FORGE_PIPELINE.can_transition("in_progress", "done")

    def test_moving_backwards_is_rejected(self):
        assert not FORGE_PIPELINE.can_transition("ready", "backlog")
        assert not FORGE_PIPELINE.can_transition("in_progress", "ready")

    def test_done_is_terminal(self):
        assert FORGE_PIPELINE.allowed_from("done") == ()
        assert FORGE_PIPELINE.is_terminal("done")
        assert not FORGE_PIPELINE.is_terminal("acceptance")

    def test_default_status(self):
        assert FORGE_PIPELINE.default_status == "backlog"


class TestOpsTransitions:
    """Tests for the lightweight pipeline."""

    def test_allowed_moves(self):
        assert OPS_PIPELINE.can_transition("todo", "in_progress")
        assert OPS_PIPELINE.can_transition("in_progress", "blocked")
        assert OPS_PIPELINE.can_transition("in_progress", "done")
        assert OPS_PIPELINE.can_transition("blocked", "in_progress")

    def test_rejected_moves(self):
        assert not OPS_PIPELINE.can_transition("todo", "done")
        assert not OPS_PIPELINE.can_transition("blocked", "done")
        assert not OPS_PIPELINE.can_transition("done", "todo")

    def test_unknown_status_has_no_moves(self):
        assert OPS_PIPELINE.allowed_from("backlog") == ()

    def test_default_status(self):
        assert OPS_PIPELINE.default_status == "todo"


class TestTransitionError:
    """Tests for the rejection message."""

    def test_names_current_target_pipeline_and_options(self):
        message = FORGE_PIPELINE.transition_error("backlog", "done")
        assert "'backlog' → 'done'" in message
        assert "forge pipeline" in message
        assert "Allowed: backlog → specced" in message

    def test_lists_every_allowed_target(self):
        message = FORGE_PIPELINE.transition_error("in_review", "done")
        assert "Allowed: in_review → testing | in_progress" in message

    def test_terminal_status(self):
        message = OPS_PIPELINE.transition_error("done", "todo")
        assert "ops pipeline" in message
        assert "No transitions from 'done'" in message


class TestStatusSets:
    """Tests for the combined status vocabulary."""

    def test_valid_statuses_is_union_without_duplicates(self):
        assert len(VALID_STATUSES) == len(set(VALID_STATUSES)) == 11
        assert set(VALID_STATUSES) == set(FORGE_PIPELINE.statuses) | set(OPS_PIPELINE.statuses)

    def test_enum_matches_pipelines(self):
        assert {s.value for s in TaskStatus} == set(VALID_STATUSES)

    def test_is_done_uses_project_pipeline(self):
        assert is_done("ops/infra", "done")
        assert is_done("forge/app", "done")
        assert not is_done("forge/app", "acceptance")
        assert not is_done("ops/infra", "blocked")
