"""Tests for the MCP tool layer and its input models."""

import json

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import ValidationError

from taskboard_mcp import (
    AddCommentInput,
    AddInitiativeUpdateInput,
    CheckCriterionInput,
    CreateInitiativeInput,
    CreateTaskInput,
    DeleteTaskInput,
    DependencyInput,
    GetBoardInput,
    GetInitiativeInput,
    GetTaskInput,
    InitiativeStatus,
    LinkTaskInput,
    ListInitiativesInput,
    ListTasksInput,
    ResponseFormat,
    SearchTasksInput,
    SetCriteriaInput,
    SubmitReviewInput,
    TaskStatus,
    UpdateInitiativeInput,
    UpdateTaskInput,
    Verdict,
    mcp,
    taskboard_add_comment,
    taskboard_add_dependency,
    taskboard_add_initiative_update,
    taskboard_check_criterion,
    taskboard_create_initiative,
    taskboard_create_task,
    taskboard_delete_task,
    taskboard_get_board,
    taskboard_get_initiative,
    taskboard_get_task,
    taskboard_link_task_to_initiative,
    taskboard_list_initiatives,
    taskboard_list_tasks,
    taskboard_remove_dependency,
    taskboard_search_tasks,
    taskboard_set_criteria,
    taskboard_submit_review,
    taskboard_update_initiative,
    taskboard_update_task,
)

EXPECTED_TOOLS = {
    "create_task",
    "list_tasks",
    "search_tasks",
    "get_task",
    "update_task",
    "delete_task",
    "add_comment",
    "submit_review",
    "set_criteria",
    "check_criterion",
    "get_board",
    "add_dependency",
    "remove_dependency",
    "create_initiative",
    "list_initiatives",
    "get_initiative",
    "update_initiative",
    "link_task_to_initiative",
    "add_initiative_update",
}


# ============================================================================
# Input Model Tests
# ============================================================================


class TestInputModels:
    """Tests for Pydantic input model validation."""

    def test_create_task_defaults(self):
        params = CreateTaskInput(title="  Build API  ", project="forge/app")
        assert params.title == "Build API"
        assert params.priority == 5
        assert params.description == ""
        assert params.status is None

    def test_create_task_limits(self):
        with pytest.raises(ValidationError):
            CreateTaskInput(title="x" * 201, project="p")
        with pytest.raises(ValidationError):
            CreateTaskInput(title="x", project="p", priority=11)
        with pytest.raises(ValidationError):
            CreateTaskInput(title="x", project="p", priority=0)
        with pytest.raises(ValidationError):
            CreateTaskInput(title="x", project="p", description="d" * 10001)
        with pytest.raises(ValidationError):
            CreateTaskInput(title="   ", project="p")

    def test_create_task_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            CreateTaskInput(title="x", project="p", status="archived")

    def test_list_tasks_defaults_and_limits(self):
        params = ListTasksInput()
        assert params.status == "all"
        assert params.limit == 30
        assert params.response_format == ResponseFormat.MARKDOWN
        assert ListTasksInput(status="ready").status == TaskStatus.READY
        with pytest.raises(ValidationError):
            ListTasksInput(limit=101)
        with pytest.raises(ValidationError):
            ListTasksInput(limit=0)

    def test_search_defaults(self):
        params = SearchTasksInput(query="login")
        assert params.limit == 20
        with pytest.raises(ValidationError):
            SearchTasksInput(query="  ")

    def test_update_task_tracks_explicit_fields(self):
        params = UpdateTaskInput(task_id="t1", parent_task_id=None, priority=3)
        assert params.model_fields_set == {"task_id", "parent_task_id", "priority"}
        with pytest.raises(ValidationError):
            UpdateTaskInput(task_id="t1", priority=42)

    def test_delete_defaults_to_unconfirmed(self):
        assert DeleteTaskInput(task_id="t1").confirm is False

    def test_review_verdict(self):
        params = SubmitReviewInput(task_id="t1", verdict="approve", content="ok")
        assert params.verdict == Verdict.APPROVE
        assert params.categories == []
        with pytest.raises(ValidationError):
            SubmitReviewInput(task_id="t1", verdict="maybe", content="ok")

    def test_set_criteria_drops_blank_items(self):
        params = SetCriteriaInput(task_id="t1", criteria=["  Tested ", "", "Documented"])
        assert params.criteria == ["Tested", "Documented"]

    def test_check_criterion_defaults_to_checked(self):
        assert CheckCriterionInput(task_id="t1", criterion_id="c1").checked is True

    def test_initiative_inputs(self):
        assert ListInitiativesInput().status == InitiativeStatus.ACTIVE
        assert ListInitiativesInput(status="all").status == "all"
        with pytest.raises(ValidationError):
            UpdateInitiativeInput(initiative_id="i1", progress_pct=101)
        with pytest.raises(ValidationError):
            AddInitiativeUpdateInput(initiative_id="i1", update_text="x" * 5001)
        assert LinkTaskInput(initiative_id="i1", task_id="t1").role == ""


class TestEnums:
    """Tests for enum values."""

    def test_response_format_values(self):
        assert ResponseFormat.MARKDOWN.value == "markdown"
        assert ResponseFormat.JSON.value == "json"

    def test_initiative_status_values(self):
        assert {s.value for s in InitiativeStatus} == {"active", "paused", "completed", "archived"}

    def test_verdict_values(self):
        assert {v.value for v in Verdict} == {"approve", "reject"}


# ============================================================================
# Tool Tests
# ============================================================================


class TestToolRegistration:
    """Tests for the FastMCP tool registry."""

    @pytest.mark.asyncio
    async def test_all_tools_registered(self):
        tools = await mcp.list_tools()
        assert {t.name for t in tools} == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_context_is_not_part_of_the_schema(self):
        tools = {t.name: t for t in await mcp.list_tools()}
        schema = tools["create_task"].inputSchema
        assert "params" in schema["properties"]
        assert "ctx" not in schema["properties"]

    @pytest.mark.asyncio
    async def test_annotations(self):
        tools = {t.name: t for t in await mcp.list_tools()}
        assert tools["get_task"].annotations.readOnlyHint is True
        assert tools["delete_task"].annotations.destructiveHint is True


class TestTaskTools:
    """Tests for task tools called with a stand-in request context."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, ctx):
        result = await taskboard_create_task(CreateTaskInput(title="Build API", project="forge/app"), ctx)
        assert result.startswith("Task created: ")
        task_id = result.split()[2]

        detail = await taskboard_get_task(GetTaskInput(task_id=task_id), ctx)
        assert f"Task: {task_id}" in detail
        assert "Status: backlog" in detail

    @pytest.mark.asyncio
    async def test_create_failure_raises_tool_error(self, ctx):
        with pytest.raises(ToolError, match="'project' is required"):
            await taskboard_create_task(CreateTaskInput(title="Orphan"), ctx)

    @pytest.mark.asyncio
    async def test_get_missing_task_is_plain_text(self, ctx):
        result = await taskboard_get_task(GetTaskInput(task_id="nope"), ctx)
        assert result == "Task 'nope' not found."

    @pytest.mark.asyncio
    async def test_get_task_json(self, ctx, new_task):
        task_id = new_task("Build API")
        result = await taskboard_get_task(GetTaskInput(task_id=task_id, response_format="json"), ctx)
        data = json.loads(result)
        assert data["outcome"] == "ok"
        assert data["data"]["task"]["id"] == task_id
        assert data["data"]["history"][0]["to_status"] == "backlog"

    @pytest.mark.asyncio
    async def test_list_markdown_and_json(self, ctx, new_task):
        new_task("Alpha", priority=1)
        new_task("Beta", project="ops/infra")

        text = await taskboard_list_tasks(ListTasksInput(), ctx)
        assert "[backlog] P1 | forge/app: Alpha" in text
        assert "Beta" in text

        filtered = await taskboard_list_tasks(
            ListTasksInput(status="todo", response_format=ResponseFormat.JSON), ctx
        )
        data = json.loads(filtered)
        assert [t["title"] for t in data["data"]] == ["Beta"]

    @pytest.mark.asyncio
    async def test_list_empty(self, ctx):
        assert await taskboard_list_tasks(ListTasksInput(), ctx) == "No tasks found matching filters."

    @pytest.mark.asyncio
    async def test_search(self, ctx, new_task):
        new_task("Build login page")
        result = await taskboard_search_tasks(SearchTasksInput(query="login"), ctx)
        assert "Build login page" in result

    @pytest.mark.asyncio
    async def test_update_transition_and_rejection(self, ctx, new_task):
        task_id = new_task()
        result = await taskboard_update_task(UpdateTaskInput(task_id=task_id, status="specced"), ctx)
        assert result == f"Task {task_id} updated: status"

        with pytest.raises(ToolError, match="Invalid status transition"):
            await taskboard_update_task(UpdateTaskInput(task_id=task_id, status="done"), ctx)

    @pytest.mark.asyncio
    async def test_update_optimistic_noop_is_not_an_error(self, ctx, new_task):
        task_id = new_task()
        result = await taskboard_update_task(
            UpdateTaskInput(task_id=task_id, status="specced", expected_status="ready"), ctx
        )
        assert result.startswith(f"No-op: task {task_id} is now 'backlog'")

    @pytest.mark.asyncio
    async def test_update_explicit_null_clears_parent(self, ctx, board, new_task):
        parent_id = new_task("Parent")
        child_id = new_task("Child", parent_task_id=parent_id)
        result = await taskboard_update_task(UpdateTaskInput(task_id=child_id, parent_task_id=None), ctx)
        assert result == f"Task {child_id} updated: parent_task_id"
        assert board.tasks.get_task(child_id).data.task.parent_task_id is None

    @pytest.mark.asyncio
    async def test_update_only_sends_given_fields(self, ctx, board, new_task):
        task_id = new_task(assigned_to="alice")
        await taskboard_update_task(UpdateTaskInput(task_id=task_id, branch="feat/x"), ctx)
        task = board.tasks.get_task(task_id).data.task
        assert task.assigned_to == "alice"
        assert task.branch == "feat/x"

    @pytest.mark.asyncio
    async def test_delete_requires_confirm(self, ctx, board, new_task):
        task_id = new_task()
        result = await taskboard_delete_task(DeleteTaskInput(task_id=task_id), ctx)
        assert result == "Deletion not confirmed. Set confirm: true to proceed."
        result = await taskboard_delete_task(DeleteTaskInput(task_id=task_id, confirm=True), ctx)
        assert result.startswith(f"Deleted task {task_id}")

    @pytest.mark.asyncio
    async def test_comment_review_and_criteria(self, ctx, board, db, new_task):
        task_id = new_task()
        assert "Comment added" in await taskboard_add_comment(AddCommentInput(task_id=task_id, content="hi"), ctx)
        review = await taskboard_submit_review(
            SubmitReviewInput(task_id=task_id, verdict="reject", content="no", categories=["bug"]), ctx
        )
        assert ": REJECT (id: " in review
        await taskboard_set_criteria(SetCriteriaInput(task_id=task_id, criteria=["Tested"]), ctx)
        checked = await taskboard_check_criterion(CheckCriterionInput(task_id=task_id, criterion_id="c1"), ctx)
        assert "(1/1 done)" in checked

        with db.transaction() as conn:
            conn.execute("UPDATE tasks SET criteria = '{bad' WHERE id = ?", (task_id,))
        with pytest.raises(ToolError, match="Data corruption"):
            await taskboard_check_criterion(CheckCriterionInput(task_id=task_id, criterion_id="c1"), ctx)
        with pytest.raises(ToolError, match="invalid JSON in criteria field"):
            await taskboard_get_task(GetTaskInput(task_id=task_id), ctx)

    @pytest.mark.asyncio
    async def test_board(self, ctx, new_task):
        new_task("Idea")
        text = await taskboard_get_board(GetBoardInput(project="forge/app"), ctx)
        assert "[BACKLOG] (1)" in text
        missing = await taskboard_get_board(GetBoardInput(project="forge/none"), ctx)
        assert missing == "No tasks found for project 'forge/none'."

    @pytest.mark.asyncio
    async def test_dependencies(self, ctx, new_task):
        a, b = new_task("A"), new_task("B")
        added = await taskboard_add_dependency(DependencyInput(task_id=a, depends_on_id=b), ctx)
        assert added == 'Dependency added: "A" is now blocked by "B"'
        with pytest.raises(ToolError, match="circular chain"):
            await taskboard_add_dependency(DependencyInput(task_id=b, depends_on_id=a), ctx)
        with pytest.raises(ToolError, match="cannot depend on itself"):
            await taskboard_add_dependency(DependencyInput(task_id=a, depends_on_id=a), ctx)

        removed = await taskboard_remove_dependency(DependencyInput(task_id=a, depends_on_id=b), ctx)
        assert removed.startswith("Dependency removed")
        again = await taskboard_remove_dependency(DependencyInput(task_id=a, depends_on_id=b), ctx)
        assert again.startswith("Dependency not found")


class TestInitiativeTools:
    """Tests for initiative tools."""

    @pytest.mark.asyncio
    async def test_initiative_flow(self, ctx, new_task):
        created = await taskboard_create_initiative(
            CreateInitiativeInput(title="Launch", participants=["alice"], criteria=["Live"]), ctx
        )
        initiative_id = created.split()[2]
        task_id = new_task("API")

        linked = await taskboard_link_task_to_initiative(
            LinkTaskInput(initiative_id=initiative_id, task_id=task_id, role="backend"), ctx
        )
        assert linked == 'Task "API" linked to initiative "Launch" (role: backend)'
        await taskboard_add_initiative_update(
            AddInitiativeUpdateInput(initiative_id=initiative_id, update_text="Kickoff done"), ctx
        )
        await taskboard_update_initiative(UpdateInitiativeInput(initiative_id=initiative_id, progress_pct=25), ctx)

        detail = await taskboard_get_initiative(GetInitiativeInput(initiative_id=initiative_id), ctx)
        assert detail.startswith("# Launch")
        assert "Progress: 25%" in detail
        assert "1. Live" in detail
        assert f"- {task_id} [backlog] P5 forge/app: API (backend)" in detail
        assert "test-agent: Kickoff done" in detail

        listed = await taskboard_list_initiatives(ListInitiativesInput(), ctx)
        assert listed.startswith(f"{initiative_id} | [active] 25% | Launch (owner: test-agent) → alice")

    @pytest.mark.asyncio
    async def test_get_initiative_json_carries_done_count(self, ctx, board, new_task, advance):
        created = await taskboard_create_initiative(CreateInitiativeInput(title="Launch"), ctx)
        initiative_id = created.split()[2]
        finished, open_task = new_task("Ops chore", project="ops/infra"), new_task("API")
        advance(finished, "in_progress", "done")
        board.initiatives.link_task(initiative_id, finished)
        board.initiatives.link_task(initiative_id, open_task)

        result = await taskboard_get_initiative(
            GetInitiativeInput(initiative_id=initiative_id, response_format="json"), ctx
        )
        data = json.loads(result)["data"]
        assert data["tasks_done"] == 1
        assert len(data["tasks"]) == 2

    @pytest.mark.asyncio
    async def test_list_initiatives_json_all(self, ctx):
        await taskboard_create_initiative(CreateInitiativeInput(title="One"), ctx)
        result = await taskboard_list_initiatives(ListInitiativesInput(status="all", response_format="json"), ctx)
        data = json.loads(result)
        assert [i["title"] for i in data["data"]] == ["One"]

    @pytest.mark.asyncio
    async def test_missing_initiative(self, ctx):
        result = await taskboard_get_initiative(GetInitiativeInput(initiative_id="nope"), ctx)
        assert result == "Initiative 'nope' not found."
