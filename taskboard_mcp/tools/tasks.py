"""Task, review, dependency and board MCP tools."""

from mcp.server.fastmcp import Context
from mcp.types import ToolAnnotations

from taskboard_mcp.enums import TaskStatus
from taskboard_mcp.models.inputs import (
    AddCommentInput,
    CheckCriterionInput,
    CreateTaskInput,
    DeleteTaskInput,
    DependencyInput,
    GetBoardInput,
    GetTaskInput,
    ListTasksInput,
    SearchTasksInput,
    SetCriteriaInput,
    SubmitReviewInput,
    UpdateTaskInput,
)
from taskboard_mcp.server import mcp
from taskboard_mcp.tools.common import _board, _respond
from taskboard_mcp.utils.formatters import _format_board, _format_task_detail, _format_tasks


@mcp.tool(
    name="create_task",
    annotations=ToolAnnotations(
        title="Create Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskboard_create_task(params: CreateTaskInput, ctx: Context) -> str:
    """
    Create a new task on the board, or a subtask of an existing task.

    USE THIS WHEN:
    - Tracking a new piece of work for yourself or another agent
    - Breaking a task into subtasks (set parent_task_id)

    DO NOT USE WHEN:
    - Changing an existing task → use update_task instead
    - Leaving a note on a task → use add_comment instead

    PIPELINES:
    - Projects named "ops/..." use todo → in_progress → blocked/done
    - All other projects use backlog → specced → designed → ready →
      in_progress → in_review → testing → acceptance → done

    Args:
        params: CreateTaskInput containing title, project and optional attributes

    Returns:
        Confirmation message with the new task ID

    Examples:
        - New task: params with title="Add login page", project="forge/web"
        - Subtask: params with title="Write tests", parent_task_id="a1b2c3d4"
        - Ops work: params with title="Renew TLS cert", project="ops/infra", priority=2
    """
    result = _board(ctx).tasks.create_task(
        title=params.title,
        project=params.project,
        description=params.description,
        priority=params.priority,
        status=params.status.value if params.status else None,
        assigned_to=params.assigned_to,
        parent_task_id=params.parent_task_id,
        due_date=params.due_date,
    )
    return _respond(result)


@mcp.tool(
    name="list_tasks",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_list_tasks(params: ListTasksInput, ctx: Context) -> str:
    """
    List tasks from the board, ordered by priority then age.

    USE THIS WHEN:
    - Finding work assigned to you or to another agent
    - Seeing every task in one status across projects

    DO NOT USE WHEN:
    - You have a specific task ID → use get_task instead
    - Looking for tasks by words in their text → use search_tasks instead
    - You want one project grouped by column → use get_board instead

    Args:
        params: ListTasksInput containing project, status, assigned_to, limit and response_format

    Returns:
        One line per task (markdown) or the task records (JSON)

    Examples:
        - My tasks: params with assigned_to="alice"
        - Everything in review: params with status="in_review"
        - One project: params with project="forge/web", limit=100
    """
    status = params.status.value if isinstance(params.status, TaskStatus) else params.status
    result = _board(ctx).tasks.list_tasks(
        project=params.project,
        status=None if status == "all" else status,
        assigned_to=params.assigned_to,
        limit=params.limit,
    )
    return _respond(result, _format_tasks, params.response_format)


@mcp.tool(
    name="search_tasks",
    annotations=ToolAnnotations(
        title="Search Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_search_tasks(params: SearchTasksInput, ctx: Context) -> str:
    """
    Full-text search across all tasks by title and description.

    Supports FTS5 syntax (AND, OR, NOT, prefix*). Queries the index cannot
    evaluate fall back to a plain substring match.

    Args:
        params: SearchTasksInput containing query, limit and response_format

    Returns:
        Matching tasks, best match first

    Examples:
        - params with query="login"
        - params with query="auth* AND NOT legacy"
    """
    result = _board(ctx).tasks.search_tasks(params.query, limit=params.limit)
    return _respond(result, _format_tasks, params.response_format)


@mcp.tool(
    name="get_task",
    annotations=ToolAnnotations(
        title="Get Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_get_task(params: GetTaskInput, ctx: Context) -> str:
    """
    Get full details of a task.

    Includes acceptance criteria, reviews, comments, status history,
    dependencies in both directions, the parent task and subtasks.

    Args:
        params: GetTaskInput containing task_id and response_format

    Returns:
        Task detail, or a not-found message
    """
    result = _board(ctx).tasks.get_task(params.task_id)
    return _respond(result, _format_task_detail, params.response_format)


@mcp.tool(
    name="update_task",
    annotations=ToolAnnotations(
        title="Update Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_update_task(params: UpdateTaskInput, ctx: Context) -> str:
    """
    Update a task's fields: move it along its pipeline, assign it, set branch or PR info.

    USE THIS WHEN:
    - Transitioning status (only moves allowed by the project's pipeline)
    - Assigning or re-assigning a task
    - Recording branch, spec, design or PR details

    CONCURRENCY: set expected_status to the status you last saw. If another
    agent has moved the task since, nothing is written and the reply says so.

    CLEARING VALUES: pass null to clear a nullable field (e.g. parent_task_id=null).

    Args:
        params: UpdateTaskInput containing task_id and the fields to change

    Returns:
        Confirmation listing the updated fields, or a no-op notice

    Examples:
        - Start work: params with task_id="a1b2c3d4", status="in_progress", expected_status="ready"
        - Assign: params with task_id="a1b2c3d4", assigned_to="bob"
        - PR merged: params with task_id="a1b2c3d4", pr_merged=true
    """
    changes = params.model_dump(mode="json", exclude_unset=True, exclude={"task_id", "expected_status"})
    expected = params.expected_status.value if params.expected_status else None
    result = _board(ctx).tasks.update_task(params.task_id, expected_status=expected, **changes)
    return _respond(result)


@mcp.tool(
    name="delete_task",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_delete_task(params: DeleteTaskInput, ctx: Context) -> str:
    """
    Permanently delete a task together with its subtasks, comments, history and dependencies.

    Requires confirm=true; without it nothing is deleted.

    Args:
        params: DeleteTaskInput containing task_id and confirm

    Returns:
        Confirmation message
    """
    result = _board(ctx).tasks.delete_task(params.task_id, confirm=params.confirm)
    return _respond(result)


@mcp.tool(
    name="add_comment",
    annotations=ToolAnnotations(
        title="Add Comment",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskboard_add_comment(params: AddCommentInput, ctx: Context) -> str:
    """
    Add a comment to a task's thread.

    Args:
        params: AddCommentInput containing task_id and content

    Returns:
        Confirmation with the comment ID
    """
    result = _board(ctx).comments.add_comment(params.task_id, params.content)
    return _respond(result)


@mcp.tool(
    name="submit_review",
    annotations=ToolAnnotations(
        title="Submit Review",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskboard_submit_review(params: SubmitReviewInput, ctx: Context) -> str:
    """
    Submit a structured review (approve or reject) with issue categories.

    Reviews are shown separately from ordinary comments in get_task.

    Args:
        params: SubmitReviewInput containing task_id, verdict, content and categories

    Returns:
        Confirmation with the review ID

    Examples:
        - params with task_id="a1b2c3d4", verdict="reject", content="Missing tests", categories=["testing"]
    """
    result = _board(ctx).comments.submit_review(
        params.task_id, params.verdict.value, params.content, params.categories
    )
    return _respond(result)


@mcp.tool(
    name="set_criteria",
    annotations=ToolAnnotations(
        title="Set Acceptance Criteria",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_set_criteria(params: SetCriteriaInput, ctx: Context) -> str:
    """
    Replace a task's acceptance criteria checklist. Items get IDs c1, c2, ... and start unchecked.

    Args:
        params: SetCriteriaInput containing task_id and criteria

    Returns:
        Confirmation with the number of criteria set
    """
    result = _board(ctx).criteria.set_criteria(params.task_id, params.criteria)
    return _respond(result)


@mcp.tool(
    name="check_criterion",
    annotations=ToolAnnotations(
        title="Check Criterion",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_check_criterion(params: CheckCriterionInput, ctx: Context) -> str:
    """
    Check (or uncheck) one acceptance criterion on a task.

    Args:
        params: CheckCriterionInput containing task_id, criterion_id and checked

    Returns:
        Confirmation with checklist progress
    """
    result = _board(ctx).criteria.check_criterion(params.task_id, params.criterion_id, params.checked)
    return _respond(result)


@mcp.tool(
    name="get_board",
    annotations=ToolAnnotations(
        title="Get Project Board",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_get_board(params: GetBoardInput, ctx: Context) -> str:
    """
    Get a sprint board overview for a project: tasks grouped by status column.

    Subtasks are nested under their parent task.

    Args:
        params: GetBoardInput containing project and response_format

    Returns:
        Board sections in pipeline order
    """
    result = _board(ctx).projects.get_board(params.project)
    return _respond(result, _format_board, params.response_format)


@mcp.tool(
    name="add_dependency",
    annotations=ToolAnnotations(
        title="Add Dependency",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_add_dependency(params: DependencyInput, ctx: Context) -> str:
    """
    Record that task_id is blocked by depends_on_id.

    Self-references and dependencies that would form a cycle are rejected.
    Adding an existing dependency again is harmless.

    Args:
        params: DependencyInput containing task_id and depends_on_id

    Returns:
        Confirmation message
    """
    result = _board(ctx).dependencies.add_dependency(params.task_id, params.depends_on_id)
    return _respond(result)


@mcp.tool(
    name="remove_dependency",
    annotations=ToolAnnotations(
        title="Remove Dependency",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_remove_dependency(params: DependencyInput, ctx: Context) -> str:
    """
    Remove a dependency between two tasks.

    Args:
        params: DependencyInput containing task_id and depends_on_id

    Returns:
        Confirmation message, or a notice that no such dependency exists
    """
    result = _board(ctx).dependencies.remove_dependency(params.task_id, params.depends_on_id)
    return _respond(result)
