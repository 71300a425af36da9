"""Initiative MCP tools: shared goals that group tasks across projects."""

from mcp.server.fastmcp import Context
from mcp.types import ToolAnnotations

from taskboard_mcp.enums import InitiativeStatus
from taskboard_mcp.models.inputs import (
    AddInitiativeUpdateInput,
    CreateInitiativeInput,
    GetInitiativeInput,
    LinkTaskInput,
    ListInitiativesInput,
    UpdateInitiativeInput,
)
from taskboard_mcp.server import mcp
from taskboard_mcp.tools.common import _board, _respond
from taskboard_mcp.utils.formatters import _format_initiative_detail, _format_initiatives


@mcp.tool(
    name="create_initiative",
    annotations=ToolAnnotations(
        title="Create Initiative",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskboard_create_initiative(params: CreateInitiativeInput, ctx: Context) -> str:
    """
    Create an initiative: a shared goal that several agents work towards.

    The calling agent becomes the owner. Tasks from any project can be linked
    to it afterwards with link_task_to_initiative.

    Args:
        params: CreateInitiativeInput containing title, description, participants, criteria and target_date

    Returns:
        Confirmation with the new initiative ID

    Examples:
        - params with title="Job search", participants=["resume-bot", "portfolio-bot"]
    """
    result = _board(ctx).initiatives.create_initiative(
        title=params.title,
        description=params.description,
        participants=params.participants,
        criteria=params.criteria,
        target_date=params.target_date,
    )
    return _respond(result)


@mcp.tool(
    name="list_initiatives",
    annotations=ToolAnnotations(
        title="List Initiatives",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_list_initiatives(params: ListInitiativesInput, ctx: Context) -> str:
    """
    List initiatives, most recently updated first. Only active ones unless a status (or 'all') is given.

    Args:
        params: ListInitiativesInput containing status, owner, limit and response_format

    Returns:
        One line per initiative with progress and participants
    """
    status = params.status.value if isinstance(params.status, InitiativeStatus) else params.status
    result = _board(ctx).initiatives.list_initiatives(status=status, owner=params.owner, limit=params.limit)
    return _respond(result, _format_initiatives, params.response_format)


@mcp.tool(
    name="get_initiative",
    annotations=ToolAnnotations(
        title="Get Initiative",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_get_initiative(params: GetInitiativeInput, ctx: Context) -> str:
    """
    Get full initiative details including linked tasks and recent updates.

    Args:
        params: GetInitiativeInput containing initiative_id and response_format

    Returns:
        Initiative detail with success criteria, linked tasks and the latest progress notes
    """
    result = _board(ctx).initiatives.get_initiative(params.initiative_id)
    return _respond(result, _format_initiative_detail, params.response_format)


@mcp.tool(
    name="update_initiative",
    annotations=ToolAnnotations(
        title="Update Initiative",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_update_initiative(params: UpdateInitiativeInput, ctx: Context) -> str:
    """
    Update an initiative's status, progress, description, participants or criteria.

    Args:
        params: UpdateInitiativeInput containing initiative_id and the fields to change

    Returns:
        Confirmation listing the updated fields

    Examples:
        - params with initiative_id="a1b2c3d4", progress_pct=60
        - params with initiative_id="a1b2c3d4", status="completed"
    """
    result = _board(ctx).initiatives.update_initiative(
        params.initiative_id,
        status=params.status.value if params.status else None,
        progress_pct=params.progress_pct,
        description=params.description,
        title=params.title,
        participants=params.participants,
        criteria=params.criteria,
        target_date=params.target_date,
    )
    return _respond(result)


@mcp.tool(
    name="link_task_to_initiative",
    annotations=ToolAnnotations(
        title="Link Task to Initiative",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskboard_link_task_to_initiative(params: LinkTaskInput, ctx: Context) -> str:
    """
    Link a task (from any project) to an initiative, with an optional role.

    Linking the same task twice is harmless.

    Args:
        params: LinkTaskInput containing initiative_id, task_id and role

    Returns:
        Confirmation message
    """
    result = _board(ctx).initiatives.link_task(params.initiative_id, params.task_id, params.role)
    return _respond(result)


@mcp.tool(
    name="add_initiative_update",
    annotations=ToolAnnotations(
        title="Add Initiative Update",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def taskboard_add_initiative_update(params: AddInitiativeUpdateInput, ctx: Context) -> str:
    """
    Log a progress note on an initiative.

    Args:
        params: AddInitiativeUpdateInput containing initiative_id and update_text

    Returns:
        Confirmation message
    """
    result = _board(ctx).initiatives.add_update(params.initiative_id, params.update_text)
    return _respond(result)
