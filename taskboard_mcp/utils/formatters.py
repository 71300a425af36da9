"""Formatting utilities for taskboard output."""

from taskboard_mcp.models.initiative import InitiativeDetail, InitiativeModel
from taskboard_mcp.models.task import BoardView, TaskDetail, TaskModel, TaskRef


def _format_task_line(task: TaskModel) -> str:
    """
    Format one task as a single listing line.

    Output: "a1b2c3d4 | [in_progress] P2 | forge/api: Add login → alice [feat/login] [1/3 subtasks]"
    """
    line = f"{task.id} | [{task.status}] P{task.priority} | {task.project}: {task.title}"
    if task.assigned_to:
        line += f" → {task.assigned_to}"
    if task.branch:
        line += f" [{task.branch}]"
    if task.pr_merged:
        line += " (PR merged)"
    if task.parent_task_id:
        line += f" (subtask of {task.parent_task_id})"
    if task.subtasks_total:
        line += f" [{task.subtasks_done}/{task.subtasks_total} subtasks]"
    return line


def _format_tasks(tasks: list[TaskModel]) -> str:
    return "\n".join(_format_task_line(t) for t in tasks)


def _format_ref(ref: TaskRef, *, show_assignee: bool = False) -> str:
    line = f"  {ref.id}: {ref.title} [{ref.status}]"
    if show_assignee and ref.assigned_to:
        line += f" ({ref.assigned_to})"
    return line


def _format_task_detail(detail: TaskDetail) -> str:
    """Format the full view of one task: fields, checklist, threads and relations."""
    task = detail.task
    pr = task.pr_url or (f"#{task.pr_number}" if task.pr_number else "none")
    if task.pr_merged:
        pr += " (MERGED)"

    lines = [
        f"Task: {task.id}",
        f"Project: {task.project}",
        f"Title: {task.title}",
        f"Status: {task.status}",
        f"Priority: {task.priority}",
        f"Assigned: {task.assigned_to or 'unassigned'}",
        f"Branch: {task.branch or 'none'}",
        f"PR: {pr}",
        f"Spec: {task.spec_file or 'none'}",
        f"Design: {task.design_file or 'none'}",
        f"Due: {task.due_date or 'none'}",
        f"Created by: {task.created_by} at {task.created_at}",
        f"Updated: {task.updated_at}",
        "",
        "Description:",
        task.description or "(none)",
    ]

    if task.criteria:
        done = sum(1 for c in task.criteria if c.checked)
        lines += ["", f"--- Acceptance Criteria ({done}/{len(task.criteria)}) ---"]
        for c in task.criteria:
            mark = "x" if c.checked else " "
            by = f" ({c.checked_by})" if c.checked_by else ""
            lines.append(f"  [{mark}] {c.id}: {c.text}{by}")

    if detail.reviews:
        lines += ["", f"--- Reviews ({len(detail.reviews)}) ---"]
        for r in detail.reviews:
            cats = f" [{', '.join(r.categories)}]" if r.categories else ""
            lines.append(f"[{r.created_at}] {r.author}: {(r.verdict or '').upper()}{cats}")
            lines.append(f"  {r.content}")

    if detail.comments:
        lines += ["", f"--- Comments ({len(detail.comments)}) ---"]
        for c in detail.comments:
            lines.append(f"[{c.created_at}] {c.author}: {c.content}")

    if detail.history:
        lines += ["", f"--- History ({len(detail.history)}) ---"]
        for h in detail.history:
            move = f"{h.from_status} → {h.to_status}" if h.from_status else f"created as {h.to_status}"
            took = f" after {h.duration_seconds}s" if h.duration_seconds is not None else ""
            lines.append(f"[{h.changed_at}] {h.changed_by}: {move}{took}")

    if detail.blocked_by:
        lines += ["", f"--- Blocked By ({len(detail.blocked_by)}) ---"]
        lines += [_format_ref(r) for r in detail.blocked_by]
    if detail.blocks:
        lines += ["", f"--- Blocks ({len(detail.blocks)}) ---"]
        lines += [_format_ref(r) for r in detail.blocks]

    if detail.parent:
        lines += ["", "--- Parent Task ---", _format_ref(detail.parent)]

    if detail.subtasks:
        lines += ["", f"--- Subtasks ({detail.subtasks_done}/{len(detail.subtasks)} done) ---"]
        lines += [_format_ref(r, show_assignee=True) for r in detail.subtasks]

    return "\n".join(lines)


def _format_board(board: BoardView) -> str:
    """Format a board: one section per non-empty column, subtasks nested under their parent."""
    sections = []
    for column in board.columns:
        if not column.tasks:
            continue
        items = []
        for t in column.tasks:
            assignee = f" ({t.assigned_to})" if t.assigned_to else ""
            counts = f" [{t.subtasks_done}/{t.subtasks_total} subtasks]" if t.subtasks_total else ""
            item = f"  {t.id}: {t.title}{assignee}{counts}"
            for child in column.subtasks.get(t.id, []):
                child_assignee = f" ({child.assigned_to})" if child.assigned_to else ""
                item += f"\n    └ {child.id}: {child.title} [{child.status}]{child_assignee}"
            items.append(item)
        sections.append(f"[{column.status.upper()}] ({len(column.tasks)})\n" + "\n".join(items))

    header = f"Sprint Board: {board.project} ({board.pipeline} pipeline)\n{'=' * 40}"
    return f"{header}\n\n" + "\n\n".join(sections)


def _format_initiative_line(initiative: InitiativeModel) -> str:
    line = (
        f"{initiative.id} | [{initiative.status}] {initiative.progress_pct}% | "
        f"{initiative.title} (owner: {initiative.owner})"
    )
    if initiative.participants:
        line += f" → {', '.join(initiative.participants)}"
    if initiative.target_date:
        line += f" (target: {initiative.target_date})"
    return line


def _format_initiatives(initiatives: list[InitiativeModel]) -> str:
    return "\n".join(_format_initiative_line(i) for i in initiatives)


def _format_initiative_detail(detail: InitiativeDetail) -> str:
    initiative = detail.initiative
    lines = [
        f"# {initiative.title}",
        f"ID: {initiative.id} | Status: {initiative.status} | Progress: {initiative.progress_pct}%",
        f"Owner: {initiative.owner} | Participants: {', '.join(initiative.participants) or 'none'}",
    ]
    if initiative.target_date:
        lines.append(f"Target: {initiative.target_date}")
    if initiative.description:
        lines += ["", initiative.description]

    lines += ["", "## Success Criteria"]
    lines += [f"{n}. {c}" for n, c in enumerate(initiative.success_criteria, start=1)]

    if detail.tasks:
        lines += ["", f"## Linked Tasks ({detail.tasks_done}/{len(detail.tasks)} done)"]
        for t in detail.tasks:
            assignee = f" → {t.assigned_to}" if t.assigned_to else ""
            role = f" ({t.role})" if t.role else ""
            lines.append(f"- {t.id} [{t.status}] P{t.priority} {t.project}: {t.title}{assignee}{role}")

    if detail.updates:
        lines += ["", "## Recent Updates"]
        for u in detail.updates:
            lines.append(f"- [{u.created_at}] {u.agent_name}: {u.update_text}")

    return "\n".join(lines)
