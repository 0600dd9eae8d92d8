"""Planning, checkpoint and memory tools.

These tools map structured agent calls onto the stores bound by an
OrchestratorSession:

- task_orchestrator: create_plan / add_task / update_task / get_plan
- create_checkpoint, list_checkpoints, restore_checkpoint
- analyze_progress
- remember, recall

Every tool returns a dict with a ``success`` key; failures carry an
``error`` message and an ``error_code``.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from task_orchestrator.errors import ErrorCode, PlanError
from task_orchestrator.logging import Loggers
from task_orchestrator.planning import TaskStatus, analyze_plan
from task_orchestrator.tools import require_context
from task_orchestrator.tools.context import (
    get_context_checkpoint_store,
    get_context_context_memory,
    get_context_task_tree,
)

logger = Loggers.tools()


class TaskOrchestratorInput(BaseModel):
    """Arguments accepted by the task_orchestrator tool."""

    action: Literal["create_plan", "add_task", "update_task", "get_plan"] = Field(
        description="The action to perform",
    )
    plan_goal: str | None = Field(
        default=None,
        description="The main goal of the plan (required for create_plan)",
    )
    task_id: str | None = Field(
        default=None,
        description="The ID of the task to update (required for update_task)",
    )
    task_description: str | None = Field(
        default=None,
        description="Description of the task (required for add_task)",
    )
    parent_task_id: str | None = Field(
        default=None,
        description="Parent task ID (optional for add_task, defaults to root)",
    )
    status: TaskStatus | None = Field(default=None, description="New status for the task")
    notes: str | None = Field(default=None, description="Notes or context to add to the task")
    result: str | None = Field(default=None, description="Result output of the task")


def _error(message: str, error_code: str) -> dict[str, Any]:
    return {"success": False, "error": message, "error_code": error_code}


def _missing(field_name: str, action: str) -> dict[str, Any]:
    return _error(f"{field_name} is required for {action}", ErrorCode.MISSING_REQUIRED)


@require_context("Task tree", get_context_task_tree)
def task_orchestrator(
    action: str,
    plan_goal: str | None = None,
    task_id: str | None = None,
    task_description: str | None = None,
    parent_task_id: str | None = None,
    status: str | None = None,
    notes: str | None = None,
    result: str | None = None,
) -> dict[str, Any]:
    """Dynamic task planning: create a plan, add and update tasks, view the plan.

    Args:
        action: One of "create_plan", "add_task", "update_task", "get_plan".
        plan_goal: The main goal of the plan (create_plan).
        task_id: The task to update (update_task).
        task_description: Task description (add_task; optional for update_task).
        parent_task_id: Parent for add_task; defaults to the root task.
        status: New status ("pending", "in_progress", "completed", "failed", "skipped").
        notes: Notes to attach; appended to existing notes on update.
        result: Result output of the task.

    Returns:
        A dict with the confirmation ``message``, the rendered plan as
        ``display`` and both joined as ``text``.
    """
    try:
        args = TaskOrchestratorInput(
            action=action,
            plan_goal=plan_goal,
            task_id=task_id,
            task_description=task_description,
            parent_task_id=parent_task_id,
            status=status,
            notes=notes,
            result=result,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return _error(f"Invalid arguments: {problems}", ErrorCode.INVALID_INPUT)

    tree = get_context_task_tree()
    message = ""
    try:
        if args.action == "create_plan":
            if not args.plan_goal:
                return _missing("plan_goal", args.action)
            message = tree.create_plan(args.plan_goal)

        elif args.action == "add_task":
            if not args.task_description:
                return _missing("task_description", args.action)
            message = tree.add_task(args.task_description, args.parent_task_id, args.notes)

        elif args.action == "update_task":
            if not args.task_id:
                return _missing("task_id", args.action)
            message = tree.update_task(
                args.task_id,
                status=args.status,
                description=args.task_description,
                notes=args.notes,
                result=args.result,
            )
    except PlanError as e:
        logger.debug("task_orchestrator_failed", action=args.action, error=e.message)
        return e.to_dict()

    display = tree.format_plan()
    return {
        "success": True,
        "action": args.action,
        "message": message,
        "display": display,
        "text": f"{message}\n\n{display}" if message else display,
    }


@require_context("Checkpoint store", get_context_checkpoint_store)
def create_checkpoint(name: str, description: str | None = None) -> dict[str, Any]:
    """Save the current plan state with a natural language description.

    Args:
        name: Checkpoint name.
        description: What this checkpoint represents.

    Returns:
        A dict with the new checkpoint ID.
    """
    if not name:
        return _error("name is required", ErrorCode.MISSING_REQUIRED)

    created = get_context_checkpoint_store().create_checkpoint(name, description)
    checkpoint_id = created["checkpoint_id"]
    return {
        "success": True,
        "checkpoint_id": checkpoint_id,
        "message": f"Checkpoint created: {name}\nID: {checkpoint_id}",
    }


@require_context("Checkpoint store", get_context_checkpoint_store)
def list_checkpoints() -> dict[str, Any]:
    """List all saved checkpoints.

    Returns:
        A dict with checkpoint summaries and a formatted ``display``.
    """
    checkpoints = get_context_checkpoint_store().list_checkpoints()
    if not checkpoints:
        display = "No checkpoints found."
    else:
        display = "\n\n".join(
            f"ID: {cp['id']}\nName: {cp['name']}"
            + (f"\nDescription: {cp['description']}" if cp["description"] else "")
            for cp in checkpoints
        )
    return {
        "success": True,
        "checkpoints": checkpoints,
        "count": len(checkpoints),
        "display": display,
    }


@require_context("Checkpoint store", get_context_checkpoint_store)
def restore_checkpoint(
    checkpoint_id: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    """Restore plan state to a checkpoint by ID or by description match.

    Args:
        checkpoint_id: Exact checkpoint ID.
        description: Or: natural language description of the checkpoint.

    Returns:
        A dict with ``success`` and a ``message``.
    """
    if not checkpoint_id and not description:
        return _error(
            "Either checkpoint_id or description must be provided.",
            ErrorCode.MISSING_REQUIRED,
        )

    outcome = get_context_checkpoint_store().restore_checkpoint(checkpoint_id, description)
    result = outcome.to_dict()
    if not outcome.success:
        result["error"] = outcome.message
    return result


@require_context("Task tree", get_context_task_tree)
def analyze_progress(plan_goal: str | None = None) -> dict[str, Any]:
    """Summarize how far the current plan has progressed.

    Args:
        plan_goal: Optional goal to phrase the summary against.

    Returns:
        A dict with a one-line ``summary``, per-status counts as
        ``progress`` and lists of ``insights``, ``risks`` and
        ``recommendations``.
    """
    report = analyze_plan(get_context_task_tree().export(), plan_goal)
    return {"success": True, **report.to_dict()}


@require_context("Context memory", get_context_context_memory)
def remember(what: str, details: str | None = None) -> dict[str, Any]:
    """Store information under a natural language description.

    Args:
        what: What to remember.
        details: Optional additional details.

    Returns:
        A dict with the memory ID.
    """
    if not what:
        return _error("what is required", ErrorCode.MISSING_REQUIRED)

    stored = get_context_context_memory().remember(what, details)
    return {"success": True, "id": stored["id"], "what": what, "details": details}


@require_context("Context memory", get_context_context_memory)
def recall(query: str, limit: int | None = None) -> dict[str, Any]:
    """Retrieve remembered information by similarity to a query.

    Args:
        query: What you're looking for.
        limit: Max results (defaults to the configured recall limit).

    Returns:
        A dict with the matching memories, most relevant first.
    """
    results = get_context_context_memory().recall(query, limit)
    return {
        "success": True,
        "results": [r.to_dict() for r in results],
        "count": len(results),
    }
