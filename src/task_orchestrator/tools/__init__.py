"""Agent-facing tools for the task orchestrator.

Tools are plain functions returning result dicts with a ``success`` key.
They operate on the stores bound by an active OrchestratorSession and
convert core errors into ``{"success": False, "error": ...}`` results.

Example:
    from task_orchestrator.tools import OrchestratorSession, task_orchestrator

    with OrchestratorSession():
        task_orchestrator(action="create_plan", plan_goal="Build X")
        task_orchestrator(action="add_task", task_description="Step A")
"""

import functools
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable)


def require_context(
    context_name: str,
    getter: Callable[..., Any],
    error_message: str | None = None,
) -> Callable[[F], F]:
    """Guard decorator: returns error dict if getter() is None.

    Args:
        context_name: Human-readable name for error messages.
        getter: Zero-arg callable returning the context value or None.
        error_message: Custom error message (defaults to "{context_name} not available").
    """
    msg = error_message or f"{context_name} not available"

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if getter() is None:
                return {"success": False, "error": msg}
            return func(*args, **kwargs)
        return wrapper  # type: ignore[return-value]
    return decorator


from task_orchestrator.tools.orchestrator_tools import (  # noqa: E402
    TaskOrchestratorInput,
    analyze_progress,
    create_checkpoint,
    list_checkpoints,
    recall,
    remember,
    restore_checkpoint,
    task_orchestrator,
)
from task_orchestrator.tools.session import OrchestratorSession  # noqa: E402

__all__ = [
    "OrchestratorSession",
    "TaskOrchestratorInput",
    "analyze_progress",
    "create_checkpoint",
    "list_checkpoints",
    "recall",
    "remember",
    "require_context",
    "restore_checkpoint",
    "task_orchestrator",
]
