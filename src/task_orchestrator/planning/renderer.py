"""Human-readable rendering of plan snapshots."""

from collections.abc import Mapping
from typing import Any

from task_orchestrator.planning.models import STATUS_ICONS, TaskNode

NO_PLAN_TEXT = "No active plan."
PLAN_HEADER = "Current Plan Status:\n"


def format_plan(state: TaskNode | Mapping[str, Any] | None) -> str:
    """Render an exported plan as an indented tree.

    Each task becomes ``<indent><icon> [<id>] <description> (<status>)``
    with two spaces of indent per depth, followed by ``Result:`` and
    ``Notes:`` lines when those are set.

    Args:
        state: A TaskNode, its dict form, or None / an error dict when no
            plan is active.

    Returns:
        The formatted plan, or "No active plan.".
    """
    if state is None:
        return NO_PLAN_TEXT
    if isinstance(state, Mapping):
        if not state or "error" in state:
            return NO_PLAN_TEXT
        state = TaskNode.from_dict(state)

    lines = [PLAN_HEADER]
    for node, depth in state.walk_with_depth():
        indent = "  " * depth
        icon = STATUS_ICONS.get(node.status, "?")
        lines.append(f"{indent}{icon} [{node.id}] {node.description} ({node.status.value})\n")
        if node.result:
            lines.append(f"{indent}    Result: {node.result}\n")
        if node.notes:
            lines.append(f"{indent}    Notes: {node.notes}\n")
    return "".join(lines)
