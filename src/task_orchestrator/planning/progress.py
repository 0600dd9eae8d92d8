"""Progress analysis over exported plan state.

``calculate_progress`` counts tasks by status; ``analyze_plan`` builds a
full report on top of it: a one-line summary, observations about the
work, risks and suggested next steps.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from task_orchestrator.planning.models import TaskNode, TaskStatus

NO_PLAN_SUMMARY = "No active plan to analyze."
NO_PLAN_RISK = "No plan is currently active."

# Deeper nesting than this is reported as a risk
MAX_HEALTHY_DEPTH = 4

BACKEND_KEYWORDS = ("api", "backend", "server", "database", "endpoint")
FRONTEND_KEYWORDS = ("frontend", "ui", "component", "react", "vue", "interface")


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def _as_node(state: TaskNode | Mapping[str, Any] | None) -> TaskNode | None:
    if state is None:
        return None
    if isinstance(state, Mapping):
        if not state or "error" in state:
            return None
        return TaskNode.from_dict(state)
    return state


def calculate_progress(state: TaskNode | Mapping[str, Any] | None) -> dict[str, int] | None:
    """Count tasks per status across a plan snapshot.

    Skipped tasks count as pending.

    Args:
        state: A TaskNode or its dict form.

    Returns:
        Dictionary with ``total``, ``completed``, ``in_progress``,
        ``pending``, ``failed`` and the rounded completion ``percent``;
        None when no plan is active.
    """
    root = _as_node(state)
    return _count(root) if root is not None else None


def _count(root: TaskNode) -> dict[str, int]:
    counts = {"total": 0, "completed": 0, "in_progress": 0, "pending": 0, "failed": 0}
    for node in root.walk():
        counts["total"] += 1
        if node.status == TaskStatus.SKIPPED:
            counts["pending"] += 1
        else:
            counts[node.status.value] += 1

    counts["percent"] = round(counts["completed"] / counts["total"] * 100)
    return counts


def summarize_progress(stats: dict[str, int] | None, goal: str | None = None) -> str:
    """Describe progress statistics in one or two sentences."""
    if stats is None:
        return NO_PLAN_SUMMARY

    summary = f"{stats['completed']} of {stats['total']} tasks completed ({stats['percent']}%)."

    in_progress = stats["in_progress"]
    if in_progress:
        summary += f" {in_progress} task{_plural(in_progress)} currently in progress."
    pending = stats["pending"]
    if pending:
        summary += f" {pending} task{_plural(pending)} pending."

    if goal:
        percent = stats["percent"]
        if percent >= 75:
            summary += f' Good progress toward "{goal}".'
        elif percent >= 50:
            summary += f' Moderate progress toward "{goal}".'
        elif percent >= 25:
            summary += f' Early stages of "{goal}".'
        else:
            summary += f' Just starting "{goal}".'

    return summary


def max_depth(root: TaskNode) -> int:
    """Depth of the deepest task; a plan with only a root has depth 0."""
    return max(depth for _, depth in root.walk_with_depth())


def ready_tasks(root: TaskNode) -> list[str]:
    """IDs of pending leaf tasks in plan order."""
    return [
        node.id
        for node in root.walk()
        if node.status == TaskStatus.PENDING and not node.subtasks
    ]


def classify_tasks(root: TaskNode) -> dict[str, int]:
    """Count tasks that look like backend, frontend or other work.

    Matching is a plain substring check on the lowercased description;
    backend keywords win when both kinds match.
    """
    kinds = {"backend": 0, "frontend": 0, "other": 0}
    for node in root.walk():
        text = node.description.lower()
        if any(word in text for word in BACKEND_KEYWORDS):
            kinds["backend"] += 1
        elif any(word in text for word in FRONTEND_KEYWORDS):
            kinds["frontend"] += 1
        else:
            kinds["other"] += 1
    return kinds


def generate_insights(stats: dict[str, int], root: TaskNode) -> list[str]:
    insights = []
    completed, total = stats["completed"], stats["total"]
    if completed:
        rate = completed / total
        if rate >= 0.8:
            insights.append("Most tasks are completed - plan is nearing completion.")
        elif rate >= 0.5:
            insights.append("About half of the work is done.")
        else:
            insights.append("Still in early to mid stages of the plan.")

    in_progress = stats["in_progress"]
    if in_progress:
        insights.append(f"{in_progress} task{_plural(in_progress)} actively being worked on.")

    kinds = classify_tasks(root)
    if kinds["backend"] and not kinds["frontend"]:
        insights.append("Backend work is in progress, but no frontend tasks have started.")
    if kinds["frontend"] and not kinds["backend"]:
        insights.append("Frontend work is in progress, but no backend tasks have started.")
    return insights


def identify_risks(stats: dict[str, int], root: TaskNode) -> list[str]:
    risks = []
    failed = stats["failed"]
    if failed:
        risks.append(f"{failed} task{' has' if failed == 1 else 's have'} failed - may need attention.")
    if not stats["in_progress"] and stats["pending"]:
        risks.append("No tasks are currently in progress - work may have stalled.")
    if max_depth(root) > MAX_HEALTHY_DEPTH:
        risks.append(
            "Deep task hierarchy detected - some tasks may be blocked by long dependency chains."
        )
    return risks


def generate_recommendations(stats: dict[str, int], root: TaskNode) -> list[str]:
    recommendations = []
    completed, total = stats["completed"], stats["total"]
    idle = not stats["in_progress"]
    if idle and stats["pending"]:
        recommendations.append("Consider starting work on pending tasks.")
    if completed and completed < total * 0.3:
        recommendations.append("Focus on completing initial tasks to build momentum.")

    ready = ready_tasks(root)
    if idle and ready:
        recommendations.append(f"Consider starting these ready tasks: {', '.join(ready[:3])}.")
    return recommendations


@dataclass
class ProgressReport:
    """Result of analyzing a plan's progress."""

    summary: str
    stats: dict[str, int] | None = None
    insights: list[str] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "progress": self.stats,
            "insights": list(self.insights),
            "risks": list(self.risks),
            "recommendations": list(self.recommendations),
        }


def analyze_plan(
    state: TaskNode | Mapping[str, Any] | None,
    goal: str | None = None,
) -> ProgressReport:
    """Analyze a plan snapshot.

    Args:
        state: A TaskNode or its dict form; None or the error state when
            no plan is active.
        goal: Optional goal to phrase the summary against.

    Returns:
        ProgressReport. Without a plan the report carries a single risk
        saying so.
    """
    root = _as_node(state)
    if root is None:
        return ProgressReport(summary=NO_PLAN_SUMMARY, risks=[NO_PLAN_RISK])

    stats = _count(root)
    return ProgressReport(
        summary=summarize_progress(stats, goal),
        stats=stats,
        insights=generate_insights(stats, root),
        risks=identify_risks(stats, root),
        recommendations=generate_recommendations(stats, root),
    )
