"""Tests for plan rendering and progress analysis."""

import pytest

from task_orchestrator.planning import (
    STATUS_ICONS,
    TaskNode,
    TaskStatus,
    analyze_plan,
    calculate_progress,
    format_plan,
    summarize_progress,
)


class TestFormatPlan:
    def test_no_plan(self, tree):
        assert tree.format_plan() == "No active plan."
        assert format_plan(None) == "No active plan."
        assert format_plan({"error": "No plan active"}) == "No active plan."

    def test_status_icons(self):
        assert STATUS_ICONS == {
            TaskStatus.PENDING: "⭕",
            TaskStatus.IN_PROGRESS: "🔄",
            TaskStatus.COMPLETED: "✅",
            TaskStatus.FAILED: "❌",
            TaskStatus.SKIPPED: "⏭️",
        }

    def test_completed_task_with_result(self, tree):
        tree.create_plan("Build X")
        tree.add_task("Step A")
        tree.update_task("2", status="completed", result="done")

        assert tree.format_plan() == (
            "Current Plan Status:\n"
            "⭕ [1] Build X (pending)\n"
            "  ✅ [2] Step A (completed)\n"
            "      Result: done\n"
        )

    def test_nesting_and_notes(self, plan):
        plan.update_task("4", status="in_progress", notes="first\nsecond")
        plan.update_task("3", status="skipped")

        lines = plan.format_plan().splitlines()

        assert lines == [
            "Current Plan Status:",
            "⭕ [1] Build X (pending)",
            "  ⭕ [2] Design (pending)",
            "    🔄 [4] Draft API (in_progress)",
            "        Notes: first",
            "second",
            "  ⏭️ [3] Implement (skipped)",
        ]

    def test_result_before_notes(self, tree):
        tree.create_plan("Goal")
        tree.update_task("1", status="failed", notes="timeout", result="partial")

        assert tree.format_plan().splitlines()[1:] == [
            "❌ [1] Goal (failed)",
            "    Result: partial",
            "    Notes: timeout",
        ]

    def test_renders_exported_dict(self, plan):
        assert format_plan(plan.get_plan_state()) == plan.format_plan()


class TestProgress:
    def test_no_plan(self, tree):
        assert calculate_progress(tree.export()) is None
        assert calculate_progress({"error": "No plan active"}) is None
        assert summarize_progress(None) == "No active plan to analyze."

    def test_counts(self, plan):
        plan.update_task("2", status="completed")
        plan.update_task("4", status="completed")
        plan.update_task("3", status="in_progress")

        stats = calculate_progress(plan.get_plan_state())

        assert stats == {
            "total": 4,
            "completed": 2,
            "in_progress": 1,
            "pending": 1,
            "failed": 0,
            "percent": 50,
        }

    def test_skipped_counts_as_pending(self, plan):
        plan.update_task("3", status="skipped")
        plan.update_task("4", status="failed")

        stats = calculate_progress(plan.export())

        assert stats["pending"] == 3
        assert stats["failed"] == 1

    def test_summary(self, plan):
        plan.update_task("2", status="completed")
        plan.update_task("3", status="in_progress")

        summary = summarize_progress(calculate_progress(plan.export()), "Build X")

        assert summary == (
            "1 of 4 tasks completed (25%). 1 task currently in progress. "
            '2 tasks pending. Early stages of "Build X".'
        )

    def test_summary_has_no_failed_clause(self, plan):
        plan.update_task("4", status="failed")
        assert summarize_progress(calculate_progress(plan.export())) == (
            "0 of 4 tasks completed (0%). 3 tasks pending."
        )

    @pytest.mark.parametrize(
        "completed, phrase",
        [
            (4, 'Good progress toward "G".'),
            (2, 'Moderate progress toward "G".'),
            (1, 'Early stages of "G".'),
            (0, 'Just starting "G".'),
        ],
    )
    def test_goal_phrase(self, completed, phrase):
        stats = {"total": 4, "completed": completed, "in_progress": 0, "pending": 0, "failed": 0}
        stats["percent"] = completed * 25
        assert summarize_progress(stats, "G").endswith(phrase)


def _chain(depth, status="pending"):
    """A plan that is a single chain of ``depth`` tasks below the root."""
    root = node = TaskNode(id="1", description="Goal")
    for i in range(depth):
        child = TaskNode(id=str(i + 2), description=f"Step {i}", status=TaskStatus(status))
        node.subtasks.append(child)
        node = child
    return root


class TestAnalyzePlan:
    def test_no_plan(self):
        report = analyze_plan({"error": "No plan active"})

        assert report.to_dict() == {
            "summary": "No active plan to analyze.",
            "progress": None,
            "insights": [],
            "risks": ["No plan is currently active."],
            "recommendations": [],
        }

    def test_idle_plan(self, plan):
        report = analyze_plan(plan.export(), "Build X")

        assert report.summary.endswith('Just starting "Build X".')
        assert report.insights == []
        assert report.risks == ["No tasks are currently in progress - work may have stalled."]
        assert report.recommendations == [
            "Consider starting work on pending tasks.",
            "Consider starting these ready tasks: 4, 3.",
        ]

    def test_active_plan(self, plan):
        plan.update_task("2", status="completed")
        plan.update_task("4", status="completed")
        plan.update_task("3", status="in_progress")

        report = analyze_plan(plan.get_plan_state())

        assert report.insights[:2] == [
            "About half of the work is done.",
            "1 task actively being worked on.",
        ]
        assert report.risks == []
        assert report.recommendations == []

    @pytest.mark.parametrize(
        "completed, insight",
        [
            (4, "Most tasks are completed - plan is nearing completion."),
            (3, "About half of the work is done."),
            (1, "Still in early to mid stages of the plan."),
        ],
    )
    def test_completion_insight(self, tree, completed, insight):
        tree.create_plan("Goal")
        for i in range(4):
            tree.add_task(f"Step {i}")
        for task_id in range(1, completed + 1):
            tree.update_task(str(task_id), status="completed")

        assert analyze_plan(tree.export()).insights[0] == insight

    def test_backend_only(self, tree):
        tree.create_plan("Ship")
        tree.add_task("Write API endpoint")

        assert analyze_plan(tree.export()).insights == [
            "Backend work is in progress, but no frontend tasks have started."
        ]

    def test_frontend_only(self, tree):
        tree.create_plan("Redesign")
        tree.add_task("Build react component")

        assert analyze_plan(tree.export()).insights == [
            "Frontend work is in progress, but no backend tasks have started."
        ]

    def test_failed_tasks(self, plan):
        plan.update_task("3", status="failed")
        plan.update_task("4", status="failed")
        plan.update_task("2", status="in_progress")

        assert analyze_plan(plan.export()).risks == [
            "2 tasks have failed - may need attention."
        ]

    def test_single_failed_task(self, plan):
        plan.update_task("3", status="failed")
        plan.update_task("2", status="in_progress")

        assert analyze_plan(plan.export()).risks == ["1 task has failed - may need attention."]

    def test_deep_hierarchy(self):
        deep = "Deep task hierarchy detected - some tasks may be blocked by long dependency chains."

        assert deep not in analyze_plan(_chain(4, "in_progress")).risks
        assert analyze_plan(_chain(5, "in_progress")).risks == [deep]

    def test_momentum_recommendation(self, tree):
        tree.create_plan("Goal")
        for i in range(4):
            tree.add_task(f"Step {i}")
        tree.update_task("2", status="completed")
        tree.update_task("3", status="in_progress")

        assert analyze_plan(tree.export()).recommendations == [
            "Focus on completing initial tasks to build momentum."
        ]

    def test_ready_tasks_capped_at_three(self, tree):
        tree.create_plan("Goal")
        for i in range(5):
            tree.add_task(f"Step {i}")

        assert analyze_plan(tree.export()).recommendations[-1] == (
            "Consider starting these ready tasks: 2, 3, 4."
        )
