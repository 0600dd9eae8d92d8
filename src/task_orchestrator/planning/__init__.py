"""Planning module for managing agent work plans.

This module provides TaskTreeStore for a single rooted plan of nested
tasks, CheckpointStore for saving and restoring snapshots of that plan,
and helpers that render or summarize exported plan state.

Example:
    >>> from task_orchestrator.planning import TaskTreeStore, CheckpointStore
    >>> store = TaskTreeStore()
    >>> checkpoints = CheckpointStore(store)
    >>> store.create_plan("Build X")
    >>> checkpoints.create_checkpoint("start")
    >>> store.add_task("Step A")
    >>> checkpoints.restore_checkpoint("cp_1")  # Step A is gone again
"""

from task_orchestrator.planning.checkpoints import (
    Checkpoint,
    CheckpointStore,
    RestoreResult,
)
from task_orchestrator.planning.models import (
    STATUS_ICONS,
    Task,
    TaskNode,
    TaskStatus,
)
from task_orchestrator.planning.progress import (
    ProgressReport,
    analyze_plan,
    calculate_progress,
    summarize_progress,
)
from task_orchestrator.planning.renderer import format_plan
from task_orchestrator.planning.task_tree import TaskTreeStore

__all__ = [
    "Checkpoint",
    "CheckpointStore",
    "ProgressReport",
    "RestoreResult",
    "STATUS_ICONS",
    "Task",
    "TaskNode",
    "TaskStatus",
    "TaskTreeStore",
    "analyze_plan",
    "calculate_progress",
    "format_plan",
    "summarize_progress",
]
