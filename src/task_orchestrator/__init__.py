"""Task Orchestrator - hierarchical task plans with checkpoints for agents.

A plan is a single rooted tree of tasks. Agents create a goal, break it
into nested subtasks, track status per task and save or restore
snapshots of the whole tree.

Example:
    from task_orchestrator import TaskTreeStore, CheckpointStore

    store = TaskTreeStore()
    checkpoints = CheckpointStore(store)

    store.create_plan("Build X")
    store.add_task("Step A")
    checkpoints.create_checkpoint("after-step-a")
    print(store.format_plan())
"""

from task_orchestrator.config import (
    OrchestratorSettings,
    SettingsContext,
    get_settings,
    reload_settings,
    set_settings,
)
from task_orchestrator.errors import (
    ErrorCode,
    InvalidStateError,
    InvalidStatusError,
    NoActivePlanError,
    ParentNotFoundError,
    PlanError,
    TaskNotFoundError,
)
from task_orchestrator.logging import configure_logging, ensure_logging_configured, get_logger
from task_orchestrator.memory import ContextMemory
from task_orchestrator.planning import (
    STATUS_ICONS,
    Checkpoint,
    CheckpointStore,
    ProgressReport,
    RestoreResult,
    Task,
    TaskNode,
    TaskStatus,
    TaskTreeStore,
    analyze_plan,
    calculate_progress,
    format_plan,
    summarize_progress,
)
from task_orchestrator.similarity import find_best_matches, semantic_similarity

__version__ = "0.2.0"

__all__ = [
    # Config
    "OrchestratorSettings",
    "SettingsContext",
    "get_settings",
    "reload_settings",
    "set_settings",
    # Logging
    "configure_logging",
    "ensure_logging_configured",
    "get_logger",
    # Errors
    "ErrorCode",
    "PlanError",
    "NoActivePlanError",
    "ParentNotFoundError",
    "TaskNotFoundError",
    "InvalidStateError",
    "InvalidStatusError",
    # Planning
    "STATUS_ICONS",
    "Checkpoint",
    "CheckpointStore",
    "ProgressReport",
    "RestoreResult",
    "Task",
    "TaskNode",
    "TaskStatus",
    "TaskTreeStore",
    "analyze_plan",
    "calculate_progress",
    "format_plan",
    "summarize_progress",
    # Memory
    "ContextMemory",
    # Similarity
    "find_best_matches",
    "semantic_similarity",
]
