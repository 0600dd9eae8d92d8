"""Checkpoint management for plan state.

Checkpoints are named, timestamped deep copies of a task tree store's
exported state. They can be restored by exact id or by matching a
natural language description against checkpoint names and descriptions.

Example:
    store = TaskTreeStore()
    checkpoints = CheckpointStore(store)

    store.create_plan("Migrate database")
    checkpoints.create_checkpoint("before-schema", "plan before schema work")
    store.add_task("Rewrite schema")

    checkpoints.restore_checkpoint(description="before schema work")
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from task_orchestrator.config import get_settings
from task_orchestrator.logging import Loggers
from task_orchestrator.planning.models import TaskNode
from task_orchestrator.planning.task_tree import TaskTreeStore
from task_orchestrator.similarity import Scorer, find_best_matches, semantic_similarity


@dataclass(frozen=True)
class Checkpoint:
    """A saved plan state."""

    id: str
    name: str
    state: dict[str, Any]
    description: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def match_text(self) -> str:
        """Text compared against restore-by-description queries."""
        return f"{self.name} {self.description}" if self.description else self.name

    def summary(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass
class RestoreResult:
    """Outcome of a checkpoint restore."""

    success: bool
    message: str
    checkpoint_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "checkpoint_id": self.checkpoint_id,
        }


class CheckpointStore:
    """Saves and restores snapshots of a task tree store.

    The checkpoint store references the tree store it wraps but does not
    own it; it only calls ``get_plan_state()`` and ``restore_state()``.
    Checkpoint ids are ``cp_1``, ``cp_2``, ... and are not reused until
    ``clear()``.
    """

    def __init__(
        self,
        tree: TaskTreeStore,
        scorer: Scorer = semantic_similarity,
        match_threshold: float | None = None,
    ) -> None:
        """Initialize the checkpoint store.

        Args:
            tree: Task tree store to snapshot and restore.
            scorer: Similarity function for restore-by-description.
            match_threshold: Score a description match must exceed.
                Defaults to ``checkpoint_match_threshold`` from settings.
        """
        self._tree = tree
        self._scorer = scorer
        if match_threshold is None:
            match_threshold = get_settings().checkpoint_match_threshold
        self._match_threshold = match_threshold
        self._checkpoints: list[Checkpoint] = []
        self._next_id = 1
        self._logger = Loggers.checkpoints()

    def __len__(self) -> int:
        return len(self._checkpoints)

    def create_checkpoint(self, name: str, description: str | None = None) -> dict[str, str]:
        """Snapshot the current plan.

        Whatever the tree store exports is stored, including the
        no-active-plan error state; restoring such a checkpoint fails.
        The export is built fresh on every call and shares nothing with
        the live plan.

        Args:
            name: Checkpoint label.
            description: What this checkpoint represents.

        Returns:
            Dict with the new ``checkpoint_id``.
        """
        checkpoint_id = f"cp_{self._next_id}"
        self._next_id += 1

        checkpoint = Checkpoint(
            id=checkpoint_id,
            name=name,
            description=description,
            state=self._tree.get_plan_state(),
        )
        self._checkpoints.append(checkpoint)

        self._logger.info("checkpoint_created", checkpoint_id=checkpoint_id, name=name)
        return {"checkpoint_id": checkpoint_id}

    def list_checkpoints(self) -> list[dict[str, Any]]:
        """List checkpoint summaries in creation order."""
        return [cp.summary() for cp in self._checkpoints]

    def get_checkpoint(self, checkpoint_id: str) -> Checkpoint | None:
        """Get a copy of a checkpoint by its exact ID."""
        checkpoint = self._find(checkpoint_id)
        if checkpoint is None:
            return None
        return replace(checkpoint, state=copy_state(checkpoint.state))

    def restore_checkpoint(
        self,
        checkpoint_id: str | None = None,
        description: str | None = None,
    ) -> RestoreResult:
        """Push a checkpoint's state back into the tree store.

        An ID is looked up exactly, with no fuzzy fallback. Otherwise the
        description is scored against every checkpoint and the single best
        match is used if its score exceeds the match threshold.

        Args:
            checkpoint_id: Exact checkpoint ID.
            description: Natural language description to match.

        Returns:
            RestoreResult; restore failures are reported, never raised.
        """
        checkpoint: Checkpoint | None = None
        if checkpoint_id:
            checkpoint = self._find(checkpoint_id)
        elif description:
            checkpoint = self._match(description)

        if checkpoint is None:
            message = (
                f"Checkpoint {checkpoint_id} not found."
                if checkpoint_id
                else f"No checkpoint found matching: {description}"
            )
            self._logger.debug("checkpoint_not_found", checkpoint_id=checkpoint_id, query=description)
            return RestoreResult(success=False, message=message)

        state = checkpoint.state
        if not state or "error" in state:
            return RestoreResult(
                success=False,
                message=f'Checkpoint "{checkpoint.name}" has invalid state.',
                checkpoint_id=checkpoint.id,
            )

        try:
            self._tree.restore_state(state)
        except Exception as e:
            self._logger.warning("checkpoint_restore_failed", checkpoint_id=checkpoint.id, error=str(e))
            return RestoreResult(
                success=False,
                message=f"Error restoring checkpoint: {e}",
                checkpoint_id=checkpoint.id,
            )

        self._logger.info("checkpoint_restored", checkpoint_id=checkpoint.id)
        return RestoreResult(
            success=True,
            message=f'Checkpoint "{checkpoint.name}" restored successfully.',
            checkpoint_id=checkpoint.id,
        )

    def clear(self) -> None:
        """Remove all checkpoints and restart ids at ``cp_1``."""
        self._checkpoints = []
        self._next_id = 1

    def _find(self, checkpoint_id: str) -> Checkpoint | None:
        for checkpoint in self._checkpoints:
            if checkpoint.id == checkpoint_id:
                return checkpoint
        return None

    def _match(self, description: str) -> Checkpoint | None:
        matches = find_best_matches(
            description,
            self._checkpoints,
            lambda cp: cp.match_text,
            limit=1,
            min_score=self._match_threshold,
            scorer=self._scorer,
        )
        return matches[0].item if matches else None


def copy_state(state: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-copy an exported plan state.

    Plan states are copied node by node rather than with ``copy.deepcopy``
    so that arbitrarily deep plans do not hit the recursion limit.
    """
    if not state or "error" in state:
        return dict(state)
    return TaskNode.from_dict(state).to_dict()
