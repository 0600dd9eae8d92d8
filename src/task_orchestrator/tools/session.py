"""Orchestrator session: the set of stores one agent works against."""

from types import TracebackType
from typing import Any, Callable

from task_orchestrator.logging import (
    Loggers,
    bind_context,
    ensure_logging_configured,
    unbind_context,
)
from task_orchestrator.memory import ContextMemory
from task_orchestrator.planning import CheckpointStore, TaskTreeStore
from task_orchestrator.similarity import Scorer, semantic_similarity
from task_orchestrator.tools.context import (
    get_context_checkpoint_store,
    get_context_context_memory,
    get_context_task_tree,
    set_context_checkpoint_store,
    set_context_context_memory,
    set_context_task_tree,
)

_BINDINGS: list[tuple[str, Callable[..., Any], Callable[..., Any]]] = [
    ("tree", get_context_task_tree, set_context_task_tree),
    ("checkpoints", get_context_checkpoint_store, set_context_checkpoint_store),
    ("memory", get_context_context_memory, set_context_context_memory),
]


class OrchestratorSession:
    """Owns a task tree, its checkpoint store and a context memory.

    Entering the session binds the stores to the tool context so the tool
    functions operate on them; leaving restores whatever was bound before.
    Calls against one session must not interleave.

    Example:
        with OrchestratorSession() as session:
            task_orchestrator(action="create_plan", plan_goal="Build X")
            create_checkpoint(name="start")
            session.tree.format_plan()
    """

    def __init__(
        self,
        scorer: Scorer = semantic_similarity,
        match_threshold: float | None = None,
        session_id: str | None = None,
    ) -> None:
        ensure_logging_configured()
        self.tree = TaskTreeStore()
        self.checkpoints = CheckpointStore(self.tree, scorer=scorer, match_threshold=match_threshold)
        self.memory = ContextMemory(scorer=scorer)
        self.session_id = session_id
        self._previous: list[tuple[Callable[..., Any], Any]] = []
        self._logger = Loggers.tools()

    def __enter__(self) -> "OrchestratorSession":
        self._previous = []
        for attr, getter, setter in _BINDINGS:
            self._previous.append((setter, getter()))
            setter(getattr(self, attr))
        if self.session_id:
            bind_context(session_id=self.session_id)
        self._logger.debug("session_entered")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        for setter, previous in reversed(self._previous):
            setter(previous)
        self._previous = []
        if self.session_id:
            unbind_context("session_id")
