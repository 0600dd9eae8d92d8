"""Task tree store for agent work plans.

This module provides the TaskTreeStore class, which holds a single rooted
plan of nested tasks keyed by id, and exports/restores the plan as a
nested snapshot.

Example:
    >>> store = TaskTreeStore()
    >>> store.create_plan("Ship release")
    'Plan created with root task ID: 1. Goal: Ship release'
    >>> store.add_task("Write changelog")
    'Added task 2: "Write changelog" to parent 1'
    >>> store.update_task("2", status=TaskStatus.COMPLETED, result="done")
    'Updated task 2. New status: completed'
"""

from collections.abc import Mapping
from typing import Any

from task_orchestrator.errors import (
    InvalidStateError,
    NoActivePlanError,
    ParentNotFoundError,
    TaskNotFoundError,
)
from task_orchestrator.logging import Loggers
from task_orchestrator.planning.models import Task, TaskNode, TaskStatus
from task_orchestrator.planning.renderer import format_plan

ROOT_TASK_ID = "1"
NO_PLAN_STATE = {"error": "No plan active"}


class TaskTreeStore:
    """A single rooted plan of nested tasks.

    The store holds at most one plan. Task ids are decimal strings assigned
    from the current task count, so they stay unique and increasing as
    long as tasks are only ever added. Failed operations leave the plan
    untouched.

    Example:
        >>> store = TaskTreeStore()
        >>> store.create_plan("Build X")
        >>> store.add_task("Step A")            # id "2", child of "1"
        >>> store.add_task("Step A.1", "2")     # id "3", child of "2"
        >>> state = store.get_plan_state()
        >>> TaskTreeStore().restore_state(state)
    """

    def __init__(self) -> None:
        """Initialize an empty store with no active plan."""
        self._tasks: dict[str, Task] = {}
        self._root_id: str | None = None
        self._logger = Loggers.planning()

    @property
    def has_plan(self) -> bool:
        """Whether a plan is active."""
        return self._root_id is not None

    @property
    def root_id(self) -> str | None:
        """ID of the root task, or None without a plan."""
        return self._root_id

    def __len__(self) -> int:
        return len(self._tasks)

    def create_plan(self, goal: str) -> str:
        """Start a new plan, discarding the current one.

        Args:
            goal: The main goal; becomes the root task's description.

        Returns:
            Confirmation message.
        """
        self._tasks.clear()
        root = Task(id=ROOT_TASK_ID, description=goal)
        self._tasks[root.id] = root
        self._root_id = root.id

        self._logger.info("plan_created", root_id=root.id, goal=goal)
        return f"Plan created with root task ID: {root.id}. Goal: {goal}"

    def add_task(
        self,
        description: str,
        parent_id: str | None = None,
        notes: str | None = None,
    ) -> str:
        """Add a task under a parent.

        Args:
            description: What needs to be done.
            parent_id: Parent task ID; defaults to the root.
            notes: Optional initial notes.

        Returns:
            Confirmation message naming the new ID and its parent.

        Raises:
            NoActivePlanError: If no plan has been created.
            ParentNotFoundError: If the parent does not exist.
        """
        if self._root_id is None:
            raise NoActivePlanError()

        parent = self._tasks.get(parent_id) if parent_id else self._tasks.get(self._root_id)
        if parent is None:
            raise ParentNotFoundError(parent_id)

        task_id = self._next_id()
        self._tasks[task_id] = Task(
            id=task_id,
            description=description,
            parent_id=parent.id,
            notes=notes,
        )
        parent.subtasks.append(task_id)

        self._logger.debug("task_added", task_id=task_id, parent_id=parent.id)
        return f'Added task {task_id}: "{description}" to parent {parent.id}'

    def update_task(
        self,
        task_id: str,
        status: TaskStatus | str | None = None,
        description: str | None = None,
        notes: str | None = None,
        result: str | None = None,
    ) -> str:
        """Update fields of a task.

        Falsy values (None or empty string) leave the field unchanged.
        Notes are appended to existing notes on a new line; every other
        field is overwritten.

        Args:
            task_id: The task to update.
            status: New status.
            description: New description.
            notes: Notes to append.
            result: New result text.

        Returns:
            Confirmation message with the resulting status.

        Raises:
            TaskNotFoundError: If the task does not exist.
            InvalidStatusError: If status is not a known status.
        """
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        new_status = TaskStatus.parse(status) if status else None

        if new_status:
            task.status = new_status
        if description:
            task.description = description
        if notes:
            task.notes = f"{task.notes}\n{notes}" if task.notes else notes
        if result:
            task.result = result

        self._logger.debug("task_updated", task_id=task_id, status=task.status.value)
        return f"Updated task {task_id}. New status: {task.status.value}"

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by its ID.

        Args:
            task_id: The ID of the task to retrieve.

        Returns:
            The live Task object, or None if not found.
        """
        return self._tasks.get(task_id)

    def export(self) -> TaskNode | None:
        """Materialize the plan as a snapshot tree.

        Returns:
            Root TaskNode, or None without a plan. The tree shares no
            mutable state with the store.
        """
        if self._root_id is None:
            return None

        nodes: dict[str, TaskNode] = {}
        stack = [self._root_id]
        while stack:
            task = self._tasks[stack.pop()]
            node = TaskNode(
                id=task.id,
                description=task.description,
                status=task.status,
                notes=task.notes,
                result=task.result,
            )
            nodes[task.id] = node
            if task.parent_id is not None:
                nodes[task.parent_id].subtasks.append(node)
            stack.extend(reversed(task.subtasks))

        return nodes[self._root_id]

    def get_plan_state(self) -> dict[str, Any]:
        """Export the plan as plain nested dicts.

        Returns:
            The nested plan, or ``{"error": "No plan active"}``.
        """
        node = self.export()
        if node is None:
            return dict(NO_PLAN_STATE)
        return node.to_dict()

    def format_plan(self) -> str:
        """Render the plan as an indented, human-readable tree."""
        return format_plan(self.export())

    def restore_state(self, state: TaskNode | Mapping[str, Any] | None) -> str:
        """Replace the plan with a previously exported snapshot.

        Task ids are kept exactly as they appear in the snapshot. The
        snapshot is fully validated before the current plan is discarded.

        Args:
            state: A TaskNode or its dict form.

        Returns:
            Confirmation message with the number of restored tasks.

        Raises:
            InvalidStateError: If the state is empty, error-shaped or malformed.
        """
        if state is None:
            raise InvalidStateError()
        if isinstance(state, Mapping):
            if not state or "error" in state:
                raise InvalidStateError()
            root = TaskNode.from_dict(state)
        elif isinstance(state, TaskNode):
            root = state.validated()
        else:
            raise InvalidStateError(f"unsupported state type {type(state).__name__}")

        seen: set[str] = set()
        for node in root.walk():
            if node.id in seen:
                raise InvalidStateError(f"duplicate task id {node.id}")
            seen.add(node.id)

        self._tasks.clear()
        self._root_id = None

        stack: list[tuple[TaskNode, str | None]] = [(root, None)]
        while stack:
            node, parent_id = stack.pop()
            self._tasks[node.id] = Task(
                id=node.id,
                description=node.description,
                status=node.status,
                parent_id=parent_id,
                notes=node.notes,
                result=node.result,
            )
            if parent_id is None:
                self._root_id = node.id
            else:
                self._tasks[parent_id].subtasks.append(node.id)
            stack.extend((child, node.id) for child in reversed(node.subtasks))

        self._logger.info("plan_restored", root_id=self._root_id, task_count=len(self._tasks))
        return f"State restored successfully. Plan has {len(self._tasks)} task(s)."

    def _next_id(self) -> str:
        """Allocate the next task id from the current task count.

        Snapshots with sparse ids can make ``count + 1`` collide with an
        existing task, so skip forward until a free id is found.
        """
        candidate = len(self._tasks) + 1
        while str(candidate) in self._tasks:
            candidate += 1
        return str(candidate)
