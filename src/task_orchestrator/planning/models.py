"""Data model for task plans.

``Task`` is the live, mutable node held by the task tree store and linked
to its neighbours by id. ``TaskNode`` is the exported snapshot: a
self-contained recursive tree that converts to and from the plain dict
shape used at the serialization boundary::

    {
        "id": "1",
        "description": "Build X",
        "status": "pending",
        "notes": None,
        "result": None,
        "subtasks": [ ...nested dicts... ],
    }
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from task_orchestrator.errors import InvalidStateError, InvalidStatusError


class TaskStatus(str, Enum):
    """Status values for tasks in a plan."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @classmethod
    def parse(cls, value: "TaskStatus | str") -> "TaskStatus":
        """Convert a status or its string value, raising InvalidStatusError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(str(value), [s.value for s in cls]) from None


# Status icons for display
STATUS_ICONS = {
    TaskStatus.PENDING: "⭕",
    TaskStatus.IN_PROGRESS: "🔄",
    TaskStatus.COMPLETED: "✅",
    TaskStatus.FAILED: "❌",
    TaskStatus.SKIPPED: "⏭️",
}


@dataclass
class Task:
    """A task in the live plan.

    Attributes:
        id: Identifier, unique within the plan.
        description: Human-readable description of what needs to be done.
        status: Current status of the task.
        parent_id: ID of the parent task; None only for the root.
        notes: Accumulated notes, newline separated.
        result: Result text from the last update that set one.
        subtasks: Child task IDs in creation order.
    """

    id: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    parent_id: str | None = None
    notes: str | None = None
    result: str | None = None
    subtasks: list[str] = field(default_factory=list)


@dataclass
class TaskNode:
    """A node of an exported plan snapshot.

    Attributes:
        id: Task identifier.
        description: Task description.
        status: Task status.
        notes: Task notes, if any.
        result: Task result, if any.
        subtasks: Child nodes in order.
    """

    id: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    notes: str | None = None
    result: str | None = None
    subtasks: list["TaskNode"] = field(default_factory=list)

    def walk(self) -> Iterator["TaskNode"]:
        """Yield this node and all descendants, depth-first pre-order."""
        for node, _ in self.walk_with_depth():
            yield node

    def walk_with_depth(self) -> Iterator[tuple["TaskNode", int]]:
        """Yield ``(node, depth)`` pairs in pre-order, the root at depth 0.

        Plans can nest deeper than the interpreter's recursion limit, so
        traversal keeps its own stack.
        """
        stack: list[tuple[TaskNode, int]] = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            for child in reversed(node.subtasks):
                stack.append((child, depth + 1))

    def to_dict(self) -> dict[str, Any]:
        """Convert the subtree to plain nested dicts.

        Returns:
            Dictionary representation of the node and its descendants.
        """
        root: dict[str, Any] = {}
        stack: list[tuple[TaskNode, dict[str, Any]]] = [(self, root)]
        while stack:
            node, out = stack.pop()
            out.update(
                id=node.id,
                description=node.description,
                status=node.status.value,
                notes=node.notes,
                result=node.result,
                subtasks=[{} for _ in node.subtasks],
            )
            stack.extend(zip(node.subtasks, out["subtasks"]))
        return root

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaskNode":
        """Build a node tree from plain nested dicts.

        A missing status defaults to pending; missing or null ``subtasks``
        means no children.

        Args:
            data: Dictionary representation of a node.

        Returns:
            A new TaskNode tree.

        Raises:
            InvalidStateError: If the data is not a well-formed node.
        """
        return cls._build(data)

    def validated(self) -> "TaskNode":
        """Return a checked copy of this tree.

        Nodes built by hand may carry a plain string status or non-text
        fields; they get the same checks as ``from_dict``.

        Raises:
            InvalidStateError: If any node is malformed.
        """
        return type(self)._build(self)

    @classmethod
    def _build(cls, data: "TaskNode | Mapping[str, Any]") -> "TaskNode":
        root, children = cls._check(data)
        stack = [(child, root) for child in reversed(children)]
        while stack:
            item, parent = stack.pop()
            node, children = cls._check(item)
            parent.subtasks.append(node)
            stack.extend((child, node) for child in reversed(children))
        return root

    @classmethod
    def _check(cls, item: Any) -> tuple["TaskNode", list[Any]]:
        """Validate one node's own fields; children are returned unchecked."""
        if isinstance(item, TaskNode):
            data: Mapping[str, Any] = {
                "id": item.id,
                "description": item.description,
                "status": item.status,
                "notes": item.notes,
                "result": item.result,
                "subtasks": item.subtasks,
            }
        elif isinstance(item, Mapping):
            data = item
        else:
            raise InvalidStateError(f"expected a task mapping, got {type(item).__name__}")

        task_id = data.get("id")
        if not isinstance(task_id, str) or not task_id:
            raise InvalidStateError(f"task id must be a non-empty string, got {task_id!r}")

        description = data.get("description")
        if not isinstance(description, str):
            raise InvalidStateError(f"task {task_id} has no description")

        try:
            status = TaskStatus.parse(data.get("status") or TaskStatus.PENDING)
        except InvalidStatusError as e:
            raise InvalidStateError(f"task {task_id}: {e.message}") from None

        for key in ("notes", "result"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise InvalidStateError(f"task {task_id} has non-text {key}")

        children = data.get("subtasks") or []
        if not isinstance(children, list):
            raise InvalidStateError(f"task {task_id} subtasks must be a list")

        node = cls(
            id=task_id,
            description=description,
            status=status,
            notes=data.get("notes"),
            result=data.get("result"),
        )
        return node, children
