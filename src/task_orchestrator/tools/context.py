"""Context variables that give tools access to the active stores.

An OrchestratorSession sets these before tools run; tools read them via
the getter functions.
"""

from contextvars import ContextVar, Token
from typing import Any, Callable


def _make_context_accessors(name: str) -> tuple[Callable[..., Token], Callable[..., Any]]:
    """Create a (setter, getter) pair backed by a ContextVar."""
    var: ContextVar[Any] = ContextVar(f"{name}_context", default=None)

    def setter(value: Any) -> Token:
        return var.set(value)

    def getter() -> Any:
        return var.get()

    setter.__name__ = setter.__qualname__ = f"set_context_{name}"
    getter.__name__ = getter.__qualname__ = f"get_context_{name}"
    return setter, getter


set_context_task_tree, get_context_task_tree = _make_context_accessors("task_tree")
set_context_checkpoint_store, get_context_checkpoint_store = _make_context_accessors("checkpoint_store")
set_context_context_memory, get_context_context_memory = _make_context_accessors("context_memory")
