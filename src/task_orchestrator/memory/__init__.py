"""Context memory for agent sessions."""

from task_orchestrator.memory.context import ContextMemory, MemoryItem, RecallResult

__all__ = [
    "ContextMemory",
    "MemoryItem",
    "RecallResult",
]
