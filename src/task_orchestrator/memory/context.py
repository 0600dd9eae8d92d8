"""In-process context memory with similarity recall.

The agent stores short facts with a natural language label and later
recalls them by describing what it is looking for. Nothing is persisted
beyond the process.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from task_orchestrator.config import get_settings
from task_orchestrator.logging import Loggers
from task_orchestrator.similarity import Scorer, find_best_matches, semantic_similarity


@dataclass
class MemoryItem:
    """A single remembered entry."""

    id: str
    what: str
    details: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def match_text(self) -> str:
        return f"{self.what} {self.details}" if self.details else self.what

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "what": self.what,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class RecallResult:
    """A recalled memory and how relevant it was to the query."""

    what: str
    details: str | None
    relevance: float

    def to_dict(self) -> dict[str, Any]:
        return {"what": self.what, "details": self.details, "relevance": self.relevance}


class ContextMemory:
    """Remembers labelled facts and recalls them by similarity.

    Example:
        >>> memory = ContextMemory()
        >>> memory.remember("database credentials location", "stored in vault")
        {'remembered': True, 'id': 'mem_1'}
        >>> memory.recall("where are the database credentials")[0].what
        'database credentials location'
    """

    def __init__(self, scorer: Scorer = semantic_similarity) -> None:
        self._scorer = scorer
        self._items: list[MemoryItem] = []
        self._next_id = 1
        self._logger = Loggers.memory()

    def remember(self, what: str, details: str | None = None) -> dict[str, Any]:
        """Store a fact.

        Args:
            what: What to remember, in natural language.
            details: Optional additional details.

        Returns:
            Dict with ``remembered`` and the new ``id``.
        """
        item_id = f"mem_{self._next_id}"
        self._next_id += 1
        self._items.append(MemoryItem(id=item_id, what=what, details=details))

        self._logger.debug("memory_stored", memory_id=item_id)
        return {"remembered": True, "id": item_id}

    def recall(self, query: str, limit: int | None = None) -> list[RecallResult]:
        """Find remembered facts similar to a query.

        Args:
            query: What you are looking for.
            limit: Maximum results; defaults to ``recall_limit`` from settings.

        Returns:
            Matches ordered by descending relevance.
        """
        if not self._items:
            return []

        settings = get_settings()
        matches = find_best_matches(
            query,
            self._items,
            lambda item: item.match_text,
            limit=limit or settings.recall_limit,
            min_score=settings.recall_min_score,
            scorer=self._scorer,
        )
        return [
            RecallResult(what=m.item.what, details=m.item.details, relevance=m.score)
            for m in matches
        ]

    def get_all(self) -> list[MemoryItem]:
        """Get all remembered items in insertion order."""
        return list(self._items)

    def clear(self) -> None:
        """Forget everything and restart ids at ``mem_1``."""
        self._items = []
        self._next_id = 1
