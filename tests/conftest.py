"""Shared test fixtures for task-orchestrator tests.

Provides:
- MockContext for isolating tests from global settings
- Fresh store fixtures
- An entered OrchestratorSession for tool tests
"""

import os
from typing import Generator

import pytest

from task_orchestrator.config import (
    OrchestratorSettings,
    reload_settings,
    set_context_settings,
    set_settings,
)
from task_orchestrator.memory import ContextMemory
from task_orchestrator.planning import CheckpointStore, TaskTreeStore
from task_orchestrator.tools import OrchestratorSession


class MockContext:
    """Context manager for isolating tests from global state.

    Handles:
    - Clearing TASK_ORCHESTRATOR_* environment variables
    - Installing a settings instance built from overrides
    - Resetting the global settings singleton afterwards

    Usage:
        with MockContext(recall_limit=1) as ctx:
            settings = ctx.settings
    """

    def __init__(self, **settings_kwargs):
        self._settings_kwargs = settings_kwargs
        self._settings: OrchestratorSettings | None = None
        self._original_env: dict[str, str] = {}

    def __enter__(self) -> "MockContext":
        for var in list(os.environ):
            if var.startswith("TASK_ORCHESTRATOR_"):
                self._original_env[var] = os.environ.pop(var)

        self._settings = OrchestratorSettings(_env_file=None, **self._settings_kwargs)
        set_settings(self._settings)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        set_context_settings(None)
        os.environ.update(self._original_env)
        reload_settings()

    @property
    def settings(self) -> OrchestratorSettings:
        """Get the test settings instance."""
        if self._settings is None:
            raise RuntimeError("MockContext not entered")
        return self._settings


@pytest.fixture
def mock_context() -> Generator[MockContext, None, None]:
    """Fixture providing an isolated settings context."""
    with MockContext() as ctx:
        yield ctx


@pytest.fixture
def tree(mock_context: MockContext) -> TaskTreeStore:
    """Fixture providing an empty task tree store."""
    return TaskTreeStore()


@pytest.fixture
def plan(tree: TaskTreeStore) -> TaskTreeStore:
    """Fixture providing a store with a small plan.

    1 Build X
      2 Design
        4 Draft API
      3 Implement
    """
    tree.create_plan("Build X")
    tree.add_task("Design")
    tree.add_task("Implement")
    tree.add_task("Draft API", parent_id="2")
    return tree


@pytest.fixture
def checkpoints(tree: TaskTreeStore) -> CheckpointStore:
    """Fixture providing a checkpoint store wrapping ``tree``."""
    return CheckpointStore(tree)


@pytest.fixture
def memory(mock_context: MockContext) -> ContextMemory:
    """Fixture providing an empty context memory."""
    return ContextMemory()


@pytest.fixture
def session(mock_context: MockContext) -> Generator[OrchestratorSession, None, None]:
    """Fixture providing an entered orchestrator session."""
    with OrchestratorSession() as s:
        yield s
