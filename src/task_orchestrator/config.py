"""Configuration for the task orchestrator.

Provides OrchestratorSettings, loaded with pydantic-settings, plus both
global singleton and context-based access:

    1. Global singleton (simple cases):
        set_settings(my_settings)
        settings = get_settings()

    2. Context-based (isolated contexts, tests):
        with SettingsContext(my_settings):
            settings = get_settings()  # Returns my_settings

Settings Loading Priority (highest to lowest):
    1. Constructor arguments
    2. Environment variables (TASK_ORCHESTRATOR_* prefix)
    3. .env file
    4. Default values
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Generator, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "OrchestratorSettings",
    "SettingsContext",
    "get_settings",
    "set_settings",
    "set_context_settings",
    "get_context_settings",
    "reload_settings",
]


class OrchestratorSettings(BaseSettings):
    """Settings for the task orchestrator.

    Settings are loaded from (in order of precedence):
    1. Constructor arguments
    2. Environment variables (TASK_ORCHESTRATOR_ prefix)
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="TASK_ORCHESTRATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="task_orchestrator",
        title="App Name",
        description="Application name used in log output",
    )

    # Logging configuration
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        title="Log Level",
        description="Logging verbosity level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        title="Log Format",
        description="Log output format (console for dev, json for production)",
    )

    # Similarity matching
    checkpoint_match_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        title="Checkpoint Match Threshold",
        description="Minimum score (exclusive) for restoring a checkpoint by description",
    )
    recall_limit: int = Field(
        default=3,
        ge=1,
        title="Recall Limit",
        description="Default number of memories returned by recall",
    )
    recall_min_score: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        title="Recall Minimum Score",
        description="Matches scoring at or below this value are dropped",
    )


# Context variable for settings (takes precedence over global singleton)
_settings_context: ContextVar[OrchestratorSettings | None] = ContextVar(
    "settings_context", default=None
)

# Global settings instance holder (fallback when no context)
_settings_instance: OrchestratorSettings | None = None


def get_settings() -> OrchestratorSettings:
    """Get the current settings instance.

    Settings resolution order:
    1. Context variable (set via SettingsContext or set_context_settings)
    2. Global singleton (set via set_settings)
    3. Fresh OrchestratorSettings instance (created on first access)

    Returns:
        OrchestratorSettings instance for the current context
    """
    context_settings = _settings_context.get()
    if context_settings is not None:
        return context_settings

    global _settings_instance
    if _settings_instance is None:
        _settings_instance = OrchestratorSettings()
    return _settings_instance


def set_settings(settings: OrchestratorSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally
    """
    global _settings_instance
    _settings_instance = settings


def set_context_settings(settings: OrchestratorSettings | None) -> Token:
    """Set settings for the current context.

    Args:
        settings: Settings to use in current context, or None to clear

    Returns:
        Token that can be used to reset the context variable.
    """
    return _settings_context.set(settings)


def get_context_settings() -> OrchestratorSettings | None:
    """Get settings from current context (if any)."""
    return _settings_context.get()


@contextmanager
def SettingsContext(
    settings: OrchestratorSettings,
) -> Generator[OrchestratorSettings, None, None]:
    """Context manager for isolated settings.

    Example:
        with SettingsContext(test_settings) as s:
            store = CheckpointStore(tree)  # picks up s.checkpoint_match_threshold

    Args:
        settings: Settings to use within the context

    Yields:
        The settings instance
    """
    token = _settings_context.set(settings)
    try:
        yield settings
    finally:
        _settings_context.reset(token)


def reload_settings() -> OrchestratorSettings:
    """Reload settings (clears global singleton and context cache).

    Returns:
        Fresh OrchestratorSettings instance
    """
    global _settings_instance
    _settings_instance = None
    _settings_context.set(None)
    return get_settings()
