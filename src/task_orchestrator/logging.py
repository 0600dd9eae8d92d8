"""structlog setup for the task orchestrator.

The orchestrator is a library: it only configures structlog when the host
application has not, and it never writes to stdout, which callers may
use for their own request/response traffic. Log lines go to stderr (or a
given stream), filtered at the level from ``OrchestratorSettings``.

Example:
    from task_orchestrator.logging import configure_logging, Loggers

    configure_logging()          # level and format from settings
    Loggers.planning().info("plan_created", root_id="1")
"""

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from task_orchestrator.config import OrchestratorSettings


def _renderer(log_format: str) -> list[Processor]:
    if log_format == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    settings: "OrchestratorSettings | None" = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog from orchestrator settings.

    Loggers are not cached, so calling this again after settings change
    takes effect on loggers that already exist.

    Args:
        settings: Settings supplying ``log_level`` and ``log_format``.
            Defaults to the active settings.
        stream: Where log lines are written. Defaults to stderr.
    """
    if settings is None:
        from task_orchestrator.config import get_settings

        settings = get_settings()

    level = logging.getLevelName(settings.log_level.upper())

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        *_renderer(settings.log_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def ensure_logging_configured() -> bool:
    """Configure logging from settings unless structlog is already configured.

    Returns:
        True if this call configured structlog.
    """
    if structlog.is_configured():
        return False
    configure_logging()
    return True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Optional logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in the current context.

    Example:
        bind_context(session_id="abc123")
        logger.info("task_added")  # Will include session_id

    Args:
        **kwargs: Key-value pairs to bind to logging context
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context.

    Args:
        *keys: Keys to remove from context
    """
    structlog.contextvars.unbind_contextvars(*keys)


class Loggers:
    """Pre-configured logger instances for orchestrator components."""

    @staticmethod
    def planning() -> structlog.stdlib.BoundLogger:
        """Logger for the task tree store."""
        return get_logger("task_orchestrator.planning")

    @staticmethod
    def checkpoints() -> structlog.stdlib.BoundLogger:
        """Logger for the checkpoint store."""
        return get_logger("task_orchestrator.checkpoints")

    @staticmethod
    def memory() -> structlog.stdlib.BoundLogger:
        """Logger for context memory."""
        return get_logger("task_orchestrator.memory")

    @staticmethod
    def tools() -> structlog.stdlib.BoundLogger:
        """Logger for tools."""
        return get_logger("task_orchestrator.tools")

    @staticmethod
    def config() -> structlog.stdlib.BoundLogger:
        """Logger for configuration."""
        return get_logger("task_orchestrator.config")
