"""
Logging setup for tinyvcs.

Every module logs through loguru with a bound ``component`` extra
(store, staging, graph, checkout, merge, repository, cli). This module owns
the sinks: stderr for the console and, when enabled, a rotating pair of
files under the configured log directory.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger

from ..config import LogConfig


class VCSLogger:
    """
    Owns the loguru sinks of one tinyvcs process.

    Sinks:
    - stderr, at the configured level
    - tinyvcs.log, everything at the configured level (file logging only)
    - errors.log, ERROR and above (file logging only)

    Handler ids are kept so close() removes exactly the sinks added here.
    """

    def __init__(self, settings: Optional[LogConfig] = None, **overrides: Any):
        """
        Install the sinks.

        Args:
            settings: Logging section of the configuration (defaults if None)
            **overrides: LogConfig fields to replace, e.g. level="DEBUG"
        """
        settings = settings or LogConfig()
        if overrides:
            settings = settings.model_copy(update=overrides)

        self.settings = settings
        self.level = settings.level
        self.log_dir = Path(settings.log_dir)
        self.handler_ids: List[int] = []

        # Records logged without a bound component still format cleanly
        logger.configure(extra={"component": "system"})
        logger.remove()

        if settings.enable_console_logging:
            self._add_sink(sys.stderr, colorize=True)

        if settings.enable_file_logging:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._add_sink(
                self.log_dir / "tinyvcs.log",
                rotation=settings.rotation,
                retention=settings.retention,
            )
            self._add_sink(
                self.log_dir / "errors.log",
                level="ERROR",
                rotation=settings.rotation,
                retention=settings.retention,
            )

    def _add_sink(self, sink: Any, level: Optional[str] = None, **options: Any) -> int:
        handler_id = logger.add(
            sink,
            format=self.settings.format,
            level=level or self.level,
            **options,
        )
        self.handler_ids.append(handler_id)
        return handler_id

    def close(self) -> None:
        """Remove the sinks installed by this instance (flushing file sinks)."""
        for handler_id in self.handler_ids:
            try:
                logger.remove(handler_id)
            except ValueError:
                # Already dropped when a later VCSLogger reset the sinks
                pass
        self.handler_ids.clear()

    def get_logger(self, component: str) -> Any:
        return logger.bind(component=component)


def get_vcs_logger(component: str = "system") -> Any:
    """
    Loguru logger bound to one component.

    Example:
        >>> log = get_vcs_logger("merge")
        >>> log.info("Split point found")
    """
    return logger.bind(component=component)


def log_repository_operation(
    logger_instance: Any, operation: str, **context: Any
) -> None:
    """
    Emit a DEBUG record for a repository operation.

    The context is attached with bind() so filenames and messages are
    never run through loguru's brace formatting.

    Args:
        logger_instance: Bound logger to emit on
        operation: Operation name (e.g. "commit", "merge_complete")
        **context: Extra fields for the record
    """
    logger_instance.bind(
        operation=operation,
        timestamp=datetime.now().isoformat(),
        **context,
    ).debug(f"Repository operation: {operation}")


_vcs_logger: Optional[VCSLogger] = None


def initialize_logging(
    settings: Optional[LogConfig] = None, **overrides: Any
) -> VCSLogger:
    """
    Configure the process-wide sinks, replacing any earlier configuration.

    Called once by the CLI entry point.

    Args:
        settings: Logging section of the configuration
        **overrides: LogConfig fields to replace

    Returns:
        The active VCSLogger
    """
    global _vcs_logger
    _vcs_logger = VCSLogger(settings, **overrides)
    return _vcs_logger


def get_logger_instance() -> Optional[VCSLogger]:
    return _vcs_logger
