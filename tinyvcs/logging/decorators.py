"""
Decorators for automatic logging of repository operations.

These decorators enable traceability without cluttering business logic.
"""

import functools
import time
from typing import Any, Callable

from .logger import get_vcs_logger, log_repository_operation


def track_operation(operation_type: str, threshold_ms: float = 1000.0) -> Callable:
    """
    Decorator to track a repository command.

    Logs start and completion at DEBUG, failures at INFO, and a warning
    when the command runs longer than threshold_ms.

    Args:
        operation_type: Name of the command (e.g., "commit", "merge")
        threshold_ms: Slow-operation warning threshold in milliseconds

    Example:
        >>> @track_operation("commit")
        ... def commit(self, message: str):
        ...     ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = get_vcs_logger("repository")
            start_time = time.perf_counter()
            log_repository_operation(log, operation_type, function=func.__name__)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                log.bind(
                    operation=operation_type,
                    error_type=type(e).__name__,
                    elapsed_ms=elapsed_ms,
                ).info(f"Operation {operation_type} failed: {e}")
                raise

            elapsed_ms = (time.perf_counter() - start_time) * 1000
            if elapsed_ms > threshold_ms:
                log.bind(operation=operation_type, elapsed_ms=elapsed_ms).warning(
                    f"Performance threshold exceeded: {operation_type}"
                )
            else:
                log_repository_operation(
                    log,
                    f"{operation_type}_complete",
                    elapsed_ms=elapsed_ms,
                )
            return result

        return wrapper

    return decorator
