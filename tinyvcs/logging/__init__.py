"""
Logging infrastructure for tinyvcs.

Provides loguru sink configuration and operation-tracking decorators.
"""

from .logger import (
    VCSLogger,
    get_vcs_logger,
    initialize_logging,
    get_logger_instance,
    log_repository_operation,
)

from .decorators import track_operation

__all__ = [
    # Logger
    "VCSLogger",
    "get_vcs_logger",
    "initialize_logging",
    "get_logger_instance",
    "log_repository_operation",
    # Decorators
    "track_operation",
]
