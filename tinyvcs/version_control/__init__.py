"""
Version control engine for the files of a working directory.

Provides git-like operations: staging, commits, branches, checkout,
reset and three-way merge.
"""

from .objects import (
    Blob,
    Commit,
    compute_blob_id,
    format_timestamp,
)

from .diff import (
    ChangeSet,
    ChangeType,
    classify_changes,
)

from .errors import (
    VersionControlError,
    DomainError,
    UserInputError,
    StoreError,
)

from .ancestry import find_split_point

from .merge import (
    Conflict,
    MergeResult,
    MergeEngine,
    conflict_body,
)

from .repository import Repository, StatusReport

from .storage import VersionStorage

__all__ = [
    # Objects
    "Blob",
    "Commit",
    "compute_blob_id",
    "format_timestamp",
    # Diff
    "ChangeSet",
    "ChangeType",
    "classify_changes",
    # Errors
    "VersionControlError",
    "DomainError",
    "UserInputError",
    "StoreError",
    # Merge
    "find_split_point",
    "Conflict",
    "MergeResult",
    "MergeEngine",
    "conflict_body",
    # Repository
    "Repository",
    "StatusReport",
    # Storage
    "VersionStorage",
]
