"""
Change classification between two commits.

Used by the merge engine to classify each side's changes relative to the
split point.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Set

from .objects import Commit


class ChangeType(str, Enum):
    """Type of change in a diff."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass
class ChangeSet:
    """
    One side's changes relative to a base commit.

    modified: in both, content differs
    added: only in the side
    removed: only in the base
    unmodified: in both, identical content
    """

    base_id: str
    side_id: str
    modified: Set[str] = field(default_factory=set)
    added: Set[str] = field(default_factory=set)
    removed: Set[str] = field(default_factory=set)
    unmodified: Set[str] = field(default_factory=set)

    def has_changes(self) -> bool:
        """Check if there are any changes."""
        return bool(self.modified or self.added or self.removed)

    def change_type(self, filename: str) -> ChangeType:
        if filename in self.added:
            return ChangeType.ADDED
        if filename in self.removed:
            return ChangeType.REMOVED
        if filename in self.modified:
            return ChangeType.MODIFIED
        return ChangeType.UNCHANGED

    def count_by_type(self) -> Dict[str, int]:
        """Count changes by type."""
        return {
            ChangeType.ADDED.value: len(self.added),
            ChangeType.REMOVED.value: len(self.removed),
            ChangeType.MODIFIED.value: len(self.modified),
        }

    def summary(self) -> str:
        """Generate a summary of the changes."""
        if not self.has_changes():
            return "No changes"

        counts = self.count_by_type()
        parts = []
        if counts["added"] > 0:
            parts.append(f"{counts['added']} files added")
        if counts["removed"] > 0:
            parts.append(f"{counts['removed']} files removed")
        if counts["modified"] > 0:
            parts.append(f"{counts['modified']} files modified")

        return ", ".join(parts)


def classify_changes(base: Commit, side: Commit) -> ChangeSet:
    """
    Classify every file of base and side.

    Args:
        base: Common ancestor (the split point)
        side: One branch head

    Returns:
        ChangeSet for the side
    """
    changes = ChangeSet(base_id=base.commit_id, side_id=side.commit_id)

    for filename, blob_id in side.blobs.items():
        base_blob = base.blobs.get(filename)
        if base_blob is None:
            changes.added.add(filename)
        elif base_blob != blob_id:
            changes.modified.add(filename)
        else:
            changes.unmodified.add(filename)

    for filename in base.blobs:
        if filename not in side.blobs:
            changes.removed.add(filename)

    return changes
