"""
Staging area for the next commit.

Pending additions and removals are kept as two in-memory maps of
filename -> blob id and persisted together as a single record. Staged
content is written to the object store at staging time, which is the
on-disk copy a later commit refers to.
"""

from typing import Any, Dict, Optional

from loguru import logger

from .content_store import ContentStore
from .errors import FileNotFoundInWorkingTreeError, NothingToRemoveError
from .objects import Blob, Commit, compute_blob_id
from .working_tree import WorkingTree


class StagingArea:
    """
    Pending additions and removals.

    Invariant: a filename is never staged for addition and removal at once.
    """

    def __init__(
        self,
        store: ContentStore,
        tree: WorkingTree,
        additions: Optional[Dict[str, str]] = None,
        removals: Optional[Dict[str, str]] = None,
    ):
        self.store = store
        self.tree = tree
        self.additions: Dict[str, str] = dict(additions or {})
        self.removals: Dict[str, str] = dict(removals or {})
        self.log = logger.bind(component="staging")

    def stage_add(self, filename: str, head: Commit) -> Optional[Blob]:
        """
        Stage a working file for addition.

        A file identical to HEAD's version is not staged, and any earlier
        staged addition for it is undone.

        Args:
            filename: Name of the working file
            head: Current HEAD commit

        Returns:
            The staged Blob, or None when the file matches HEAD

        Raises:
            FileNotFoundInWorkingTreeError: If the file does not exist
        """
        content = self.tree.read(filename)
        if content is None:
            raise FileNotFoundInWorkingTreeError()

        self.removals.pop(filename, None)

        if head.blobs.get(filename) == compute_blob_id(content):
            if self.additions.pop(filename, None) is not None:
                self.log.debug(f"Unstaged {filename}: matches HEAD")
            return None

        blob = self.store.blob_from_bytes(filename, content)
        self.additions[filename] = blob.blob_id
        self.log.bind(blob_id=blob.blob_id).debug(f"Staged {filename}")
        return blob

    def stage_remove(self, filename: str, head: Commit) -> None:
        """
        Unstage a file or stage it for removal.

        Args:
            filename: Name of the file
            head: Current HEAD commit

        Raises:
            NothingToRemoveError: If the file is neither staged nor tracked
        """
        staged = filename in self.additions
        tracked = head.tracks(filename)

        if staged and tracked:
            snapshot = self._snapshot(filename, self.additions[filename])
            self.removals[filename] = snapshot
            self.tree.delete(filename)
            del self.additions[filename]
        elif staged:
            # Never tracked: forget the addition, leave the file alone
            del self.additions[filename]
        elif tracked:
            self.removals[filename] = head.blobs[filename]
            self.tree.delete(filename)
        else:
            raise NothingToRemoveError()

        self.log.bind(staged_removal=filename in self.removals).debug(
            f"Removed {filename} from stage"
        )

    def _snapshot(self, filename: str, fallback_id: str) -> str:
        content = self.tree.read(filename)
        if content is None:
            return fallback_id
        return self.store.blob_from_bytes(filename, content).blob_id

    def clear(self) -> None:
        """Empty the staged additions."""
        self.additions.clear()

    def clear_removed(self) -> None:
        """Empty the staged removals."""
        self.removals.clear()

    def reset(self) -> None:
        self.clear()
        self.clear_removed()

    def is_empty(self) -> bool:
        return not self.additions and not self.removals

    def to_dict(self) -> Dict[str, Any]:
        """Convert staging area to dictionary for serialization."""
        return {
            "additions": dict(self.additions),
            "removals": dict(self.removals),
        }

    @classmethod
    def from_dict(
        cls, data: Optional[Dict[str, Any]], store: ContentStore, tree: WorkingTree
    ) -> "StagingArea":
        """Create staging area from dictionary (None yields an empty one)."""
        data = data or {}
        return cls(
            store,
            tree,
            additions=data.get("additions", {}),
            removals=data.get("removals", {}),
        )
