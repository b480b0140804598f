"""
Three-way merge of another branch into the current branch.

The engine keeps no state of its own. It reads both branch heads from the
commit graph, finds their split point, classifies each side's changes,
applies the non-conflicting ones through the materializer and staging
area, writes conflict files for the rest, and commits the result.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from .ancestry import find_split_point
from .checkout import Materializer
from .content_store import ContentStore
from .diff import ChangeSet, classify_changes
from .errors import (
    AncestorBranchError,
    NoSuchBranchError,
    SelfMergeError,
    UncommittedChangesError,
    UntrackedFileConflictError,
)
from .graph import CommitGraph
from .objects import Commit
from .staging import StagingArea
from .working_tree import WorkingTree

CONFLICT_NOTICE = "Encountered a merge conflict."
FAST_FORWARD_NOTICE = "Current branch fast-forwarded."


@dataclass
class Conflict:
    """A file both sides changed incompatibly. None means the side deleted it."""

    filename: str
    current_blob_id: Optional[str]
    other_blob_id: Optional[str]


@dataclass
class MergeResult:
    """Outcome of a merge (conflicts included; they are not errors)."""

    current_branch: str
    other_branch: str
    split_point_id: str
    commit: Optional[Commit] = None
    fast_forwarded: bool = False
    applied: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    conflicts: List[Conflict] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def notices(self) -> List[str]:
        """User-visible notices, at most one per kind."""
        if self.fast_forwarded:
            return [FAST_FORWARD_NOTICE]
        if self.conflicts:
            return [CONFLICT_NOTICE]
        return []


def _as_line_block(content: Optional[bytes]) -> bytes:
    if not content:
        return b""
    if not content.endswith(b"\n"):
        return content + b"\n"
    return content


def conflict_body(current: Optional[bytes], other: Optional[bytes]) -> bytes:
    """
    Build the contents of a conflicted file.

    Args:
        current: Current branch's version (None if deleted)
        other: Other branch's version (None if deleted)
    """
    return (
        b"<<<<<<< HEAD\n"
        + _as_line_block(current)
        + b"=======\n"
        + _as_line_block(other)
        + b">>>>>>>\n"
    )


def detect_conflicts(
    current: Commit,
    other: Commit,
    current_changes: ChangeSet,
    other_changes: ChangeSet,
) -> List[Conflict]:
    """
    Files whose changes on the two sides cannot both be applied.

    - modified in both, to different content
    - modified in other, removed in current
    - modified in current, removed in other
    - added in both, with different content
    """
    conflicts: List[Conflict] = []

    for filename in sorted(other_changes.modified & current_changes.modified):
        if current.blobs[filename] != other.blobs[filename]:
            conflicts.append(
                Conflict(filename, current.blobs[filename], other.blobs[filename])
            )

    for filename in sorted(other_changes.modified & current_changes.removed):
        conflicts.append(Conflict(filename, None, other.blobs[filename]))

    for filename in sorted(current_changes.modified & other_changes.removed):
        conflicts.append(Conflict(filename, current.blobs[filename], None))

    for filename in sorted(other_changes.added & current_changes.added):
        if current.blobs[filename] != other.blobs[filename]:
            conflicts.append(
                Conflict(filename, current.blobs[filename], other.blobs[filename])
            )

    return sorted(conflicts, key=lambda c: c.filename)


class MergeEngine:
    """Drives a merge through the graph, materializer and staging area."""

    def __init__(
        self,
        store: ContentStore,
        tree: WorkingTree,
        graph: CommitGraph,
        stage: StagingArea,
        materializer: Materializer,
        split_point_strategy: str = "first_parent",
    ):
        self.store = store
        self.tree = tree
        self.graph = graph
        self.stage = stage
        self.materializer = materializer
        self.split_point_strategy = split_point_strategy
        self.log = logger.bind(component="merge")

    def check_preconditions(self, branch: str) -> None:
        """
        Validate a merge before anything is touched.

        Raises:
            NoSuchBranchError: Unknown branch
            SelfMergeError: Merging the current branch, or it is the only one
            UncommittedChangesError: Staging area is not empty
            UntrackedFileConflictError: Working directory not fully tracked
        """
        state = self.graph.state
        if branch not in state.branches:
            raise NoSuchBranchError()
        if branch == state.current_branch or len(state.branches) == 1:
            raise SelfMergeError()
        if not self.stage.is_empty():
            raise UncommittedChangesError()
        if self.materializer.untracked_files(self.graph.head_commit()):
            raise UntrackedFileConflictError()

    def merge(self, branch: str) -> MergeResult:
        """
        Merge a branch into the current branch.

        Args:
            branch: Name of the branch to merge in

        Returns:
            MergeResult describing the outcome

        Raises:
            AncestorBranchError: If the branch is already contained in HEAD
            DomainError: For any failed precondition
        """
        self.check_preconditions(branch)

        current_branch = self.graph.state.current_branch
        current_id = self.graph.state.head
        other_id = self.graph.branch_head(branch)
        split_id = find_split_point(
            self.store, current_id, other_id, self.split_point_strategy
        )

        if split_id == other_id:
            raise AncestorBranchError()

        result = MergeResult(
            current_branch=current_branch,
            other_branch=branch,
            split_point_id=split_id,
        )

        if split_id == current_id:
            self.materializer.checkout_branch(self.graph, branch)
            self.stage.reset()
            result.fast_forwarded = True
            self.log.info(f"Fast-forwarded {current_branch} to {branch}")
            return result

        split = self.store.get_commit(split_id)
        current = self.store.get_commit(current_id)
        other = self.store.get_commit(other_id)
        current_changes = classify_changes(split, current)
        other_changes = classify_changes(split, other)

        result.conflicts = detect_conflicts(
            current, other, current_changes, other_changes
        )
        conflicted = {c.filename for c in result.conflicts}

        modified_in_other = other_changes.modified - current_changes.modified
        added_in_other = other_changes.added - current_changes.added
        for filename in sorted(modified_in_other) + sorted(added_in_other):
            if filename in conflicted:
                continue
            self.materializer.checkout_file(other, filename)
            self.stage.stage_add(filename, current)
            result.applied.append(filename)

        for conflict in result.conflicts:
            self._write_conflict(conflict, current)

        # Deletions last so a partial merge never loses a written file
        for filename in sorted(current_changes.unmodified & other_changes.removed):
            if filename in conflicted:
                continue
            self.stage.stage_remove(filename, current)
            result.removed.append(filename)

        if result.conflicts:
            self.log.bind(files=[c.filename for c in result.conflicts]).info(
                CONFLICT_NOTICE
            )

        message = f"Merged {branch} into {current_branch}."
        result.commit = self.graph.commit_from_stage(
            self.stage, message, second_parent_id=other_id, allow_empty=True
        )
        self.stage.reset()

        self.log.bind(
            merge_commit=result.commit.commit_id,
            split_point=split_id,
            current_changes=current_changes.summary(),
            other_changes=other_changes.summary(),
        ).info(f"Merged {branch} into {current_branch}")
        return result

    def _write_conflict(self, conflict: Conflict, current: Commit) -> None:
        current_content = (
            self.store.get_blob_content(conflict.current_blob_id)
            if conflict.current_blob_id
            else None
        )
        other_content = (
            self.store.get_blob_content(conflict.other_blob_id)
            if conflict.other_blob_id
            else None
        )
        self.tree.write(conflict.filename, conflict_body(current_content, other_content))
        self.stage.stage_add(conflict.filename, current)
