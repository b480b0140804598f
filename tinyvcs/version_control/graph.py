"""
Commit graph: branch table, current branch and HEAD.

All graph state lives in an explicit RepositoryState object that callers
load, pass around and persist. Commits are always dereferenced by id
through the content store.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from loguru import logger

from .content_store import ContentStore
from .errors import (
    BranchExistsError,
    CannotRemoveCurrentBranchError,
    CorruptedRecordError,
    EmptyMessageError,
    NoSuchBranchError,
    NothingStagedError,
)
from .objects import EPOCH_TIMESTAMP, Commit
from .staging import StagingArea


@dataclass
class RepositoryState:
    """
    Branch table plus the current branch and HEAD.

    Invariant: head == branches[current_branch].
    """

    branches: Dict[str, str]
    current_branch: str
    head: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary for serialization."""
        return {
            "branches": dict(self.branches),
            "current_branch": self.current_branch,
            "head": self.head,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryState":
        """Create state from dictionary."""
        try:
            state = cls(
                branches=dict(data["branches"]),
                current_branch=data["current_branch"],
                head=data["head"],
            )
        except KeyError as e:
            raise CorruptedRecordError(f"Repository record missing {e}") from e
        state.check_invariant()
        return state

    def check_invariant(self) -> None:
        if self.branches.get(self.current_branch) != self.head:
            raise CorruptedRecordError(
                f"HEAD {self.head[:8]} does not match branch {self.current_branch}"
            )


class CommitGraph:
    """Builds commits from staged changes and moves branch pointers."""

    def __init__(self, store: ContentStore, state: RepositoryState):
        self.store = store
        self.state = state
        self.log = logger.bind(component="graph")

    @classmethod
    def create_root(
        cls,
        store: ContentStore,
        blobs: Dict[str, str],
        branch: str = "master",
        message: str = "initial commit",
    ) -> "CommitGraph":
        """
        Create the root commit and the first branch.

        Args:
            store: Content store to write into
            blobs: Snapshot of the working directory (filename -> blob id)
            branch: Name of the first branch
            message: Root commit message

        Returns:
            A graph whose only branch points at the root commit
        """
        root = store.commit(message, None, blobs, timestamp=EPOCH_TIMESTAMP)
        state = RepositoryState(
            branches={branch: root.commit_id},
            current_branch=branch,
            head=root.commit_id,
        )
        return cls(store, state)

    def head_commit(self) -> Commit:
        return self.store.get_commit(self.state.head)

    def has_branch(self, name: str) -> bool:
        return name in self.state.branches

    def branch_head(self, name: str) -> str:
        if name not in self.state.branches:
            raise NoSuchBranchError()
        return self.state.branches[name]

    def commit_from_stage(
        self,
        stage: StagingArea,
        message: str,
        second_parent_id: Optional[str] = None,
        allow_empty: bool = False,
    ) -> Commit:
        """
        Create a commit from HEAD plus the staged changes and advance HEAD.

        Args:
            stage: Staging area to read from (not cleared here)
            message: Commit message
            second_parent_id: Merged-in parent for merge commits
            allow_empty: Permit a commit with nothing staged

        Returns:
            The new commit

        Raises:
            EmptyMessageError: If the message is blank
            NothingStagedError: If nothing is staged and allow_empty is False
        """
        if not message or not message.strip():
            raise EmptyMessageError()
        if stage.is_empty() and not allow_empty:
            raise NothingStagedError()

        head = self.head_commit()
        blobs = dict(head.blobs)
        blobs.update(stage.additions)
        for filename in stage.removals:
            blobs.pop(filename, None)

        commit = self.store.commit(
            message, head.commit_id, blobs, second_parent_id=second_parent_id
        )
        self._advance(commit.commit_id)

        self.log.bind(
            commit_id=commit.commit_id, branch=self.state.current_branch
        ).info(f"Committed {commit.commit_id[:8]}: {message}")
        return commit

    def _advance(self, commit_id: str) -> None:
        self.state.branches[self.state.current_branch] = commit_id
        self.state.head = commit_id

    def add_branch(self, name: str) -> None:
        """Point a new branch at the current HEAD."""
        if name in self.state.branches:
            raise BranchExistsError()
        self.state.branches[name] = self.state.head
        self.log.info(f"Created branch: {name} at {self.state.head[:8]}")

    def remove_branch(self, name: str) -> None:
        """Delete a branch pointer (its commits are kept)."""
        if name not in self.state.branches:
            raise NoSuchBranchError()
        if name == self.state.current_branch:
            raise CannotRemoveCurrentBranchError()
        del self.state.branches[name]
        self.log.info(f"Removed branch: {name}")

    def switch_branch(self, name: str) -> None:
        """
        Make another branch current.

        Callers materialize the working directory and clear staging.
        """
        self.state.head = self.branch_head(name)
        self.state.current_branch = name

    def reset_head(self, commit_id: str) -> None:
        """Move the current branch and HEAD to an arbitrary commit."""
        self._advance(commit_id)

    def history(self, start_id: Optional[str] = None) -> Iterator[Commit]:
        """Walk first parents from a commit (default HEAD) back to the root."""
        commit_id = start_id or self.state.head
        while commit_id:
            commit = self.store.get_commit(commit_id)
            yield commit
            commit_id = commit.parent_id
