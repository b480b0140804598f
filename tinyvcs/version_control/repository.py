"""
Repository facade for one working directory.

Binds storage, content store, working tree, commit graph and staging area,
and exposes every user command as a method. Persisted records are loaded
lazily and saved whole after each successful mutating command.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from ..config import Config, config as default_config
from ..logging import track_operation
from .checkout import Materializer
from .content_store import ContentStore
from .errors import (
    AlreadyInitializedError,
    AmbiguousCommitIdError,
    AmbiguousObjectIdError,
    NoMatchingCommitError,
    NoSuchCommitError,
    NotInitializedError,
    ObjectNotFoundError,
)
from .graph import CommitGraph, RepositoryState
from .merge import MergeEngine, MergeResult
from .objects import Blob, Commit, compute_blob_id
from .staging import StagingArea
from .storage import VersionStorage
from .working_tree import WorkingTree


@dataclass
class StatusReport:
    """Snapshot of the repository state for the status reporter. All lists sorted."""

    branches: List[str]
    current_branch: str
    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)


class Repository:
    """
    Version control for the plain files of a working directory.

    Provides operations for:
    - Initializing a repository
    - Staging additions and removals
    - Committing staged changes
    - Checking out files, commits and branches
    - Branching, resetting and merging
    - History queries (log, global log, find, status)
    """

    def __init__(
        self,
        working_dir: Path = Path("."),
        settings: Optional[Config] = None,
    ):
        """
        Open (without loading) the repository of a working directory.

        Args:
            working_dir: Directory whose top-level files are versioned
            settings: Configuration (defaults to the global config)
        """
        self.config = settings or default_config
        self.working_dir = Path(working_dir).resolve()
        self.storage = VersionStorage(
            self.working_dir / self.config.repository.metadata_dir
        )
        self.store = ContentStore(self.storage)
        self.tree = WorkingTree(self.working_dir)
        self.materializer = Materializer(self.store, self.tree)
        self._graph: Optional[CommitGraph] = None
        self._stage: Optional[StagingArea] = None

    def is_initialized(self) -> bool:
        return self.storage.exists()

    @property
    def graph(self) -> CommitGraph:
        if self._graph is None:
            self._graph, self._stage = self._load()
        return self._graph

    @property
    def stage(self) -> StagingArea:
        if self._stage is None:
            self._graph, self._stage = self._load()
        return self._stage

    @property
    def state(self) -> RepositoryState:
        return self.graph.state

    def _load(self) -> Tuple[CommitGraph, StagingArea]:
        record = self.storage.load_repository_record()
        if record is None:
            raise NotInitializedError()
        graph = CommitGraph(self.store, RepositoryState.from_dict(record))
        stage = StagingArea.from_dict(
            self.storage.load_staging_record(), self.store, self.tree
        )
        return graph, stage

    def save(self) -> None:
        """Persist the repository and staging records."""
        self.graph.state.check_invariant()
        self.storage.save_repository_record(self.graph.state.to_dict())
        self.storage.save_staging_record(self.stage.to_dict())

    def head_commit(self) -> Commit:
        return self.graph.head_commit()

    def resolve_commit(self, commit_id: str) -> Commit:
        """
        Resolve a full or abbreviated commit id given by the user.

        Raises:
            NoSuchCommitError: If no commit matches
            AmbiguousCommitIdError: If several commits match
        """
        try:
            full_id = self.store.resolve_commit_id(commit_id)
        except ObjectNotFoundError:
            raise NoSuchCommitError() from None
        except AmbiguousObjectIdError:
            raise AmbiguousCommitIdError() from None
        return self.store.get_commit(full_id)

    @track_operation("init")
    def init(self) -> Commit:
        """
        Create the repository and its root commit from the working directory.

        Raises:
            AlreadyInitializedError: If a repository already exists here
        """
        if self.storage.exists():
            raise AlreadyInitializedError()

        self.storage.create()
        blobs = {
            name: self.store.add_blob(self.tree.path(name)).blob_id
            for name in self.tree.files()
        }
        self._graph = CommitGraph.create_root(
            self.store,
            blobs,
            branch=self.config.repository.default_branch,
            message=self.config.repository.initial_message,
        )
        self._stage = StagingArea(self.store, self.tree)
        self.save()

        logger.info(f"Initialized repository in {self.working_dir}")
        return self.head_commit()

    @track_operation("add")
    def add(self, filename: str) -> Optional[Blob]:
        """Stage a file for addition (or undo staging if it matches HEAD)."""
        blob = self.stage.stage_add(filename, self.head_commit())
        self.save()
        return blob

    @track_operation("rm")
    def rm(self, filename: str) -> None:
        """Unstage a file or stage it for removal."""
        self.stage.stage_remove(filename, self.head_commit())
        self.save()

    @track_operation("commit")
    def commit(self, message: str) -> Commit:
        """
        Commit the staged changes on the current branch.

        Example:
            >>> repo = Repository(Path("."))
            >>> commit = repo.commit("Add README")
        """
        commit = self.graph.commit_from_stage(self.stage, message)
        self.stage.reset()
        self.save()
        return commit

    @track_operation("checkout")
    def checkout_file(self, filename: str) -> None:
        """Restore a file from HEAD."""
        self.materializer.checkout_file(self.head_commit(), filename)

    @track_operation("checkout")
    def checkout_commit_file(self, commit_id: str, filename: str) -> None:
        """Restore a file from any commit (abbreviated ids accepted)."""
        self.materializer.checkout_file(self.resolve_commit(commit_id), filename)

    @track_operation("checkout")
    def checkout_branch(self, name: str) -> Commit:
        """Switch to a branch, rewriting the working directory."""
        commit = self.materializer.checkout_branch(self.graph, name)
        self.stage.reset()
        self.save()
        return commit

    def log(self) -> List[Commit]:
        """History of HEAD following first parents."""
        return list(self.graph.history())

    def global_log(self) -> List[Commit]:
        """Every commit ever made, ordered by id."""
        if not self.is_initialized():
            raise NotInitializedError()
        return list(self.store.all_commits())

    def find(self, message: str) -> List[str]:
        """
        Ids of all commits with exactly this message.

        Raises:
            NoMatchingCommitError: If there are none
        """
        matches = [c.commit_id for c in self.global_log() if c.message == message]
        if not matches:
            raise NoMatchingCommitError()
        return matches

    def status(self) -> StatusReport:
        """Collect branches, staged changes and working directory changes."""
        state = self.state
        stage = self.stage
        head = self.head_commit()
        working_files = set(self.tree.files())

        report = StatusReport(
            branches=sorted(state.branches),
            current_branch=state.current_branch,
            staged=sorted(stage.additions),
            removed=sorted(stage.removals),
        )

        for filename in sorted(set(head.blobs) | set(stage.additions)):
            if filename in stage.removals:
                continue
            expected = stage.additions.get(filename, head.blobs.get(filename))
            if filename not in working_files:
                report.deleted.append(filename)
                continue
            content = self.tree.read(filename)
            if content is not None and compute_blob_id(content) != expected:
                report.modified.append(filename)

        for filename in sorted(working_files):
            if filename in stage.removals:
                report.untracked.append(filename)
            elif filename not in head.blobs and filename not in stage.additions:
                report.untracked.append(filename)

        return report

    @track_operation("branch")
    def branch(self, name: str) -> None:
        """Create a branch at HEAD (does not switch to it)."""
        self.graph.add_branch(name)
        self.save()

    @track_operation("rm-branch")
    def rm_branch(self, name: str) -> None:
        """Delete a branch pointer."""
        self.graph.remove_branch(name)
        self.save()

    @track_operation("reset")
    def reset(self, commit_id: str) -> Commit:
        """
        Move the current branch to a commit and check out its files.

        Raises:
            NoSuchCommitError: If the id matches no commit
            UntrackedFileConflictError: If an untracked file would be clobbered
        """
        target = self.resolve_commit(commit_id)
        current = self.head_commit()
        self.materializer.ensure_safe(current, target)

        self.materializer.materialize(current, target)
        self.graph.reset_head(target.commit_id)
        self.stage.reset()
        self.save()

        logger.info(f"Reset {self.state.current_branch} to {target.commit_id[:8]}")
        return target

    @track_operation("merge")
    def merge(self, branch: str) -> MergeResult:
        """
        Merge a branch into the current branch.

        Conflicts do not raise; they are reported on the result and the
        merge commit is still created.
        """
        engine = MergeEngine(
            self.store,
            self.tree,
            self.graph,
            self.stage,
            self.materializer,
            split_point_strategy=self.config.merge.split_point_strategy,
        )
        result = engine.merge(branch)
        self.save()
        return result
