"""
Materializer: keeps the working directory consistent with a commit.

Every destructive materialization is preceded by the tracked test, which
refuses to overwrite or delete a file the user never committed.
"""

from typing import List

from loguru import logger

from .content_store import ContentStore
from .errors import (
    FileNotInCommitError,
    NoOpSameBranchError,
    NoSuchBranchError,
    UntrackedFileConflictError,
)
from .graph import CommitGraph
from .objects import Commit, compute_blob_id
from .working_tree import WorkingTree


class Materializer:
    """Writes and deletes working files to match commits."""

    def __init__(self, store: ContentStore, tree: WorkingTree):
        self.store = store
        self.tree = tree
        self.log = logger.bind(component="checkout")

    def checkout_file(self, commit: Commit, filename: str) -> None:
        """
        Overwrite one working file with its version in a commit.

        Raises:
            FileNotInCommitError: If the commit does not track the file
        """
        if filename not in commit.blobs:
            raise FileNotInCommitError()
        self.tree.write(filename, self.store.get_blob_content(commit.blobs[filename]))
        self.log.debug(f"Checked out {filename} from {commit.commit_id[:8]}")

    def checkout_branch(self, graph: CommitGraph, name: str) -> Commit:
        """
        Switch to a branch and materialize its head.

        All checks run before any file is touched.

        Returns:
            The new HEAD commit

        Raises:
            NoSuchBranchError: If the branch does not exist
            NoOpSameBranchError: If it is already the current branch
            UntrackedFileConflictError: If an untracked file would be clobbered
        """
        if not graph.has_branch(name):
            raise NoSuchBranchError("No such branch exists.")
        if name == graph.state.current_branch:
            raise NoOpSameBranchError()

        current = graph.head_commit()
        target = self.store.get_commit(graph.branch_head(name))
        self.ensure_safe(current, target)

        self.materialize(current, target)
        graph.switch_branch(name)
        self.log.info(f"Checked out branch: {name}")
        return target

    def materialize(self, from_commit: Commit, to_commit: Commit) -> None:
        """
        Rewrite the working directory from one commit's snapshot to another's.

        Files of to_commit are written first, then files tracked only by
        from_commit are deleted. Files untracked by both are left alone.
        """
        for filename, blob_id in sorted(to_commit.blobs.items()):
            self.tree.write(filename, self.store.get_blob_content(blob_id))

        for filename in sorted(from_commit.blobs):
            if filename not in to_commit.blobs:
                self.tree.delete(filename)

        self.log.debug(
            f"Materialized {to_commit.commit_id[:8]} over {from_commit.commit_id[:8]}",
            written=len(to_commit.blobs),
        )

    def untracked_files(self, commit: Commit) -> List[str]:
        """
        Working files not tracked by a commit.

        A file counts as untracked when the commit lacks it or records
        different content for it.
        """
        result = []
        for filename in self.tree.files():
            blob_id = commit.blobs.get(filename)
            if blob_id is None:
                result.append(filename)
                continue
            content = self.tree.read(filename)
            if content is not None and compute_blob_id(content) != blob_id:
                result.append(filename)
        return result

    def tracked_test(self, commit_a: Commit, commit_b: Commit) -> bool:
        """
        Whether moving from commit_a to commit_b is safe.

        Every file untracked by commit_a must also be absent from commit_b.
        """
        return not any(f in commit_b.blobs for f in self.untracked_files(commit_a))

    def ensure_safe(self, commit_a: Commit, commit_b: Commit) -> None:
        if not self.tracked_test(commit_a, commit_b):
            self.log.info(
                f"Untracked file blocks move to {commit_b.commit_id[:8]}",
                untracked=self.untracked_files(commit_a),
            )
            raise UntrackedFileConflictError()
