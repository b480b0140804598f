"""
Content-addressed store for blobs and commits.

Every object is keyed by its full sha1 id. Lookups by abbreviated id accept
any unique prefix.
"""

from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from loguru import logger

from .errors import AmbiguousObjectIdError, ObjectNotFoundError
from .objects import Blob, Commit, format_timestamp
from .storage import VersionStorage


class ContentStore:
    """Creates, persists and dereferences immutable objects."""

    def __init__(self, storage: VersionStorage):
        self.storage = storage
        self.log = logger.bind(component="store")

    def add_blob(self, path: Path) -> Blob:
        """
        Snapshot a file into a blob.

        Args:
            path: File to read

        Returns:
            The stored Blob
        """
        path = Path(path)
        return self.blob_from_bytes(path.name, path.read_bytes())

    def blob_from_bytes(self, name: str, content: bytes) -> Blob:
        blob = Blob(name=name, content=content)
        self.storage.save_blob(blob.blob_id, content)
        return blob

    def commit(
        self,
        message: str,
        parent_id: Optional[str],
        blobs: Dict[str, str],
        second_parent_id: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> Commit:
        """
        Create and persist a commit.

        Args:
            message: Commit message
            parent_id: First parent (None only for the root commit)
            blobs: Mapping of filename to blob id
            second_parent_id: Merged-in parent, merge commits only
            timestamp: Fixed timestamp (defaults to now)

        Returns:
            The stored Commit
        """
        commit = Commit(
            message=message,
            timestamp=timestamp or format_timestamp(),
            parent_id=parent_id,
            blobs=dict(blobs),
            second_parent_id=second_parent_id,
        )
        self.storage.save_commit(commit)
        self.log.debug(
            f"Stored commit {commit.commit_id[:8]}",
            commit_id=commit.commit_id,
            files=len(commit.blobs),
        )
        return commit

    def get(self, object_id: str) -> Union[Commit, Blob]:
        """
        Dereference any stored object by full id.

        Raises:
            ObjectNotFoundError: If no object has this id
        """
        commit = self.storage.load_commit(object_id)
        if commit is not None:
            return commit
        content = self.storage.load_blob(object_id)
        if content is not None:
            return Blob(name="", content=content, blob_id=object_id)
        raise ObjectNotFoundError(object_id)

    def get_commit(self, commit_id: str) -> Commit:
        commit = self.storage.load_commit(commit_id)
        if commit is None:
            self.log.error(f"Missing commit object {commit_id}")
            raise ObjectNotFoundError(commit_id)
        return commit

    def get_blob_content(self, blob_id: str) -> bytes:
        content = self.storage.load_blob(blob_id)
        if content is None:
            self.log.error(f"Missing blob object {blob_id}")
            raise ObjectNotFoundError(blob_id)
        return content

    def resolve_commit_id(self, prefix: str) -> str:
        """
        Resolve an abbreviated commit id.

        Args:
            prefix: Any prefix of a stored commit id (a full id works too)

        Returns:
            The full commit id

        Raises:
            ObjectNotFoundError: If nothing matches
            AmbiguousObjectIdError: If more than one commit matches
        """
        if not prefix:
            raise ObjectNotFoundError(prefix)
        matches = [cid for cid in self.storage.list_commits() if cid.startswith(prefix)]
        if not matches:
            raise ObjectNotFoundError(prefix)
        if len(matches) > 1:
            raise AmbiguousObjectIdError(prefix, matches)
        return matches[0]

    def all_commits(self) -> Iterator[Commit]:
        """Iterate every stored commit, ordered by id."""
        for commit_id in self.storage.list_commits():
            yield self.get_commit(commit_id)
