"""
Storage backend for version control system.

Handles persistence of objects, the repository record and the staging
record to disk.
"""

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from loguru import logger

from .errors import CorruptedRecordError
from .objects import Commit


class VersionStorage:
    """
    File-based storage for version control.

    Layout:
    - .tinyvcs/
      - objects/
        - blobs/
          - {blob_id}  (raw bytes)
        - commits/
          - {commit_id}.json
      - repository.json  (branch table, current branch, HEAD)
      - staging.json  (staged additions and removals)

    Objects are write-once. The two records are replaced whole on every
    save through an atomic rename.
    """

    def __init__(self, base_dir: Path):
        """
        Initialize storage.

        Args:
            base_dir: Metadata directory (does not need to exist yet)
        """
        self.base_dir = Path(base_dir)
        self.objects_dir = self.base_dir / "objects"
        self.blobs_dir = self.objects_dir / "blobs"
        self.commits_dir = self.objects_dir / "commits"
        self.repository_file = self.base_dir / "repository.json"
        self.staging_file = self.base_dir / "staging.json"

    def exists(self) -> bool:
        """Whether a repository has been initialized here."""
        return self.repository_file.exists()

    def create(self) -> None:
        """Create the directory structure."""
        self.blobs_dir.mkdir(parents=True, exist_ok=True)
        self.commits_dir.mkdir(parents=True, exist_ok=True)

    # Objects

    def save_blob(self, blob_id: str, content: bytes) -> None:
        """Persist blob bytes. Existing blobs are left as they are."""
        blob_file = self.blobs_dir / blob_id
        if blob_file.exists():
            return
        with self._atomic_write(blob_file, binary=True) as f:
            f.write(content)

    def load_blob(self, blob_id: str) -> Optional[bytes]:
        """
        Load blob bytes.

        Returns:
            Content if found, None otherwise
        """
        blob_file = self.blobs_dir / blob_id
        if not blob_file.is_file():
            return None
        return blob_file.read_bytes()

    def has_blob(self, blob_id: str) -> bool:
        return (self.blobs_dir / blob_id).is_file()

    def save_commit(self, commit: Commit) -> None:
        """
        Save a commit to storage.

        Args:
            commit: Commit to save
        """
        commit_file = self.commits_dir / f"{commit.commit_id}.json"
        if commit_file.exists():
            return
        with self._atomic_write(commit_file) as f:
            f.write(commit.to_json())

    def load_commit(self, commit_id: str) -> Optional[Commit]:
        """
        Load a commit from storage.

        Args:
            commit_id: Full id of the commit

        Returns:
            Commit if found, None otherwise
        """
        commit_file = self.commits_dir / f"{commit_id}.json"
        if not commit_file.is_file():
            return None

        try:
            return Commit.from_json(commit_file.read_text())
        except (ValueError, KeyError) as e:
            logger.error(f"Unreadable commit record {commit_id}: {e}")
            raise CorruptedRecordError(f"Commit {commit_id} is corrupted") from e

    def list_commits(self) -> List[str]:
        """
        List all commit IDs.

        Returns:
            List of commit IDs
        """
        if not self.commits_dir.exists():
            return []
        return sorted(f.stem for f in self.commits_dir.glob("*.json"))

    def list_blobs(self) -> List[str]:
        if not self.blobs_dir.exists():
            return []
        return sorted(f.name for f in self.blobs_dir.iterdir() if f.is_file())

    # Records

    def save_repository_record(self, record: Dict[str, Any]) -> None:
        """Overwrite the repository record (branch table, current branch, HEAD)."""
        self._write_record(self.repository_file, record)

    def load_repository_record(self) -> Optional[Dict[str, Any]]:
        return self._read_record(self.repository_file)

    def save_staging_record(self, record: Dict[str, Any]) -> None:
        """Overwrite the staging record."""
        self._write_record(self.staging_file, record)

    def load_staging_record(self) -> Optional[Dict[str, Any]]:
        return self._read_record(self.staging_file)

    def _write_record(self, path: Path, record: Dict[str, Any]) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        with self._atomic_write(path) as f:
            json.dump(record, f, indent=2, sort_keys=True)

    def _read_record(self, path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            return None
        try:
            with open(path, "r") as f:
                return json.load(f)
        except ValueError as e:
            logger.error(f"Unreadable record {path.name}: {e}")
            raise CorruptedRecordError(f"{path.name} is corrupted") from e

    @contextmanager
    def _atomic_write(self, filepath: Path, binary: bool = False) -> Iterator[Any]:
        """
        Context manager for atomic file write operations (overwrite mode).

        Writes to a temporary file in the same directory, then renames it
        over the target so a crash never leaves a half-written record.

        Args:
            filepath: Target file path
            binary: Open the temporary file in binary mode

        Yields:
            File object for writing
        """
        temp_fd, temp_path = tempfile.mkstemp(
            dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp"
        )

        try:
            with os.fdopen(temp_fd, "wb" if binary else "w") as f:
                yield f

            # Atomic rename
            os.replace(temp_path, filepath)

        except Exception:
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
            raise
