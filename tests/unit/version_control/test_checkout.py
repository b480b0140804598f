"""
Unit tests for the materializer.
"""

import tempfile
from pathlib import Path

import pytest

from tinyvcs.version_control.checkout import Materializer
from tinyvcs.version_control.content_store import ContentStore
from tinyvcs.version_control.errors import (
    FileNotInCommitError,
    UntrackedFileConflictError,
)
from tinyvcs.version_control.storage import VersionStorage
from tinyvcs.version_control.working_tree import WorkingTree


class TestMaterializer:
    """Tests for Materializer class."""

    def _materializer(self, tmpdir: str) -> Materializer:
        storage = VersionStorage(Path(tmpdir) / ".tinyvcs")
        storage.create()
        return Materializer(ContentStore(storage), WorkingTree(Path(tmpdir)))

    def _commit(self, m: Materializer, message: str, files: dict):
        blobs = {
            name: m.store.blob_from_bytes(name, content).blob_id
            for name, content in files.items()
        }
        return m.store.commit(message, None, blobs)

    def test_checkout_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            m = self._materializer(tmpdir)
            commit = self._commit(m, "c", {"f.txt": b"committed"})
            m.tree.write("f.txt", b"edited")

            m.checkout_file(commit, "f.txt")

            assert m.tree.read("f.txt") == b"committed"

    def test_checkout_file_not_in_commit(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            m = self._materializer(tmpdir)
            commit = self._commit(m, "c", {})
            with pytest.raises(FileNotInCommitError):
                m.checkout_file(commit, "f.txt")

    def test_materialize(self) -> None:
        """Test that materialize rewrites tracked files and leaves untracked ones."""
        with tempfile.TemporaryDirectory() as tmpdir:
            m = self._materializer(tmpdir)
            old = self._commit(m, "old", {"keep.txt": b"1", "gone.txt": b"x"})
            new = self._commit(m, "new", {"keep.txt": b"2", "added.txt": b"a"})
            m.tree.write("keep.txt", b"1")
            m.tree.write("gone.txt", b"x")
            m.tree.write("mine.txt", b"untracked")

            m.materialize(old, new)

            assert m.tree.files() == ["added.txt", "keep.txt", "mine.txt"]
            assert m.tree.read("keep.txt") == b"2"
            assert m.tree.read("mine.txt") == b"untracked"

    def test_untracked_files(self) -> None:
        """Test that absent and content-modified files count as untracked."""
        with tempfile.TemporaryDirectory() as tmpdir:
            m = self._materializer(tmpdir)
            commit = self._commit(m, "c", {"same.txt": b"s", "changed.txt": b"c"})
            m.tree.write("same.txt", b"s")
            m.tree.write("changed.txt", b"C")
            m.tree.write("new.txt", b"n")

            assert m.untracked_files(commit) == ["changed.txt", "new.txt"]

    def test_tracked_test(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            m = self._materializer(tmpdir)
            empty = self._commit(m, "empty", {})
            full = self._commit(m, "full", {"f.txt": b"theirs"})
            m.tree.write("f.txt", b"mine")
            m.tree.write("other.txt", b"other")

            assert not m.tracked_test(empty, full)
            assert m.tracked_test(empty, empty)
            with pytest.raises(UntrackedFileConflictError):
                m.ensure_safe(empty, full)
            assert m.tree.read("f.txt") == b"mine"
