"""Access to the plain files at the top level of the working directory."""

from pathlib import Path
from typing import List, Optional


class WorkingTree:
    """
    Thin wrapper over the working directory.

    Only regular files directly inside the root are versioned; directories
    (the metadata directory included) are never read or written.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path(self, filename: str) -> Path:
        return self.root / filename

    def files(self) -> List[str]:
        """Names of the versionable files, sorted."""
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def exists(self, filename: str) -> bool:
        return self.path(filename).is_file()

    def read(self, filename: str) -> Optional[bytes]:
        path = self.path(filename)
        if not path.is_file():
            return None
        return path.read_bytes()

    def write(self, filename: str, content: bytes) -> None:
        """Overwrite a file, creating it if needed."""
        self.path(filename).write_bytes(content)

    def delete(self, filename: str) -> bool:
        """
        Delete a file.

        Returns:
            True if deleted, False if it didn't exist
        """
        path = self.path(filename)
        if path.is_file():
            path.unlink()
            return True
        return False
