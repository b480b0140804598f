"""
Object model for version control.

Defines the two immutable, content-addressed object kinds: blobs (one file's
bytes) and commits (a full snapshot of tracked files plus metadata).
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from datetime import datetime
import hashlib
import json

BLOB_SALT = b"blob"
COMMIT_SALT = b"commit"

TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Y %z"

# Fixed timestamp of every root commit
EPOCH_TIMESTAMP = "Thu Jan 01 00:00:00 1970 +0000"


def compute_blob_id(content: bytes) -> str:
    """Compute a blob id from its content only."""
    return hashlib.sha1(content + BLOB_SALT).hexdigest()


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a commit timestamp in local time."""
    moment = moment or datetime.now().astimezone()
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class Blob:
    """
    Immutable snapshot of one file's bytes.

    The name is carried for convenience but is not part of the digest:
    two differently named files with identical bytes share one id.

    Attributes:
        name: File name the content was read from
        content: Raw file bytes
        blob_id: sha1 of content salted with "blob"
    """

    name: str
    content: bytes
    blob_id: str = ""

    def __post_init__(self) -> None:
        if not self.blob_id:
            object.__setattr__(self, "blob_id", compute_blob_id(self.content))

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class Commit:
    """
    Represents a commit in the version history.

    A commit is a snapshot of the full tracked file set. Files and parents
    are referenced by id only; callers dereference them through the
    content store.
    """

    message: str
    timestamp: str
    parent_id: Optional[str]
    blobs: Dict[str, str] = field(default_factory=dict)
    second_parent_id: Optional[str] = None
    commit_id: str = ""

    def __post_init__(self) -> None:
        if not self.commit_id:
            object.__setattr__(self, "commit_id", self.compute_hash())

    @property
    def is_merge(self) -> bool:
        return self.second_parent_id is not None

    @property
    def parent_ids(self) -> list:
        """Parent ids, first parent first."""
        return [p for p in (self.parent_id, self.second_parent_id) if p]

    def hashable_fields(self) -> Dict[str, Any]:
        """Every persisted field except the id itself."""
        return {
            "message": self.message,
            "timestamp": self.timestamp,
            "parent_id": self.parent_id,
            "second_parent_id": self.second_parent_id,
            "blobs": dict(self.blobs),
        }

    def compute_hash(self) -> str:
        """Compute the commit id over the canonical serialization."""
        canonical = json.dumps(
            self.hashable_fields(), sort_keys=True, separators=(",", ":")
        )
        return hashlib.sha1(canonical.encode("utf-8") + COMMIT_SALT).hexdigest()

    def tracks(self, filename: str) -> bool:
        return filename in self.blobs

    def to_dict(self) -> Dict[str, Any]:
        """Convert commit to dictionary for serialization."""
        data = self.hashable_fields()
        data["commit_id"] = self.commit_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        """Create commit from dictionary."""
        return cls(
            message=data["message"],
            timestamp=data["timestamp"],
            parent_id=data.get("parent_id"),
            blobs=dict(data.get("blobs", {})),
            second_parent_id=data.get("second_parent_id"),
            commit_id=data["commit_id"],
        )

    def to_json(self) -> str:
        """Convert commit to JSON string."""
        return json.dumps(self.to_dict(), indent=2, sort_keys=True)

    @classmethod
    def from_json(cls, json_str: str) -> "Commit":
        """Create commit from JSON string."""
        return cls.from_dict(json.loads(json_str))
