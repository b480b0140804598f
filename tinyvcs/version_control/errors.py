"""
Exception hierarchy for the version control engine.

Three families:
- UserInputError: malformed command lines, raised by the CLI layer.
- DomainError: expected user-facing failures, each carrying the exact
  message shown to the user. Raised before any destructive change.
- StoreError: the object store or a persisted record is unreadable. These
  indicate corruption rather than user error and are fatal.
"""

from typing import Optional


class VersionControlError(Exception):
    """Base exception for version control errors."""

    pass


class UserInputError(VersionControlError):
    """Raised for bad operand counts or unknown commands."""

    message = "Incorrect operands."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class DomainError(VersionControlError):
    """Base class for failures reported to the user with a fixed message."""

    message = "Operation failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class AlreadyInitializedError(DomainError):
    message = (
        "A Gitlet version-control system already exists in the current directory."
    )


class NotInitializedError(DomainError):
    message = "Not in an initialized Gitlet directory."


class FileNotFoundInWorkingTreeError(DomainError):
    message = "File does not exist."


class NothingToRemoveError(DomainError):
    message = "No reason to remove the file."


class EmptyMessageError(DomainError):
    message = "Please enter a commit message."


class NothingStagedError(DomainError):
    message = "No changes added to the commit."


class BranchExistsError(DomainError):
    message = "A branch with that name already exists."


class NoSuchBranchError(DomainError):
    """Raised for unknown branch names.

    Checkout reports "No such branch exists."; rm-branch and merge use the
    default message.
    """

    message = "A branch with that name does not exist."


class CannotRemoveCurrentBranchError(DomainError):
    message = "Cannot remove the current branch."


class NoOpSameBranchError(DomainError):
    message = "No need to checkout the current branch."


class UntrackedFileConflictError(DomainError):
    message = (
        "There is an untracked file in the way; "
        "delete it, or add and commit it first."
    )


class FileNotInCommitError(DomainError):
    message = "File does not exist in that commit."


class NoSuchCommitError(DomainError):
    message = "No commit with that id exists."


class AmbiguousCommitIdError(DomainError):
    message = "Commit id prefix is ambiguous."


class UncommittedChangesError(DomainError):
    message = "You have uncommitted changes."


class SelfMergeError(DomainError):
    message = "Cannot merge a branch with itself."


class AncestorBranchError(DomainError):
    message = "Given branch is an ancestor of the current branch."


class NoMatchingCommitError(DomainError):
    message = "Found no commit with that message."


class StoreError(VersionControlError):
    """Base exception for object store failures."""

    pass


class ObjectNotFoundError(StoreError):
    """Raised when an object id (or id prefix) matches nothing in the store."""

    def __init__(self, object_id: str):
        super().__init__(f"Object not found: {object_id}")
        self.object_id = object_id


class AmbiguousObjectIdError(StoreError):
    """Raised when an abbreviated id matches more than one stored object."""

    def __init__(self, prefix: str, matches: list):
        super().__init__(
            f"Abbreviated id {prefix!r} matches {len(matches)} objects"
        )
        self.prefix = prefix
        self.matches = matches


class CorruptedRecordError(StoreError):
    """Raised when a persisted record is unreadable or invalid."""

    pass
