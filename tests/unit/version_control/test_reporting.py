"""
Unit tests for log, find and status formatting.
"""

from tinyvcs.version_control.objects import Commit
from tinyvcs.version_control.reporting import (
    format_find,
    format_log,
    format_log_entry,
    format_status,
)
from tinyvcs.version_control.repository import StatusReport


def _commit(message: str, second_parent_id=None) -> Commit:
    return Commit(
        message=message,
        timestamp="Thu Nov 09 17:01:33 2017 -0800",
        parent_id="4975af1" + "0" * 33,
        blobs={},
        second_parent_id=second_parent_id,
    )


def test_log_entry() -> None:
    commit = _commit("A regular commit")
    assert format_log_entry(commit) == (
        "===\n"
        f"commit {commit.commit_id}\n"
        "Date: Thu Nov 09 17:01:33 2017 -0800\n"
        "A regular commit\n"
    )


def test_merge_log_entry() -> None:
    """Test that merge commits list both abbreviated parents."""
    commit = _commit("Merged development into master.", "2c1ead1" + "1" * 33)
    lines = format_log_entry(commit).splitlines()

    assert lines[2] == "Merge: 4975af1 2c1ead1"
    assert lines[3].startswith("Date: ")


def test_log_separates_entries_with_blank_lines() -> None:
    text = format_log([_commit("one"), _commit("two")])
    assert text.count("===") == 2
    assert "\n\n===" in text


def test_find() -> None:
    assert format_find(["a", "b"]) == "a\nb"


def test_status() -> None:
    report = StatusReport(
        branches=["master", "other-branch"],
        current_branch="master",
        staged=["wug.txt", "wug2.txt"],
        removed=["goodbye.txt"],
        modified=["junk.txt"],
        deleted=["wug3.txt"],
        untracked=["random.stuff"],
    )

    assert format_status(report) == "\n".join(
        [
            "=== Branches ===",
            "*master",
            "other-branch",
            "",
            "=== Staged Files ===",
            "wug.txt",
            "wug2.txt",
            "",
            "=== Removed Files ===",
            "goodbye.txt",
            "",
            "=== Modifications Not Staged For Commit ===",
            "junk.txt (modified)",
            "wug3.txt (deleted)",
            "",
            "=== Untracked Files ===",
            "random.stuff",
            "",
        ]
    )


def test_empty_status_sections() -> None:
    report = StatusReport(branches=["master"], current_branch="master")
    text = format_status(report)

    assert "=== Staged Files ===\n\n=== Removed Files ===" in text
