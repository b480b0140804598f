"""
Plain-text rendering of log, find and status output.

Read-only: these functions format data produced by the repository and
never touch the store or the working directory.
"""

from typing import Iterable, List

from .objects import Commit

SECTION = "==="


def format_log_entry(commit: Commit, abbreviated_id_length: int = 7) -> str:
    """
    Format one commit for log output.

    Example output:
        ===
        commit 3e8bf1d7...
        Merge: 4975af1 2c1ead1
        Date: Thu Nov 9 17:01:33 2017 -0800
        Merged development into master.
    """
    lines = [SECTION, f"commit {commit.commit_id}"]
    if commit.is_merge:
        n = abbreviated_id_length
        lines.append(f"Merge: {commit.parent_id[:n]} {commit.second_parent_id[:n]}")
    lines.append(f"Date: {commit.timestamp}")
    lines.append(commit.message)
    lines.append("")
    return "\n".join(lines)


def format_log(commits: Iterable[Commit], abbreviated_id_length: int = 7) -> str:
    return "\n".join(format_log_entry(c, abbreviated_id_length) for c in commits)


def format_find(commit_ids: Iterable[str]) -> str:
    return "\n".join(commit_ids)


def _section(title: str, entries: List[str]) -> List[str]:
    return [f"{SECTION} {title} {SECTION}", *entries, ""]


def format_status(report) -> str:
    """
    Format a StatusReport.

    Sections are always printed in the same order, each followed by a
    blank line; the current branch is marked with a leading "*".
    """
    branches = [
        f"*{name}" if name == report.current_branch else name
        for name in report.branches
    ]
    changes = sorted(
        [f"{name} (modified)" for name in report.modified]
        + [f"{name} (deleted)" for name in report.deleted]
    )

    lines: List[str] = []
    lines += _section("Branches", branches)
    lines += _section("Staged Files", list(report.staged))
    lines += _section("Removed Files", list(report.removed))
    lines += _section("Modifications Not Staged For Commit", changes)
    lines += _section("Untracked Files", list(report.untracked))
    return "\n".join(lines)
