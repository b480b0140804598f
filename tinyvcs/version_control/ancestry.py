"""
Ancestry walks and split-point discovery.

Two strategies are available:

- "first_parent" (default): take the full multi-parent ancestor closure of
  the other branch head, then walk the current head following only first
  parents until a commit in that closure is found. At the first merge
  commit on the current side, the first-parent chains of both of its
  parents are searched and the nearer hit is taken. The two sides are
  treated asymmetrically.
- "generation": symmetric lowest common ancestor. Among all common
  ancestors pick the one with the highest generation number (longest path
  from the root), then the one closest to the current head, then the
  smallest id.

The strategies agree on linear and simple merge histories and can differ
on criss-cross histories.
"""

from collections import deque
from typing import Callable, Dict, Iterable, Optional, Set, Tuple

from loguru import logger

from .content_store import ContentStore
from .errors import CorruptedRecordError
from .objects import Commit

SplitPointStrategy = Callable[[ContentStore, str, str], str]


class _CommitCache:
    """Memoizes commit loads for the duration of one walk."""

    def __init__(self, store: ContentStore):
        self.store = store
        self._commits: Dict[str, Commit] = {}

    def get(self, commit_id: str) -> Commit:
        if commit_id not in self._commits:
            self._commits[commit_id] = self.store.get_commit(commit_id)
        return self._commits[commit_id]


def ancestor_closure(store: ContentStore, commit_id: str) -> Set[str]:
    """
    All ancestors of a commit, itself included, following every parent.

    For a merge commit this is the union of both parents' closures plus
    the commit itself.
    """
    cache = _CommitCache(store)
    seen: Set[str] = set()
    pending = [commit_id]
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        pending.extend(cache.get(current).parent_ids)
    return seen


def ancestor_distances(store: ContentStore, commit_id: str) -> Dict[str, int]:
    """Shortest number of parent hops from a commit to each of its ancestors."""
    cache = _CommitCache(store)
    distances = {commit_id: 0}
    queue = deque([commit_id])
    while queue:
        current = queue.popleft()
        for parent in cache.get(current).parent_ids:
            if parent not in distances:
                distances[parent] = distances[current] + 1
                queue.append(parent)
    return distances


def generation_numbers(store: ContentStore, commit_ids: Iterable[str]) -> Dict[str, int]:
    """
    Generation number of each commit: 0 for the root, otherwise one more
    than the largest generation among its parents.
    """
    cache = _CommitCache(store)
    generations: Dict[str, int] = {}
    for start in commit_ids:
        stack = [start]
        while stack:
            current = stack[-1]
            if current in generations:
                stack.pop()
                continue
            parents = cache.get(current).parent_ids
            missing = [p for p in parents if p not in generations]
            if missing:
                stack.extend(missing)
                continue
            generations[current] = 1 + max(
                (generations[p] for p in parents), default=-1
            )
            stack.pop()
    return generations


def _first_parent_hit(
    store: ContentStore, start_id: Optional[str], targets: Set[str]
) -> Optional[Tuple[int, str]]:
    """Distance and id of the first commit in ``targets`` on a first-parent chain."""
    distance = 0
    commit_id = start_id
    while commit_id:
        if commit_id in targets:
            return distance, commit_id
        commit_id = store.get_commit(commit_id).parent_id
        distance += 1
    return None


def first_parent_split_point(store: ContentStore, current_id: str, other_id: str) -> str:
    """
    Split point by first-parent walk of the current side against the full
    closure of the other side.

    At the first merge commit reached on the current side, both parents'
    first-parent chains are searched and the nearer hit wins (the first
    parent on a tie).
    """
    other_ancestors = ancestor_closure(store, other_id)
    commit_id = current_id
    while commit_id:
        if commit_id in other_ancestors:
            return commit_id
        commit = store.get_commit(commit_id)
        if commit.is_merge:
            hits = [
                hit
                for hit in (
                    _first_parent_hit(store, parent, other_ancestors)
                    for parent in commit.parent_ids
                )
                if hit is not None
            ]
            if hits:
                return min(hits, key=lambda hit: hit[0])[1]
            break
        commit_id = commit.parent_id
    raise CorruptedRecordError(
        f"No common ancestor for {current_id[:8]} and {other_id[:8]}"
    )


def generation_split_point(store: ContentStore, current_id: str, other_id: str) -> str:
    """Split point by highest-generation common ancestor."""
    current_distances = ancestor_distances(store, current_id)
    other_ancestors = ancestor_closure(store, other_id)
    common = [c for c in current_distances if c in other_ancestors]
    if not common:
        raise CorruptedRecordError(
            f"No common ancestor for {current_id[:8]} and {other_id[:8]}"
        )
    generations = generation_numbers(store, common)
    return min(common, key=lambda c: (-generations[c], current_distances[c], c))


STRATEGIES: Dict[str, SplitPointStrategy] = {
    "first_parent": first_parent_split_point,
    "generation": generation_split_point,
}


def find_split_point(
    store: ContentStore,
    current_id: str,
    other_id: str,
    strategy: str = "first_parent",
) -> str:
    """
    Find the merge base of two commits.

    Args:
        store: Content store holding both histories
        current_id: Head of the branch being merged into
        other_id: Head of the branch being merged in
        strategy: "first_parent" or "generation"

    Returns:
        Id of the split point
    """
    try:
        finder = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown split point strategy: {strategy}") from None

    split_id = finder(store, current_id, other_id)
    logger.bind(component="merge").debug(
        f"Split point {split_id[:8]} ({strategy})",
        current=current_id,
        other=other_id,
    )
    return split_id
