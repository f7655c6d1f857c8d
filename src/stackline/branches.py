"""Branch index: branches grouped by commit, with ancestry relationship queries.

The index is a snapshot. It is built once from whatever branches the caller
enumerated and never observes later changes to the repository. Relationship
queries (`dependents`, `on_path`, `protected_subset`) never modify the
receiver; each returns a new index holding a subset of the original groups.

Ancestry facts come from the `Repository` gateway. When a merge-base is
absent (unrelated history, unknown commit) the predicate is false and the
group is dropped; that is logged at DEBUG and never raised.
"""

import logging
from collections.abc import Callable, Iterable, Iterator

from stackline.errors import InvariantViolationError
from stackline.gateway.repo.abc import Repository
from stackline.gateway.repo.types import Branch, CommitId
from stackline.protect import ProtectionMatcher

logger = logging.getLogger(__name__)

BranchGroup = tuple[Branch, ...]


def _first_branch(branches: BranchGroup) -> Branch:
    if not branches:
        raise InvariantViolationError("branch groups are never empty")
    return branches[0]


class BranchIndex:
    """Branches grouped by the commit they point at.

    Groups iterate in ascending commit id order regardless of input order.
    Within a group, branches keep the order they were supplied in. Every
    stored group is non-empty.
    """

    def __init__(self, branches: Iterable[Branch]) -> None:
        grouped: dict[CommitId, list[Branch]] = {}
        for branch in branches:
            grouped.setdefault(branch.id, []).append(branch)
        self._groups: dict[CommitId, BranchGroup] = {
            commit_id: tuple(grouped[commit_id]) for commit_id in sorted(grouped)
        }

    @classmethod
    def _from_groups(cls, groups: Iterable[tuple[CommitId, BranchGroup]]) -> "BranchIndex":
        """Build an index from already-ordered, non-empty groups."""
        index = cls(())
        for commit_id, branches in groups:
            if not branches:
                raise InvariantViolationError(f"refusing to store empty group for {commit_id}")
            index._groups[commit_id] = branches
        return index

    # ============================================================================
    # Basic Access
    # ============================================================================

    def contains(self, commit_id: CommitId) -> bool:
        return commit_id in self._groups

    def get(self, commit_id: CommitId) -> BranchGroup | None:
        """Get the branches pointing at a commit, or None if there are none."""
        return self._groups.get(commit_id)

    def remove(self, commit_id: CommitId) -> BranchGroup | None:
        """Evict and return the group for a commit.

        This is the only operation that modifies an index in place.
        """
        return self._groups.pop(commit_id, None)

    def ids(self) -> Iterator[CommitId]:
        """Iterate over commit ids in ascending order."""
        return iter(self._groups)

    def iter(self) -> Iterator[tuple[CommitId, BranchGroup]]:
        """Iterate over (commit id, branches) pairs in ascending commit order."""
        return iter(self._groups.items())

    def is_empty(self) -> bool:
        return not self._groups

    def all(self) -> "BranchIndex":
        """Return an independent copy of this index."""
        return BranchIndex._from_groups(self.iter())

    def branch_names(self) -> list[str]:
        """All branch names, in commit order then input order."""
        return [branch.name for _, branches in self.iter() for branch in branches]

    def __contains__(self, commit_id: object) -> bool:
        return commit_id in self._groups

    def __iter__(self) -> Iterator[tuple[CommitId, BranchGroup]]:
        return self.iter()

    def __len__(self) -> int:
        return len(self._groups)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BranchIndex):
            return NotImplemented
        return list(self._groups.items()) == list(other._groups.items())

    def __repr__(self) -> str:
        groups = ", ".join(
            f"{commit_id[:12]}: [{', '.join(b.name for b in branches)}]"
            for commit_id, branches in self.iter()
        )
        return f"BranchIndex({{{groups}}})"

    # ============================================================================
    # Relationship Queries
    # ============================================================================

    def _filter_groups(self, keep: Callable[[CommitId, BranchGroup], bool]) -> "BranchIndex":
        """Build a new index from the groups `keep` accepts; whole groups only."""
        return BranchIndex._from_groups(
            (commit_id, branches)
            for commit_id, branches in self.iter()
            if keep(commit_id, branches)
        )

    def dependents(self, repo: Repository, base: CommitId, head: CommitId) -> "BranchIndex":
        """Keep groups that descend from base and are part of head's line.

        A group is dropped when its commit does not descend from base, or when
        its only shared history with head is base itself (a sibling that forked
        at base). The group at base is always kept. Branches that diverge from
        head but rejoin it above base are kept.

        Args:
            repo: Repository used for merge-base queries
            base: Base commit of the stack
            head: Head commit of the stack

        Returns:
            New index with the qualifying groups
        """

        def keep(commit_id: CommitId, branches: BranchGroup) -> bool:
            head_merge = repo.merge_base(commit_id, head)
            is_shared_base = head_merge is not None and head_merge == base and commit_id != base
            base_merge = repo.merge_base(commit_id, base)
            is_base_descendant = base_merge is not None and base_merge == base
            if is_shared_base:
                logger.debug(
                    "Branch %s is not on the branch of HEAD (%s)",
                    _first_branch(branches).name,
                    head,
                )
                return False
            if not is_base_descendant:
                logger.debug(
                    "Branch %s is not on the branch of %s",
                    _first_branch(branches).name,
                    base,
                )
                return False
            return True

        return self._filter_groups(keep)

    def on_path(self, repo: Repository, base: CommitId, head: CommitId) -> "BranchIndex":
        """Keep groups on the direct line from base to head, both inclusive.

        This is the current-stack query: a group qualifies when its commit is an
        ancestor of (or equal to) head and a descendant of (or equal to) base.

        Args:
            repo: Repository used for merge-base queries
            base: Base commit of the stack
            head: Head commit of the stack

        Returns:
            New index with the qualifying groups
        """

        def keep(commit_id: CommitId, branches: BranchGroup) -> bool:
            head_merge = repo.merge_base(commit_id, head)
            is_head_ancestor = head_merge is not None and head_merge == commit_id
            base_merge = repo.merge_base(commit_id, base)
            is_base_descendant = base_merge is not None and base_merge == base
            if not is_head_ancestor:
                logger.debug(
                    "Branch %s is not on the branch of HEAD (%s)",
                    _first_branch(branches).name,
                    head,
                )
                return False
            if not is_base_descendant:
                logger.debug(
                    "Branch %s is not on the branch of %s",
                    _first_branch(branches).name,
                    base,
                )
                return False
            return True

        return self._filter_groups(keep)

    def protected_subset(self, matcher: ProtectionMatcher) -> "BranchIndex":
        """Keep only protected branches; drop groups left with none."""
        groups: list[tuple[CommitId, BranchGroup]] = []
        for commit_id, branches in self.iter():
            protected = tuple(b for b in branches if matcher.is_protected(b.name))
            if protected:
                groups.append((commit_id, protected))
        return BranchIndex._from_groups(groups)


def find_protected_bases(
    repo: Repository, protected: BranchIndex, head: CommitId
) -> BranchGroup | None:
    """Find every protected branch candidate at head's nearest protected base.

    For each protected commit p, merge_base(head, p) is where head's line
    rejoins p's line. Walking head's ancestry nearest first, the first commit
    that is one of those merge-bases is the protected base.

    Several protected commits can share one merge-base. Their groups are
    unioned in ascending protected commit order, so the result is
    deterministic and no protected branch is dropped.

    Args:
        repo: Repository used for merge-base queries and the ancestor walk
        protected: Index already restricted to protected branches
        head: Commit to find the base for

    Returns:
        The unioned protected branches at the nearest base, or None when head
        never rejoins a protected branch
    """
    candidates: dict[CommitId, list[Branch]] = {}
    for protected_id, branches in protected.iter():
        merge_id = repo.merge_base(head, protected_id)
        if merge_id is None:
            logger.debug(
                "Protected branch %s shares no history with %s",
                _first_branch(branches).name,
                head,
            )
            continue
        candidates.setdefault(merge_id, []).extend(branches)

    if not candidates:
        return None

    for commit in repo.ancestors_from(head):
        found = candidates.get(commit.id)
        if found is not None:
            logger.debug(
                "Protected base of %s is %s (%s)",
                head,
                commit.id,
                ", ".join(b.name for b in found),
            )
            return tuple(found)
    return None


def find_protected_base(
    repo: Repository, protected: BranchIndex, head: CommitId
) -> Branch | None:
    """Find the nearest protected branch whose line head rejoins or descends from.

    Returns the first branch of the group found by `find_protected_bases`:
    the lowest protected commit id wins ties, then input order.

    Returns:
        The protected base branch, or None when no protected base exists
    """
    bases = find_protected_bases(repo, protected, head)
    if bases is None:
        return None
    return _first_branch(bases)
