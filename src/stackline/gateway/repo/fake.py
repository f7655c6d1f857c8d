"""Fake repository implementation for testing."""

from collections import deque
from collections.abc import Iterator

from stackline.gateway.repo.abc import Repository
from stackline.gateway.repo.types import Branch, Commit, CommitId


class FakeRepository(Repository):
    """In-memory fake implementation backed by an explicit commit graph.

    Constructor Injection: the commit graph and refs are passed via the
    constructor. Merge-bases are computed from the graph, so tests describe
    history rather than pre-computing answers.

    Mutation Tracking:
    -----------------
    - merge_base_calls: every (a, b) pair passed to merge_base()
    - ancestor_walks: every start commit passed to ancestors_from()
    """

    def __init__(
        self,
        *,
        parents: dict[CommitId, list[CommitId]] | None = None,
        branches: list[Branch] | None = None,
        head: CommitId | None = None,
        current_branch: str | None = None,
        summaries: dict[CommitId, str] | None = None,
        config_values: dict[str, list[str]] | None = None,
    ) -> None:
        """Create FakeRepository with pre-configured state.

        Args:
            parents: Mapping of commit id -> parent commit ids (first parent first).
                Commits mentioned only as parents are treated as root commits.
            branches: Local branches returned by list_branches()
            head: Commit id HEAD points at
            current_branch: Checked-out branch name (None for detached HEAD)
            summaries: Mapping of commit id -> subject line
            config_values: Mapping of git config key -> values
        """
        self._parents: dict[CommitId, list[CommitId]] = parents if parents is not None else {}
        self._branches: list[Branch] = branches if branches is not None else []
        self._head = head
        self._current_branch = current_branch
        self._summaries: dict[CommitId, str] = summaries if summaries is not None else {}
        self._config_values: dict[str, list[str]] = (
            config_values if config_values is not None else {}
        )
        self._merge_base_calls: list[tuple[CommitId, CommitId]] = []
        self._ancestor_walks: list[CommitId] = []

    @staticmethod
    def linear(
        commit_ids: list[CommitId],
        *,
        branches: list[Branch] | None = None,
        head: CommitId | None = None,
    ) -> "FakeRepository":
        """Create a repository whose history is a single chain.

        `FakeRepository.linear(["a", "b", "c"])` builds a -> b -> c where "a" is
        the root commit. HEAD defaults to the last commit.
        """
        parents: dict[CommitId, list[CommitId]] = {commit_ids[0]: []}
        for parent, child in zip(commit_ids, commit_ids[1:], strict=False):
            parents[child] = [parent]
        return FakeRepository(
            parents=parents,
            branches=branches,
            head=head if head is not None else commit_ids[-1],
        )

    def _is_known(self, commit_id: CommitId) -> bool:
        if commit_id in self._parents:
            return True
        return any(commit_id in ps for ps in self._parents.values())

    def _reachable(self, start: CommitId) -> set[CommitId]:
        """Every commit reachable from start, start included."""
        seen: set[CommitId] = {start}
        stack = [start]
        while stack:
            for parent in self._parents.get(stack.pop(), []):
                if parent not in seen:
                    seen.add(parent)
                    stack.append(parent)
        return seen

    def _walk(self, start: CommitId) -> Iterator[CommitId]:
        """Topological walk from start: every child before its parents, each commit once.

        Kahn's algorithm over the subgraph reachable from start. Ties go
        first-parent first, so a linear chain walks nearest first.
        """
        reachable = self._reachable(start)
        pending_children: dict[CommitId, int] = dict.fromkeys(reachable, 0)
        for commit_id in reachable:
            for parent in self._parents.get(commit_id, []):
                pending_children[parent] += 1
        ready: deque[CommitId] = deque([start])
        while ready:
            commit_id = ready.popleft()
            yield commit_id
            for parent in self._parents.get(commit_id, []):
                pending_children[parent] -= 1
                if pending_children[parent] == 0:
                    ready.append(parent)

    # ============================================================================
    # Ancestry Queries
    # ============================================================================

    def merge_base(self, a: CommitId, b: CommitId) -> CommitId | None:
        """Return the best common ancestor, as `git merge-base` does.

        A common ancestor is best when it is not an ancestor of another common
        ancestor. With several best candidates (criss-cross merges) the one
        reached first walking from b wins.
        """
        self._merge_base_calls.append((a, b))
        if not self._is_known(a) or not self._is_known(b):
            return None
        common = self._reachable(a) & self._reachable(b)
        for commit_id in self._walk(b):
            if commit_id not in common:
                continue
            if not any(
                other != commit_id and commit_id in self._reachable(other) for other in common
            ):
                return commit_id
        return None

    def ancestors_from(self, start: CommitId) -> Iterator[Commit]:
        self._ancestor_walks.append(start)
        if not self._is_known(start):
            return iter(())
        return (
            Commit(id=commit_id, summary=self._summaries.get(commit_id, ""))
            for commit_id in self._walk(start)
        )

    # ============================================================================
    # Ref Queries
    # ============================================================================

    def resolve(self, ref: str) -> CommitId | None:
        """Resolve HEAD, a branch name, or a known commit id."""
        if ref == "HEAD":
            return self._head
        for branch in self._branches:
            if branch.name == ref:
                return branch.id
        if self._is_known(ref):
            return ref
        return None

    def head_commit(self) -> CommitId | None:
        return self._head

    def current_branch(self) -> str | None:
        return self._current_branch

    def list_branches(self) -> list[Branch]:
        return list(self._branches)

    def get_config_values(self, key: str) -> list[str]:
        return list(self._config_values.get(key, []))

    # ============================================================================
    # Test Assertions
    # ============================================================================

    @property
    def merge_base_calls(self) -> list[tuple[CommitId, CommitId]]:
        """Get every merge_base() call made so far.

        Returns a copy to prevent external mutation.
        """
        return list(self._merge_base_calls)

    @property
    def ancestor_walks(self) -> list[CommitId]:
        """Get the start commit of every ancestors_from() call."""
        return list(self._ancestor_walks)
