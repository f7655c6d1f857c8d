"""Abstract interface for the repository capability."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from stackline.gateway.repo.types import Branch, Commit, CommitId


class Repository(ABC):
    """Abstract interface for the history queries stackline depends on.

    The branch index never reads the on-disk store itself; every ancestry fact
    comes through this interface. All implementations (real, fake, caching)
    must implement it.

    Cost model: `merge_base` dominates. Each relationship filter issues two
    merge-base queries per distinct commit group, so the total cost is bounded
    by the implementation's merge-base complexity.
    """

    # ============================================================================
    # Ancestry Queries
    # ============================================================================

    @abstractmethod
    def merge_base(self, a: CommitId, b: CommitId) -> CommitId | None:
        """Get the nearest common ancestor of two commits.

        Must be a pure function of repository state.

        Args:
            a: First commit id
            b: Second commit id

        Returns:
            Commit id of the merge base, or None if the commits share no history
            or either commit is unknown
        """
        ...

    @abstractmethod
    def ancestors_from(self, start: CommitId) -> Iterator[Commit]:
        """Walk history backward from a commit, nearest first.

        Yields `start` itself followed by every reachable ancestor, each exactly
        once. Each call starts a fresh, independent walk.

        Args:
            start: Commit id to start walking from

        Returns:
            Lazy, finite iterator of commits
        """
        ...

    # ============================================================================
    # Ref Queries
    # ============================================================================

    @abstractmethod
    def resolve(self, ref: str) -> CommitId | None:
        """Resolve a ref (branch name, SHA, `HEAD~2`, ...) to a commit id.

        Returns:
            Commit id, or None if the ref does not name a commit
        """
        ...

    @abstractmethod
    def head_commit(self) -> CommitId | None:
        """Get the commit id HEAD points at, or None in an unborn repository."""
        ...

    @abstractmethod
    def current_branch(self) -> str | None:
        """Get the checked-out branch name, or None when HEAD is detached."""
        ...

    @abstractmethod
    def list_branches(self) -> list[Branch]:
        """List every local branch with the commit it points at."""
        ...

    @abstractmethod
    def get_config_values(self, key: str) -> list[str]:
        """Read every value of a multi-valued git config key, in config order."""
        ...
