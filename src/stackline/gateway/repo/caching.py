"""Repository wrapper that memoizes merge-base queries."""

from collections.abc import Iterator

from stackline.gateway.repo.abc import Repository
from stackline.gateway.repo.types import Branch, Commit, CommitId


class CachingRepository(Repository):
    """Wrapper that caches merge_base() results for one repository snapshot.

    Merge-base is symmetric, so (a, b) and (b, a) share one cache entry.
    Absent results are cached too. Every other query delegates to the
    wrapped implementation unchanged.

    The cache never invalidates; create a new wrapper when refs move.
    """

    def __init__(self, wrapped: Repository) -> None:
        self._wrapped = wrapped
        self._merge_bases: dict[tuple[CommitId, CommitId], CommitId | None] = {}

    def merge_base(self, a: CommitId, b: CommitId) -> CommitId | None:
        key = (a, b) if a <= b else (b, a)
        if key not in self._merge_bases:
            self._merge_bases[key] = self._wrapped.merge_base(a, b)
        return self._merge_bases[key]

    def ancestors_from(self, start: CommitId) -> Iterator[Commit]:
        return self._wrapped.ancestors_from(start)

    def resolve(self, ref: str) -> CommitId | None:
        return self._wrapped.resolve(ref)

    def head_commit(self) -> CommitId | None:
        return self._wrapped.head_commit()

    def current_branch(self) -> str | None:
        return self._wrapped.current_branch()

    def list_branches(self) -> list[Branch]:
        return self._wrapped.list_branches()

    def get_config_values(self, key: str) -> list[str]:
        return self._wrapped.get_config_values(key)
