"""Protection policy: decides which branch names are protected.

Protected branches (trunk, release lines) anchor the root of a stack and are
never rewritten by stack operations. Patterns use gitignore syntax so users
can write `release/*` or negate with `!release/experimental`.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

import pathspec

logger = logging.getLogger(__name__)

DEFAULT_PROTECTED_BRANCHES: tuple[str, ...] = ("main", "master", "dev", "stable", "gh-pages")


class ProtectionMatcher(ABC):
    """ABC for protection policy checks.

    Implementations:
    - ProtectedBranches: gitignore-style glob patterns
    - FakeProtectionMatcher: exact names, for testing
    """

    @abstractmethod
    def is_protected(self, name: str) -> bool:
        """Check whether a branch name is protected.

        Must be a pure predicate over the configured rules.
        """
        ...


class ProtectedBranches(ProtectionMatcher):
    """Protection matcher built from gitignore-style patterns.

    Later patterns take precedence over earlier ones, and a leading `!`
    un-protects names matched by an earlier pattern. As with gitignore, a
    pattern without a slash matches at any depth, so `main` also protects
    `origin/main`.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self._patterns = tuple(p for p in (p.strip() for p in patterns) if p)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self._patterns)

    @staticmethod
    def default() -> "ProtectedBranches":
        return ProtectedBranches(DEFAULT_PROTECTED_BRANCHES)

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def is_protected(self, name: str) -> bool:
        protected = self._spec.match_file(name)
        if protected:
            logger.debug("Branch %s is protected", name)
        return protected


class FakeProtectionMatcher(ProtectionMatcher):
    """Fake matcher protecting an explicit set of branch names.

    Mutation Tracking:
    -----------------
    - checked_names: every name passed to is_protected(), in call order
    """

    def __init__(self, *, protected_names: Iterable[str]) -> None:
        self._protected_names = frozenset(protected_names)
        self._checked_names: list[str] = []

    def is_protected(self, name: str) -> bool:
        self._checked_names.append(name)
        return name in self._protected_names

    @property
    def checked_names(self) -> list[str]:
        return list(self._checked_names)
