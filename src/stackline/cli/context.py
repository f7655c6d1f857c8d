"""Application context with dependency injection."""

from collections.abc import Callable
from dataclasses import dataclass
from functools import update_wrapper
from pathlib import Path
from typing import Any

import click

from stackline.cli.ensure import UserFacingCliError
from stackline.config import (
    PROTECTED_BRANCH_GIT_KEY,
    ConfigError,
    load_config,
    merge_git_config_patterns,
)
from stackline.gateway.repo.abc import Repository
from stackline.gateway.repo.caching import CachingRepository
from stackline.gateway.repo.real import RealRepository, discover_repo_root
from stackline.protect import ProtectedBranches, ProtectionMatcher


@dataclass(frozen=True)
class StacklineContext:
    """Immutable context holding all dependencies for stackline commands.

    Created at CLI entry point and threaded through the commands. Tests build
    one with `for_test` and pass it as the click `obj`.
    """

    repo: Repository
    protection: ProtectionMatcher
    cwd: Path
    repo_root: Path

    @staticmethod
    def for_test(
        *,
        repo: Repository | None = None,
        protection: ProtectionMatcher | None = None,
        cwd: Path | None = None,
    ) -> "StacklineContext":
        """Create a context with fake defaults for anything not supplied.

        Example:
            >>> repo = FakeRepository.linear(["a", "b"], branches=[Branch("a", "main")])
            >>> ctx = StacklineContext.for_test(repo=repo)
            >>> runner.invoke(cli, ["base"], obj=ctx)
        """
        from stackline.gateway.repo.fake import FakeRepository

        resolved_cwd = cwd if cwd is not None else Path("/fake/repo")
        return StacklineContext(
            repo=repo if repo is not None else FakeRepository(),
            protection=protection if protection is not None else ProtectedBranches.default(),
            cwd=resolved_cwd,
            repo_root=resolved_cwd,
        )


def create_context(cwd: Path | None = None) -> StacklineContext:
    """Create production context with real implementations.

    Steps:
    1. Discover the repository containing cwd
    2. Load `.stackline/config.toml` and append `stack.protected-branch` values
    3. Wrap the real repository in a merge-base cache for this invocation

    Raises:
        UserFacingCliError: If cwd is not in a git repository or config is invalid
    """
    resolved_cwd = cwd if cwd is not None else Path.cwd()
    repo_root = discover_repo_root(resolved_cwd)
    if repo_root is None:
        raise UserFacingCliError("Not in a git repository")

    real_repo = RealRepository(repo_root)
    try:
        config = load_config(repo_root)
    except ConfigError as exc:
        raise UserFacingCliError(str(exc)) from exc
    config = merge_git_config_patterns(
        config, real_repo.get_config_values(PROTECTED_BRANCH_GIT_KEY)
    )

    return StacklineContext(
        repo=CachingRepository(real_repo),
        protection=ProtectedBranches(config.protected_branches),
        cwd=resolved_cwd,
        repo_root=repo_root,
    )


def pass_stackline_context(f: Callable[..., Any]) -> Callable[..., Any]:
    """Pass the StacklineContext as the first argument, creating it on first use.

    The context lives on the root click context. Tests inject one as `obj`;
    otherwise it is built here, so `--help` and `--version` work outside a
    repository.
    """

    def new_func(*args: Any, **kwargs: Any) -> Any:
        root = click.get_current_context().find_root()
        if root.obj is None:
            root.obj = create_context()
        return f(root.obj, *args, **kwargs)

    return update_wrapper(new_func, f)
