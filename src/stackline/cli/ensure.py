"""CLI error handling for user-facing failures.

Commands raise UserFacingCliError for conditions the user can fix (unknown
ref, not in a repository, bad config). Click prints the message and exits
with status 1; no traceback is shown.
"""

from typing import IO, TypeVar

import click

from stackline.gateway.repo.abc import Repository
from stackline.gateway.repo.types import CommitId

T = TypeVar("T")


class UserFacingCliError(click.ClickException):
    """Error shown to the user as `Error: <message>` with exit code 1."""

    exit_code = 1

    def show(self, file: IO[str] | None = None) -> None:
        click.echo(click.style("Error: ", fg="red") + self.format_message(), err=True)


class Ensure:
    """Precondition checks that exit with user-friendly errors."""

    @staticmethod
    def not_none(value: T | None, message: str) -> T:
        """Ensure value is not None, otherwise raise UserFacingCliError.

        Provides type narrowing from `T | None` to `T`.
        """
        if value is None:
            raise UserFacingCliError(message)
        return value

    @staticmethod
    def commit(repo: Repository, ref: str) -> CommitId:
        """Resolve a ref to a commit id or fail with the ref in the message."""
        return Ensure.not_none(repo.resolve(ref), f"Unknown revision: {ref}")
