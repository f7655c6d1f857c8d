"""Helpers shared by the stack inspection commands."""

import click

from stackline.branches import BranchGroup, BranchIndex
from stackline.cli.context import StacklineContext
from stackline.gateway.repo.types import CommitId

SHORT_SHA_LENGTH = 7


def load_branch_index(ctx: StacklineContext) -> BranchIndex:
    """Snapshot every local branch into a BranchIndex."""
    return BranchIndex(ctx.repo.list_branches())


def format_group(commit_id: CommitId, branches: BranchGroup, ctx: StacklineContext) -> str:
    """Format one commit group as `<short-sha> name, name (protected)`."""
    names = []
    for branch in branches:
        if ctx.protection.is_protected(branch.name):
            names.append(branch.name + click.style(" (protected)", dim=True))
        else:
            names.append(branch.name)
    sha = click.style(commit_id[:SHORT_SHA_LENGTH], fg="yellow")
    return f"{sha} {', '.join(names)}"


def echo_index(index: BranchIndex, ctx: StacklineContext) -> None:
    for commit_id, branches in index.iter():
        click.echo(format_group(commit_id, branches, ctx))
