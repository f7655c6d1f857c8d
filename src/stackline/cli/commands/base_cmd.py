import click

from stackline.branches import find_protected_bases
from stackline.cli.commands.shared import load_branch_index
from stackline.cli.context import StacklineContext, pass_stackline_context
from stackline.cli.ensure import Ensure


@click.command("base")
@click.option("--head", "head_ref", default="HEAD", show_default=True, help="Revision to inspect")
@click.option(
    "--all",
    "show_all",
    is_flag=True,
    help="Print every protected branch at the base instead of the first",
)
@pass_stackline_context
def base_cmd(ctx: StacklineContext, head_ref: str, show_all: bool) -> None:
    """Print the nearest protected branch that HEAD builds on.

    Walks history backward from HEAD and stops at the first commit where
    HEAD's line rejoins a protected branch.

    \b
    Examples:
      stackline base                 # Protected base of HEAD
      stackline base --head feature  # Protected base of another branch
    """
    head = Ensure.commit(ctx.repo, head_ref)
    protected = load_branch_index(ctx).protected_subset(ctx.protection)
    bases = find_protected_bases(ctx.repo, protected, head)
    if bases is None:
        click.echo(click.style(f"No protected base found for {head_ref}", dim=True), err=True)
        return

    for branch in bases if show_all else bases[:1]:
        click.echo(branch.name)
