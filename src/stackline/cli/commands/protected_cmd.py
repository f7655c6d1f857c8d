import click

from stackline.cli.commands.shared import load_branch_index
from stackline.cli.context import StacklineContext, pass_stackline_context


@click.command("protected")
@pass_stackline_context
def protected_cmd(ctx: StacklineContext) -> None:
    """List local branches matched by the protection policy."""
    protected = load_branch_index(ctx).protected_subset(ctx.protection)
    if protected.is_empty():
        click.echo(click.style("No protected branches", dim=True), err=True)
        return
    for name in protected.branch_names():
        click.echo(name)
