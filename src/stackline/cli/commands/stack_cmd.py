import click

from stackline.branches import find_protected_base
from stackline.cli.commands.shared import echo_index, load_branch_index
from stackline.cli.context import StacklineContext, pass_stackline_context
from stackline.cli.ensure import Ensure, UserFacingCliError


@click.command("stack")
@click.option("--base", "base_ref", default=None, help="Stack base (default: protected base)")
@click.option("--head", "head_ref", default="HEAD", show_default=True, help="Stack head")
@click.option(
    "--dependents",
    is_flag=True,
    help="Include branches that fork from the stack and rejoin it above the base",
)
@pass_stackline_context
def stack_cmd(
    ctx: StacklineContext, base_ref: str | None, head_ref: str, dependents: bool
) -> None:
    """Show the branches on the stack between a base and HEAD.

    Prints one line per commit, oldest commit id first, with every branch
    pointing at that commit.

    \b
    Examples:
      stackline stack                    # Base defaults to the protected base
      stackline stack --base main
      stackline stack --dependents
    """
    head = Ensure.commit(ctx.repo, head_ref)
    index = load_branch_index(ctx)

    if base_ref is None:
        protected_base = find_protected_base(
            ctx.repo, index.protected_subset(ctx.protection), head
        )
        if protected_base is None:
            raise UserFacingCliError(
                f"No protected base found for {head_ref}; pass --base explicitly"
            )
        # Anchor at the fork point; the protected tip may have moved past it
        base = Ensure.not_none(
            ctx.repo.merge_base(protected_base.id, head),
            f"{protected_base.name} shares no history with {head_ref}",
        )
    else:
        base = Ensure.commit(ctx.repo, base_ref)

    if dependents:
        stack = index.dependents(ctx.repo, base, head)
    else:
        stack = index.on_path(ctx.repo, base, head)

    if stack.is_empty():
        click.echo(click.style("No branches on this stack", dim=True), err=True)
        return
    echo_index(stack, ctx)
