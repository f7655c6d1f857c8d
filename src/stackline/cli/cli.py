import logging

import click

from stackline.cli.commands.base_cmd import base_cmd
from stackline.cli.commands.protected_cmd import protected_cmd
from stackline.cli.commands.stack_cmd import stack_cmd

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="stackline")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug: bool) -> None:
    """Inspect stacked branches: stack membership and protected bases."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")


cli.add_command(base_cmd)
cli.add_command(protected_cmd)
cli.add_command(stack_cmd)


def main() -> None:
    """CLI entry point used by the `stackline` console script."""
    cli()
