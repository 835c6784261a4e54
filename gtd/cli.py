"""
Command-line interface for the GTD agent.

Uses GTDCore and the .gtd/ object store exclusively.
"""
import logging

import click

from gtd.commands.ai import ai
from gtd.commands.config import config
from gtd.commands.context import context
from gtd.commands.project import project
from gtd.commands.reference import reference
from gtd.commands.serve import serve
from gtd.commands.task import task
from gtd.constants import DATA_DIR_ENV_VAR


@click.group()
@click.option("--data-dir", type=click.Path(file_okay=False), envvar=DATA_DIR_ENV_VAR,
              help="Data directory (default: .gtd).")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx, data_dir, verbose):
    """A GTD task manager with an AI assistant."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    ctx.obj["verbose"] = verbose


cli.add_command(task)
cli.add_command(project)
cli.add_command(context)
cli.add_command(reference)
cli.add_command(ai)
cli.add_command(config)
cli.add_command(serve)


if __name__ == '__main__':
    cli()
