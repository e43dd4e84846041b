"""Main CLI entry point for podforge."""

from pathlib import Path

import click

from ..core.constants import DEFAULT_TARGET
from .commands.export import export
from .commands.output import output
from .commands.source import source
from .commands.status import status
from .commands.wait import wait
from .helpers import CliOptions, configure_logging


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
@click.option('--target', '-t', default=DEFAULT_TARGET, show_default=True,
              envvar='PODFORGE_TARGET', help='Target to generate files for')
@click.option('--project-name', '-p', default=None,
              help='Project name (defaults to the project directory name)')
@click.option('--default-tags', 'default_tags_path', default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='File of image:tag lines used to pin untagged images')
@click.pass_context
def cli(ctx, verbose, target, project_name, default_tags_path):
    """podforge - Generate per-target compose files from pods"""
    configure_logging(verbose)
    ctx.obj = CliOptions(
        target=target,
        project_name=project_name,
        default_tags_path=default_tags_path,
    )


# Register commands
cli.add_command(output)
cli.add_command(export)
cli.add_command(status)
cli.add_command(wait)
cli.add_command(source)


if __name__ == '__main__':
    cli()
