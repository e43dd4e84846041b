"""Export command for podforge."""

from pathlib import Path

import click

from ..helpers import exit_on_error, load_project


@click.command()
@click.argument('directory', type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
@exit_on_error
def export(options, directory):
    """Export standalone compose files for the current target to DIRECTORY"""
    project = load_project(options)
    written = project.export(directory)
    for path in written:
        click.echo(f"Exported {path}")
