"""Output command for podforge."""

import click

from ..helpers import exit_on_error, load_project


@click.command()
@click.option('--subcommand', default='output', show_default=True,
              help='Generate files for this compose subcommand (`build` keeps build sections)')
@click.pass_obj
@exit_on_error
def output(options, subcommand):
    """Regenerate .podforge/pods for the current target"""
    project = load_project(options)
    written = project.output(subcommand)
    click.echo(f"Wrote {len(written)} pod(s) to {project.output_pods_dir}")
