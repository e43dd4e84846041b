"""Source command group for podforge."""

import click

from ...exceptions import ConfigurationError
from ...models.config import SourceRegistryKind
from ...services.git_service import GitService
from ..helpers import exit_on_error, load_project, print_table, yes_no


def _uses_repos(project) -> bool:
    return project.config.source_registry is SourceRegistryKind.REPOS


@click.group()
def source():
    """Manage the source trees used by this project"""
    pass


@source.command(name='ls')
@click.pass_obj
@exit_on_error
def list_sources(options):
    """List source trees and whether they are mounted"""
    project = load_project(options)
    if _uses_repos(project):
        rows = [[repo.alias, yes_no(repo.is_cloned(project.src_dir)), repo.git_url]
                for repo in project.repos]
        print_table(["ALIAS", "CLONED", "REPOSITORY"], rows)
        return

    paths = project.source_paths
    rows = [
        [src.alias, yes_no(src.mounted), yes_no(src.is_available_locally(paths)), src.context]
        for src in project.sources
    ]
    print_table(["ALIAS", "MOUNTED", "AVAILABLE", "ORIGIN"], rows)


@source.command(name='clone')
@click.argument('alias')
@click.pass_obj
@exit_on_error
def clone_source(options, alias):
    """Clone the git source ALIAS into src/ and mount it"""
    project = load_project(options)
    git = GitService(project.root_dir)
    if _uses_repos(project):
        repo = project.repos.clone(alias, git, project.src_dir)
        click.echo(f"Cloned {repo.alias} to {repo.path(project.src_dir)}")
        return
    src = project.sources.clone(alias, git, project.source_paths)
    click.echo(f"Cloned {src.alias} to {src.path(project.source_paths)}")


def _set_mounted(options, alias: str, mounted: bool) -> None:
    project = load_project(options)
    if _uses_repos(project):
        raise ConfigurationError("this project uses `repos`, which can't be mounted or unmounted")
    src = project.sources.set_mounted(alias, mounted)
    if mounted and not src.is_available_locally(project.source_paths):
        click.echo(f"{alias} is not available locally; try `podforge source clone {alias}`")
    click.echo(f"{'Mounted' if mounted else 'Unmounted'} {alias}; "
               f"run `podforge output` to regenerate pods")


@source.command(name='mount')
@click.argument('alias')
@click.pass_obj
@exit_on_error
def mount_source(options, alias):
    """Mount source ALIAS into the services that use it"""
    _set_mounted(options, alias, True)


@source.command(name='unmount')
@click.argument('alias')
@click.pass_obj
@exit_on_error
def unmount_source(options, alias):
    """Stop mounting source ALIAS"""
    _set_mounted(options, alias, False)
