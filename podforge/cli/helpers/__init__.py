"""CLI helper functions for podforge.

These keep error reporting, project loading and table output consistent
across every command.
"""

import functools
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

import click
from tabulate import tabulate

from ...core.default_tags import DefaultTags
from ...core.project import Project
from ...exceptions import PodforgeError


@dataclass
class CliOptions:
    """Global options, stored on the click context by the root group."""

    target: str
    project_name: Optional[str] = None
    default_tags_path: Optional[Path] = None


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def exit_on_error(func):
    """Report any `PodforgeError` as `Error: ...` and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PodforgeError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    return wrapper


def load_project(options: CliOptions) -> Project:
    """Find and load the project containing the current directory."""
    default_tags = None
    if options.default_tags_path is not None:
        default_tags = DefaultTags.read(options.default_tags_path)
    return Project.from_current_dir(
        target_name=options.target,
        name=options.project_name,
        default_tags=default_tags,
    )


def print_table(headers: list[str], rows: list[list[Any]],
                tablefmt: str = "simple") -> None:
    """Print a table with project-wide defaults.

    Args:
        headers: Table headers
        rows: Table rows
        tablefmt: Table format (default: "simple")
    """
    table_str = tabulate(rows, headers=headers, tablefmt=tablefmt)
    click.echo(table_str)


def yes_no(value: bool) -> str:
    return "yes" if value else "no"


def format_ports(ip_addr: Optional[str], ports: List[int]) -> str:
    if not ports:
        return ""
    host = ip_addr or "?"
    return ", ".join(f"{host}:{port}" for port in ports)
