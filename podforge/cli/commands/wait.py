"""Wait command for podforge."""

import time

import click

from ...core.readiness import ReadinessPoller
from ..helpers import exit_on_error, load_project


@click.command()
@click.argument('pod_name')
@click.option('--timeout', type=float, default=None,
              help='Give up after this many seconds (default: wait forever)')
@click.pass_obj
@exit_on_error
def wait(options, pod_name, timeout):
    """Wait until every service in POD_NAME is listening on its ports"""
    project = load_project(options)
    pod = project.pod_or_err(pod_name)
    deadline = time.monotonic() + timeout if timeout is not None else None
    ReadinessPoller(project, pod, deadline=deadline).wait()
    click.echo(f"Pod {pod.name} is ready")
