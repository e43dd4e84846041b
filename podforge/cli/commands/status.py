"""Status command for podforge."""

import click
from rich.console import Console
from rich.table import Table

from ...core.runtime_state import RuntimeState
from ...models.runtime import StatusKind
from ..helpers import exit_on_error, format_ports, load_project

STATUS_STYLES = {
    StatusKind.RUNNING: "green",
    StatusKind.DONE: "blue",
    StatusKind.EXITED: "red",
    StatusKind.CREATED: "yellow",
    StatusKind.RESTARTING: "yellow",
    StatusKind.PAUSED: "yellow",
    StatusKind.OTHER: "white",
}


@click.command()
@click.pass_obj
@exit_on_error
def status(options):
    """Show the containers of each pod in the current target"""
    console = Console()
    project = load_project(options)
    runtime = RuntimeState.observe(project)

    compose_project = project.target.compose_project_name(project.name)
    table = Table(title=f"{project.name} ({project.target}, compose project {compose_project})")
    table.add_column("Service", style="cyan", no_wrap=True)
    table.add_column("Container")
    table.add_column("Status")
    table.add_column("Ports")

    for pod in project.pods:
        if not pod.enabled_in(project.target):
            continue
        for service_name in pod.service_names:
            label = f"{pod.name}/{service_name}"
            containers = runtime.containers_for(service_name)
            if not containers:
                table.add_row(label, "", "[dim]not started[/dim]", "")
                continue
            for container in containers:
                style = STATUS_STYLES[container.status.kind]
                name = f"{container.name} (run)" if container.one_off else container.name
                table.add_row(
                    label,
                    name,
                    f"[{style}]{container.status}[/{style}]",
                    format_ports(container.ip_addr, list(container.tcp_ports)),
                )

    console.print(table)
