"""What a project's containers are doing right now, as reported by Docker."""

import ipaddress
import logging
import re
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from ..exceptions import CouldNotParseError, RuntimeStateError
from ..models.runtime import ContainerInfo, ContainerStatus
from ..services.docker_service import DockerService
from ..services.exceptions import ContainerNotFoundError, DockerServiceError
from .constants import (
    COMPOSE_ONEOFF_LABEL,
    COMPOSE_PROJECT_LABEL,
    COMPOSE_SERVICE_LABEL,
    TARGET_LABEL,
)

if TYPE_CHECKING:
    from .project import Project

logger = logging.getLogger(__name__)

_PORT_KEY = re.compile(r"^(\d+)/(tcp|udp|sctp)$")


def _parse_ip_addr(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return str(ipaddress.ip_address(value))
    except ValueError as e:
        raise CouldNotParseError("IP address", value) from e


def _parse_tcp_ports(port_keys) -> List[int]:
    """Extract TCP port numbers from keys like `80/tcp`."""
    ports = []
    for key in port_keys:
        match = _PORT_KEY.match(key)
        if not match:
            raise CouldNotParseError("port", key)
        if match.group(2) == "tcp":
            ports.append(int(match.group(1)))
    return sorted(set(ports))


def container_info_from_inspect(info: Dict[str, Any]) -> ContainerInfo:
    """Build a `ContainerInfo` from the engine's inspect document."""
    config = info.get("Config") or {}
    labels = config.get("Labels") or {}
    state = info.get("State") or {}
    network = info.get("NetworkSettings") or {}

    ip_addr = network.get("IPAddress")
    if not ip_addr:
        for settings in (network.get("Networks") or {}).values():
            if settings and settings.get("IPAddress"):
                ip_addr = settings["IPAddress"]
                break

    port_keys = network.get("Ports") or config.get("ExposedPorts") or {}

    return ContainerInfo(
        name=(info.get("Name") or info.get("Id") or "").lstrip("/"),
        one_off=labels.get(COMPOSE_ONEOFF_LABEL) == "True",
        status=ContainerStatus.from_engine(state.get("Status"), state.get("ExitCode")),
        ip_addr=_parse_ip_addr(ip_addr),
        tcp_ports=tuple(_parse_tcp_ports(port_keys)),
    )


class RuntimeState:
    """The containers belonging to a project and target, grouped by service."""

    def __init__(self, services: Optional[Dict[str, List[ContainerInfo]]] = None):
        self._services: Dict[str, List[ContainerInfo]] = services or {}

    @classmethod
    def observe(cls, project: "Project",
                docker: Optional[DockerService] = None) -> "RuntimeState":
        """Ask Docker about every container in the project's current target.

        Raises:
            RuntimeStateError: If Docker can't be reached or reports
                something we can't parse
        """
        compose_project = project.target.compose_project_name(project.name)
        target_name = project.target.name
        try:
            docker = docker or DockerService()
            containers = docker.list_containers(
                all=True, sparse=True,
                labels={COMPOSE_PROJECT_LABEL: compose_project, TARGET_LABEL: target_name},
            )
            services: Dict[str, List[ContainerInfo]] = {}
            for container in containers:
                try:
                    info = docker.inspect_container(container.id)
                except ContainerNotFoundError:
                    logger.debug(f"Container {container.id} went away while inspecting it")
                    continue
                labels = (info.get("Config") or {}).get("Labels") or {}
                if labels.get(COMPOSE_PROJECT_LABEL) != compose_project:
                    continue
                if labels.get(TARGET_LABEL) != target_name:
                    continue
                service_name = labels.get(COMPOSE_SERVICE_LABEL)
                if service_name is None:
                    continue
                services.setdefault(service_name, []).append(container_info_from_inspect(info))
        except (DockerServiceError, CouldNotParseError) as e:
            raise RuntimeStateError() from e

        logger.debug(f"Found containers for services: {sorted(services)}")
        return cls(services)

    def containers_for(self, service_name: str) -> List[ContainerInfo]:
        """Containers for `service_name`; empty if it has none or is unknown."""
        return list(self._services.get(service_name, []))

    def service_names(self) -> List[str]:
        return sorted(self._services)

    def __iter__(self) -> Iterator[ContainerInfo]:
        for name in self.service_names():
            yield from self._services[name]
