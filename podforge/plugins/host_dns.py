"""Lets containers reach the host as `host.docker.internal` on Linux."""

import ipaddress
import json
import logging
import platform
import subprocess
from typing import TYPE_CHECKING, Optional

from ..core.constants import DOCKER_BRIDGE_INTERFACE, HOST_ALIAS
from ..models.compose import ComposeFile
from .base import Operation, Plugin, PluginContext

if TYPE_CHECKING:
    from ..core.project import Project

logger = logging.getLogger(__name__)

_NOT_LOOKED_UP = object()


def find_interface_ipv4(interface: str) -> Optional[str]:
    """The IPv4 address of a network interface, using `ip -j address show`.

    Returns None if the interface has no IPv4 address.

    Raises:
        OSError: If `ip` can't be run
        subprocess.CalledProcessError: If `ip` fails, e.g. no such interface
        ValueError: If `ip` prints something unexpected
    """
    result = subprocess.run(
        ["ip", "-j", "address", "show", interface],
        check=True,
        capture_output=True,
        text=True,
    )
    for link in json.loads(result.stdout or "[]"):
        for addr_info in link.get("addr_info", []):
            if addr_info.get("family") == "inet" and addr_info.get("local"):
                return str(ipaddress.IPv4Address(addr_info["local"]))
    return None


class HostDnsPlugin(Plugin):
    """Maps `host.docker.internal` to the address of the `docker0` bridge.

    Docker Desktop provides this name itself; on Linux we add it as an
    extra host.  If we can't find the address, we warn and carry on.
    """

    name = "host_dns"

    def __init__(self, project: "Project"):
        super().__init__(project)
        self._address = _NOT_LOOKED_UP

    @property
    def address(self) -> Optional[str]:
        if self._address is _NOT_LOOKED_UP:
            self._address = self._look_up_address()
        return self._address

    @staticmethod
    def _look_up_address() -> Optional[str]:
        try:
            addr = find_interface_ipv4(DOCKER_BRIDGE_INTERFACE)
        except (OSError, subprocess.CalledProcessError, ValueError) as e:
            logger.warning(f"omitting {HOST_ALIAS} ({e})")
            return None
        if addr is None:
            logger.warning(
                f"omitting {HOST_ALIAS} (interface {DOCKER_BRIDGE_INTERFACE} has no IPv4 address)"
            )
        return addr

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        if op is not Operation.OUTPUT or platform.system() != "Linux":
            return
        addr = self.address
        if addr is None:
            return
        logger.debug(f"mapping {HOST_ALIAS} to {addr}")
        mapping = f"{HOST_ALIAS}:{addr}"
        for service in file.services.values():
            if mapping not in service.extra_hosts:
                service.extra_hosts.append(mapping)
