"""Runtime state models, built from what the container engine reports."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..core.probes import Probe, bind_probe

logger = logging.getLogger(__name__)

# Engine status strings that map directly onto a StatusKind.
_SIMPLE_STATUSES = {
    "created": "CREATED",
    "restarting": "RESTARTING",
    "running": "RUNNING",
    "paused": "PAUSED",
}


class StatusKind(Enum):
    """Container status enumeration."""
    CREATED = "created"
    RESTARTING = "restarting"
    RUNNING = "running"
    PAUSED = "paused"
    DONE = "done"
    EXITED = "exited"
    OTHER = "other"


@dataclass(frozen=True)
class ContainerStatus:
    """What a container is doing.  `exit_code` is only set for EXITED."""

    kind: StatusKind
    exit_code: Optional[int] = None

    @classmethod
    def from_engine(cls, status: Optional[str], exit_code: Optional[int]) -> "ContainerStatus":
        """Classify the engine's raw status string and exit code.

        This never fails: anything we don't recognize becomes OTHER.
        """
        raw = (status or "").strip().lower()
        if raw in _SIMPLE_STATUSES:
            return cls(StatusKind[_SIMPLE_STATUSES[raw]])
        if raw == "exited":
            if exit_code == 0:
                return cls(StatusKind.DONE)
            if exit_code is not None:
                return cls(StatusKind.EXITED, exit_code)
        return cls(StatusKind.OTHER)

    def __str__(self):
        if self.kind is StatusKind.EXITED:
            return f"exited({self.exit_code})"
        return self.kind.value


@dataclass(frozen=True)
class ContainerInfo:
    """Information about a specific container associated with a service."""
    name: str
    one_off: bool  # created by `run` rather than `up`
    status: ContainerStatus
    ip_addr: Optional[str] = None
    tcp_ports: Tuple[int, ...] = ()  # container ports, not host ports

    def socket_addrs(self) -> List[tuple]:
        if not self.ip_addr:
            return []
        return [(self.ip_addr, port) for port in self.tcp_ports]

    def is_listening(self, probe: Optional[Probe] = None) -> bool:
        """Is this container listening on all of its TCP ports?

        A container with ports but no IP address is not listening.
        """
        probe = probe or bind_probe
        if self.tcp_ports and not self.ip_addr:
            return False
        for addr in self.socket_addrs():
            if not probe(addr):
                logger.debug(f"container '{self.name}': {addr[0]}:{addr[1]} not listening")
                return False
        logger.debug(f"container '{self.name}' is listening on all ports")
        return True
