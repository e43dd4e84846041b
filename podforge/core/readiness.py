"""Waiting for a pod's services to start listening on their ports."""

import logging
import threading
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ..exceptions import ReadinessCancelledError, ReadinessTimeoutError
from .constants import READINESS_POLL_INTERVAL
from .pod import Pod
from .probes import Probe, bind_probe
from .runtime_state import RuntimeState

if TYPE_CHECKING:
    from .project import Project

logger = logging.getLogger(__name__)


class ReadinessState(Enum):
    WAITING_FOR_CONTAINERS = "waiting for containers"
    WAITING_FOR_PORTS = "waiting for ports"
    READY = "ready"
    TIMED_OUT = "timed out"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ReadinessState.READY, ReadinessState.TIMED_OUT, ReadinessState.CANCELLED)


class ReadinessPoller:
    """Polls Docker until every service in a pod is serving.

    A pod is ready when each of its services has at least one container
    that was not started as a one-off, and every such container is
    listening on all of its TCP ports.

    Args:
        project: The project, with its current target
        pod: The pod to wait for
        deadline: Give up when `clock()` reaches this value; None waits forever
        cancel: Set this event from another thread to stop waiting
        interval: Seconds between observations
        observe: Returns a fresh `RuntimeState` for the project
        probe: Checks one container address; see `podforge.core.probes`
        clock: Monotonic time source that `deadline` is measured against
    """

    def __init__(
        self,
        project: "Project",
        pod: Pod,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        interval: float = READINESS_POLL_INTERVAL,
        observe: Optional[Callable[["Project"], RuntimeState]] = None,
        probe: Probe = bind_probe,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.project = project
        self.pod = pod
        self.deadline = deadline
        self.cancel = cancel or threading.Event()
        self.interval = interval
        self.observe = observe or RuntimeState.observe
        self.probe = probe
        self.clock = clock
        self.state = ReadinessState.WAITING_FOR_CONTAINERS

    def _check(self, runtime: RuntimeState) -> ReadinessState:
        started = {}
        for service_name in self.pod.service_names:
            containers = [c for c in runtime.containers_for(service_name) if not c.one_off]
            if not containers:
                logger.debug(f"No containers yet for {self.pod.name}/{service_name}")
                return ReadinessState.WAITING_FOR_CONTAINERS
            started[service_name] = containers

        for service_name, containers in started.items():
            for container in containers:
                if not container.is_listening(self.probe):
                    return ReadinessState.WAITING_FOR_PORTS
        return ReadinessState.READY

    def step(self) -> ReadinessState:
        """Make one observation and update `state`."""
        if self.state.is_terminal:
            return self.state
        if self.cancel.is_set():
            self.state = ReadinessState.CANCELLED
            return self.state

        state = self._check(self.observe(self.project))
        if state is not ReadinessState.READY and self.deadline is not None \
                and self.clock() >= self.deadline:
            state = ReadinessState.TIMED_OUT
        if state is not self.state:
            logger.debug(f"Pod {self.pod.name}: {self.state.value} -> {state.value}")
        self.state = state
        return state

    def wait(self) -> None:
        """Block until the pod is ready.

        Raises:
            ReadinessTimeoutError: If the deadline passes first
            ReadinessCancelledError: If `cancel` is set first
            RuntimeStateError: If Docker can't be queried
        """
        while True:
            state = self.step()
            if state is ReadinessState.READY:
                return
            if state is ReadinessState.TIMED_OUT:
                raise ReadinessTimeoutError(self.pod.name)
            if state is ReadinessState.CANCELLED:
                raise ReadinessCancelledError(self.pod.name)

            timeout = self.interval
            if self.deadline is not None:
                timeout = max(0.0, min(timeout, self.deadline - self.clock()))
            self.cancel.wait(timeout)
