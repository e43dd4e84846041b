"""Map user-visible service names to `(pod, service)` pairs."""

from typing import Dict, Optional, Sequence, Tuple

from .pod import Pod


class ServiceLocations:
    """Every service is reachable as `pod/service`, and also by its bare
    name when that name is unique across the project.
    """

    def __init__(self, pods: Sequence[Pod]):
        self._locations: Dict[str, Tuple[str, str]] = {}
        owners: Dict[str, Optional[str]] = {}
        for pod in pods:
            for service in pod.service_names:
                self._locations[f"{pod.name}/{service}"] = (pod.name, service)
                # None marks a short name used by more than one pod
                owners[service] = None if service in owners else pod.name

        for service, pod_name in owners.items():
            if pod_name is not None:
                self._locations[service] = (pod_name, service)

    def find(self, name: str) -> Optional[Tuple[str, str]]:
        return self._locations.get(name)
