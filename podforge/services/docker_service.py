"""Docker service for abstracting Docker operations."""

import logging
from typing import Any, Optional

import docker
import docker.errors
from docker.models.containers import Container

from .exceptions import (
    ContainerNotFoundError,
    DockerServiceError,
)

logger = logging.getLogger(__name__)


class DockerService:
    """Service for Docker operations with clean abstractions.

    podforge only ever reads from the engine: listing containers and
    inspecting them.
    """

    def __init__(self, client: Optional[docker.DockerClient] = None):
        """Initialize Docker service and test connection.

        Args:
            client: An already-connected client (defaults to `docker.from_env()`)
        """
        if client is not None:
            self.client = client
            return
        try:
            self.client = docker.from_env()
            self.client.ping()
        except docker.errors.DockerException as e:
            if "connection refused" in str(e).lower() or "cannot connect" in str(e).lower():
                raise DockerServiceError(
                    "Docker daemon is not running. Please start Docker Desktop or the Docker service."
                ) from e
            else:
                raise DockerServiceError(f"Failed to connect to Docker: {e}") from e

    def list_containers(
        self,
        all: bool = True,
        labels: Optional[dict[str, str]] = None,
        sparse: bool = False,
    ) -> list[Container]:
        """List containers, optionally only those carrying some labels.

        Args:
            all: Include stopped containers
            labels: Label values every listed container must have
            sparse: Skip the per-container inspect that docker-py does by default

        Returns:
            List of containers

        Raises:
            DockerServiceError: If listing fails
        """
        try:
            filter_dict = {}
            if labels:
                filter_dict['label'] = [f"{k}={v}" for k, v in labels.items()]

            return self.client.containers.list(all=all, filters=filter_dict, sparse=sparse)
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to list containers: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error listing containers: {e}") from e

    def inspect_container(self, container_id: str) -> dict[str, Any]:
        """Get the low-level inspect data for a container.

        Args:
            container_id: Container ID or name

        Returns:
            The engine's inspect document

        Raises:
            ContainerNotFoundError: If container not found
            DockerServiceError: If inspection fails
        """
        try:
            return self.client.api.inspect_container(container_id)
        except docker.errors.NotFound as e:
            raise ContainerNotFoundError(
                f"Container '{container_id}' not found"
            ) from e
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to inspect container: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error inspecting container: {e}") from e
