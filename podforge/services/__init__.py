"""Service layer for abstracting Docker and Git operations."""

from .docker_service import DockerService
from .git_service import GitService
from .exceptions import (
    ServiceError,
    DockerServiceError,
    GitServiceError,
    ContainerNotFoundError,
)

__all__ = [
    "DockerService",
    "GitService",
    "ServiceError",
    "DockerServiceError",
    "GitServiceError",
    "ContainerNotFoundError",
]
