"""Custom exceptions for service layer."""

from typing import Sequence

from ..exceptions import PodforgeError


class ServiceError(PodforgeError):
    """Base exception for all service-related errors."""

    pass


class DockerServiceError(ServiceError):
    """Exception raised for Docker service operations."""

    pass


class GitServiceError(ServiceError):
    """Exception raised for Git service operations.

    Carries the full command line that failed, when there was one.
    """

    def __init__(self, message: str, command: Sequence[str] = ()):
        self.command = list(command)
        super().__init__(message)


class ContainerNotFoundError(DockerServiceError):
    """Exception raised when a Docker container is not found."""

    pass
