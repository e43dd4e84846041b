"""Tests for Docker service."""

from unittest.mock import Mock, patch
import pytest
import docker.errors

from podforge.services.docker_service import DockerService
from podforge.services.exceptions import (
    DockerServiceError,
    ContainerNotFoundError,
)


class TestDockerService:
    """Test cases for DockerService."""

    @patch('docker.from_env')
    def test_init_success(self, mock_from_env):
        """Test successful initialization."""
        mock_client = Mock()
        mock_client.ping.return_value = None
        mock_from_env.return_value = mock_client

        service = DockerService()
        assert service.client == mock_client
        mock_client.ping.assert_called_once()

    @patch('docker.from_env')
    def test_init_with_client(self, mock_from_env, mock_docker_client):
        """Test initialization with an existing client."""
        service = DockerService(mock_docker_client)
        assert service.client == mock_docker_client
        mock_from_env.assert_not_called()

    @patch('docker.from_env')
    def test_init_docker_not_running(self, mock_from_env):
        """Test initialization when Docker is not running."""
        mock_from_env.side_effect = docker.errors.DockerException("connection refused")

        with pytest.raises(DockerServiceError, match="Docker daemon is not running"):
            DockerService()

    @patch('docker.from_env')
    def test_init_other_error(self, mock_from_env):
        """Test initialization with other Docker errors."""
        mock_from_env.side_effect = docker.errors.DockerException("Other error")

        with pytest.raises(DockerServiceError, match="Failed to connect to Docker"):
            DockerService()

    @patch('docker.from_env')
    def test_list_containers_with_labels(self, mock_from_env):
        """Test listing containers filtered by label."""
        mock_client = Mock()
        mock_from_env.return_value = mock_client
        mock_containers = [Mock(), Mock()]
        mock_client.containers.list.return_value = mock_containers

        service = DockerService()
        result = service.list_containers(
            labels={"com.docker.compose.project": "myapp"}, sparse=True
        )

        assert result == mock_containers
        mock_client.containers.list.assert_called_once_with(
            all=True,
            filters={"label": ["com.docker.compose.project=myapp"]},
            sparse=True,
        )

    @patch('docker.from_env')
    def test_list_containers_with_several_labels(self, mock_from_env):
        """Test that every label becomes its own filter."""
        mock_client = Mock()
        mock_from_env.return_value = mock_client
        mock_client.containers.list.return_value = []

        DockerService().list_containers(labels={
            "com.docker.compose.project": "myapp",
            "io.podforge.target": "development",
        })

        mock_client.containers.list.assert_called_once_with(
            all=True,
            filters={"label": [
                "com.docker.compose.project=myapp",
                "io.podforge.target=development",
            ]},
            sparse=False,
        )

    @patch('docker.from_env')
    def test_list_containers_without_labels(self, mock_from_env):
        """Test listing every container when no labels are given."""
        mock_client = Mock()
        mock_from_env.return_value = mock_client
        mock_client.containers.list.return_value = []

        DockerService().list_containers(all=False)

        mock_client.containers.list.assert_called_once_with(all=False, filters={}, sparse=False)

    @patch('docker.from_env')
    def test_list_containers_failure(self, mock_from_env):
        """Test listing containers when the engine errors."""
        mock_client = Mock()
        mock_from_env.return_value = mock_client
        mock_client.containers.list.side_effect = docker.errors.APIError("boom")

        service = DockerService()
        with pytest.raises(DockerServiceError, match="Failed to list containers"):
            service.list_containers()

    @patch('docker.from_env')
    def test_inspect_container_success(self, mock_from_env):
        """Test inspecting a container."""
        mock_client = Mock()
        mock_from_env.return_value = mock_client
        mock_client.api.inspect_container.return_value = {"Id": "abc", "Name": "/web"}

        service = DockerService()
        assert service.inspect_container("abc") == {"Id": "abc", "Name": "/web"}
        mock_client.api.inspect_container.assert_called_once_with("abc")

    @patch('docker.from_env')
    def test_inspect_container_not_found(self, mock_from_env):
        """Test inspecting a container that has gone away."""
        mock_client = Mock()
        mock_from_env.return_value = mock_client
        mock_client.api.inspect_container.side_effect = docker.errors.NotFound("gone")

        service = DockerService()
        with pytest.raises(ContainerNotFoundError, match="Container 'abc' not found"):
            service.inspect_container("abc")

    @patch('docker.from_env')
    def test_inspect_container_failure(self, mock_from_env):
        """Test inspect failures other than not found."""
        mock_client = Mock()
        mock_from_env.return_value = mock_client
        mock_client.api.inspect_container.side_effect = docker.errors.APIError("boom")

        service = DockerService()
        with pytest.raises(DockerServiceError, match="Failed to inspect container"):
            service.inspect_container("abc")
