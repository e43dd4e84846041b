"""Tests for Git service."""

from pathlib import Path
from unittest.mock import Mock, patch
import subprocess
import pytest

from podforge.models.context import GitUrl
from podforge.services.git_service import GitService
from podforge.services.exceptions import GitServiceError


class TestGitService:
    """Test cases for GitService."""

    def test_init_default_cwd(self):
        """Test that the current directory is used by default."""
        assert GitService().cwd == Path.cwd()
        assert GitService(Path("/test/repo")).cwd == Path("/test/repo")

    @patch('subprocess.run')
    def test_run_git_command_success(self, mock_run):
        """Test successful git command execution."""
        mock_result = Mock()
        mock_result.stdout = "output"
        mock_result.stderr = ""
        mock_run.return_value = mock_result

        service = GitService(Path("/test/repo"))
        result = service._run_git_command(["status"])

        assert result == mock_result
        mock_run.assert_called_once_with(
            ["git", "status"],
            cwd=Path("/test/repo"),
            check=True,
            capture_output=True,
            text=True
        )

    @patch('subprocess.run')
    def test_run_git_command_failure(self, mock_run):
        """Test git command failure."""
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ["git", "status"], stderr="error message"
        )

        service = GitService(Path("/test/repo"))
        with pytest.raises(GitServiceError, match="error running 'git status': error message"):
            service._run_git_command(["status"])

    @patch('subprocess.run')
    def test_run_git_command_missing_git(self, mock_run):
        """Test git not being installed."""
        mock_run.side_effect = FileNotFoundError("git")

        service = GitService(Path("/test/repo"))
        with pytest.raises(GitServiceError, match="Unexpected error running git command") as exc_info:
            service._run_git_command(["status"])
        assert exc_info.value.command == ["git", "status"]

    @patch('subprocess.run')
    def test_clone(self, mock_run, tmp_path):
        """Test cloning a repository."""
        dest = tmp_path / "src" / "web"
        service = GitService(tmp_path)
        service.clone(GitUrl("https://github.com/example/web.git"), dest)

        assert dest.parent.is_dir()
        mock_run.assert_called_once_with(
            ["git", "clone", "https://github.com/example/web.git", str(dest)],
            cwd=tmp_path,
            check=True,
            capture_output=True,
            text=True
        )

    @patch('subprocess.run')
    def test_clone_branch(self, mock_run, tmp_path):
        """Test cloning a specific branch."""
        dest = tmp_path / "src" / "web_stable"
        GitService(tmp_path).clone(GitUrl("https://github.com/example/web.git#stable"), dest)

        args = mock_run.call_args[0][0]
        assert args == ["git", "clone", "-b", "stable",
                        "https://github.com/example/web.git", str(dest)]

    @patch('subprocess.run')
    def test_clone_failure(self, mock_run, tmp_path):
        """Test clone failure."""
        mock_run.side_effect = subprocess.CalledProcessError(
            128, ["git", "clone"], stderr="repository not found"
        )

        service = GitService(tmp_path)
        with pytest.raises(GitServiceError, match="Error cloning .*repository not found") as exc_info:
            service.clone(GitUrl("https://github.com/example/web.git"), tmp_path / "web")
        assert exc_info.value.command[:2] == ["git", "clone"]
