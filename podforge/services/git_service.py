"""Git service for abstracting Git operations."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..models.context import GitUrl
from .exceptions import GitServiceError

logger = logging.getLogger(__name__)


class GitService:
    """Service for Git operations with clean abstractions."""

    def __init__(self, cwd: Optional[Path] = None):
        """Initialize Git service.

        Args:
            cwd: Directory to run git commands in (defaults to current directory)
        """
        self.cwd = cwd or Path.cwd()

    def _run_git_command(
        self, args: list[str], check: bool = True, capture_output: bool = True
    ) -> subprocess.CompletedProcess:
        """Run a git command with proper error handling.

        Args:
            args: Git command arguments
            check: Check return code
            capture_output: Capture stdout and stderr

        Returns:
            Completed process result

        Raises:
            GitServiceError: If command fails
        """
        cmd = ["git"] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                check=check,
                capture_output=capture_output,
                text=True,
            )
            return result
        except subprocess.CalledProcessError as e:
            error_msg = e.stderr if e.stderr else str(e)
            raise GitServiceError(
                f"error running '{' '.join(cmd)}': {error_msg.strip()}", cmd
            ) from e
        except OSError as e:
            raise GitServiceError(f"Unexpected error running git command: {e}", cmd) from e

    def clone(self, git_url: GitUrl, dest: Path) -> None:
        """Clone a repository (and branch, if any) into `dest`.

        Args:
            git_url: Repository to clone
            dest: Directory to clone into; its parent is created if needed

        Raises:
            GitServiceError: If the clone fails
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._run_git_command(["clone"] + git_url.clone_args() + [str(dest)])
        except GitServiceError as e:
            raise GitServiceError(
                f"Error cloning {git_url} to {dest}: {e}", e.command
            ) from e
        logger.info(f"Cloned {git_url} to {dest}")
