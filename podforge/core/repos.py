"""Legacy registry of the git repositories used by a project.

This predates `podforge.core.sources`: it only knows about git build
contexts and has no notion of mounting.  A repository that has been cloned
is always used.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence

from ..exceptions import AliasCollisionError, CouldNotParseError, UnknownSourceError
from ..models.config import load_yaml
from ..models.context import GitUrl
from ..services.git_service import GitService
from .pod import Pod

logger = logging.getLogger(__name__)


class Repo:
    """A git repository checked out under the project's `src/` directory."""

    def __init__(self, alias: str, git_url: GitUrl):
        self.alias = alias
        self.git_url = git_url

    def path(self, src_dir: Path) -> Path:
        return Path(src_dir) / self.alias

    def is_cloned(self, src_dir: Path) -> bool:
        return self.path(src_dir).exists()

    def __repr__(self):
        return f"Repo({self.alias!r}, {self.git_url.url!r})"


class Repos:
    """Git repositories referred to by pods or `config/libraries.yml`."""

    def __init__(self):
        self._repos: Dict[str, Repo] = {}
        self._lib_keys: Dict[str, str] = {}

    @classmethod
    def load(cls, pods: Sequence[Pod], libraries_path: Optional[Path] = None) -> "Repos":
        repos = cls()
        for pod in pods:
            for file in pod.all_files():
                for service in file.services.values():
                    context = service.build_context()
                    if context is not None and context.git_url is not None:
                        repos.add(context.git_url)

        if libraries_path is not None and Path(libraries_path).exists():
            libs = load_yaml(libraries_path) or {}
            if not isinstance(libs, dict):
                raise CouldNotParseError("library list", str(libraries_path))
            for lib_key, url in libs.items():
                repos._lib_keys[str(lib_key)] = repos.add(GitUrl(str(url))).alias
        return repos

    def add(self, git_url: GitUrl) -> Repo:
        git_url = git_url.without_subdirectory()
        alias = git_url.alias()
        existing = self._repos.get(alias)
        if existing is not None:
            if existing.git_url != git_url:
                raise AliasCollisionError(alias, str(existing.git_url), str(git_url))
            return existing
        repo = Repo(alias, git_url)
        self._repos[alias] = repo
        return repo

    def __iter__(self) -> Iterator[Repo]:
        for alias in sorted(self._repos):
            yield self._repos[alias]

    def __len__(self):
        return len(self._repos)

    def find_by_alias(self, alias: str) -> Optional[Repo]:
        return self._repos.get(alias)

    def find_by_git_url(self, git_url: GitUrl) -> Optional[Repo]:
        repo = self._repos.get(git_url.without_subdirectory().alias())
        if repo is not None and repo.git_url == git_url.without_subdirectory():
            return repo
        return None

    def find_by_lib_key(self, lib_key: str) -> Optional[Repo]:
        alias = self._lib_keys.get(lib_key)
        return self._repos.get(alias) if alias is not None else None

    def clone(self, alias: str, git: GitService, src_dir: Path) -> Repo:
        repo = self.find_by_alias(alias)
        if repo is None:
            raise UnknownSourceError(alias)
        git.clone(repo.git_url, repo.path(src_dir))
        return repo
