"""The source trees used by a project's services and libraries."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..exceptions import (
    AliasCollisionError,
    CouldNotParseError,
    LibHasRepoSubdirectoryError,
    UnknownSourceError,
)
from ..models.config import LibConfig, load_yaml
from ..models.context import BuildContext
from ..services.git_service import GitService
from .mount_state import MountState
from .pod import Pod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourcePaths:
    """Where source trees live on disk.

    Git sources are checked out under `src_dir`, named by alias.  Directory
    sources are relative to `pods_dir`.
    """

    src_dir: Path
    pods_dir: Path


class Source:
    """A source tree, either a git repository or a local directory."""

    def __init__(self, alias: str, context: BuildContext, mounted: bool = False):
        self.alias = alias
        # Never has a subdirectory; see `BuildContext.without_subdirectory`.
        self.context = context
        self.mounted = mounted

    @property
    def is_git(self) -> bool:
        return self.context.is_git

    def path(self, paths: SourcePaths) -> Path:
        """The local path of this source tree."""
        if self.context.is_git:
            return Path(paths.src_dir) / self.alias
        return Path(paths.pods_dir) / self.context.value

    def is_available_locally(self, paths: SourcePaths) -> bool:
        return self.path(paths).exists()

    def __repr__(self):
        return f"Source({self.alias!r}, {self.context.value!r}, mounted={self.mounted})"


class Sources:
    """Every source tree a project refers to, indexed by alias.

    Two services naming different subdirectories of the same repository
    share a single `Source`.
    """

    def __init__(self, mount_state: Optional[MountState] = None):
        self._sources: Dict[str, Source] = {}
        self._lib_keys: Dict[str, str] = {}
        self.mount_state = mount_state

    @classmethod
    def load(
        cls,
        pods: Sequence[Pod],
        lib_config_path: Optional[Path] = None,
        mount_state: Optional[MountState] = None,
    ) -> "Sources":
        """Collect the build contexts of every pod file and every library.

        Raises:
            AliasCollisionError: If two different origins share an alias
            LibHasRepoSubdirectoryError: If a library names a subdirectory
        """
        sources = cls(mount_state)
        for pod in pods:
            for file in pod.all_files():
                for service in file.services.values():
                    context = service.build_context()
                    if context is not None:
                        sources.add(context)

        if lib_config_path is not None and Path(lib_config_path).exists():
            for lib_key, lib in _load_lib_config(Path(lib_config_path)).items():
                context = BuildContext(lib.context)
                if context.subdirectory:
                    raise LibHasRepoSubdirectoryError(lib_key)
                sources._lib_keys[lib_key] = sources.add(context).alias
        return sources

    def add(self, context: BuildContext) -> Source:
        """Register `context`, or return the existing source for its origin."""
        context = context.without_subdirectory()
        alias = context.alias()
        existing = self._sources.get(alias)
        if existing is not None:
            if existing.context.origin() != context.origin():
                raise AliasCollisionError(alias, existing.context.origin(), context.origin())
            return existing

        mounted = self.mount_state.is_mounted(alias) if self.mount_state else False
        source = Source(alias, context, mounted)
        self._sources[alias] = source
        logger.debug(f"Found source {alias} at {context}")
        return source

    def __iter__(self) -> Iterator[Source]:
        for alias in sorted(self._sources):
            yield self._sources[alias]

    def __len__(self):
        return len(self._sources)

    def find_by_alias(self, alias: str) -> Optional[Source]:
        return self._sources.get(alias)

    def find_by_alias_or_err(self, alias: str) -> Source:
        source = self.find_by_alias(alias)
        if source is None:
            raise UnknownSourceError(alias)
        return source

    def find_by_origin(self, context: Union[BuildContext, str]) -> Optional[Source]:
        """Find the source holding `context`, ignoring any subdirectory."""
        if isinstance(context, str):
            context = BuildContext(context)
        try:
            source = self._sources.get(context.without_subdirectory().alias())
        except CouldNotParseError:
            return None
        if source is not None and source.context.origin() == context.origin():
            return source
        return None

    def find_by_lib_key(self, lib_key: str) -> Optional[Source]:
        alias = self._lib_keys.get(lib_key)
        return self._sources.get(alias) if alias is not None else None

    def lib_keys(self) -> List[str]:
        return sorted(self._lib_keys)

    def set_mounted(self, alias: str, mounted: bool) -> Source:
        """Change whether a source is mounted, and remember it."""
        source = self.find_by_alias_or_err(alias)
        source.mounted = mounted
        if self.mount_state is not None:
            self.mount_state.set_mounted(alias, mounted)
        logger.info(f"{'Mounted' if mounted else 'Unmounted'} {alias}")
        return source

    def clone(self, alias: str, git: GitService, paths: SourcePaths) -> Source:
        """Check out a git source locally and mark it as mounted.

        Raises:
            UnknownSourceError: If there is no source called `alias`
            ConfigurationError: If the source is a directory, not a repository
            GitServiceError: If `git clone` fails; the mount flag is unchanged
        """
        source = self.find_by_alias_or_err(alias)
        if not source.is_git:
            raise CouldNotParseError("git repository", source.context.value)
        git.clone(source.context.git_url, source.path(paths))
        return self.set_mounted(alias, True)


def _load_lib_config(path: Path) -> Dict[str, LibConfig]:
    """Parse `config/sources.yml`: lib key -> `{context: ...}` or a bare string."""
    data = load_yaml(path) or {}
    if not isinstance(data, dict):
        raise CouldNotParseError("library configuration", str(path))
    libs: Dict[str, LibConfig] = {}
    for lib_key, value in data.items():
        if isinstance(value, str):
            value = {"context": value}
        try:
            libs[str(lib_key)] = LibConfig.model_validate(value)
        except ValidationError as e:
            raise CouldNotParseError("library configuration", str(path)) from e
    return libs
