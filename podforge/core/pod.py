"""A single pod in a project."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from ..exceptions import UnknownServiceError, UnknownTargetError
from ..models.compose import ComposeFile, Service
from ..models.config import load_model
from ..models.pod import PodConfig, PodType
from ..models.target import Target
from .constants import (
    COMMON_ENV_FILE_NAME,
    POD_FILE_SUFFIX,
    POD_METADATA_SUFFIX,
    TARGETS_DIR_NAME,
)
from .merge import check_same_services, merge

logger = logging.getLogger(__name__)


class PodFile:
    """A compose file belonging to a pod, with its path relative to `pods/`.

    If the file doesn't exist on disk, `file` is an empty `ComposeFile`.
    """

    def __init__(self, base_dir: Path, rel_path: Path):
        self.rel_path = rel_path
        path = base_dir / rel_path
        self.exists = path.exists()
        if self.exists:
            logger.debug(f"Parsing {path}")
            self.file = ComposeFile.read_from_path(path)
        else:
            self.file = ComposeFile()

    def add_common_env(self, base_dir: Path, service_names: Iterable[str]) -> None:
        """Prepend the `common.env` next to this file to each service's env files.

        Services from `service_names` that this file doesn't mention are
        added as empty entries first, so a target-wide `common.env` reaches
        every service of the pod.
        """
        env_rel_path = self.rel_path.parent / COMMON_ENV_FILE_NAME
        if not (base_dir / env_rel_path).exists():
            return
        for name in service_names:
            if name not in self.file.services:
                self.file.services[name] = Service()
        for service in self.file.services.values():
            service.env_file = [env_rel_path.as_posix()] + service.env_file


class Pod:
    """A pod, specified by `pods/<name>.yml` plus optional target overrides.

    Paths inside any of the pod's files are relative to `base_dir`
    (normally `<project>/pods`), including paths in override files.
    """

    def __init__(self, base_dir: Path, name: str, targets: Sequence[Target]):
        self.base_dir = Path(base_dir)
        self.name = name

        config_path = self.base_dir / f"{name}{POD_METADATA_SUFFIX}"
        self.config = load_model(PodConfig, config_path) if config_path.exists() else PodConfig()

        self._base = PodFile(self.base_dir, Path(f"{name}{POD_FILE_SUFFIX}"))
        self.service_names: List[str] = list(self._base.file.services)

        self._overrides: Dict[Target, PodFile] = {}
        for target in targets:
            rel_path = Path(TARGETS_DIR_NAME) / target.name / f"{name}{POD_FILE_SUFFIX}"
            override = PodFile(self.base_dir, rel_path)
            check_same_services(self._base.file, override.file,
                                self._base.rel_path, override.rel_path)
            override.add_common_env(self.base_dir, self.service_names)
            self._overrides[target] = override

        self._base.add_common_env(self.base_dir, self.service_names)

    @property
    def pod_type(self) -> PodType:
        return self.config.pod_type or PodType.SERVICE

    def enabled_in(self, target: Target) -> bool:
        return target.is_enabled_by(self.config.enable_in_targets)

    @property
    def rel_path(self) -> Path:
        """Path to the base file, relative to `base_dir`."""
        return self._base.rel_path

    @property
    def file(self) -> ComposeFile:
        """The base file.  Copy it before changing it."""
        return self._base.file

    def _override(self, target: Target) -> PodFile:
        try:
            return self._overrides[target]
        except KeyError:
            raise UnknownTargetError(target.name) from None

    def target_rel_path(self, target: Target) -> Path:
        return self._override(target).rel_path

    def target_file(self, target: Target) -> Optional[ComposeFile]:
        """The override file for `target`, or None if there isn't one."""
        override = self._override(target)
        if not override.exists and not override.file.services:
            return None
        return override.file

    def merged_file(self, target: Target) -> ComposeFile:
        """The base file and the target's override merged into one."""
        logger.debug(f"Merging pod {self.name} with target {target.name}")
        return merge(self.file, self.target_file(target),
                     self.rel_path, self.target_rel_path(target))

    def all_files(self) -> Iterator[ComposeFile]:
        """The base file followed by every override file."""
        yield self.file
        for override in self._overrides.values():
            yield override.file

    def service(self, target: Target, name: str) -> Optional[Service]:
        return self.merged_file(target).services.get(name)

    def service_or_err(self, target: Target, name: str) -> Service:
        service = self.service(target, name)
        if service is None:
            raise UnknownServiceError(name)
        return service

    def __repr__(self):
        return f"Pod({self.name!r})"
