"""A podforge project: a directory with a `pods/` subdirectory."""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from packaging.specifiers import InvalidSpecifier, SpecifierSet

from ..exceptions import (
    ConfigurationError,
    CouldNotParseError,
    MismatchedVersionError,
    OutputDirectoryExistsError,
    UnknownPodOrServiceError,
    UnknownServiceError,
    UnknownTargetError,
)
from ..models.compose import ComposeFile
from ..models.config import ProjectConfig, load_model
from ..models.pod import PodType
from ..models.target import Target
from ..plugins import Operation, PluginContext, PluginManager
from .constants import (
    CONFIG_DIR_NAME,
    DATA_DIR_NAME,
    DEFAULT_TARGET,
    EXPORT_TASKS_DIR_NAME,
    LIBRARIES_CONFIG_FILE_NAME,
    MOUNT_STATE_FILE_NAME,
    OUTPUT_PODS_DIR_NAME,
    POD_FILE_SUFFIX,
    POD_METADATA_SUFFIX,
    PODS_DIR_NAME,
    PROJECT_CONFIG_FILE_NAME,
    SOURCES_CONFIG_FILE_NAME,
    SRC_DIR_NAME,
    TARGETS_DIR_NAME,
    VERSION,
)
from .default_tags import DefaultTags
from .merge import make_standalone
from .mount_state import MountState
from .pod import Pod
from .repos import Repos
from .service_locations import ServiceLocations
from .sources import SourcePaths, Sources

logger = logging.getLogger(__name__)


def find_project(start_dir: Optional[Path] = None) -> Path:
    """Walk up from `start_dir` to the first directory containing `pods/`.

    Raises:
        ConfigurationError: If there is no such directory
    """
    start_dir = Path(start_dir or Path.cwd()).absolute()
    for candidate in [start_dir, *start_dir.parents]:
        if (candidate / PODS_DIR_NAME).is_dir():
            return candidate
    raise ConfigurationError(
        f"could not find a `{PODS_DIR_NAME}` directory in {start_dir} or its parents"
    )


def check_version(config: ProjectConfig, path: Path, version: str = VERSION) -> None:
    """Make sure we satisfy the project's `podforge_version`, if it has one."""
    if config.podforge_version is None:
        return
    try:
        specifier = SpecifierSet(config.podforge_version)
    except InvalidSpecifier as e:
        raise CouldNotParseError("version requirement", config.podforge_version) from e
    if not specifier.contains(version, prereleases=True):
        raise MismatchedVersionError(path, config.podforge_version, version)


class Project:
    """Everything we know about a project, loaded from disk.

    Args:
        root_dir: The directory containing `pods/`
        target_name: The target to generate files for
        name: The project name passed to the compose engine (defaults to
            the name of `root_dir`)
        default_tags: Tags for images which don't specify one
    """

    def __init__(
        self,
        root_dir: Path,
        target_name: str = DEFAULT_TARGET,
        name: Optional[str] = None,
        default_tags: Optional[DefaultTags] = None,
    ):
        self.root_dir = Path(root_dir).absolute()
        self.name = name or self.root_dir.name
        self.pods_dir = self.root_dir / PODS_DIR_NAME
        self.config_dir = self.root_dir / CONFIG_DIR_NAME
        self.src_dir = self.root_dir / SRC_DIR_NAME
        self.data_dir = self.root_dir / DATA_DIR_NAME
        self.output_pods_dir = self.data_dir / OUTPUT_PODS_DIR_NAME
        self.default_tags = default_tags

        config_path = self.config_dir / PROJECT_CONFIG_FILE_NAME
        self.config = load_model(ProjectConfig, config_path) if config_path.exists() \
            else ProjectConfig()
        check_version(self.config, config_path)

        self.targets = self._find_targets()
        self.target = self.target_or_err(target_name)

        self.pods = self._find_pods()
        self.service_locations = ServiceLocations(self.pods)

        self.mount_state = MountState(self.data_dir / MOUNT_STATE_FILE_NAME)
        self.sources = Sources.load(
            self.pods, self.config_dir / SOURCES_CONFIG_FILE_NAME, self.mount_state
        )
        self.repos = Repos.load(self.pods, self.config_dir / LIBRARIES_CONFIG_FILE_NAME)

        self.plugins = PluginManager(self)
        logger.debug(f"Loaded project {self.name} for target {self.target} "
                     f"with plugins {self.plugins.names}")

    @classmethod
    def from_current_dir(cls, **kwargs) -> "Project":
        return cls(find_project(), **kwargs)

    def _find_targets(self) -> List[Target]:
        targets_dir = self.pods_dir / TARGETS_DIR_NAME
        if not targets_dir.is_dir():
            return []
        return sorted(Target(entry.name) for entry in targets_dir.iterdir() if entry.is_dir())

    def _find_pods(self) -> List[Pod]:
        names = sorted(
            path.name[: -len(POD_FILE_SUFFIX)]
            for path in self.pods_dir.glob(f"*{POD_FILE_SUFFIX}")
            if path.is_file() and not path.name.endswith(POD_METADATA_SUFFIX)
        )
        return [Pod(self.pods_dir, name, self.targets) for name in names]

    @property
    def source_paths(self) -> SourcePaths:
        return SourcePaths(src_dir=self.src_dir, pods_dir=self.pods_dir)

    def target_or_err(self, name: str) -> Target:
        target = Target(name)
        if target not in self.targets:
            raise UnknownTargetError(name)
        return target

    def pod(self, name: str) -> Optional[Pod]:
        for pod in self.pods:
            if pod.name == name:
                return pod
        return None

    def pod_or_err(self, name: str) -> Pod:
        pod = self.pod(name)
        if pod is None:
            raise UnknownPodOrServiceError(name)
        return pod

    def service(self, name: str) -> Optional[Tuple[Pod, str]]:
        """Look up a service as `pod/service`, or by its name if unique."""
        location = self.service_locations.find(name)
        if location is None:
            return None
        pod_name, service_name = location
        return self.pod_or_err(pod_name), service_name

    def service_or_err(self, name: str) -> Tuple[Pod, str]:
        found = self.service(name)
        if found is None:
            raise UnknownServiceError(name)
        return found

    def transformed_file(self, pod: Pod, op: Operation, subcommand: str = "output") -> ComposeFile:
        """Merge, inline env files and run every plugin for one pod."""
        file = pod.merged_file(self.target)
        make_standalone(file, self.pods_dir)
        self.plugins.transform(op, PluginContext(self, pod, subcommand), file)
        return file

    def _write_pods(self, op: Operation, out_dir: Path, subcommand: str) -> List[Path]:
        written = []
        for pod in self.pods:
            if op is Operation.EXPORT and not pod.enabled_in(self.target):
                logger.debug(f"Skipping pod {pod.name}, not enabled in {self.target}")
                continue

            file_name = f"{pod.name}{POD_FILE_SUFFIX}"
            if op is Operation.EXPORT and pod.pod_type is PodType.TASK:
                out_path = out_dir / EXPORT_TASKS_DIR_NAME / file_name
            else:
                out_path = out_dir / file_name

            file = self.transformed_file(pod, op, subcommand)
            logger.debug(f"Outputting {out_path}")
            file.write_to_path(out_path)
            written.append(out_path)
        return written

    def output(self, subcommand: str = "output") -> List[Path]:
        """Regenerate `.podforge/pods/` for local use by the compose engine.

        Any previous output is deleted first.
        """
        if self.output_pods_dir.exists():
            shutil.rmtree(self.output_pods_dir)
        self.output_pods_dir.mkdir(parents=True)
        return self._write_pods(Operation.OUTPUT, self.output_pods_dir, subcommand)

    def export(self, export_dir: Path) -> List[Path]:
        """Write standalone compose files to `export_dir`, for use elsewhere.

        Raises:
            OutputDirectoryExistsError: If `export_dir` already exists
        """
        export_dir = Path(export_dir)
        if export_dir.exists():
            raise OutputDirectoryExistsError(export_dir)
        if self.default_tags is None:
            logger.warning("Exporting project without --default-tags")
        os.makedirs(export_dir)
        return self._write_pods(Operation.EXPORT, export_dir, "export")
