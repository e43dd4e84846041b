"""Models for podforge."""

from .compose import BuildConfig, ComposeFile, Service, VolumeMount
from .config import ProjectConfig, SecretsConfig, VaultConfig
from .context import BuildContext, GitUrl
from .pod import PodConfig, PodType
from .runtime import ContainerInfo, ContainerStatus, StatusKind
from .target import Target

__all__ = [
    'BuildConfig',
    'ComposeFile',
    'Service',
    'VolumeMount',
    'ProjectConfig',
    'SecretsConfig',
    'VaultConfig',
    'BuildContext',
    'GitUrl',
    'PodConfig',
    'PodType',
    'ContainerInfo',
    'ContainerStatus',
    'StatusKind',
    'Target',
]
