"""Exceptions raised while loading and transforming a project."""

from pathlib import Path
from typing import Iterable, Optional


class PodforgeError(Exception):
    """Base exception for all podforge errors."""

    pass


class ConfigurationError(PodforgeError):
    """A project's configuration files are invalid or inconsistent."""

    pass


class CouldNotParseError(ConfigurationError):
    """Exception raised when a value or file cannot be parsed."""

    def __init__(self, parsing_as: str, input: str):
        self.parsing_as = parsing_as
        self.input = input
        super().__init__(f"failed to parse '{input}' as {parsing_as}")


class CouldNotReadFileError(ConfigurationError):
    """Exception raised when a file cannot be read."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"could not read '{path}'")


class UnknownPodOrServiceError(ConfigurationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown pod or service '{name}'")


class UnknownServiceError(ConfigurationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown service '{name}'")


class UnknownSourceError(ConfigurationError):
    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(
            f"unknown short alias '{alias}' for source tree (try `podforge source ls`)"
        )


class UnknownTargetError(ConfigurationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown target '{name}'")


class UnknownLibKeyError(ConfigurationError):
    def __init__(self, lib_key: str):
        self.lib_key = lib_key
        super().__init__(f"no library '{lib_key}' defined in `config/sources.yml`")


class LibHasRepoSubdirectoryError(ConfigurationError):
    def __init__(self, lib_key: str):
        self.lib_key = lib_key
        super().__init__(
            f"library '{lib_key}' may not specify a subdirectory in its git URL"
        )


class ServicesAddedInTargetError(ConfigurationError):
    """An override file declares services that its base file does not."""

    def __init__(self, base: Path, target: Path, names: Iterable[str]):
        self.base = base
        self.target = target
        self.names = sorted(names)
        super().__init__(
            f"services {self.names} present in {target} but not in {base}"
        )


class AliasCollisionError(ConfigurationError):
    """Two different origins would be checked out under the same alias."""

    def __init__(self, alias: str, first: str, second: str):
        self.alias = alias
        self.first = first
        self.second = second
        super().__init__(f"{first} and {second} would both alias to {alias}")


class MismatchedVersionError(ConfigurationError):
    def __init__(self, path: Path, requirement: str, version: str):
        self.requirement = requirement
        super().__init__(
            f"{path} specifies podforge_version {requirement}, but you have {version}"
        )


class OutputDirectoryExistsError(ConfigurationError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"output directory {path} already exists (please delete)")


class PluginFailedError(PodforgeError):
    """A transform plugin raised while rewriting a pod."""

    def __init__(self, plugin_name: str, cause: Optional[BaseException] = None):
        self.plugin_name = plugin_name
        message = f"plugin '{plugin_name}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class RuntimeStateError(PodforgeError):
    """The container engine could not be queried for the project's state."""

    def __init__(self):
        super().__init__("error getting the project's state from Docker")


class ReadinessTimeoutError(PodforgeError):
    def __init__(self, pod_name: str):
        self.pod_name = pod_name
        super().__init__(f"timed out waiting for pod '{pod_name}' to start serving")


class ReadinessCancelledError(PodforgeError):
    def __init__(self, pod_name: str):
        self.pod_name = pod_name
        super().__init__(f"stopped waiting for pod '{pod_name}'")


class VaultError(PodforgeError):
    def __init__(self, address: str, detail: str = ""):
        self.address = address
        message = f"an error occurred talking to the Vault server at {address}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
