"""Compose file models.

These cover the parts of the `docker-compose.yml` format that podforge
needs to understand.  Any other keys are preserved as-is so that they make
it through merging and output untouched.
"""

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.constants import DEFAULT_SRCDIR, LIB_LABEL_PREFIX, SRCDIR_LABEL
from ..exceptions import CouldNotParseError, CouldNotReadFileError
from .context import BuildContext


def _scalar_to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _key_value_map(value: Any) -> Dict[str, Optional[str]]:
    """Normalize a `KEY=VALUE` list or a mapping into an ordered dict."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return {str(k): _scalar_to_str(v) for k, v in value.items()}
    if isinstance(value, list):
        result: Dict[str, Optional[str]] = {}
        for item in value:
            key, sep, val = str(item).partition("=")
            result[key] = val if sep else None
        return result
    raise ValueError(f"expected a list or a mapping, got {value!r}")


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, Path)):
        return [str(value)]
    return [str(v) for v in value]


class BuildConfig(BaseModel):
    """The `build` section of a service."""

    model_config = ConfigDict(extra="allow")

    context: str = "."
    dockerfile: Optional[str] = None
    args: Dict[str, Optional[str]] = Field(default_factory=dict)

    @field_validator("args", mode="before")
    @classmethod
    def _normalize_args(cls, value):
        return _key_value_map(value)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"context": self.context}
        if self.dockerfile is not None:
            data["dockerfile"] = self.dockerfile
        if self.args:
            data["args"] = dict(self.args)
        data.update(copy.deepcopy(self.model_extra or {}))
        return data


class Service(BaseModel):
    """A single service in a compose file."""

    model_config = ConfigDict(extra="allow")

    image: Optional[str] = None
    build: Optional[BuildConfig] = None
    command: Optional[Union[str, List[str]]] = None
    entrypoint: Optional[Union[str, List[str]]] = None
    env_file: List[str] = Field(default_factory=list)
    environment: Dict[str, Optional[str]] = Field(default_factory=dict)
    volumes: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    ports: List[Union[str, int, Dict[str, Any]]] = Field(default_factory=list)
    extra_hosts: List[str] = Field(default_factory=list)
    labels: Dict[str, str] = Field(default_factory=dict)

    @field_validator("image", mode="before")
    @classmethod
    def _normalize_image(cls, value):
        return _scalar_to_str(value)

    @field_validator("build", mode="before")
    @classmethod
    def _normalize_build(cls, value):
        if isinstance(value, (str, Path)):
            return {"context": str(value)}
        return value

    @field_validator("env_file", mode="before")
    @classmethod
    def _normalize_env_file(cls, value):
        return _string_list(value)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value):
        return _key_value_map(value)

    @field_validator("labels", mode="before")
    @classmethod
    def _normalize_labels(cls, value):
        return {k: v if v is not None else "" for k, v in _key_value_map(value).items()}

    @field_validator("extra_hosts", mode="before")
    @classmethod
    def _normalize_extra_hosts(cls, value):
        if isinstance(value, dict):
            return [f"{host}:{addr}" for host, addr in value.items()]
        return _string_list(value)

    def build_context(self) -> Optional[BuildContext]:
        """The build context of this service, if it has one."""
        if self.build is None:
            return None
        return BuildContext(self.build.context)

    def source_mount_dir(self) -> str:
        """Where this service expects its source code to be mounted."""
        return self.labels.get(SRCDIR_LABEL) or DEFAULT_SRCDIR

    def lib_mounts(self) -> Iterator[Tuple[str, str]]:
        """Yield `(lib_key, container_path)` for each library label."""
        for label, mount_as in self.labels.items():
            if label.startswith(LIB_LABEL_PREFIX):
                yield label[len(LIB_LABEL_PREFIX):], mount_as

    def add_volume(self, volume: str) -> bool:
        """Append a volume unless an identical one is already present."""
        if volume in self.volumes:
            return False
        self.volumes.append(volume)
        return True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None or value == [] or value == {}:
                continue
            if name == "build":
                data[name] = value.to_dict()
            else:
                data[name] = copy.deepcopy(value)
        data.update(copy.deepcopy(self.model_extra or {}))
        return data


class ComposeFile(BaseModel):
    """A whole compose file: a named collection of services."""

    model_config = ConfigDict(extra="allow")

    version: Optional[str] = None
    services: Dict[str, Service] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def _normalize_version(cls, value):
        return _scalar_to_str(value)

    @field_validator("services", mode="before")
    @classmethod
    def _normalize_services(cls, value):
        if value is None:
            return {}
        return {name: (body if body is not None else {}) for name, body in value.items()}

    @classmethod
    def from_yaml(cls, text: str, source: str = "<string>") -> "ComposeFile":
        """Parse a compose file from YAML text.

        Raises:
            CouldNotParseError: If the YAML is malformed or does not look
                like a compose file
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CouldNotParseError("compose file", source) from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise CouldNotParseError("compose file", source)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise CouldNotParseError("compose file", source) from e

    @classmethod
    def read_from_path(cls, path: Path) -> "ComposeFile":
        try:
            text = Path(path).read_text()
        except OSError as e:
            raise CouldNotReadFileError(Path(path)) from e
        return cls.from_yaml(text, str(path))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.version is not None:
            data["version"] = self.version
        data["services"] = {name: svc.to_dict() for name, svc in self.services.items()}
        data.update(copy.deepcopy(self.model_extra or {}))
        return data

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)

    def write_to_path(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_yaml())


@dataclass
class VolumeMount:
    """A short-syntax volume entry: `[host:]container[:mode]`."""

    container: str
    host: Optional[str] = None
    mode: Optional[str] = None

    @classmethod
    def parse(cls, spec: str) -> "VolumeMount":
        parts = spec.split(":")
        if len(parts) == 1:
            return cls(container=parts[0])
        if len(parts) == 2:
            return cls(host=parts[0], container=parts[1])
        if len(parts) == 3:
            return cls(host=parts[0], container=parts[1], mode=parts[2])
        raise CouldNotParseError("volume mount", spec)

    @property
    def is_host_path(self) -> bool:
        """Is `host` a path on the host, rather than a named volume?"""
        return self.host is not None and self.host.startswith(("/", ".", "~"))

    def __str__(self):
        parts = [self.host] if self.host is not None else []
        parts.append(self.container)
        if self.mode:
            parts.append(self.mode)
        return ":".join(parts)
