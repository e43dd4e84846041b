"""Configuration models for the files under a project's `config/` directory."""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Literal, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import CouldNotParseError, CouldNotReadFileError
from .compose import _scalar_to_str

ModelT = TypeVar("ModelT", bound=BaseModel)


def _env_values(value):
    """Stringify scalar values, so `PORT: 5432` and `DEBUG: true` are accepted."""
    if not isinstance(value, dict):
        return value
    return {k: v if isinstance(v, (dict, list)) else _scalar_to_str(v)
            for k, v in value.items()}


def _service_env_values(value):
    """Like `_env_values`, for pod -> service -> vars maps."""
    if not isinstance(value, dict):
        return value
    return {
        pod: {service: _env_values(env) for service, env in services.items()}
        if isinstance(services, dict) else services
        for pod, services in value.items()
    }


def load_yaml(path: Path) -> object:
    """Read a YAML file, mapping failures onto our configuration errors."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise CouldNotReadFileError(Path(path)) from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CouldNotParseError("YAML", str(path)) from e


def load_model(model: Type[ModelT], path: Path) -> ModelT:
    """Read a YAML file and validate it against a pydantic model."""
    data = load_yaml(path)
    try:
        return model.model_validate(data if data is not None else {})
    except ValidationError as e:
        raise CouldNotParseError(model.__name__, str(path)) from e


class SourceRegistryKind(str, Enum):
    SOURCES = "sources"
    REPOS = "repos"


class ProjectConfig(BaseModel):
    """Contents of `config/project.yml`."""

    model_config = ConfigDict(extra="forbid")

    # A PEP 440 specifier such as ">=0.1,<0.2".
    podforge_version: Optional[str] = None
    source_registry: SourceRegistryKind = SourceRegistryKind.SOURCES


class LibConfig(BaseModel):
    """A single entry in `config/sources.yml`."""

    model_config = ConfigDict(extra="forbid")

    context: str


class TargetSecrets(BaseModel):
    model_config = ConfigDict(extra="forbid")

    common: Dict[str, str] = Field(default_factory=dict)
    pods: Dict[str, Dict[str, Dict[str, str]]] = Field(default_factory=dict)

    @field_validator("common", mode="before")
    @classmethod
    def _normalize_common(cls, value):
        return _env_values(value)

    @field_validator("pods", mode="before")
    @classmethod
    def _normalize_pods(cls, value):
        return _service_env_values(value)


class SecretsConfig(BaseModel):
    """Contents of `config/secrets.yml`.

    `common` applies to every service; `pods` maps pod -> service -> vars;
    `targets` holds the same two sections per target.
    """

    model_config = ConfigDict(extra="forbid")

    common: Dict[str, str] = Field(default_factory=dict)
    pods: Dict[str, Dict[str, Dict[str, str]]] = Field(default_factory=dict)
    targets: Dict[str, TargetSecrets] = Field(default_factory=dict)

    @field_validator("common", mode="before")
    @classmethod
    def _normalize_common(cls, value):
        return _env_values(value)

    @field_validator("pods", mode="before")
    @classmethod
    def _normalize_pods(cls, value):
        return _service_env_values(value)


class VaultServiceConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    policies: List[str] = Field(default_factory=list)


class VaultConfig(BaseModel):
    """Contents of `config/vault.yml`."""

    model_config = ConfigDict(extra="forbid")

    enable_in_targets: Optional[List[str]] = None
    auth_type: Literal["token"] = "token"
    extra_environment: Dict[str, str] = Field(default_factory=dict)
    default_ttl: int
    default_policies: List[str] = Field(default_factory=list)
    pods: Dict[str, Dict[str, VaultServiceConfig]] = Field(default_factory=dict)

    @field_validator("extra_environment", mode="before")
    @classmethod
    def _normalize_extra_environment(cls, value):
        return _env_values(value)
