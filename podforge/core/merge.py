"""Layering a pod's base file with a target's override file."""

import copy
import logging
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from ..exceptions import CouldNotReadFileError, ServicesAddedInTargetError
from ..models.compose import BuildConfig, ComposeFile, Service

logger = logging.getLogger(__name__)

# Override entries are appended after the base entries.
LIST_FIELDS = frozenset({"volumes", "ports", "extra_hosts", "env_file"})
# Override entries replace base entries with the same key.
MAP_FIELDS = frozenset({"environment", "labels"})


def check_same_services(base: ComposeFile, override: ComposeFile,
                        base_path: Path, override_path: Path) -> None:
    """Make sure `override` only touches services declared in `base`.

    Raises:
        ServicesAddedInTargetError: If the override introduces new services
    """
    introduced = set(override.services) - set(base.services)
    if introduced:
        raise ServicesAddedInTargetError(base_path, override_path, introduced)


def merge_build(base: Optional[BuildConfig], override: BuildConfig) -> BuildConfig:
    if base is None:
        return override.model_copy(deep=True)
    merged = base.model_copy(deep=True)
    for name in override.model_fields_set:
        if name == "args":
            merged.args = {**merged.args, **override.args}
        else:
            setattr(merged, name, copy.deepcopy(getattr(override, name)))
    for key, value in (override.model_extra or {}).items():
        setattr(merged, key, copy.deepcopy(value))
    return merged


def merge_service(base: Service, override: Service) -> Service:
    """Apply one service's override on top of its base definition."""
    merged = base.model_copy(deep=True)
    for name in override.model_fields_set:
        value = getattr(override, name)
        if name in LIST_FIELDS:
            setattr(merged, name, getattr(merged, name) + copy.deepcopy(value))
        elif name in MAP_FIELDS:
            setattr(merged, name, {**getattr(merged, name), **value})
        elif name == "build":
            if value is not None:
                merged.build = merge_build(merged.build, value)
        else:
            setattr(merged, name, copy.deepcopy(value))
    for key, value in (override.model_extra or {}).items():
        setattr(merged, key, copy.deepcopy(value))
    return merged


def merge(base: ComposeFile, override: Optional[ComposeFile],
          base_path: Optional[Path] = None,
          override_path: Optional[Path] = None) -> ComposeFile:
    """Merge a pod's base file with a target's override file.

    The result always contains exactly the services declared in `base`, in
    the same order.  With no override, the result is a copy of `base`.
    `base_path` and `override_path` only name the files in errors.

    Raises:
        ServicesAddedInTargetError: If the override introduces new services
    """
    merged = base.model_copy(deep=True)
    if override is None:
        return merged
    check_same_services(base, override,
                        base_path or Path("<base>"), override_path or Path("<override>"))

    services: Dict[str, Service] = {}
    for name, service in merged.services.items():
        if name in override.services:
            services[name] = merge_service(service, override.services[name])
        else:
            services[name] = service
    merged.services = services
    for key, value in (override.model_extra or {}).items():
        setattr(merged, key, copy.deepcopy(value))
    return merged


def make_standalone(file: ComposeFile, base_dir: Path) -> None:
    """Inline every `env_file` into `environment`, in place.

    Env files are applied in order and explicit `environment` entries win,
    which matches how the compose engine itself resolves them.  Paths are
    relative to `base_dir`.

    Raises:
        CouldNotReadFileError: If an env file does not exist
    """
    for service in file.services.values():
        if not service.env_file:
            continue
        env: Dict[str, Optional[str]] = {}
        for env_file in service.env_file:
            path = Path(base_dir) / env_file
            if not path.is_file():
                raise CouldNotReadFileError(path)
            logger.debug(f"Inlining {path}")
            env.update(dotenv_values(path, interpolate=False))
        env.update(service.environment)
        service.environment = env
        service.env_file = []
