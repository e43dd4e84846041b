"""Injects secrets from `config/secrets.yml` into each service's environment."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict

from ..core.constants import SECRETS_CONFIG_FILE_NAME
from ..models.compose import ComposeFile
from ..models.config import SecretsConfig, load_model
from .base import Operation, Plugin, PluginContext

if TYPE_CHECKING:
    from ..core.project import Project

logger = logging.getLogger(__name__)


def _config_path(project: "Project") -> Path:
    return project.config_dir / SECRETS_CONFIG_FILE_NAME


class SecretsPlugin(Plugin):
    """Layers secrets onto every service.

    Later layers win: `common`, then `targets.<target>.common`, then
    `pods.<pod>.<service>`, then `targets.<target>.pods.<pod>.<service>`.
    Secrets override any environment variable of the same name.
    """

    name = "secrets"

    def __init__(self, project: "Project"):
        super().__init__(project)
        self.config = load_model(SecretsConfig, _config_path(project))

    @classmethod
    def is_configured_for(cls, project: "Project") -> bool:
        path = _config_path(project)
        if not path.exists():
            logger.warning(f"No {path}, not injecting secrets")
            return False
        return True

    def secrets_for(self, target_name: str, pod_name: str, service_name: str) -> Dict[str, str]:
        """All the secrets for one service, with later layers applied."""
        secrets: Dict[str, str] = {}
        target = self.config.targets.get(target_name)
        secrets.update(self.config.common)
        if target is not None:
            secrets.update(target.common)
        secrets.update(self.config.pods.get(pod_name, {}).get(service_name, {}))
        if target is not None:
            secrets.update(target.pods.get(pod_name, {}).get(service_name, {}))
        return secrets

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        for service_name, service in file.services.items():
            secrets = self.secrets_for(ctx.target.name, ctx.pod.name, service_name)
            service.environment.update(secrets)
