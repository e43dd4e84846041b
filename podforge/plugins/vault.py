"""Issues each service its own Vault token.

Configured by `config/vault.yml`.  Policy names and extra environment
values may use `$PROJECT`, `$TARGET`, `$POD` and `$SERVICE`.  To generate
tokens, set `VAULT_ADDR` and `VAULT_MASTER_TOKEN` in the environment.
"""

import logging
import os
from pathlib import Path
from string import Template
from typing import TYPE_CHECKING, Dict, List, Optional

import httpx

from ..core.constants import VAULT_CONFIG_FILE_NAME
from ..exceptions import VaultError
from ..models.compose import ComposeFile
from ..models.config import VaultConfig, load_model
from .base import Operation, Plugin, PluginContext

if TYPE_CHECKING:
    from ..core.project import Project

logger = logging.getLogger(__name__)

VAULT_ADDR_VAR = "VAULT_ADDR"
VAULT_TOKEN_VAR = "VAULT_TOKEN"
VAULT_MASTER_TOKEN_VAR = "VAULT_MASTER_TOKEN"

REQUEST_TIMEOUT = 10.0  # seconds


def _config_path(project: "Project") -> Path:
    return project.config_dir / VAULT_CONFIG_FILE_NAME


class VaultClient:
    """Just enough of the Vault HTTP API to create tokens."""

    def __init__(self, address: str, token: str, http_client: Optional[httpx.Client] = None):
        self.address = address.rstrip("/")
        self.token = token
        self.http_client = http_client or httpx.Client(timeout=REQUEST_TIMEOUT)

    def create_token(self, display_name: str, policies: List[str], ttl: int) -> str:
        """Create a child token and return its `client_token`.

        Raises:
            VaultError: If the request fails or the reply has no token
        """
        url = f"{self.address}/v1/auth/token/create"
        body = {
            "display_name": display_name,
            "policies": policies,
            "ttl": f"{ttl}s",
        }
        try:
            response = self.http_client.post(url, json=body, headers={"X-Vault-Token": self.token})
            response.raise_for_status()
            return response.json()["auth"]["client_token"]
        except httpx.HTTPError as e:
            raise VaultError(self.address, str(e)) from e
        except (ValueError, KeyError, TypeError) as e:
            raise VaultError(self.address, f"unexpected response: {e}") from e


class VaultPlugin(Plugin):
    """Adds `VAULT_ADDR` and a fresh `VAULT_TOKEN` to each service.

    Tokens are only generated for OUTPUT.  Exported files get `VAULT_ADDR`
    and the extra environment, and whatever deploys them is expected to
    supply the token.
    """

    name = "vault"

    def __init__(self, project: "Project", http_client: Optional[httpx.Client] = None):
        super().__init__(project)
        self.config = load_model(VaultConfig, _config_path(project))
        self.http_client = http_client
        self._client: Optional[VaultClient] = None

    @classmethod
    def is_configured_for(cls, project: "Project") -> bool:
        return _config_path(project).exists()

    def _vault_client(self) -> VaultClient:
        if self._client is None:
            address = os.environ.get(VAULT_ADDR_VAR)
            token = os.environ.get(VAULT_MASTER_TOKEN_VAR)
            if not address or not token:
                raise VaultError(
                    address or "<unset>",
                    f"{VAULT_ADDR_VAR} and {VAULT_MASTER_TOKEN_VAR} must both be set",
                )
            self._client = VaultClient(address, token, self.http_client)
        return self._client

    def _vault_addr(self) -> str:
        address = os.environ.get(VAULT_ADDR_VAR)
        if not address:
            raise VaultError("<unset>", f"{VAULT_ADDR_VAR} must be set")
        return address

    def policies_for(self, pod_name: str, service_name: str) -> List[str]:
        policies = list(self.config.default_policies)
        service_config = self.config.pods.get(pod_name, {}).get(service_name)
        if service_config is not None:
            policies.extend(service_config.policies)
        return policies

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        if not ctx.target.is_enabled_by(self.config.enable_in_targets):
            return

        address = self._vault_addr()
        for service_name, service in file.services.items():
            variables = {
                "PROJECT": self.project.name,
                "TARGET": ctx.target.name,
                "POD": ctx.pod.name,
                "SERVICE": service_name,
            }

            env: Dict[str, str] = {VAULT_ADDR_VAR: address}
            for key, value in self.config.extra_environment.items():
                env[key] = Template(value).safe_substitute(variables)
            service.environment.update(env)

            if op is not Operation.OUTPUT or service.environment.get(VAULT_TOKEN_VAR):
                continue

            policies = [Template(p).safe_substitute(variables) for p in
                        self.policies_for(ctx.pod.name, service_name)]
            display_name = f"{self.project.name}_{ctx.target.name}_{ctx.pod.name}_{service_name}"
            logger.debug(f"Generating Vault token for {display_name} with policies {policies}")
            token = self._vault_client().create_token(display_name, policies, self.config.default_ttl)
            service.environment[VAULT_TOKEN_VAR] = token
