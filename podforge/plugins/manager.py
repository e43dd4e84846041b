"""Runs the transform plugins, in order, over a compose file."""

import logging
from typing import TYPE_CHECKING, List, Sequence, Type

from ..exceptions import PluginFailedError
from ..models.compose import ComposeFile
from .abs_path import AbsPathPlugin
from .base import Operation, Plugin, PluginContext
from .default_tags import DefaultTagsPlugin
from .host_dns import HostDnsPlugin
from .labels import LabelsPlugin
from .remove_build import RemoveBuildPlugin
from .repos import ReposPlugin
from .secrets import SecretsPlugin
from .sources import SourcesPlugin
from .vault import VaultPlugin

if TYPE_CHECKING:
    from ..core.project import Project

logger = logging.getLogger(__name__)

# Order matters: later plugins see the output of earlier ones.
TRANSFORM_PLUGINS: Sequence[Type[Plugin]] = (
    LabelsPlugin,
    SecretsPlugin,
    VaultPlugin,
    DefaultTagsPlugin,
    SourcesPlugin,
    ReposPlugin,
    AbsPathPlugin,
    HostDnsPlugin,
    RemoveBuildPlugin,
)


class PluginManager:
    """The plugins configured for a particular project."""

    def __init__(self, project: "Project",
                 plugin_classes: Sequence[Type[Plugin]] = TRANSFORM_PLUGINS):
        self.plugins: List[Plugin] = []
        for plugin_class in plugin_classes:
            if not plugin_class.is_configured_for(project):
                logger.debug(f"Plugin {plugin_class.name} is not configured, skipping")
                continue
            self.plugins.append(plugin_class(project))

    @property
    def names(self) -> List[str]:
        return [plugin.name for plugin in self.plugins]

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        """Apply every plugin to `file`, in place.

        Raises:
            PluginFailedError: If a plugin raises, with the original
                exception as its cause
        """
        for plugin in self.plugins:
            logger.debug(f"Transforming {ctx.pod.name} with plugin {plugin.name}")
            try:
                plugin.transform(op, ctx, file)
            except Exception as e:
                raise PluginFailedError(plugin.name, e) from e
