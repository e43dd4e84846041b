"""Mounts locally checked-out source trees into the services that use them."""

import logging
import os
from typing import TYPE_CHECKING

from ..exceptions import UnknownLibKeyError
from ..models.compose import ComposeFile
from ..models.config import SourceRegistryKind
from .base import Operation, Plugin, PluginContext

if TYPE_CHECKING:
    from ..core.project import Project

logger = logging.getLogger(__name__)


class SourcesPlugin(Plugin):
    """Mounts sources that are available locally and flagged as mounted.

    A service whose build context is such a source gets the tree (or the
    context's subdirectory of it) mounted at its `io.podforge.srcdir`, and
    builds from the local copy.  `io.podforge.lib.<key>` labels mount the
    library `<key>` at the label's value.
    """

    name = "sources"

    @classmethod
    def is_configured_for(cls, project: "Project") -> bool:
        return project.config.source_registry is SourceRegistryKind.SOURCES

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        if op is not Operation.OUTPUT:
            return

        sources = self.project.sources
        paths = self.project.source_paths
        for service in file.services.values():
            context = service.build_context()
            if context is not None:
                source = sources.find_by_origin(context)
                if source is not None and source.mounted and source.is_available_locally(paths):
                    path = os.path.abspath(source.path(paths))
                    if context.subdirectory:
                        path = os.path.join(path, context.subdirectory)
                    service.add_volume(f"{path}:{service.source_mount_dir()}")
                    service.build.context = path

            for lib_key, mount_as in service.lib_mounts():
                source = sources.find_by_lib_key(lib_key)
                if source is None:
                    raise UnknownLibKeyError(lib_key)
                if source.mounted and source.is_available_locally(paths):
                    path = os.path.abspath(source.path(paths))
                    service.add_volume(f"{path}:{mount_as}")
