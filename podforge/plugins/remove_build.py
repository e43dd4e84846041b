"""Drops `build` sections unless we're actually building."""

from ..models.compose import ComposeFile
from .base import Operation, Plugin, PluginContext

BUILD_SUBCOMMAND = "build"


class RemoveBuildPlugin(Plugin):
    """Keeps the compose engine from rebuilding images behind our back."""

    name = "remove_build"

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        if ctx.subcommand == BUILD_SUBCOMMAND:
            return
        for service in file.services.values():
            service.build = None
