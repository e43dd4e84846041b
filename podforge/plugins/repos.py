"""Mounts cloned git repositories, for projects still using the repos registry."""

import os
from typing import TYPE_CHECKING

from ..models.compose import ComposeFile
from ..models.config import SourceRegistryKind
from .base import Operation, Plugin, PluginContext

if TYPE_CHECKING:
    from ..core.project import Project


class ReposPlugin(Plugin):
    """Like `SourcesPlugin`, but any cloned repository is mounted.

    Only build contexts are handled; library labels are ignored.
    """

    name = "repos"

    @classmethod
    def is_configured_for(cls, project: "Project") -> bool:
        return project.config.source_registry is SourceRegistryKind.REPOS

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        if op is not Operation.OUTPUT:
            return

        src_dir = self.project.src_dir
        for service in file.services.values():
            context = service.build_context()
            if context is None or context.git_url is None:
                continue
            repo = self.project.repos.find_by_git_url(context.git_url)
            if repo is None or not repo.is_cloned(src_dir):
                continue
            path = os.path.abspath(repo.path(src_dir))
            if context.subdirectory:
                path = os.path.join(path, context.subdirectory)
            service.add_volume(f"{path}:{service.source_mount_dir()}")
            service.build.context = path
