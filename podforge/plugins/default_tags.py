"""Pins untagged images to the tags listed in a default-tags file."""

import logging
from typing import TYPE_CHECKING

from ..models.compose import ComposeFile
from .base import Operation, Plugin, PluginContext

if TYPE_CHECKING:
    from ..core.project import Project

logger = logging.getLogger(__name__)


class DefaultTagsPlugin(Plugin):
    name = "default_tags"

    @classmethod
    def is_configured_for(cls, project: "Project") -> bool:
        return project.default_tags is not None

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        default_tags = self.project.default_tags
        for service in file.services.values():
            if service.image:
                service.image = default_tags.default_for(service.image)
