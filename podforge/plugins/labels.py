"""Stamps each service with the target and pod it was generated for."""

from ..core.constants import POD_LABEL, TARGET_LABEL
from ..models.compose import ComposeFile
from .base import Operation, Plugin, PluginContext


class LabelsPlugin(Plugin):
    """Adds `io.podforge.target` and `io.podforge.pod` to every service.

    These labels are how we find a project's containers again later.
    """

    name = "labels"

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        for service in file.services.values():
            service.labels[TARGET_LABEL] = ctx.target.name
            service.labels[POD_LABEL] = ctx.pod.name
