"""Makes host paths absolute so generated files work from any directory."""

import os
from pathlib import Path
from typing import Any, Dict

from ..models.compose import ComposeFile, VolumeMount
from .base import Operation, Plugin, PluginContext


def absolutize(host: str, base_dir: Path) -> str:
    """Anchor a relative host path at `base_dir`, and `~/` at `$HOME`."""
    if host == "~" or host.startswith("~/"):
        return os.path.normpath(os.path.expanduser(host))
    if os.path.isabs(host):
        return host
    return os.path.normpath(os.path.abspath(os.path.join(base_dir, host)))


class AbsPathPlugin(Plugin):
    """Absolutizes bind-mount sources and local build contexts.

    Only for OUTPUT: absolute paths on this machine mean nothing anywhere
    else.  Named volumes are left alone.
    """

    name = "abs_path"

    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        if op is not Operation.OUTPUT:
            return
        base_dir = self.project.pods_dir
        for service in file.services.values():
            if service.build is not None:
                context = service.build_context()
                if not context.is_git:
                    service.build.context = absolutize(service.build.context, base_dir)

            volumes = []
            for volume in service.volumes:
                if isinstance(volume, dict):
                    volumes.append(self._long_syntax(volume, base_dir))
                    continue
                mount = VolumeMount.parse(volume)
                if mount.is_host_path:
                    mount.host = absolutize(mount.host, base_dir)
                volumes.append(str(mount))
            service.volumes = volumes

    @staticmethod
    def _long_syntax(volume: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
        if volume.get("type") != "bind" or not volume.get("source"):
            return volume
        volume = dict(volume)
        volume["source"] = absolutize(str(volume["source"]), base_dir)
        return volume
