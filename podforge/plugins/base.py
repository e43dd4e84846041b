"""The interface shared by every transform plugin."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..models.compose import ComposeFile
from ..models.target import Target

if TYPE_CHECKING:
    from ..core.pod import Pod
    from ..core.project import Project


class Operation(Enum):
    """What are we generating compose files for?"""
    # Local use with the compose engine, on this machine.
    OUTPUT = "output"
    # Hand-off to some other tool; nothing may depend on this machine.
    EXPORT = "export"


@dataclass
class PluginContext:
    """Everything a plugin may look at while transforming one pod."""

    project: "Project"
    pod: "Pod"
    # The command the output is being generated for, such as `up` or `build`.
    subcommand: str = "output"

    @property
    def target(self) -> Target:
        return self.project.target


class Plugin(ABC):
    """A transform applied to every pod's merged compose file.

    Plugins modify the file in place, and must leave an already
    transformed file unchanged.
    """

    name: str = ""

    def __init__(self, project: "Project"):
        self.project = project

    @classmethod
    def is_configured_for(cls, project: "Project") -> bool:
        """Should this plugin run at all for `project`?"""
        return True

    @abstractmethod
    def transform(self, op: Operation, ctx: PluginContext, file: ComposeFile) -> None:
        """Rewrite `file` for `op`."""
