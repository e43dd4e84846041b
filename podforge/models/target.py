"""Targets modify a pod for use in a specific environment."""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import TEST_TARGET

_INVALID_PROJECT_CHARS = re.compile(r"[^a-z0-9_-]")


@dataclass(frozen=True, order=True)
class Target:
    """A deployment environment such as `development`, `test` or `production`.

    Deliberately a thin wrapper around `name` so it can be used as a
    dictionary key.
    """

    name: str

    def is_enabled_by(self, enable_in_targets: Optional[Sequence[str]]) -> bool:
        """Should a pod or plugin with this `enable_in_targets` list run here?

        With no list, every target except `test` is enabled.
        """
        if enable_in_targets is not None:
            return self.name in enable_in_targets
        return self.name != TEST_TARGET

    def compose_project_name(self, project_name: str) -> str:
        """The compose project name (its `-p` option) for this target.

        Characters other than lowercase letters, digits, `-` and `_` are
        stripped, and the name must start with a letter or digit, the same
        way the compose engine normalizes project names.
        """
        base_name = f"{project_name}test" if self.name == TEST_TARGET else project_name
        return _INVALID_PROJECT_CHARS.sub("", base_name.lower()).lstrip("-_")

    def __str__(self):
        return self.name
