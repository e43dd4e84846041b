"""Persistent record of which source trees are mounted into containers."""

import json
import logging
from pathlib import Path
from typing import Dict

from ..exceptions import CouldNotParseError, CouldNotReadFileError

logger = logging.getLogger(__name__)


class MountState:
    """Maps source aliases to a mounted flag, stored as JSON.

    Aliases that were never recorded count as unmounted.  Every change is
    written straight back to disk.
    """

    def __init__(self, state_file: Path):
        """Initialize mount state.

        Args:
            state_file: Usually `<project>/.podforge/sources.json`
        """
        self.state_file = Path(state_file)
        self._mounted = self._load()

    def _load(self) -> Dict[str, bool]:
        """Load the mount flags from disk."""
        if not self.state_file.exists():
            return {}
        try:
            with open(self.state_file) as f:
                data = json.load(f)
        except OSError as e:
            raise CouldNotReadFileError(self.state_file) from e
        except json.JSONDecodeError as e:
            raise CouldNotParseError("mount state", str(self.state_file)) from e
        if not isinstance(data, dict):
            raise CouldNotParseError("mount state", str(self.state_file))
        return {str(alias): bool(flag) for alias, flag in data.items()}

    def _save(self) -> None:
        """Save the mount flags to disk."""
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, 'w') as f:
            json.dump(self._mounted, f, indent=2, sort_keys=True)

    def is_mounted(self, alias: str) -> bool:
        return self._mounted.get(alias, False)

    def set_mounted(self, alias: str, mounted: bool) -> None:
        logger.debug(f"Setting {alias} mounted={mounted}")
        self._mounted[alias] = mounted
        self._save()
