"""podforge - Generate per-target compose files from pods, and watch them run."""

from .core.constants import VERSION

__version__ = VERSION

# Export main CLI for convenience
from .cli.main import cli

__all__ = ['cli', '__version__']
