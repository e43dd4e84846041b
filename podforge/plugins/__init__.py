"""Transform plugins, applied to each pod before it is written out."""

from .base import Operation, Plugin, PluginContext
from .manager import TRANSFORM_PLUGINS, PluginManager

__all__ = [
    'Operation',
    'Plugin',
    'PluginContext',
    'PluginManager',
    'TRANSFORM_PLUGINS',
]
