"""Core functionality for podforge: pods, merging, sources and runtime state."""
