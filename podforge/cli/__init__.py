"""Command-line interface for podforge."""
