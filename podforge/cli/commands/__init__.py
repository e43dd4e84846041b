"""podforge CLI commands."""
