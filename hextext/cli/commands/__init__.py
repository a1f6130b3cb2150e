"""CLI commands for hextext."""
