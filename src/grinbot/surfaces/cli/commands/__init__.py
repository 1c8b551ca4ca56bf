"""CLI command groups, registered onto the root app by ``cli.py``."""
