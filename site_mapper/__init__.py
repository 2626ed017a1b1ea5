# site_mapper/__init__.py
"""
SiteMapper package initializer.
Defines package version and exposes the CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point
from site_mapper.cli import cli as main_cli  # noqa: E402
