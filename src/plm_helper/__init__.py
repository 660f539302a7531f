"""
Top-level package for plm_helper.

This package exposes the main CLI entry point via the
``plm_helper.cli`` module and the heuristic commit classifier via
``plm_helper.suggest``.
"""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:
    __version__ = version("plmhelper")
except PackageNotFoundError:
    # Running from a source checkout without an installed distribution.
    __version__ = "0.0.0.dev0"
