"""
Configuration handling for plm_helper.

Provides a loader for the ``.plmhelperrc`` settings file and an explicit
:class:`ConfigStore`. See :mod:`plm_helper.config.loader` for details.
"""

from .loader import ConfigError, ConfigStore, PlmConfig, load_config, save_config  # noqa: F401
