"""
Configuration loader for plm_helper.

Settings live in a JSON file named ``.plmhelperrc``. A file in the current
working directory takes precedence over the one in the user's home
directory. A missing file is not an error: the defaults in
:class:`PlmConfig` are used. A file that exists but cannot be read,
is not valid JSON, or holds values of the wrong type raises
:class:`ConfigError`.

There is no module-level cache. Callers construct a :class:`ConfigStore`
and pass it to whatever needs configuration; the store reloads only when
asked to.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILE_NAME = ".plmhelperrc"

PROFILES = ("standard", "expert", "custom")
THEMES = ("default", "dark", "light", "ocean")
LANGUAGES = ("tr", "en")
AI_PROVIDERS = ("none", "groq", "gemini", "deepseek", "openai", "anthropic", "minimax", "ollama")

STANDARD_FEATURES = [
    "stage", "commit", "push", "pull",
    "status", "diff", "history",
    "branch", "stash", "gitignore",
]

EXPERT_FEATURES = STANDARD_FEATURES + [
    "tag", "merge", "remote",
    "security", "analytics", "advanced",
]

# Python attribute name -> key used in the JSON file.
_FILE_KEYS = {
    "profile": "profile",
    "custom_features": "customFeatures",
    "theme": "theme",
    "language": "language",
    "aliases": "aliases",
    "favorites": "favorites",
    "conventional_commit": "conventionalCommit",
    "ai_provider": "aiProvider",
    "ai_api_key": "aiApiKey",
    "ai_model": "aiModel",
    "ai_enabled": "aiEnabled",
}


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""

    pass


@dataclass
class PlmConfig:
    """User settings for plm_helper."""

    profile: str = "standard"
    custom_features: List[str] = field(default_factory=list)
    theme: str = "default"
    language: str = "en"
    aliases: Dict[str, str] = field(default_factory=dict)
    favorites: List[str] = field(default_factory=list)
    conventional_commit: bool = False

    ai_provider: str = "none"
    ai_api_key: Optional[str] = None
    ai_model: Optional[str] = None
    ai_enabled: bool = False

    def to_file_dict(self) -> Dict[str, Any]:
        """Return the settings keyed the way they are stored on disk."""
        data = asdict(self)
        return {_FILE_KEYS[name]: value for name, value in data.items()}


def _home_config_path() -> Path:
    return Path.home() / CONFIG_FILE_NAME


def _local_config_path() -> Path:
    return Path.cwd() / CONFIG_FILE_NAME


def get_config_path() -> Path:
    """Return the configuration file that is in effect.

    The project-local file wins when it exists; otherwise the file in the
    home directory is used, whether or not it exists yet.
    """
    local = _local_config_path()
    if local.exists():
        return local
    return _home_config_path()


def _validate(data: Dict[str, Any]) -> None:
    def expect(key: str, types: tuple, label: str) -> None:
        if key in data and data[key] is not None and not isinstance(data[key], types):
            raise ConfigError(f"'{key}' must be {label}")

    expect("profile", (str,), "a string")
    expect("theme", (str,), "a string")
    expect("language", (str,), "a string")
    expect("aiProvider", (str,), "a string")
    expect("aiApiKey", (str,), "a string")
    expect("aiModel", (str,), "a string")
    expect("customFeatures", (list,), "a list")
    expect("favorites", (list,), "a list")
    expect("aliases", (dict,), "an object")
    expect("conventionalCommit", (bool,), "a boolean")
    expect("aiEnabled", (bool,), "a boolean")

    for key, allowed in (
        ("profile", PROFILES),
        ("theme", THEMES),
        ("language", LANGUAGES),
        ("aiProvider", AI_PROVIDERS),
    ):
        if data.get(key) is not None and data[key] not in allowed:
            raise ConfigError(f"'{key}' must be one of: {', '.join(allowed)}")


def load_config(config_path: Optional[Path] = None) -> PlmConfig:
    """Load settings from ``config_path`` (or the path in effect).

    Args:
        config_path: Explicit file to read. Defaults to :func:`get_config_path`.

    Returns:
        A :class:`PlmConfig` with file values layered over the defaults.
        Unknown keys are ignored.

    Raises:
        ConfigError: If the file exists but is unreadable, malformed, or invalid.
    """
    path = config_path or get_config_path()
    if not path.exists():
        logger.debug("No configuration file at %s; using defaults", path)
        return PlmConfig()

    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")

    _validate(data)

    values = {
        name: data[key]
        for name, key in _FILE_KEYS.items()
        if key in data and data[key] is not None
    }
    logger.debug("Loaded configuration from: %s", path)
    return replace(PlmConfig(), **values)


def save_config(config: PlmConfig, global_: bool = True, config_path: Optional[Path] = None) -> Path:
    """Write ``config`` as indented JSON and return the file written.

    ``global_`` selects the home directory file; otherwise the file in the
    current working directory is written. An explicit ``config_path``
    overrides both.
    """
    if config_path is not None:
        path = config_path
    else:
        path = _home_config_path() if global_ else _local_config_path()
    try:
        path.write_text(json.dumps(config.to_file_dict(), indent=2), encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to write configuration file %s: %s", path, exc)
        raise ConfigError(f"Could not write {path}: {exc}") from exc
    logger.debug("Saved configuration to: %s", path)
    return path


def get_enabled_features(config: PlmConfig) -> List[str]:
    """Return the feature keys available under the configured profile."""
    if config.profile == "expert":
        return list(EXPERT_FEATURES)
    if config.profile == "custom":
        return STANDARD_FEATURES + list(config.custom_features)
    return list(STANDARD_FEATURES)


def is_feature_enabled(feature: str, config: PlmConfig) -> bool:
    return feature in get_enabled_features(config)


class ConfigStore:
    """Explicitly owned handle on the active configuration.

    The configuration is read lazily on the first :meth:`get` and then
    held until :meth:`reload` or :meth:`invalidate` is called.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._explicit_path = config_path
        self._config: Optional[PlmConfig] = None

    @property
    def path(self) -> Path:
        return self._explicit_path or get_config_path()

    def get(self) -> PlmConfig:
        if self._config is None:
            self._config = load_config(self.path)
        return self._config

    def reload(self) -> PlmConfig:
        self._config = load_config(self.path)
        return self._config

    def invalidate(self) -> None:
        self._config = None

    def update(self, global_: bool = True, **changes: Any) -> PlmConfig:
        """Apply ``changes`` to the current settings, save, and reload.

        Raises
        ------
        ConfigError
            If a key is unknown, a value is invalid, or the file cannot
            be written.
        """
        unknown = [name for name in changes if name not in _FILE_KEYS]
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        updated = replace(self.get(), **changes)
        _validate(updated.to_file_dict())
        save_config(updated, global_=global_, config_path=self._explicit_path)
        return self.reload()
