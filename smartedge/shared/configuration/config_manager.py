"""JSON configuration files for SmartEdge.

A configuration file holds any subset of the settings categories::

    {
      "routing": {"grid_ratio": 5, "node_padding": 8, "smoothing": "line_of_sight"},
      "logging": {"level": "DEBUG", "file_output": true}
    }

Missing keys keep their defaults. The file is taken from an explicit path,
else from the ``SMARTEDGE_CONFIG`` environment variable, else from the first
of DEFAULT_CONFIG_PATHS that exists. With no file the built-in defaults are
used and nothing is written.
"""
import json
import logging
import os
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import ConfigurationError
from .settings import ApplicationSettings, LoggingSettings, SmartEdgeOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SMARTEDGE_CONFIG"

PathLike = Union[str, Path]


def _expand(path: PathLike) -> Path:
    return Path(path).expanduser().resolve()


def _known_keys(settings_type, data: Dict[str, Any], category: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{category}' settings must be a JSON object")
    names = {f.name for f in fields(settings_type)}
    unknown = sorted(set(data) - names)
    if unknown:
        logger.warning(f"Ignoring unknown {category} settings: {', '.join(unknown)}")
    return {key: value for key, value in data.items() if key in names}


class ConfigManager:
    """Loads, holds and saves the application settings."""

    DEFAULT_CONFIG_PATHS = [
        "smartedge.json",
        "config/smartedge.json",
        "~/.smartedge/config.json",
        "~/.config/smartedge/config.json"
    ]

    def __init__(self, config_path: Optional[PathLike] = None):
        """Initialize configuration manager.

        Args:
            config_path: Configuration file; when None the environment
                variable and then the default locations are tried
        """
        self.settings = ApplicationSettings()
        self.config_path: Optional[Path] = _expand(config_path) if config_path else self._locate()

        if self.config_path is not None and self.config_path.exists():
            self.load()

    def _locate(self) -> Optional[Path]:
        from_env = os.environ.get(CONFIG_ENV_VAR)
        if from_env:
            return _expand(from_env)

        candidates: List[Path] = [_expand(p) for p in self.DEFAULT_CONFIG_PATHS]
        found = next((path for path in candidates if path.exists()), None)
        if found:
            logger.info(f"Using config file: {found}")
        else:
            logger.debug("No config file found, using built-in defaults")
        return found

    def load(self, config_path: Optional[PathLike] = None) -> bool:
        """Read settings from a JSON file.

        The current settings are only replaced when the whole file is valid.

        Returns:
            True if the file was applied, False otherwise.
        """
        path = _expand(config_path) if config_path else self.config_path
        if path is None or not path.exists():
            logger.warning(f"Configuration file not found: {path}")
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self.settings = self._merge(self.settings, data)
        except (OSError, ValueError, ConfigurationError) as e:
            logger.error(f"Ignoring configuration {path}: {e}")
            return False

        for category, errors in self.validate().items():
            for error in errors:
                logger.warning(f"Config {category}: {error}")
        logger.info(f"Configuration loaded from: {path}")
        return True

    @staticmethod
    def _merge(current: ApplicationSettings, data: Any) -> ApplicationSettings:
        """Return ``current`` overlaid with the categories present in ``data``.

        Raises:
            ConfigurationError: If the structure or the routing values are invalid
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a JSON object")

        routing = current.routing
        if 'routing' in data:
            try:
                routing = replace(routing, **_known_keys(SmartEdgeOptions, data['routing'], 'routing'))
            except TypeError as e:
                raise ConfigurationError(f"Invalid routing settings: {e}") from e

        logging_settings = current.logging
        if 'logging' in data:
            logging_settings = replace(
                logging_settings, **_known_keys(LoggingSettings, data['logging'], 'logging')
            )

        extra = sorted(set(data) - {'routing', 'logging', 'version', 'config_version'})
        if extra:
            logger.warning(f"Ignoring unknown settings categories: {', '.join(extra)}")

        return ApplicationSettings(
            routing=routing,
            logging=logging_settings,
            version=data.get('version', current.version),
            config_version=data.get('config_version', current.config_version)
        )

    def save(self, config_path: Optional[PathLike] = None) -> bool:
        """Write the current settings as JSON.

        Returns:
            True if saved successfully, False otherwise.
        """
        path = _expand(config_path) if config_path else self.config_path
        if path is None:
            logger.error("No configuration path to save to")
            return False

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self.settings), f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save configuration to {path}: {e}")
            return False

        logger.info(f"Configuration saved to: {path}")
        return True

    def get_settings(self) -> ApplicationSettings:
        return self.settings

    def get_routing_options(self) -> SmartEdgeOptions:
        return self.settings.routing

    def update_routing_settings(self, **kwargs):
        """Replace routing options; unknown keys are dropped with a warning.

        Raises:
            ConfigurationError: If the resulting options are invalid
        """
        self.settings.routing = replace(
            self.settings.routing, **_known_keys(SmartEdgeOptions, kwargs, 'routing')
        )

    def update_logging_settings(self, **kwargs):
        self.settings.logging = replace(
            self.settings.logging, **_known_keys(LoggingSettings, kwargs, 'logging')
        )

    def validate(self) -> Dict[str, List[str]]:
        return self.settings.validate()

    def reset_to_defaults(self):
        self.settings = ApplicationSettings()
        logger.info("Settings reset to defaults")

    def reset_category_to_defaults(self, category: str):
        """Reset ``routing`` or ``logging`` to its defaults."""
        defaults = {'routing': SmartEdgeOptions, 'logging': LoggingSettings}
        if category not in defaults:
            logger.warning(f"Unknown settings category: {category}")
            return
        setattr(self.settings, category, defaults[category]())
        logger.info(f"Reset {category} settings to defaults")

    def get_config_info(self) -> Dict[str, Any]:
        """Describe where the settings came from and whether they are valid."""
        return {
            "config_path": str(self.config_path) if self.config_path else None,
            "config_exists": bool(self.config_path and self.config_path.exists()),
            "version": self.settings.version,
            "config_version": self.settings.config_version,
            "validation_errors": self.validate()
        }


_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Return the process-wide configuration manager, creating it on first use."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def initialize_config(config_path: Optional[PathLike] = None) -> ConfigManager:
    """Replace the process-wide configuration manager."""
    global _config_manager
    _config_manager = ConfigManager(config_path)
    return _config_manager
