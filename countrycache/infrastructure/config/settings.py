"""Provides the configuration provider used by the cache layers.

Supports loading from a YAML configuration file (e.g., ~/.countrycache/config.yaml),
a .env file, and environment variables. Implements the ConfigurationProvider
interface with dotted-key access (``countries.cache.enabled``).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from countrycache.domain.interfaces.config import ConfigurationProvider
from countrycache.domain.models.common import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_ENABLED,
    DIRECTORY_KEY,
    DURATION_KEY,
    ENABLED_KEY,
)

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".countrycache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

# Built-in values used when no source defines a key
DEFAULTS: Dict[str, Any] = {
    ENABLED_KEY: DEFAULT_ENABLED,
    DURATION_KEY: DEFAULT_DURATION_MINUTES,
    DIRECTORY_KEY: None,
    "logging.level": "WARNING",
    "logging.format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "logging.file": None,
}


class Settings(ConfigurationProvider):
    """Layered configuration: test overrides, environment, .env, YAML, defaults."""

    def __init__(
        self,
        config_file: Optional[Path] = DEFAULT_CONFIG_FILE,
        env_file: Optional[Path] = None,
        autoload: bool = True,
    ):
        self.config_file = Path(config_file) if config_file is not None else None
        self.env_file = Path(env_file) if env_file is not None else None
        self._config: Dict[str, Any] = {}
        self._test_config: Dict[str, Any] = {}
        if autoload:
            self.load_config()

    def load_config(self) -> None:
        """Loads configuration from the YAML file and the .env file.

        Priority order (highest to lowest):
        1. Environment Variables
        2. .env file
        3. YAML configuration file
        4. Built-in defaults
        """
        self._config = {}

        # 1. YAML file (lowest priority)
        if self.config_file is not None and self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    yaml_config = yaml.safe_load(f)
                if isinstance(yaml_config, dict):
                    self._config.update(yaml_config)
                    logger.info(f"Loaded configuration from YAML: {self.config_file}")
                elif yaml_config is not None:
                    logger.warning(f"YAML config file {self.config_file} did not contain a mapping.")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load or parse YAML config {self.config_file}: {e}")
        else:
            logger.debug(f"YAML config file not found: {self.config_file}")

        # 2. .env file; existing environment variables take precedence
        dotenv_path = self.env_file or find_dotenv_path()
        if dotenv_path:
            if load_dotenv(dotenv_path=dotenv_path, override=False):
                logger.info(f"Loaded environment variables from: {dotenv_path}")
        else:
            logger.debug("No .env file found at or above the current directory.")

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """Gets a configuration value by dotted key.

        Args:
            key: The configuration key, e.g. 'cache.duration'. The matching
                environment variable is the key upper-cased with dots turned
                into underscores ('CACHE_DURATION').
            default: Returned when no source defines the key. Built-in
                defaults apply only when this is None.

        Returns:
            The configuration value.
        """
        if key in self._test_config:
            return self._test_config[key]

        env_key = env_var_name(key)
        if env_key in os.environ:
            return coerce_env_value(os.environ[env_key])

        found, value = _lookup(self._config, key)
        if found:
            return value

        if default is None and key in DEFAULTS:
            return DEFAULTS[key]
        return default

    def set_for_testing(self, config_dict: Dict[str, Any]) -> None:
        """Overrides configuration values; overrides win over every source."""
        self._test_config.update(config_dict)
        logger.debug(f"Set testing configuration: {config_dict}")

    def clear_test_config(self) -> None:
        """Clears all testing overrides."""
        self._test_config = {}


def env_var_name(key: str) -> str:
    return key.upper().replace('.', '_')


def coerce_env_value(value: str) -> Any:
    """Converts 'true'/'false' and numeric strings to their Python types."""
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _lookup(config: Dict[str, Any], key: str) -> Tuple[bool, Any]:
    """Resolves a dotted key, trying a literal key before walking nested mappings."""
    if key in config:
        return True, config[key]

    node: Any = config
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return False, None
        node = node[part]
    return True, node


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None
