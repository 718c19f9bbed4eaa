"""
typelattice User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.typelattice/config.json (cross-project settings)
- Local: .typelattice/config.json (project-specific overrides)

Config structure:
{
  "hierarchy": {
    "memoize_closures": true,             // Cache interface closures per node
    "allow_multiple_superclasses": false  // Accept a second superclass edge
  }
}
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from typelattice.exceptions import ConfigError
from typelattice.logging_config import logger
from typelattice.resolution.config import HIERARCHY_CONFIG


# Default configuration
DEFAULT_CONFIG = {
    "hierarchy": dict(HIERARCHY_CONFIG),
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.typelattice/config.json)
    3. Local config (.typelattice/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None, home: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
            home: Home directory holding the global config (defaults to ~)
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.global_config_path = (Path(home) if home else Path.home()) / ".typelattice" / "config.json"
        self.local_config_path = self.project_root / ".typelattice" / "config.json"

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration with hierarchical override.

        Returns:
            Merged configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, 'r') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {label} config: {e}")
                continue
            if not isinstance(loaded, dict):
                logger.warning(f"Ignoring {label} config at {path}: top level must be an object")
                continue
            config = self._deep_merge(config, loaded)
            logger.debug(f"Loaded {label} config from {path}")

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "hierarchy.memoize_closures")
            default: Default value if key not found

        Returns:
            Config value
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set_global(self, key: str, value: Any) -> bool:
        """Set a global config value and save to disk."""
        return self._set_and_save(key, value, is_global=True)

    def set_local(self, key: str, value: Any) -> bool:
        """Set a local config value and save to disk."""
        return self._set_and_save(key, value, is_global=False)

    def _set_and_save(self, key: str, value: Any, is_global: bool) -> bool:
        """
        Set a config value and save to appropriate file.

        Args:
            key: Dot-separated key
            value: Value to set
            is_global: True for global config, False for local

        Returns:
            True if successful, False otherwise
        """
        config_path = self.global_config_path if is_global else self.local_config_path

        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    config = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load config from {config_path}: {e}")
                return False
        else:
            config = {}

        keys = key.split(".")
        current = config
        for k in keys[:-1]:
            current = current.setdefault(k, {})

        current[keys[-1]] = value

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save config to {config_path}: {e}")
            return False

        self._config = self._load_config()
        logger.info(f"Saved {'global' if is_global else 'local'} config: {key}={value}")
        return True

    def get_all(self) -> Dict[str, Any]:
        """Get the entire merged configuration."""
        return copy.deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from disk."""
        self._config = self._load_config()


# Global singleton
_config: Optional[UserConfig] = None


def get_user_config(project_root: Optional[Path] = None) -> UserConfig:
    """
    Get the user configuration singleton.

    Args:
        project_root: Optional project root override

    Returns:
        UserConfig instance
    """
    global _config
    if project_root is not None:
        return UserConfig(project_root)
    if _config is None:
        _config = UserConfig()
    return _config


def get_hierarchy_config(user_config: Optional[UserConfig] = None) -> Dict[str, bool]:
    """
    Resolve the effective hierarchy settings.

    Raises:
        ConfigError: If a known setting is not a boolean
    """
    config = user_config or get_user_config()
    section = config.get("hierarchy", {})
    if not isinstance(section, dict):
        raise ConfigError("'hierarchy' config section must be an object")

    merged = dict(HIERARCHY_CONFIG)
    for key in HIERARCHY_CONFIG:
        if key in section:
            if not isinstance(section[key], bool):
                raise ConfigError(f"hierarchy.{key} must be true or false, got {section[key]!r}")
            merged[key] = section[key]
    return merged
