# geo_explore/config/config.py
"""YAML-overridable configuration for the exploration pipelines."""

import copy
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from . import defaults

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager with YAML override support."""

    def __init__(self, config_file: Optional[Path] = None, create_dirs: bool = True):
        self.settings = self.load_defaults()
        self.config_file: Optional[Path] = None

        if config_file is None:
            config_file = self._find_config_file()
        elif not isinstance(config_file, Path):
            config_file = Path(config_file)

        if config_file and config_file.exists():
            self._load_yaml_config(config_file)
            self.config_file = config_file
            logger.info(f"Loaded configuration from {config_file}")
        else:
            logger.debug("No config.yml found - using defaults only")

        if create_dirs:
            self._ensure_directories()

    def _find_config_file(self) -> Optional[Path]:
        """Find config.yml with multiple fallback locations."""
        project_root = Path(__file__).parent.parent.parent

        potential_locations = [
            project_root / 'config.yml',
            Path.cwd() / 'config.yml',
            Path.home() / '.geo_explore' / 'config.yml',
        ]

        for location in potential_locations:
            if location.exists() and location.is_file():
                return location

        return None

    def load_defaults(self) -> Dict[str, Any]:
        """Load default configuration settings."""
        return {
            'paths': copy.deepcopy(defaults.PATHS),
            'logging': copy.deepcopy(defaults.LOGGING),
            'point_pattern': copy.deepcopy(defaults.POINT_PATTERN),
            'time_series': copy.deepcopy(defaults.TIME_SERIES),
            'plotting': copy.deepcopy(defaults.PLOTTING),
        }

    def _load_yaml_config(self, config_file: Path):
        """Load and merge configuration from a YAML file."""
        with open(config_file, 'r') as file:
            yaml_config = yaml.safe_load(file)
        if yaml_config:
            if not isinstance(yaml_config, dict):
                raise ValueError(f"Config file {config_file} must contain a mapping")
            self._deep_merge(self.settings, yaml_config)

    def _deep_merge(self, base: dict, override: dict):
        """Deep merge override into base dictionary."""
        for key, value in override.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _ensure_directories(self):
        """Create output and log directories if they are accessible."""
        for key in ('logs_dir', 'output_dir'):
            path = Path(self.settings['paths'][key])
            try:
                path.mkdir(parents=True, exist_ok=True)
            except (PermissionError, FileNotFoundError):
                # Configured paths may point at locations unavailable here
                pass

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key.split(".")
        target = self.settings
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value

    def update(self, overrides: Dict[str, Any]) -> None:
        """Deep merge a dict of overrides, e.g. from CLI options."""
        self._deep_merge(self.settings, overrides)

    @property
    def paths(self) -> Dict[str, Any]:
        return self.settings['paths']

    @property
    def logging(self) -> Dict[str, Any]:
        return self.settings['logging']

    @property
    def point_pattern(self) -> Dict[str, Any]:
        return self.settings['point_pattern']

    @property
    def time_series(self) -> Dict[str, Any]:
        return self.settings['time_series']

    @property
    def plotting(self) -> Dict[str, Any]:
        return self.settings['plotting']


# Global configuration instance, created on first use
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global configuration."""
    global _config

    if _config is None:
        _config = Config()

    return _config
