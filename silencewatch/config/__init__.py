"""Simple YAML configuration loader for SilenceWatch."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..models.config import DetectorConfig

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_NAME = "silencewatch.yaml"


class SilenceWatchConfig:
    """SilenceWatch configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, uses silencewatch.yaml
                        in the current directory, or built-in defaults when there
                        is none.
        """
        if config_path is None:
            default_file = Path.cwd() / DEFAULT_CONFIG_NAME
            if not default_file.exists():
                logger.info("No configuration file found, using defaults")
                self.config_file = default_file
                self.config = {}
                return
            config_path = str(default_file)

        self.config_file = Path(config_path)

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if not config:
            raise ValueError("Configuration file is empty")
        if not isinstance(config, dict):
            raise ValueError("Configuration file must contain a mapping")

        # Resolve relative paths
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        for section, key in (('storage', 'state_file'),
                             ('storage', 'export_directory'),
                             ('logging', 'file_path')):
            if section in config and key in config[section]:
                path = config[section][key]
                if not os.path.isabs(path):
                    config[section][key] = str(config_dir / path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'detection.threshold_db').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_detector_config(self) -> DetectorConfig:
        """Detector defaults from the 'detection' section."""
        return DetectorConfig.from_dict(self.get('detection', {}) or {})

    def get_state_file(self) -> str:
        """Get path of the persisted detector settings."""
        state_file = self.get('storage.state_file', 'data/state.yaml')
        return str(Path(state_file).absolute())

    def get_export_directory(self) -> str:
        """Get session export directory path."""
        export_dir = self.get('storage.export_directory', 'data/exports')
        return str(Path(export_dir).absolute())
