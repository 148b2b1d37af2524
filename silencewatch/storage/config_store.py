"""Flat key-value store persisted as a single YAML file."""

import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)


DETECTOR_CONFIG_KEY = "silence_detector_config"


class ConfigStore:
    """Opaque namespaced key-value blob, one YAML mapping on disk."""

    def __init__(self, state_file: str):
        """Initialize config store.

        Args:
            state_file: Path of the YAML file backing the store. Created on
                first write.
        """
        self.state_file = Path(state_file)
        logger.info(f"ConfigStore initialized with state file: {self.state_file}")

    def _read_all(self) -> Dict[str, Any]:
        if not self.state_file.exists():
            return {}
        with open(self.state_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"State file is not a mapping: {self.state_file}")
        return data

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get the value stored under ``key``.

        Raises:
            ValueError: If the state file cannot be parsed.
        """
        try:
            data = self._read_all()
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in state file: {e}")
        return data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, keeping every other key."""
        try:
            data = self._read_all()
        except (yaml.YAMLError, ValueError) as e:
            logger.warning(f"Overwriting unreadable state file {self.state_file}: {e}")
            data = {}
        data[key] = value

        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True)
        logger.debug(f"Stored key '{key}' in {self.state_file}")

