"""Persistent storage for SilenceWatch settings."""

from .config_store import ConfigStore, DETECTOR_CONFIG_KEY

__all__ = ["ConfigStore", "DETECTOR_CONFIG_KEY"]
