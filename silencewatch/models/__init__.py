"""Data models for the SilenceWatch application."""

from .silence import (
    NATURAL,
    UNNATURAL,
    LoudnessSample,
    SilenceRun,
    AIClassification,
    Silence,
    SilenceAlert,
    SilenceStatistics,
)
from .config import DetectorConfig

__all__ = [
    "NATURAL",
    "UNNATURAL",
    "LoudnessSample",
    "SilenceRun",
    "AIClassification",
    "Silence",
    "SilenceAlert",
    "SilenceStatistics",
    "DetectorConfig",
]
