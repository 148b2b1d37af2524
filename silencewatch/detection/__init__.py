"""Silence detection, classification and monitoring."""

from .classifier import classify_silence, score_confidence, ai_classify
from .detector import SilenceDetector
from .monitor import SilenceMonitor

__all__ = [
    "classify_silence",
    "score_confidence",
    "ai_classify",
    "SilenceDetector",
    "SilenceMonitor",
]
