"""SilenceWatch: silence detection and alerting for audio streams."""

__version__ = "0.1.0"
