"""Audio level measurement and amplitude sources."""

from .level import calculate_rms, rms_to_db, measure_level, level_db
from .sources import AmplitudeSource, MicrophoneSource, WaveFileSource
from .silence_pub import SilencePublisher

__all__ = [
    'calculate_rms',
    'rms_to_db',
    'measure_level',
    'level_db',
    'AmplitudeSource',
    'MicrophoneSource',
    'WaveFileSource',
    'SilencePublisher',
]
