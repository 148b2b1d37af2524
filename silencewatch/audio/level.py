"""Loudness measurement for raw amplitude buffers."""

import numpy as np


# Below this RMS the level is floored instead of going to -inf
RMS_FLOOR = 1e-4
# Reported for a buffer that is exactly zero
SILENCE_DB = -100.0


def normalize_buffer(buffer) -> np.ndarray:
    """Convert a raw amplitude buffer to float samples in [-1, 1].

    Unsigned 8-bit buffers are centred on 128 (browser analyser style),
    signed integer buffers are scaled by their full-scale value and float
    buffers are taken as already normalized.
    """
    data = np.asarray(buffer)
    if data.size == 0:
        return np.zeros(0, dtype=np.float64)

    if data.dtype == np.uint8:
        return (data.astype(np.float64) - 128.0) / 128.0
    if np.issubdtype(data.dtype, np.integer):
        full_scale = float(np.iinfo(data.dtype).max) + 1.0
        return data.astype(np.float64) / full_scale
    return data.astype(np.float64)


def calculate_rms(buffer) -> float:
    """Root-mean-square of a buffer after normalization."""
    data = normalize_buffer(buffer)
    if data.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(data))))


def rms_to_db(rms: float) -> float:
    """Convert an RMS value to decibels, floored to stay finite."""
    if rms <= 0:
        return SILENCE_DB
    return float(20 * np.log10(max(rms, RMS_FLOOR)))


def measure_level(buffer) -> tuple:
    """Reduce one buffer to ``(db, rms)``."""
    rms = calculate_rms(buffer)
    return rms_to_db(rms), rms


def level_db(buffer) -> float:
    """Loudness of one buffer in decibels."""
    return measure_level(buffer)[0]
