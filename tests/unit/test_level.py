"""Unit tests for loudness measurement."""

import math
import pytest
import numpy as np

from silencewatch.audio.level import (
    calculate_rms, rms_to_db, level_db, measure_level, normalize_buffer, SILENCE_DB
)


@pytest.mark.unit
class TestLevel:
    """Test cases for RMS and decibel conversion."""

    def test_zero_buffer_is_sentinel(self):
        assert level_db(np.zeros(1024, dtype=np.int16)) == SILENCE_DB

    def test_empty_buffer_is_sentinel(self):
        assert level_db(np.array([], dtype=np.int16)) == SILENCE_DB

    def test_tiny_rms_is_floored(self):
        # 1/32768 is below the 1e-4 floor
        buffer = np.ones(512, dtype=np.int16)
        assert level_db(buffer) == pytest.approx(-80.0)

    def test_full_scale_float_is_zero_db(self):
        buffer = np.ones(256, dtype=np.float32)
        assert level_db(buffer) == pytest.approx(0.0)

    def test_sine_wave_level(self, audio_test_data):
        buffer = audio_test_data("sine", amplitude=0.5)
        expected = 20 * math.log10(0.5 / math.sqrt(2))
        assert level_db(buffer) == pytest.approx(expected, abs=0.1)

    def test_uint8_buffer_centered_on_128(self):
        silent = np.full(2048, 128, dtype=np.uint8)
        assert level_db(silent) == SILENCE_DB

        loud = np.array([0, 255] * 512, dtype=np.uint8)
        assert level_db(loud) > -1.0

    def test_normalize_int16(self):
        data = normalize_buffer(np.array([-32768, 0, 16384], dtype=np.int16))
        assert data.tolist() == [-1.0, 0.0, 0.5]

    def test_rms_and_db_consistent(self, audio_test_data):
        buffer = audio_test_data("noise", amplitude=0.2)
        db, rms = measure_level(buffer)
        assert rms == pytest.approx(calculate_rms(buffer))
        assert db == pytest.approx(rms_to_db(rms))
        assert math.isfinite(db)

    def test_rms_to_db_negative(self):
        assert rms_to_db(0.0) == SILENCE_DB
        assert rms_to_db(-1.0) == SILENCE_DB
