"""Unit tests for amplitude sources."""

import time
import pytest
import numpy as np

from silencewatch.audio.sources import MicrophoneSource, WaveFileSource


@pytest.mark.unit
class TestMicrophoneSource:
    """Test cases for MicrophoneSource."""

    def test_initialization(self):
        source = MicrophoneSource()
        assert source.sample_rate == 16000
        assert source.chunk_size == 1024
        assert source.is_capturing is False
        assert source.read_buffer().tolist() == [0] * 1024

    def test_open_and_close(self, mock_pyaudio):
        samples = np.array([0, 16383, 0, -16383], dtype=np.int16)
        mock_pyaudio['stream'].read.return_value = samples.tobytes()

        source = MicrophoneSource(chunk_size=4)
        source.open()
        assert source.is_capturing is True
        assert source.capture_thread.daemon is True

        time.sleep(0.1)
        assert source.read_buffer().tolist() == samples.tolist()

        source.close()
        assert source.is_capturing is False
        mock_pyaudio['stream'].stop_stream.assert_called_once()
        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_open_failure_terminates(self, mock_pyaudio):
        mock_pyaudio['instance'].open.side_effect = OSError("Invalid input device")
        source = MicrophoneSource()
        with pytest.raises(OSError):
            source.open()
        mock_pyaudio['instance'].terminate.assert_called_once()
        assert source.is_capturing is False

    def test_close_when_not_open(self):
        MicrophoneSource().close()


@pytest.mark.unit
class TestWaveFileSource:
    """Test cases for WaveFileSource."""

    def test_read_windows(self, wav_writer):
        path = wav_writer([("sine", 0.25)])
        source = WaveFileSource(path, window_ms=100)
        source.open()

        assert source.duration_ms == pytest.approx(250)
        sizes = []
        positions = []
        while not source.exhausted:
            sizes.append(source.read_buffer().size)
            positions.append(source.position_ms)
        source.close()

        assert sizes == [1600, 1600, 800]
        assert positions == [0, 100, 200]

    def test_read_before_open(self, wav_writer):
        with pytest.raises(RuntimeError):
            WaveFileSource(wav_writer([("silence", 0.1)])).read_buffer()
