"""Amplitude sources the silence monitor pulls buffers from."""

import wave
import logging
import threading
from abc import ABC, abstractmethod
from threading import Thread, Event
from typing import Optional

import numpy as np
import pyaudio


logger = logging.getLogger(__name__)


class AmplitudeSource(ABC):
    """Source of raw amplitude samples with "pull current buffer" semantics."""

    def open(self) -> None:
        """Acquire any underlying resources. Called once by the monitor."""

    @abstractmethod
    def read_buffer(self) -> np.ndarray:
        """Return the most recent amplitude buffer without mutating the source."""

    def close(self) -> None:
        """Release underlying resources."""


class MicrophoneSource(AmplitudeSource):
    """Live microphone source backed by a PyAudio capture thread.

    The capture thread reads the stream continuously and keeps only the latest
    chunk, so polling at any rate always sees current audio.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        format: int = pyaudio.paInt16,
    ):
        """Initialize microphone source.

        Args:
            sample_rate: Audio sample rate
            chunk_size: Size of each captured buffer in samples
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
        """
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format

        self.capture_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.lock = threading.Lock()
        self.is_capturing = False
        self.total_chunks = 0

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream = None
        self._latest = np.zeros(chunk_size, dtype=np.int16)

    def open(self) -> None:
        """Open the input stream and start the capture thread."""
        if self.is_capturing:
            logger.warning("Microphone capture already in progress")
            return

        self.pyaudio_instance = pyaudio.PyAudio()
        try:
            self.stream = self.pyaudio_instance.open(
                format=self.format,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
                stream_callback=None
            )
        except Exception:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None
            raise
        logger.info(f"Microphone stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")

        self.stop_event.clear()
        self.capture_thread = Thread(target=self._capture_continuously, daemon=True)
        self.capture_thread.name = "MicrophoneCaptureThread"
        self.capture_thread.start()
        self.is_capturing = True

    def _capture_continuously(self) -> None:
        """Internal method: keep the latest chunk while the source is open."""
        while not self.stop_event.is_set():
            try:
                audio_chunk = self.stream.read(self.chunk_size, exception_on_overflow=False)
            except OSError as e:
                logger.error(f"Error reading microphone stream: {e}")
                break
            samples = np.frombuffer(audio_chunk, dtype=np.int16)
            with self.lock:
                self._latest = samples
                self.total_chunks += 1

    def read_buffer(self) -> np.ndarray:
        with self.lock:
            return self._latest.copy()

    def close(self) -> None:
        """Stop the capture thread and release PyAudio resources."""
        if not self.is_capturing:
            return

        self.stop_event.set()
        if self.capture_thread and self.capture_thread.is_alive():
            self.capture_thread.join(timeout=2.0)
            if self.capture_thread.is_alive():
                logger.warning("Capture thread did not stop cleanly")

        if self.stream:
            self.stream.stop_stream()
            self.stream.close()
            self.stream = None
        if self.pyaudio_instance:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None

        self.is_capturing = False
        logger.info(f"Microphone closed. Total chunks: {self.total_chunks}")


class WaveFileSource(AmplitudeSource):
    """Replays a WAV file one tick-sized window at a time.

    The file position doubles as the clock: ``position_ms`` is the time of the
    window most recently returned by ``read_buffer``.
    """

    def __init__(self, filepath: str, window_ms: float = 100):
        self.filepath = filepath
        self.window_ms = window_ms
        self.sample_rate = 0
        self.channels = 0
        self.sample_width = 0
        self.total_frames = 0
        self.frames_read = 0
        self.position_ms = 0.0
        self._wave: Optional[wave.Wave_read] = None

    def open(self) -> None:
        self._wave = wave.open(self.filepath, 'rb')
        self.sample_rate = self._wave.getframerate()
        self.channels = self._wave.getnchannels()
        self.sample_width = self._wave.getsampwidth()
        self.total_frames = self._wave.getnframes()
        self.frames_read = 0
        logger.info(f"Opened {self.filepath}: {self.sample_rate}Hz, {self.channels} channels, "
                    f"{self.duration_ms / 1000:.1f}s")

    @property
    def duration_ms(self) -> float:
        if not self.sample_rate:
            return 0.0
        return self.total_frames * 1000.0 / self.sample_rate

    @property
    def exhausted(self) -> bool:
        return self._wave is None or self.frames_read >= self.total_frames

    def read_buffer(self) -> np.ndarray:
        if self._wave is None:
            raise RuntimeError("WaveFileSource is not open")

        self.position_ms = self.frames_read * 1000.0 / self.sample_rate
        frames_per_window = max(1, int(self.sample_rate * self.window_ms / 1000))
        raw = self._wave.readframes(frames_per_window)
        frames = len(raw) // (self.sample_width * self.channels) if raw else 0
        self.frames_read += frames

        if self.sample_width == 1:
            samples = np.frombuffer(raw, dtype=np.uint8)
        elif self.sample_width == 2:
            samples = np.frombuffer(raw, dtype=np.int16)
        elif self.sample_width == 4:
            samples = np.frombuffer(raw, dtype=np.int32)
        else:
            raise ValueError(f"Unsupported sample width: {self.sample_width}")

        if self.channels > 1 and samples.size:
            samples = samples.reshape(-1, self.channels)[:, 0]
        return samples

    def close(self) -> None:
        if self._wave is not None:
            self._wave.close()
            self._wave = None
