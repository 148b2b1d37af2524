"""Polling monitor that drives the silence detector from an amplitude source."""

import time
import logging
from threading import Thread, Event, RLock
from typing import Optional, Dict, Any, Callable, List

from ..audio.level import measure_level
from ..audio.sources import AmplitudeSource, WaveFileSource
from ..audio.silence_pub import SilencePublisher
from ..models.silence import LoudnessSample, Silence
from .detector import SilenceDetector

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class SilenceMonitor:
    """Owns one detector, its amplitude source and the polling thread."""

    def __init__(
        self,
        detector: Optional[SilenceDetector] = None,
        publisher: Optional[SilencePublisher] = None,
        clock: Callable[[], float] = monotonic_ms,
    ):
        """Initialize silence monitor.

        Args:
            detector: Detector to drive (a default one if None)
            publisher: Publisher that receives every silence and alert
            clock: Millisecond clock used to timestamp samples
        """
        self.detector = detector or SilenceDetector()
        self.publisher = publisher
        self.clock = clock

        self.source: Optional[AmplitudeSource] = None
        self.is_monitoring = False
        self.monitor_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.tick_lock = RLock()
        self.total_ticks = 0

        if self.publisher:
            self.detector.on_silence(self.publisher.publish_silence)
            self.detector.on_alert(self.publisher.publish_alert)

    def initialize(self, source: Optional[AmplitudeSource]) -> Dict[str, Any]:
        """Attach and open the amplitude source.

        Returns:
            Result dictionary with success flag and message
        """
        logger.info("Initializing silence monitor...")
        if source is None:
            logger.error("No amplitude source provided")
            return {"success": False, "message": "No audio source provided"}

        try:
            source.open()
        except Exception as e:
            logger.error(f"Error opening amplitude source: {e}")
            return {"success": False, "message": str(e)}

        self.source = source
        logger.info("Silence monitor initialized")
        return {"success": True, "message": "Detector initialized"}

    def start_monitoring(self) -> Dict[str, Any]:
        """Start polling the source on a background thread."""
        if self.source is None:
            logger.error("Silence monitor not initialized")
            return {"success": False, "message": "Detector not initialized"}

        if self.is_monitoring:
            logger.warning("Silence monitoring already in progress")
            return {"success": False, "message": "Monitoring already in progress"}

        self.detector.reset()
        self.total_ticks = 0
        self.stop_event.clear()

        config = self.detector.config
        logger.info(f"Silence monitoring started: threshold={config.threshold_db} dB, "
                    f"min_duration={config.min_silence_duration_ms} ms, "
                    f"interval={config.check_interval_ms} ms")

        self.monitor_thread = Thread(target=self._monitor_loop, daemon=True)
        self.monitor_thread.name = "SilenceMonitorThread"
        self.is_monitoring = True
        self.monitor_thread.start()
        return {"success": True, "message": "Monitoring started"}

    def stop_monitoring(self) -> Dict[str, Any]:
        """Stop polling and finalize a qualifying open run."""
        self.stop_event.set()
        if self.monitor_thread and self.monitor_thread.is_alive():
            self.monitor_thread.join(timeout=2.0)
            if self.monitor_thread.is_alive():
                logger.warning("Monitor thread did not stop cleanly")
        self.monitor_thread = None

        with self.tick_lock:
            self.detector.flush(self.clock())
        was_monitoring = self.is_monitoring
        self.is_monitoring = False

        if was_monitoring:
            logger.info(f"Silence monitoring stopped after {self.total_ticks} ticks")
        return {"success": True, "message": "Monitoring stopped"}

    def _monitor_loop(self) -> None:
        """Internal method: one tick per configured interval until stopped."""
        while not self.stop_event.wait(self.detector.config.check_interval_ms / 1000):
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Error during silence monitor tick, continuing: {e}")

    def tick(self) -> Optional[Silence]:
        """Sample the source once and feed the detector."""
        if self.source is None:
            return None

        with self.tick_lock:
            try:
                buffer = self.source.read_buffer()
            except Exception as e:
                logger.error(f"Error reading amplitude source, skipping tick: {e}")
                return None

            db, rms = measure_level(buffer)
            self.total_ticks += 1
            return self.detector.process_sample(
                LoudnessSample(db=db, timestamp=self.clock(), rms=rms)
            )

    def replay(self, source: WaveFileSource) -> List[Silence]:
        """Analyze a WAV file offline, using the file position as the clock.

        Returns:
            Silences recorded during the replay

        Raises:
            RuntimeError: If live monitoring is active.
        """
        if self.is_monitoring:
            raise RuntimeError("Cannot replay while monitoring is active")

        with self.tick_lock:
            source.window_ms = self.detector.config.check_interval_ms
            source.open()
            try:
                self.detector.reset()
                while not source.exhausted:
                    buffer = source.read_buffer()
                    db, rms = measure_level(buffer)
                    self.detector.process_sample(
                        LoudnessSample(db=db, timestamp=source.position_ms, rms=rms)
                    )
                self.detector.flush(source.duration_ms)
            finally:
                source.close()

        logger.info(f"Replayed {source.filepath}: {len(self.detector.silences)} silences")
        return self.detector.get_silences()

    def cleanup(self) -> None:
        """Stop monitoring and release the source."""
        self.stop_monitoring()
        if self.source:
            self.source.close()
            self.source = None
        logger.info("SilenceMonitor cleaned up")
