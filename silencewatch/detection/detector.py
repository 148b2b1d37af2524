"""Silence detection state machine with alerting and a finalized-silence log."""

import logging
import threading
from datetime import datetime
from typing import Optional, List, Callable, Any

from ..models.silence import (
    LoudnessSample,
    SilenceRun,
    Silence,
    SilenceAlert,
    SilenceStatistics,
    NATURAL,
    UNNATURAL,
)
from ..models.config import DetectorConfig
from ..storage.config_store import ConfigStore, DETECTOR_CONFIG_KEY
from .classifier import classify_silence, ai_classify

logger = logging.getLogger(__name__)


# Clock time between two level snapshots in the debug log
LEVEL_LOG_INTERVAL_MS = 5000


class SilenceDetector:
    """Folds loudness samples into silence runs and classifies finished runs.

    States are ``NoRun`` (``current_run is None``) and ``OpenRun``. A run opens
    on the first below-threshold sample and closes on the first sample at or
    above the threshold; it is recorded only if it lasted at least
    ``min_silence_duration_ms``.
    """

    def __init__(self, config: Optional[DetectorConfig] = None,
                 config_store: Optional[ConfigStore] = None):
        """Initialize silence detector.

        Args:
            config: Starting configuration (defaults if None)
            config_store: Optional store; persisted settings are merged over
                ``config`` and every ``set_config`` is written back
        """
        self.config = config or DetectorConfig()
        self.config_store = config_store

        self.current_run: Optional[SilenceRun] = None
        self.silences: List[Silence] = []
        self.silence_counter = 0
        self.last_log_time: Optional[float] = None

        self._silence_callbacks: List[Callable[[Silence], None]] = []
        self._alert_callbacks: List[Callable[[SilenceAlert], None]] = []
        self.lock = threading.RLock()

        self.load_config()

    # Configuration

    def load_config(self) -> None:
        """Merge persisted settings over the current configuration."""
        if not self.config_store:
            return
        try:
            stored = self.config_store.get(DETECTOR_CONFIG_KEY)
        except ValueError as e:
            logger.error(f"Error loading detector config, using defaults: {e}")
            return

        if not stored:
            logger.info("Using default detector configuration")
            return
        if not isinstance(stored, dict):
            logger.error(f"Stored detector config is not a mapping ({type(stored).__name__}), "
                         f"using defaults")
            return

        try:
            self.config = self.config.merged(
                {k: v for k, v in stored.items() if k in DetectorConfig.field_names()}
            )
        except ValueError as e:
            logger.error(f"Invalid stored detector config, using defaults: {e}")
            return
        logger.info(f"Detector config loaded from store: threshold={self.config.threshold_db} dB, "
                    f"min_duration={self.config.min_silence_duration_ms} ms")

    def save_config(self) -> None:
        if self.config_store:
            self.config_store.set(DETECTOR_CONFIG_KEY, self.config.to_dict())

    def set_config(self, **changes: Any) -> DetectorConfig:
        """Apply a partial configuration update.

        Takes effect from the next sample. Past silences are not reclassified
        and an open run is kept.

        Raises:
            ValueError: If an unknown key or an invalid value is passed.
        """
        with self.lock:
            old_threshold = self.config.threshold_db
            self.config = self.config.merged(changes)
            self.save_config()
        logger.info(f"Detector config updated: threshold {old_threshold} -> {self.config.threshold_db} dB, "
                    f"changes={changes}")
        return self.config

    # Subscribers

    def on_silence(self, callback: Callable[[Silence], None]) -> None:
        """Register ``callback(silence)`` for every finalized silence."""
        self._silence_callbacks.append(callback)

    def on_alert(self, callback: Callable[[SilenceAlert], None]) -> None:
        """Register ``callback(alert)`` for every silence alert."""
        self._alert_callbacks.append(callback)

    def _notify(self, callbacks: List[Callable], payload) -> None:
        for callback in callbacks:
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Silence subscriber {callback!r} failed: {e}")

    # State machine

    @property
    def has_open_run(self) -> bool:
        return self.current_run is not None

    def process_sample(self, sample: LoudnessSample) -> Optional[Silence]:
        """Fold one loudness sample into the state machine.

        Returns:
            The Silence finalized by this sample, if any
        """
        with self.lock:
            now = sample.timestamp
            is_silent = sample.db < self.config.threshold_db
            self._log_level(sample, is_silent)

            if is_silent:
                if self.current_run is None:
                    self.current_run = SilenceRun(
                        start_time=now,
                        start_timestamp=datetime.now().isoformat(),
                        running_average_db=sample.db,
                    )
                    logger.debug(f"Silence run opened at {now:.0f}ms ({sample.db:.2f} dB)")
                else:
                    self.current_run.fold(sample.db)
                    self._check_alert(now)
                return None

            finalized = None
            if self.current_run is not None:
                finalized = self._close_run(now)
            return finalized

    def process_level(self, db: float, now: float, rms: float = 0.0) -> Optional[Silence]:
        return self.process_sample(LoudnessSample(db=db, timestamp=now, rms=rms))

    def _close_run(self, now: float) -> Optional[Silence]:
        duration = now - self.current_run.start_time
        if duration >= self.config.min_silence_duration_ms:
            return self._finalize(now)

        logger.debug(f"Discarded short silence run ({duration:.0f}ms < "
                     f"{self.config.min_silence_duration_ms}ms)")
        self.current_run = None
        return None

    def flush(self, now: float) -> Optional[Silence]:
        """Close any open run at ``now`` using the minimum-duration rule."""
        with self.lock:
            if self.current_run is None:
                return None
            return self._close_run(now)

    def _finalize(self, end_time: float) -> Silence:
        run = self.current_run
        duration = end_time - run.start_time
        recent_durations = [s.duration for s in self.silences]

        ai_classification = None
        if self.config.enable_ai_detection:
            ai_classification = ai_classify(
                duration, run.running_average_db, run.start_time, self.config, recent_durations
            )

        self.silence_counter += 1
        silence = Silence(
            silence_id=f"silence_{self.silence_counter}",
            start_time=run.start_time,
            end_time=end_time,
            duration=duration,
            timestamp=run.start_timestamp,
            avg_db=run.running_average_db,
            category=classify_silence(duration, self.config.natural_silence_max_duration_ms),
            alert_sent=run.alert_sent,
            ai_classification=ai_classification,
        )
        self.silences.append(silence)
        self.current_run = None

        logger.info(f"Silence detected: {duration / 1000:.1f}s, {silence.category}, "
                    f"avg {silence.avg_db:.2f} dB")
        self._notify(self._silence_callbacks, silence)
        return silence

    def _check_alert(self, now: float) -> None:
        run = self.current_run
        elapsed = now - run.start_time
        if elapsed < self.config.notification_threshold_ms or run.alert_sent:
            return

        # Mark first so a reentrant tick cannot fire a second alert
        run.alert_sent = True
        severity = "high" if elapsed > self.config.notification_threshold_ms * 2 else "medium"
        alert = SilenceAlert(
            duration=elapsed,
            severity=severity,
            timestamp=datetime.now().isoformat(),
            start_timestamp=run.start_timestamp,
            avg_db=run.running_average_db,
        )
        logger.warning(f"Silence alert: {elapsed / 1000:.1f}s (threshold "
                       f"{self.config.notification_threshold_ms / 1000:.0f}s), severity {severity}")
        self._notify(self._alert_callbacks, alert)

    def _log_level(self, sample: LoudnessSample, is_silent: bool) -> None:
        now = sample.timestamp
        if self.last_log_time is None or now - self.last_log_time > LEVEL_LOG_INTERVAL_MS:
            logger.debug(f"Audio level: {sample.db:.2f} dB (rms {sample.rms:.4f}), "
                         f"threshold {self.config.threshold_db}, silent={is_silent}, "
                         f"run_open={self.current_run is not None}")
            self.last_log_time = now

    # Log access

    def get_silences(self) -> List[Silence]:
        with self.lock:
            return list(self.silences)

    def get_unnatural_silences(self) -> List[Silence]:
        with self.lock:
            return [s for s in self.silences if s.category == UNNATURAL]

    def get_statistics(self) -> SilenceStatistics:
        with self.lock:
            if not self.silences:
                return SilenceStatistics()

            total_duration = sum(s.duration for s in self.silences)
            return SilenceStatistics(
                total=len(self.silences),
                natural=sum(1 for s in self.silences if s.category == NATURAL),
                unnatural=sum(1 for s in self.silences if s.category == UNNATURAL),
                avg_duration_ms=round(total_duration / len(self.silences)),
                total_silence_duration_ms=total_duration,
                alerts_sent=sum(1 for s in self.silences if s.alert_sent),
            )

    def reset(self) -> None:
        """Clear the log and drop any open run without recording it."""
        with self.lock:
            self.silences = []
            self.current_run = None
            self.last_log_time = None
        logger.debug("Silence detector reset")
