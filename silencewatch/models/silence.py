"""Silence-related data models."""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any


NATURAL = "natural"
UNNATURAL = "unnatural"


@dataclass
class LoudnessSample:
    """One polling tick reduced to a single loudness value."""
    db: float
    timestamp: float  # Milliseconds, clock of the owning monitor
    rms: float = 0.0


@dataclass
class SilenceRun:
    """In-progress silence run. At most one is open per detector."""
    start_time: float  # Milliseconds
    start_timestamp: str  # ISO wall-clock time the run opened
    running_average_db: float
    sample_count: int = 1
    alert_sent: bool = False

    def fold(self, db: float) -> None:
        """Fold one more below-threshold sample into the running average."""
        self.running_average_db = (
            (self.running_average_db * self.sample_count + db) / (self.sample_count + 1)
        )
        self.sample_count += 1


@dataclass(frozen=True)
class AIClassification:
    """Advisory confidence metadata attached to a finalized silence."""
    confidence: float
    is_natural: bool
    reason: str
    features: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Silence:
    """Finalized silence, appended to the detector log."""
    silence_id: str
    start_time: float  # Milliseconds
    end_time: float    # Milliseconds
    duration: float    # Milliseconds
    timestamp: str     # ISO wall-clock time the run opened
    avg_db: float
    category: str      # NATURAL | UNNATURAL
    alert_sent: bool = False
    ai_classification: Optional[AIClassification] = None

    @property
    def is_unnatural(self) -> bool:
        return self.category == UNNATURAL


@dataclass(frozen=True)
class SilenceAlert:
    """Alert fired when an open run crosses the notification threshold."""
    duration: float  # Milliseconds elapsed when the alert fired
    severity: str    # "medium" | "high"
    timestamp: str   # ISO wall-clock time the alert fired
    start_timestamp: str
    avg_db: float
    alert_type: str = "unnaturalSilence"


@dataclass
class SilenceStatistics:
    """Aggregate statistics over the finalized silence log."""
    total: int = 0
    natural: int = 0
    unnatural: int = 0
    avg_duration_ms: int = 0
    total_silence_duration_ms: float = 0.0
    alerts_sent: int = 0
