"""Detector configuration model."""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any


NUMERIC_FIELDS = (
    "threshold_db",
    "min_silence_duration_ms",
    "natural_silence_max_duration_ms",
    "check_interval_ms",
    "notification_threshold_ms",
)
DURATION_FIELDS = (
    "min_silence_duration_ms",
    "natural_silence_max_duration_ms",
    "notification_threshold_ms",
)


@dataclass
class DetectorConfig:
    """Tunable parameters of the silence detector. Durations in milliseconds."""
    threshold_db: float = -40.0
    min_silence_duration_ms: float = 3000
    natural_silence_max_duration_ms: float = 5000
    check_interval_ms: float = 100
    enable_ai_detection: bool = True
    notification_threshold_ms: float = 10000

    def __post_init__(self):
        """Coerce numeric fields to float and reject values the detector cannot use.

        Raises:
            ValueError: If a value has the wrong type or is out of range.
        """
        for name in NUMERIC_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool):
                raise ValueError(f"Detector config '{name}' must be a number, got {value!r}")
            try:
                setattr(self, name, float(value))
            except (TypeError, ValueError):
                raise ValueError(f"Detector config '{name}' must be a number, got {value!r}")

        if not isinstance(self.enable_ai_detection, bool):
            raise ValueError(f"Detector config 'enable_ai_detection' must be true or false, "
                             f"got {self.enable_ai_detection!r}")
        if not self.check_interval_ms > 0:
            raise ValueError(f"Detector config 'check_interval_ms' must be positive, "
                             f"got {self.check_interval_ms}")
        for name in DURATION_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"Detector config '{name}' must not be negative")

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}

    def merged(self, changes: Dict[str, Any]) -> "DetectorConfig":
        """Return a copy with ``changes`` applied.

        Raises:
            ValueError: If a key is not a known configuration field or a
                value is invalid.
        """
        unknown = set(changes) - self.field_names()
        if unknown:
            raise ValueError(f"Unknown detector config keys: {sorted(unknown)}")
        values = asdict(self)
        values.update(changes)
        return DetectorConfig(**values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectorConfig":
        """Build a config from a dict, ignoring keys this version does not know.

        Raises:
            ValueError: If ``data`` is not a mapping or a value is invalid.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Detector config must be a mapping, got {type(data).__name__}")
        known = cls.field_names()
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
