"""Natural/unnatural silence classification."""

from typing import Sequence, Dict, Any

from ..models.silence import NATURAL, UNNATURAL, AIClassification
from ..models.config import DetectorConfig


# Number of recorded silences used for the pattern heuristic
HISTORY_WINDOW = 5
# Confidence below which a silence is still read as natural
NATURAL_CONFIDENCE_CEILING = 0.6


def classify_silence(duration: float, natural_max_duration: float) -> str:
    """Baseline category of a finished run. This alone drives statistics."""
    if duration <= natural_max_duration:
        return NATURAL
    return UNNATURAL


def classification_reason(confidence: float) -> str:
    if confidence >= 0.8:
        return "Very likely unnatural silence (excessive duration and/or unusual pattern)"
    elif confidence >= 0.6:
        return "Possibly unnatural silence (abnormal duration)"
    elif confidence >= 0.4:
        return "Probably natural silence (standard pause)"
    return "Natural silence (normal pause in conversation)"


def score_confidence(
    duration: float,
    avg_db: float,
    config: DetectorConfig,
    recent_durations: Sequence[float] = (),
) -> float:
    """Heuristic confidence in [0, 1] that a silence is unnatural.

    Args:
        duration: Run duration in milliseconds
        avg_db: Average loudness of the run
        config: Detector configuration the run was recorded under
        recent_durations: Durations of previously recorded silences, oldest
            first; only the last ``HISTORY_WINDOW`` are considered
    """
    natural_max = config.natural_silence_max_duration_ms
    confidence = 0.5

    if duration > natural_max * 2:
        confidence += 0.3
    elif duration < natural_max:
        confidence -= 0.2

    # Deeper silence reads as more suspicious
    if avg_db < config.threshold_db - 10:
        confidence += 0.1

    window = list(recent_durations)[-HISTORY_WINDOW:]
    if window:
        avg_recent = sum(window) / len(window)
        if duration > avg_recent * 2:
            confidence += 0.15

    return max(0.0, min(1.0, confidence))


def ai_classify(
    duration: float,
    avg_db: float,
    start_time: float,
    config: DetectorConfig,
    recent_durations: Sequence[float] = (),
) -> AIClassification:
    """Advisory classification metadata. Never overrides the baseline category."""
    features: Dict[str, Any] = {
        "duration": duration,
        "avg_db": avg_db,
        "position": start_time,
        "previous_silences": len(recent_durations),
    }
    confidence = score_confidence(duration, avg_db, config, recent_durations)
    return AIClassification(
        confidence=confidence,
        is_natural=confidence < NATURAL_CONFIDENCE_CEILING,
        reason=classification_reason(confidence),
        features=features,
    )
