"""Unit tests for silence classification."""

import pytest

from silencewatch.detection.classifier import (
    classify_silence, score_confidence, ai_classify, classification_reason
)
from silencewatch.models.config import DetectorConfig
from silencewatch.models.silence import NATURAL, UNNATURAL


@pytest.fixture
def config():
    return DetectorConfig()


@pytest.mark.unit
class TestClassifySilence:

    @pytest.mark.parametrize("duration", [0, 3000, 4999, 5000])
    def test_natural_up_to_boundary(self, duration):
        assert classify_silence(duration, 5000) == NATURAL

    @pytest.mark.parametrize("duration", [5001, 10000, 60000])
    def test_unnatural_past_boundary(self, duration):
        assert classify_silence(duration, 5000) == UNNATURAL


@pytest.mark.unit
class TestScoreConfidence:

    def test_short_silence_lowers_confidence(self, config):
        assert score_confidence(4000, -45, config) == pytest.approx(0.3)

    def test_between_boundaries_is_neutral(self, config):
        assert score_confidence(7000, -45, config) == pytest.approx(0.5)

    def test_long_silence_raises_confidence(self, config):
        assert score_confidence(12000, -45, config) == pytest.approx(0.8)

    def test_deep_silence_adds(self, config):
        # -60 is more than 10 dB under -40
        assert score_confidence(7000, -60, config) == pytest.approx(0.6)
        assert score_confidence(7000, -50, config) == pytest.approx(0.5)

    def test_pattern_anomaly(self, config):
        assert score_confidence(7000, -45, config, [3000, 3000]) == pytest.approx(0.65)
        assert score_confidence(7000, -45, config, [4000, 4000]) == pytest.approx(0.5)

    def test_only_last_five_in_history(self, config):
        history = [100000, 3000, 3000, 3000, 3000, 3000]
        assert score_confidence(7000, -45, config, history) == pytest.approx(0.65)

    def test_clamped_to_one(self, config):
        assert score_confidence(30000, -90, config, [3000]) == 1.0

    def test_respects_config_boundaries(self):
        config = DetectorConfig(natural_silence_max_duration_ms=1000, threshold_db=-20)
        assert score_confidence(2500, -35, config) == pytest.approx(0.9)


@pytest.mark.unit
class TestAIClassify:

    def test_metadata(self, config):
        result = ai_classify(12000, -60, 500, config, [3000, 4000])
        assert result.confidence == 1.0
        assert result.is_natural is False
        assert result.reason == classification_reason(1.0)
        assert result.features == {
            "duration": 12000,
            "avg_db": -60,
            "position": 500,
            "previous_silences": 2,
        }

    def test_low_confidence_reads_natural(self, config):
        result = ai_classify(3500, -45, 0, config)
        assert result.is_natural is True

    @pytest.mark.parametrize("confidence,fragment", [
        (0.9, "Very likely unnatural"),
        (0.6, "Possibly unnatural"),
        (0.4, "Probably natural"),
        (0.1, "Natural silence"),
    ])
    def test_reason_tiers(self, confidence, fragment):
        assert classification_reason(confidence).startswith(fragment)
