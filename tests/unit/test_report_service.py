"""Unit tests for silence reports, session export and console output."""

import io
import json
import pytest
from pathlib import Path
from rich.console import Console

from silencewatch.detection.detector import SilenceDetector
from silencewatch.services.report_service import build_silence_report, export_session, save_silence_report
from silencewatch.ui.silence_console import SilenceConsole
from silencewatch.models.silence import SilenceAlert


def record(detector, ticks, start):
    now = start
    for _ in range(ticks):
        detector.process_level(-60, now)
        now += 100
    detector.process_level(-10, now)
    return now + 100


@pytest.fixture
def detector():
    detector = SilenceDetector()
    now = record(detector, 40, 0)
    record(detector, 120, now)
    return detector


@pytest.mark.unit
class TestReportService:

    def test_no_report_without_unnatural(self):
        detector = SilenceDetector()
        record(detector, 40, 0)
        assert build_silence_report(detector) is None

    def test_report_contents(self, detector):
        report = build_silence_report(detector, session_id="abc")
        assert report["session_id"] == "abc"
        assert report["statistics"]["total"] == 2
        assert report["statistics"]["unnatural"] == 1
        assert len(report["unnatural_silences"]) == 1
        assert report["unnatural_silences"][0]["duration"] == 12000
        assert report["config"]["threshold_db"] == -40

    def test_export_session(self, detector, temp_data_dir):
        path = export_session(detector, f"{temp_data_dir}/exports", session_id="s1")
        assert Path(path).name == "silences_s1.json"

        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        assert data["session_id"] == "s1"
        assert [s["category"] for s in data["silences"]] == ["natural", "unnatural"]
        assert data["silences"][1]["ai_classification"]["confidence"] == pytest.approx(1.0)
        assert data["statistics"]["alerts_sent"] == 1

    def test_save_silence_report(self, detector, temp_data_dir):
        report = build_silence_report(detector, session_id="s2")
        path = save_silence_report(report, f"{temp_data_dir}/exports")
        assert Path(path).name == "silence_report_s2.json"

        with open(path, encoding='utf-8') as f:
            saved = json.load(f)
        assert saved["statistics"]["unnatural"] == 1
        assert saved["unnatural_silences"][0]["duration"] == 12000

    def test_export_default_session_id(self, temp_data_dir):
        path = export_session(SilenceDetector(), temp_data_dir)
        assert Path(path).exists()


@pytest.mark.unit
class TestSilenceConsole:

    @pytest.fixture
    def output(self):
        return io.StringIO()

    @pytest.fixture
    def silence_console(self, output):
        return SilenceConsole(Console(file=output, width=120, color_system=None))

    def test_prints_silence(self, silence_console, output, detector):
        silence_console.on_silence(detector.get_silences()[1])
        text = output.getvalue()
        assert "12.0s" in text
        assert "unnatural" in text
        assert silence_console.silences_shown == 1

    def test_prints_alert(self, silence_console, output):
        silence_console.on_alert(SilenceAlert(
            duration=25000, severity="high", timestamp="t", start_timestamp="s", avg_db=-70,
        ))
        assert "high" in output.getvalue()
        assert silence_console.alerts_shown == 1

    def test_summary(self, silence_console, output, detector):
        silence_console.render_summary(detector.get_statistics(), detector.get_unnatural_silences())
        text = output.getvalue()
        assert "Silence Summary" in text
        assert "Unnatural Silences" in text
        assert "1.00" in text
