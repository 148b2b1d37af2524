"""Silence reports and session export."""

import json
import logging
from pathlib import Path
from datetime import datetime
from dataclasses import asdict
from typing import Dict, Any, Optional

from ..detection.detector import SilenceDetector

logger = logging.getLogger(__name__)


def build_silence_report(detector: SilenceDetector, session_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Build a report of a monitoring session.

    Returns:
        Report dictionary, or None when the session had no unnatural silence
    """
    statistics = detector.get_statistics()
    if statistics.unnatural == 0:
        logger.debug("No unnatural silences, skipping report")
        return None

    report = {
        "session_id": session_id,
        "generated_at": datetime.now().isoformat(),
        "statistics": asdict(statistics),
        "unnatural_silences": [asdict(s) for s in detector.get_unnatural_silences()],
        "config": detector.config.to_dict(),
    }
    logger.info(f"Silence report generated: {statistics.unnatural} unnatural of {statistics.total}")
    return report


def export_session(detector: SilenceDetector, export_dir: str, session_id: Optional[str] = None) -> str:
    """Write every recorded silence, the statistics and the config to JSON.

    Returns:
        Path to the export file
    """
    if session_id is None:
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S")

    export_path = Path(export_dir)
    export_path.mkdir(parents=True, exist_ok=True)
    export_file = export_path / f"silences_{session_id}.json"

    data = {
        "session_id": session_id,
        "exported_at": datetime.now().isoformat(),
        "silences": [asdict(s) for s in detector.get_silences()],
        "statistics": asdict(detector.get_statistics()),
        "config": detector.config.to_dict(),
    }

    try:
        with open(export_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        logger.info(f"Session exported: {export_file}")
        return str(export_file)
    except Exception as e:
        logger.error(f"Error exporting session: {e}")
        raise


def save_silence_report(report: Dict[str, Any], export_dir: str) -> str:
    """Write a report built by ``build_silence_report`` to JSON.

    Returns:
        Path to the report file
    """
    session_id = report.get("session_id") or datetime.now().strftime("%Y%m%d_%H%M%S")

    export_path = Path(export_dir)
    export_path.mkdir(parents=True, exist_ok=True)
    report_file = export_path / f"silence_report_{session_id}.json"

    with open(report_file, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2)
    logger.info(f"Silence report saved: {report_file}")
    return str(report_file)
