"""Services layer for SilenceWatch reporting."""

from .report_service import build_silence_report, export_session, save_silence_report

__all__ = [
    "build_silence_report",
    "export_session",
    "save_silence_report",
]
