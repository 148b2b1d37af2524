"""Terminal output for silence events and session summaries."""

import logging
from typing import Optional, List
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.silence import Silence, SilenceAlert, SilenceStatistics, UNNATURAL


logger = logging.getLogger(__name__)


class SilenceConsole:
    """Prints silences and alerts as they happen, and a summary at the end."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.silences_shown = 0
        self.alerts_shown = 0

    def on_silence(self, silence: Silence) -> None:
        style = "bold red" if silence.category == UNNATURAL else "green"
        line = Text.assemble(
            ("SILENCE ", "bold"),
            (f"{silence.duration / 1000:.1f}s ", "cyan"),
            (silence.category, style),
            f"  avg {silence.avg_db:.1f} dB",
        )
        if silence.ai_classification:
            line.append(f"  confidence {silence.ai_classification.confidence:.2f}", style="dim")
        self.console.print(line)
        self.silences_shown += 1

    def on_alert(self, alert: SilenceAlert) -> None:
        style = "white on red" if alert.severity == "high" else "black on yellow"
        self.console.print(Panel(
            Text(f"Silence for {alert.duration / 1000:.1f}s (severity: {alert.severity})", style="bold"),
            title="ALERT",
            style=style,
        ))
        self.alerts_shown += 1

    def render_summary(self, statistics: SilenceStatistics, unnatural: List[Silence]) -> None:
        stats_table = Table(title="Silence Summary", show_header=True, header_style="bold magenta")
        stats_table.add_column("Metric", style="cyan")
        stats_table.add_column("Value", style="white")
        stats_table.add_row("Total", str(statistics.total))
        stats_table.add_row("Natural", str(statistics.natural))
        stats_table.add_row("Unnatural", str(statistics.unnatural))
        stats_table.add_row("Average duration", f"{statistics.avg_duration_ms / 1000:.1f}s")
        stats_table.add_row("Total silence", f"{statistics.total_silence_duration_ms / 1000:.1f}s")
        stats_table.add_row("Alerts sent", str(statistics.alerts_sent))
        self.console.print(stats_table)

        if not unnatural:
            return

        detail_table = Table(title="Unnatural Silences", show_header=True, header_style="bold red")
        detail_table.add_column("Started")
        detail_table.add_column("Duration")
        detail_table.add_column("Avg dB")
        detail_table.add_column("Confidence")
        detail_table.add_column("Alert")
        for silence in unnatural:
            confidence = (f"{silence.ai_classification.confidence:.2f}"
                          if silence.ai_classification else "-")
            detail_table.add_row(
                silence.timestamp,
                f"{silence.duration / 1000:.1f}s",
                f"{silence.avg_db:.1f}",
                confidence,
                "yes" if silence.alert_sent else "no",
            )
        self.console.print(detail_table)
