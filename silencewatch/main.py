"""Main application entry point for SilenceWatch."""

import sys
import time
import argparse
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from silencewatch.audio.silence_pub import SilencePublisher
from silencewatch.audio.sources import MicrophoneSource, WaveFileSource
from silencewatch.detection.detector import SilenceDetector
from silencewatch.detection.monitor import SilenceMonitor
from silencewatch.services.report_service import build_silence_report, export_session, save_silence_report
from silencewatch.storage.config_store import ConfigStore
from silencewatch.ui.silence_console import SilenceConsole

from .config import SilenceWatchConfig

logger = logging.getLogger(__name__)


class Server:

    def __init__(self, config_path: Optional[str], log_level: Optional[str] = None):
        # Load configuration
        self.config = SilenceWatchConfig(config_path)
        # Set up logging (command line overrides config)
        level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, level)
        self.should_exit = False

    def init(self):
        logger.info("Initializing services...")

        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.config_store = ConfigStore(self.config.get_state_file())
        self.detector = SilenceDetector(self.config.get_detector_config(), self.config_store)
        self.publisher = SilencePublisher()
        self.monitor = SilenceMonitor(self.detector, self.publisher)

        # Held here: the publisher only keeps weak references to listeners
        self.silence_console = SilenceConsole()
        self.publisher.subscribe_silences(self.silence_console.on_silence)
        self.publisher.subscribe_alerts(self.silence_console.on_alert)

    def run(self, duration: Optional[int]) -> bool:
        """Monitor the microphone for ``duration`` seconds (until interrupted if None)."""
        source = MicrophoneSource(
            sample_rate=self.config.get('audio.sample_rate', 16000),
            chunk_size=self.config.get('audio.chunk_size', 1024),
            channels=self.config.get('audio.channels', 1),
        )
        result = self.monitor.initialize(source)
        if not result["success"]:
            logger.error(f"Could not initialize monitor: {result['message']}")
            return False

        try:
            started = self.monitor.start_monitoring()
            if not started["success"]:
                logger.error(f"Could not start monitoring: {started['message']}")
                return False
            if duration:
                time.sleep(duration)
            else:
                while not self.should_exit:
                    time.sleep(1)
        finally:
            self.cleanup()
        return True

    def replay(self, input_file: str) -> bool:
        if not Path(input_file).exists():
            logger.error(f"Input file not found: {input_file}")
            return False
        self.monitor.replay(WaveFileSource(input_file))
        return True

    def summarize(self, export: bool = False) -> Optional[str]:
        """Print the session summary and save the silence report if there is one.

        Returns:
            Path to the saved report, or None when the session had no unnatural silence
        """
        self.silence_console.render_summary(
            self.detector.get_statistics(), self.detector.get_unnatural_silences()
        )
        export_dir = self.config.get_export_directory()

        report_path = None
        report = build_silence_report(self.detector, session_id=self.session_id)
        if report:
            logger.warning(f"{report['statistics']['unnatural']} unnatural silences in session")
            report_path = save_silence_report(report, export_dir)
            self.silence_console.console.print(f"Silence report saved to {report_path}")
        if export:
            path = export_session(self.detector, export_dir, session_id=self.session_id)
            self.silence_console.console.print(f"Exported to {path}")
        return report_path

    def cleanup(self):
        self.monitor.cleanup()


def setup_logging(config, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/silencewatch.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("SilenceWatch starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def main() -> None:
    """Main entry point for SilenceWatch."""
    parser = argparse.ArgumentParser(
        description="SilenceWatch - silence detection and alerting for audio streams"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: silencewatch.yaml if present)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    parser.add_argument(
        "--duration",
        type=int,
        help="Seconds of microphone monitoring (default: until Ctrl+C)"
    )

    parser.add_argument(
        "--input-file",
        type=str,
        help="Analyze a WAV file instead of the microphone"
    )

    parser.add_argument(
        "--export",
        action="store_true",
        help="Export the session's silences to JSON when done"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="SilenceWatch v0.1.0"
    )

    args = parser.parse_args()

    server = Server(args.config, args.log_level)
    try:
        server.init()
        if args.input_file:
            ok = server.replay(args.input_file)
        else:
            ok = server.run(args.duration)
        if not ok:
            sys.exit(1)
        server.summarize(export=args.export)
    except KeyboardInterrupt:
        server.cleanup()
        server.summarize(export=args.export)
        print("\nGoodbye!")
    except Exception as e:
        print(f"Error: {e}")
        logging.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
