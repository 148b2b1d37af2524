"""Terminal user interface."""

from .silence_console import SilenceConsole

__all__ = ["SilenceConsole"]
