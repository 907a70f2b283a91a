"""
Debug output for CRM Calendar.

Messages go to stderr with a timestamp and a component tag. Output is off
until the launcher enables it with --debug.
"""

import sys
from datetime import datetime


_debug_enabled: bool = False


def set_debug(enabled: bool):
    """Enable or disable debug output for the whole application."""
    global _debug_enabled
    _debug_enabled = enabled


def debug_print(component: str, message: str) -> None:
    if not _debug_enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {component}: {message}", file=sys.stderr)
