"""
Configuration & Global Constants
================================
This module serves as the central registry for the viewer's tunables.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (frame interval, indentation) and
   the file filter string from being scattered throughout the views.
2. Deployment: Logging can be switched to DEBUG on a frozen build without
   code changes, through environment variables.

Exports:
    VISIBLE_APP_NAME (str): Window title prefix.
    SOL_FILE_FILTER (str): Qt name filter used by the open dialog.
    FRAME_INTERVAL_MS (int): Period of the frame timer driving the app loop.
    INDENT_STEP_PX (int): Horizontal space of one tree indentation level.
    LOG_LEVEL (int): Level passed to setup_logging.
    LOG_FILE (Optional[str]): Optional log file path.
"""
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def get_log_level(default: int = logging.INFO) -> int:
    """
    Resolve the log level from SOLVIEWER_LOG_LEVEL (e.g. "DEBUG").
    Unknown names fall back to the default.
    """
    name = os.environ.get("SOLVIEWER_LOG_LEVEL", "").strip().upper()
    if not name:
        return default

    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level

    logger.warning(f"Unknown log level {name!r}, using {logging.getLevelName(default)}")
    return default


# Global Constants
VISIBLE_APP_NAME: str = "SOL Editor"

SOL_EXTENSION: str = "sol"
SOL_FILE_FILTER: str = f"SOL files (*.{SOL_EXTENSION})"

# ~60 FPS, the app loop drains the message bus on every tick
FRAME_INTERVAL_MS: int = 16

INDENT_STEP_PX: int = 10

LOG_LEVEL: int = get_log_level()
LOG_FILE: Optional[str] = os.environ.get("SOLVIEWER_LOG_FILE") or None
