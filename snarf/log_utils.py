"""
log_utils.py - Logging setup with icons

Modules log through logging.getLogger(__name__); only the CLI entry point
calls setup_logging().
"""

import logging

from snarf import icons as icon_module


# Message-only; no per-line timestamps
LOG_FORMAT = "%(message)s"


def _level_icons() -> dict:
    icons = icon_module.icons
    return {
        logging.DEBUG: icons.DEBUG,
        logging.INFO: icons.INFO,
        logging.WARNING: icons.WARNING,
        logging.ERROR: icons.ERROR,
        logging.CRITICAL: icons.ERROR,
    }


class IconLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        icon = _level_icons().get(record.levelno, icon_module.icons.INFO)
        base = super().format(record)
        return f"{icon} {base}"


def setup_logging(verbosity: int) -> None:
    """
    Route snarf logs to stderr.

    verbosity 0 shows warnings and errors, 1 adds progress, 2+ adds debug.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler()
    handler.setFormatter(IconLogFormatter(LOG_FORMAT))

    root = logging.getLogger("snarf")
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)
