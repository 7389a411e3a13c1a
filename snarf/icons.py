#!/usr/bin/env python3
"""
icons.py - Centralized icon/emoji definitions for Snarf CLI output

Usage:
    from snarf.icons import icons
    click.echo(f"{icons.SUCCESS} Downloaded HW1")

All unicode characters are defined here once. Import from this module
instead of pasting emoji into other files.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Icons:
    """
    Centralized icon definitions.

    Categories:
    - Status: SUCCESS, ERROR, WARNING, INFO, DEBUG
    - Actions: UPLOAD, DOWNLOAD, EDIT, SEARCH
    - Assignment state: DOWNLOADED, NOT_DOWNLOADED, GRADED
    - Progress: WORKING, WAITING
    """

    # Status
    SUCCESS: str = "✅"
    ERROR: str = "❌"
    WARNING: str = "⚠️"
    INFO: str = "ℹ️"
    DEBUG: str = "🔍"

    # Actions
    UPLOAD: str = "⬆️"
    DOWNLOAD: str = "⬇️"
    EDIT: str = "✏️"
    SEARCH: str = "🔎"
    LINK: str = "🔗"
    FOLDER: str = "📁"

    # Assignment state
    DOWNLOADED: str = "✔"
    NOT_DOWNLOADED: str = "○"
    GRADED: str = "📊"

    # Progress
    WORKING: str = "⏳"
    WAITING: str = "🕐"


class AsciiIcons:
    """ASCII-only fallback icons for limited terminals."""

    SUCCESS = "[OK]"
    ERROR = "[X]"
    WARNING = "[!]"
    INFO = "[i]"
    DEBUG = "[?]"
    UPLOAD = "[^]"
    DOWNLOAD = "[v]"
    EDIT = "[*]"
    SEARCH = "[/]"
    LINK = "[L]"
    FOLDER = "[D]"
    DOWNLOADED = "[x]"
    NOT_DOWNLOADED = "[ ]"
    GRADED = "[#]"
    WORKING = "[.]"
    WAITING = "[:]"


# Global singleton instance
icons = Icons()


def use_ascii_icons():
    """Switch to ASCII-only icons globally."""
    global icons
    icons = AsciiIcons()


def downloaded_icon(is_downloaded: bool) -> str:
    """Return the icon for an assignment's download status."""
    return icons.DOWNLOADED if is_downloaded else icons.NOT_DOWNLOADED


DOT_LINE = "." * 70


def fence(label: str) -> str:
    """
    Build a visual fence with a timestamped label.
    Used to bracket the output of long-running commands.
    """
    ts = datetime.now().strftime("%H:%M:%S")
    return f"{DOT_LINE}\n[{ts}] {label}\n"
