#!/usr/bin/env python3
"""
headers.py - Fill in TODO placeholders in Java file headers

Starter code ships with headers like:

    /**
     * @author TODO Your Name
     * @date TODO Date
     * @period TODO Your Period
     * Collaborators: TODO list collaborators
     */

apply_headers() walks an assignment folder and replaces each placeholder
everywhere it appears. Matching is case-insensitive and tolerates any run
of whitespace between words. Once replaced, a placeholder is gone, so
running it again changes nothing.
"""

import logging
import re
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from snarf.models import Preferences


logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".java"

DEFAULT_COLLABORATORS = "Me, myself, and I"

AUTHOR_RE = re.compile(r"TODO\s+Your\s+Name", re.IGNORECASE)
DATE_RE = re.compile(r"TODO\s+Date", re.IGNORECASE)
PERIOD_RE = re.compile(r"TODO\s+Your\s+Period", re.IGNORECASE)
COLLABORATORS_RE = re.compile(r"TODO\s+list\s+collaborators", re.IGNORECASE)


def format_header_date(day: date) -> str:
    """October 5, 2026"""
    return f"{day:%B} {day.day}, {day.year}"


def _replacements(prefs: Preferences, today: date) -> List[Tuple[re.Pattern, str]]:
    rules = []
    if prefs.author_name:
        rules.append((AUTHOR_RE, prefs.author_name))
    rules.append((DATE_RE, format_header_date(today)))
    if prefs.period:
        rules.append((PERIOD_RE, prefs.period))
    rules.append((COLLABORATORS_RE, prefs.collaborators or DEFAULT_COLLABORATORS))
    return rules


def substitute_placeholders(content: str, prefs: Preferences, today: Optional[date] = None) -> Tuple[str, bool]:
    """
    Replace header placeholders in content.

    Returns:
        (new content, whether anything was replaced)
    """
    today = today or date.today()
    modified = False
    for pattern, value in _replacements(prefs, today):
        # Function replacement: names may contain backslashes
        content, count = pattern.subn(lambda _m, v=value: v, content)
        if count:
            modified = True
    return content, modified


def apply_headers(
    root_dir: Path,
    prefs: Preferences,
    today: Optional[date] = None,
    extension: str = SOURCE_EXTENSION,
) -> List[Path]:
    """
    Fill placeholders in every source file under root_dir.

    Files are only rewritten when a placeholder was found. A missing
    root_dir is logged and ignored.

    Returns:
        Paths of the files that were rewritten
    """
    root = Path(root_dir)
    logger.debug(f"Scanning folder for Java headers: {root}")
    if not root.is_dir():
        logger.info(f"Folder does not exist: {root}")
        return []

    today = today or date.today()
    changed = []
    for path in sorted(root.iterdir()):
        if path.is_dir():
            changed.extend(apply_headers(path, prefs, today, extension))
        elif path.name.endswith(extension):
            logger.debug(f"Checking Java file: {path.name}")
            # newline="" keeps Windows line endings intact on rewrite;
            # surrogateescape carries non-UTF-8 bytes through unchanged
            with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
                content = f.read()
            new_content, modified = substitute_placeholders(content, prefs, today)
            if modified:
                logger.info(f"Updated header in {path.name}")
                with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                    f.write(new_content)
                changed.append(path)
    return changed
