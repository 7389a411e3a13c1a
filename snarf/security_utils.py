#!/usr/bin/env python3
"""
security_utils.py (Snarf)

Shared helpers for keeping the session cookie out of logs and keeping
scraped names and archive members inside the workspace.
"""

from __future__ import annotations

from pathlib import Path

from snarf.errors import FilesystemError


# ============================================================================
# Secret Masking for Logs
# ============================================================================

def mask_sensitive(value: str, visible_chars: int = 4) -> str:
    """
    Mask a secret for logs and `config show`.

    A cookie pair keeps its name: "_autolab3_session=abc1****alue".
    """
    if not value:
        return "****"

    name, sep, secret = value.partition("=")
    if not sep:
        name, secret = "", value

    if len(secret) <= visible_chars * 2:
        masked = "****"
    else:
        masked = f"{secret[:visible_chars]}****{secret[-visible_chars:]}"
    return f"{name}{sep}{masked}"


# ============================================================================
# Path Validation
# ============================================================================

def is_safe_path(base_dir: Path, target_path: Path) -> bool:
    """
    Check if target_path is safely within base_dir (no symlink escape).

    Args:
        base_dir: The allowed base directory
        target_path: The path to validate

    Returns:
        True if target is within base (safe), False otherwise
    """
    try:
        base_resolved = Path(base_dir).resolve()
        target_resolved = Path(target_path).resolve()
        target_resolved.relative_to(base_resolved)
        return True
    except (ValueError, OSError):
        return False


def is_safe_name(name: str) -> bool:
    """A scraped name is usable as a single path component"""
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return True


def assignment_dir(workspace_path: Path, name: str) -> Path:
    """
    Resolve <workspace>/<name> for an assignment.

    Raises:
        FilesystemError: If the name would leave the workspace
    """
    if not is_safe_name(name):
        raise FilesystemError(
            message=f"Assignment name is not a safe folder name: {name!r}",
            context={"workspace": str(workspace_path)},
        )
    return Path(workspace_path) / name


def archive_path(workspace_path: Path, name: str) -> Path:
    """Transient <workspace>/<name>.zip used by download and submit"""
    return assignment_dir(workspace_path, name).with_name(f"{name}.zip")
