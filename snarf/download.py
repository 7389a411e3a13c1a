#!/usr/bin/env python3
"""
download.py - Fetch and unpack an assignment's starter code

Steps:
1. Make sure the workspace exists
2. Stream <download_path>/<name>.zip to <workspace>/<name>.zip
3. Extract into <workspace>/<name>/
4. Delete the zip (always, even when extraction fails part way)
5. Fill in the Java header placeholders

Partially extracted files are left in place if extraction fails.
"""

import logging
import zipfile
from pathlib import Path
from typing import Optional

from snarf.client import AutolabClient
from snarf.config_utils import SnarfConfig, get_config
from snarf.errors import FilesystemError
from snarf.headers import apply_headers
from snarf.models import Assignment
from snarf.security_utils import archive_path, assignment_dir, is_safe_path


logger = logging.getLogger(__name__)


def extract_archive(zip_path: Path, dest_dir: Path) -> None:
    """
    Extract zip_path into dest_dir.

    Raises:
        FilesystemError: If the archive is corrupt or a member would land
            outside dest_dir
    """
    try:
        with zipfile.ZipFile(zip_path) as zf:
            for member in zf.namelist():
                if not is_safe_path(dest_dir, dest_dir / member):
                    raise FilesystemError(
                        message=f"Archive member escapes the assignment folder: {member}",
                        context={"archive": str(zip_path)},
                    )
            dest_dir.mkdir(parents=True, exist_ok=True)
            zf.extractall(dest_dir)
    except (zipfile.BadZipFile, OSError) as e:
        raise FilesystemError(
            message=f"Could not extract {zip_path.name}",
            context={"archive": str(zip_path), "destination": str(dest_dir)},
            cause=e,
        )


def download_assignment(
    assignment: Assignment,
    config: Optional[SnarfConfig] = None,
    client: Optional[AutolabClient] = None,
) -> Path:
    """
    Download, extract and stamp headers for one assignment.

    Returns:
        The extracted assignment folder

    Raises:
        NetworkError: If the archive request fails; nothing is extracted
        FilesystemError: If the archive cannot be extracted
    """
    if config is None:
        config = get_config()
    prefs = config.preferences

    dest_dir = assignment_dir(prefs.workspace_path, assignment.name)
    zip_path = archive_path(prefs.workspace_path, assignment.name)

    if client is None:
        client = AutolabClient(config)

    Path(prefs.workspace_path).mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading {assignment.name} from {assignment.download_url}")
    client.download_archive(assignment.download_url, zip_path)

    try:
        extract_archive(zip_path, dest_dir)
    finally:
        zip_path.unlink(missing_ok=True)

    apply_headers(dest_dir, prefs)
    logger.info(f"Extracted {assignment.name} to {dest_dir}")
    return dest_dir
