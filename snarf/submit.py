#!/usr/bin/env python3
"""
submit.py - Package and hand in an assignment

The folder is re-stamped, zipped to <workspace>/<name>.zip, and uploaded
with a freshly scraped authenticity token. The zip is removed afterwards
whether or not the upload succeeded, so a retry always starts clean.

Submitting the same assignment twice at once races on that zip path;
callers that allow concurrent submissions must serialize them per name.
"""

import logging
import zipfile
from pathlib import Path
from typing import Optional

from snarf.client import AutolabClient
from snarf.config_utils import SnarfConfig, get_config
from snarf.errors import missing_folder_error
from snarf.headers import apply_headers
from snarf.models import Assignment
from snarf.scraper import find_authenticity_token
from snarf.security_utils import archive_path, assignment_dir


logger = logging.getLogger(__name__)


def package_folder(folder: Path, zip_path: Path, arc_root: str) -> Path:
    """
    Zip folder at maximum compression with entries under arc_root/.

    The archive is fully written and closed when this returns.
    """
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for path in sorted(folder.rglob("*")):
            arcname = Path(arc_root) / path.relative_to(folder)
            if path.is_dir():
                zf.write(path, arcname.as_posix() + "/")
            elif path.is_file():
                zf.write(path, arcname.as_posix())
    return zip_path


def submit_assignment(
    assignment: Assignment,
    config: Optional[SnarfConfig] = None,
    client: Optional[AutolabClient] = None,
) -> bool:
    """
    Hand in the local copy of an assignment.

    Raises:
        FilesystemError: If the assignment folder does not exist (no
            request is made)
        NetworkError: If the assessment page or handin request fails
        ParseError: If the assessment page has no authenticity token
    """
    if config is None:
        config = get_config()
    prefs = config.preferences

    folder = assignment_dir(prefs.workspace_path, assignment.name)
    zip_path = archive_path(prefs.workspace_path, assignment.name)

    if not folder.is_dir():
        raise missing_folder_error(folder)

    if client is None:
        client = AutolabClient(config)

    apply_headers(folder, prefs)

    try:
        package_folder(folder, zip_path, assignment.name)
        logger.info(f"Packaged {folder} ({zip_path.stat().st_size} bytes)")

        page = client.get_page(client.assessment_url(assignment.name), "Fetching assessment page")
        token = find_authenticity_token(page)

        client.post_handin(assignment.name, token, zip_path)
        logger.info(f"Submitted {assignment.name}")
    finally:
        if zip_path.exists():
            zip_path.unlink()
            logger.debug(f"Removed {zip_path}")

    return True
