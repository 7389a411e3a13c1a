#!/usr/bin/env python3
"""
client.py - Autolab HTTP client

Owns the requests.Session, every URL Snarf talks to, and the mapping of
HTTP failures onto NetworkError. Pages are returned as text; parsing
lives in scraper.py.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote, urljoin

import requests
from requests.auth import HTTPBasicAuth

from snarf.config_utils import SnarfConfig, get_config, require_session_cookie
from snarf.errors import NetworkError, http_status_error
from snarf.security_utils import mask_sensitive


logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/142.0.0.0 Safari/537.36"
)

# The student gradebook view ignores this id, but the route requires one.
GRADEBOOK_USER_ID = 100

CHUNK_SIZE = 8192


class AutolabClient:
    """Cookie-authenticated access to one Autolab course"""

    def __init__(self, config: Optional[SnarfConfig] = None, session: Optional[requests.Session] = None):
        self.config = config if config is not None else get_config()
        self.cookie = require_session_cookie(self.config)
        self.base_url = self.config.base_url.rstrip("/")
        self.timeout = self.config.timeout

        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            "Cookie": self.cookie,
            "User-Agent": USER_AGENT,
        })
        logger.debug(f"Autolab client for {self.base_url} (cookie {mask_sensitive(self.cookie)})")

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    @property
    def course_url(self) -> str:
        return f"{self.base_url}/courses/{self.config.course}"

    @property
    def assessments_url(self) -> str:
        return f"{self.course_url}/assessments"

    @property
    def gradebook_url(self) -> str:
        return f"{self.course_url}/course_user_data/{GRADEBOOK_USER_ID}/gradebook/student"

    def assessment_url(self, name: str) -> str:
        return f"{self.assessments_url}/{quote(name)}"

    def handin_url(self, name: str) -> str:
        return f"{self.assessment_url(name)}/handin"

    @property
    def download_base(self) -> str:
        return f"{self.base_url}/{self.config.download_path}"

    def download_url(self, name: str) -> str:
        return f"{self.download_base}/{quote(name)}.zip"

    def absolute_url(self, href: str) -> str:
        return urljoin(self.base_url + "/", href)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _request(self, method: str, url: str, action: str, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(
                message=f"{action} failed: could not reach Autolab",
                endpoint=url,
                suggestion="Check your network connection and base_url.",
                cause=e,
            )
        if not response.ok:
            response.close()
            raise http_status_error(action, response.status_code, url)
        return response

    def get_page(self, url: str, action: str = "Fetching page") -> str:
        """GET an HTML page and return its text"""
        response = self._request("GET", url, action, headers={"Accept": "text/html"})
        return response.text

    def download_archive(self, url: str, dest: Path) -> Path:
        """
        Stream an archive to dest.

        The snarf server wants the shared basic-auth login on top of the
        session cookie. A partially written file is removed before the
        error propagates.
        """
        auth = HTTPBasicAuth(self.config.download_user, self.config.download_password)
        response = self._request("GET", url, "Download", auth=auth, stream=True)
        try:
            with open(dest, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as e:
            Path(dest).unlink(missing_ok=True)
            raise NetworkError(
                message="Download interrupted",
                endpoint=url,
                cause=e,
            )
        except OSError:
            Path(dest).unlink(missing_ok=True)
            raise
        finally:
            response.close()
        return dest

    def post_handin(self, name: str, token: str, archive: Path) -> requests.Response:
        """POST a zipped submission to the handin endpoint"""
        data = {
            "utf8": "✓",
            "authenticity_token": token,
            "integrity_checkbox": "1",
        }
        with open(archive, "rb") as fh:
            files = {"submission[file]": (f"{name}.zip", fh, "application/zip")}
            return self._request("POST", self.handin_url(name), "Submission", data=data, files=files)
