# tests/conftest.py
"""
Pytest configuration and shared fixtures for Snarf tests

HTTP is faked with a mocked requests.Session whose request() is routed by
(method, url). A route may be a single response, an exception, or a list
consumed in order (the last entry repeats).
"""
import io
import logging
import zipfile
from pathlib import Path
from typing import Dict

import pytest

from snarf.client import AutolabClient
from snarf.config_utils import SnarfConfig


FILES_DIR = Path(__file__).parent / "files"

BASE_URL = "https://cs.lhs.fuhsd.org"
COURSE_URL = f"{BASE_URL}/courses/APCS-A-25"
ASSESSMENTS_URL = f"{COURSE_URL}/assessments"
GRADEBOOK_URL = f"{COURSE_URL}/course_user_data/100/gradebook/student"
FEEDBACK_URL = f"{ASSESSMENTS_URL}/HW1/viewFeedback?feedback=1&submission_id=42"

COOKIE = "_autolab3_session=abc123secretvalue"


def read_fixture(name: str) -> str:
    return (FILES_DIR / name).read_text(encoding="utf-8")


def make_zip(files: Dict[str, str]) -> bytes:
    """Build an in-memory zip from {member name: text}"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, text in files.items():
            zf.writestr(name, text)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's real settings out of every test"""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for var in (
        "SNARF_WORKSPACE",
        "SNARF_SESSION_COOKIE",
        "SNARF_AUTHOR_NAME",
        "SNARF_PERIOD",
        "SNARF_COLLABORATORS",
        "SNARF_BASE_URL",
        "SNARF_COURSE",
    ):
        monkeypatch.delenv(var, raising=False)
    yield home
    # CLI runs attach a handler bound to CliRunner's (now closed) stderr
    snarf_logger = logging.getLogger("snarf")
    snarf_logger.handlers.clear()
    snarf_logger.setLevel(logging.NOTSET)


@pytest.fixture
def workspace(tmp_path) -> Path:
    """Workspace root path (not created)"""
    return tmp_path / "workspace"


@pytest.fixture
def config(workspace) -> SnarfConfig:
    return SnarfConfig(
        workspace_path=workspace,
        session_cookie=COOKIE,
        author_name="Ada Lovelace",
        period="3",
        collaborators=None,
    )


@pytest.fixture
def make_response(mocker):
    """Factory for fake requests.Response objects"""
    def factory(status: int = 200, text: str = "", content: bytes = b""):
        response = mocker.Mock()
        response.status_code = status
        response.ok = status < 400
        response.text = text
        response.iter_content.return_value = [content] if content else []
        return response
    return factory


@pytest.fixture
def fake_session(mocker, make_response):
    """A requests.Session stand-in routed by (method, url)"""
    session = mocker.Mock()
    session.headers = {}
    session.routes = {}

    def request(method, url, **kwargs):
        route = session.routes.get((method, url))
        if route is None:
            return make_response(404)
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, Exception):
            raise route
        return route

    session.request.side_effect = request
    return session


@pytest.fixture
def client(config, fake_session) -> AutolabClient:
    return AutolabClient(config, session=fake_session)


def calls_to(session, method: str, url: str) -> int:
    """Count requests made to one endpoint"""
    return sum(
        1 for call in session.request.call_args_list
        if call.args[0] == method and call.args[1] == url
    )
