# tests/test_download.py
"""
Tests for download.py
"""
import pytest
import requests

from snarf.download import download_assignment
from snarf.errors import FilesystemError, NetworkError
from snarf.models import Assignment

from conftest import BASE_URL, make_zip, read_fixture


DOWNLOAD_URL = f"{BASE_URL}/apcssnarf/HW1.zip"


@pytest.fixture
def assignment():
    return Assignment(
        name="HW1",
        due_date="Wed, Dec 10 at 11:59pm",
        writeup_url=f"{BASE_URL}/courses/APCS-A-25/assessments/HW1",
        download_url=DOWNLOAD_URL,
    )


class TestDownloadAssignment:
    """Tests for download_assignment"""

    def test_extracts_and_stamps_headers(self, assignment, config, client, fake_session, make_response, workspace):
        archive = make_zip({"Starter.java": read_fixture("Starter.java"), "data/input.txt": "1 2 3\n"})
        fake_session.routes[("GET", DOWNLOAD_URL)] = make_response(content=archive)

        dest = download_assignment(assignment, config, client)

        assert dest == workspace / "HW1"
        assert (dest / "data" / "input.txt").read_text() == "1 2 3\n"
        starter = (dest / "Starter.java").read_text()
        assert "@author Ada Lovelace" in starter
        assert "TODO Date" not in starter
        assert not (workspace / "HW1.zip").exists()

    def test_sends_basic_auth_and_streams(self, assignment, config, client, fake_session, make_response):
        fake_session.routes[("GET", DOWNLOAD_URL)] = make_response(content=make_zip({"A.java": ""}))

        download_assignment(assignment, config, client)

        kwargs = fake_session.request.call_args.kwargs
        assert kwargs["auth"].username == "lhsuser"
        assert kwargs["stream"] is True
        assert fake_session.headers["Cookie"] == config.session_cookie

    def test_creates_workspace(self, assignment, config, client, fake_session, make_response, workspace):
        fake_session.routes[("GET", DOWNLOAD_URL)] = make_response(content=make_zip({"A.java": ""}))
        assert not workspace.exists()

        download_assignment(assignment, config, client)

        assert workspace.is_dir()

    def test_404_leaves_nothing_behind(self, assignment, config, client, fake_session, make_response, workspace):
        fake_session.routes[("GET", DOWNLOAD_URL)] = make_response(status=404)

        with pytest.raises(NetworkError) as exc:
            download_assignment(assignment, config, client)

        assert exc.value.status_code == 404
        assert not (workspace / "HW1").exists()
        assert not (workspace / "HW1.zip").exists()

    def test_interrupted_stream_removes_partial_zip(self, assignment, config, client, fake_session, make_response, workspace):
        response = make_response()
        response.iter_content.side_effect = requests.ConnectionError("connection reset")
        fake_session.routes[("GET", DOWNLOAD_URL)] = response

        with pytest.raises(NetworkError):
            download_assignment(assignment, config, client)

        assert not (workspace / "HW1.zip").exists()
        assert not (workspace / "HW1").exists()

    def test_corrupt_archive(self, assignment, config, client, fake_session, make_response, workspace):
        fake_session.routes[("GET", DOWNLOAD_URL)] = make_response(content=b"<html>not a zip</html>")

        with pytest.raises(FilesystemError):
            download_assignment(assignment, config, client)

        assert not (workspace / "HW1.zip").exists()

    def test_rejects_members_outside_folder(self, assignment, config, client, fake_session, make_response, workspace):
        fake_session.routes[("GET", DOWNLOAD_URL)] = make_response(content=make_zip({"../escape.java": "x"}))

        with pytest.raises(FilesystemError):
            download_assignment(assignment, config, client)

        assert not (workspace / "escape.java").exists()
        assert not (workspace / "HW1.zip").exists()

    def test_unsafe_name_rejected_before_request(self, config, client, fake_session):
        bad = Assignment(name="../HW1", due_date="", writeup_url="x", download_url=DOWNLOAD_URL)

        with pytest.raises(FilesystemError):
            download_assignment(bad, config, client)

        fake_session.request.assert_not_called()
