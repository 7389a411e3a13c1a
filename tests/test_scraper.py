# tests/test_scraper.py
"""
Tests for scraper.py against saved Autolab pages
"""
import pytest

from snarf.errors import ParseError
from snarf.models import FeedbackStatus, GRADING_IN_PROGRESS
from snarf.scraper import (
    find_authenticity_token,
    find_feedback_link,
    parse_assessment_list,
    parse_feedback_page,
    parse_grade_table,
)

from conftest import BASE_URL, read_fixture


DOWNLOAD_BASE = f"{BASE_URL}/apcssnarf"


class TestParseAssessmentList:
    """Tests for the assessments page parser"""

    @pytest.fixture
    def assignments(self):
        return parse_assessment_list(read_fixture("assessments.html"), BASE_URL, DOWNLOAD_BASE)

    def test_one_assignment_per_valid_item(self, assignments):
        """Items without a name or href are skipped"""
        assert [a.name for a in assignments] == ["HW1", "HW2", "Lab3"]

    def test_name_excludes_badge_text(self, assignments):
        """Badge labels inside the anchor are not part of the name"""
        assert all("Writeup" not in a.name and "New" not in a.name for a in assignments)

    def test_due_date_strips_prefix(self, assignments):
        assert assignments[0].due_date == "Wed, Dec 10 at 11:59pm"
        assert assignments[1].due_date == "Fri, Dec 12 at 11:59pm"

    def test_due_date_without_prefix_kept(self, assignments):
        assert assignments[2].due_date == "Sun, Dec 14"

    def test_badge_data_url_overrides_href(self, assignments):
        assert assignments[0].writeup_url == f"{BASE_URL}/courses/APCS-A-25/assessments/HW1/writeup"

    def test_writeup_falls_back_to_href(self, assignments):
        assert assignments[1].writeup_url == f"{BASE_URL}/courses/APCS-A-25/assessments/HW2"
        assert assignments[2].writeup_url == f"{BASE_URL}/courses/APCS-A-25/assessments/Lab3"

    def test_download_url_derived_from_name(self, assignments):
        assert assignments[0].download_url == f"{DOWNLOAD_BASE}/HW1.zip"

    def test_defaults_before_correlation(self, assignments):
        assert all(a.score == "" and a.is_downloaded is False for a in assignments)

    def test_missing_container_returns_empty(self):
        assert parse_assessment_list("<html><body><p>Log in</p></body></html>", BASE_URL, DOWNLOAD_BASE) == []

    def test_empty_document(self):
        assert parse_assessment_list("", BASE_URL, DOWNLOAD_BASE) == []

    def _single(self, date_html):
        html = (
            '<div class="collection red darken-4 date">'
            f'<a class="collection-item" href="/a/HW5">HW5<p class="date">{date_html}</p></a>'
            '</div>'
        )
        return parse_assessment_list(html, BASE_URL, DOWNLOAD_BASE)[0]

    def test_due_date_keeps_spaces_around_inline_markup(self):
        assert self._single("Due: <b>Wed, Dec 10</b> at 11:59pm").due_date == "Wed, Dec 10 at 11:59pm"

    def test_due_date_stops_at_line_break(self):
        assert self._single("Due: Wed, Dec 10\nLate penalty applies").due_date == "Wed, Dec 10"


class TestParseGradeTable:
    """Tests for the gradebook parser"""

    @pytest.fixture
    def grades(self):
        return parse_grade_table(read_fixture("gradebook.html"))

    def test_numeric_score_trailing_zero_stripped(self, grades):
        assert grades["HW1"] == "95"

    def test_spinner_means_in_progress(self, grades):
        assert grades["HW2"] == GRADING_IN_PROGRESS

    def test_not_submitted_dropped(self, grades):
        assert "Lab3" not in grades

    def test_short_rows_and_unnamed_rows_dropped(self, grades):
        assert set(grades) == {"HW1", "HW2"}

    @pytest.mark.parametrize("cell, expected", [
        ("95.0", "95"),
        ("95.0/100.0", "95/100"),
        ("10.05", "10.05"),
        ("A-", "A-"),
        ("<span>95.0</span> / 100", "95 / 100"),
    ])
    def test_score_cleanup(self, cell, expected):
        html = (
            '<div class="category"><table class="grades">'
            f'<tr><td><a>HW9</a></td><td></td><td></td><td>{cell}</td></tr>'
            '</table></div>'
        )
        assert parse_grade_table(html) == {"HW9": expected}


class TestFeedbackPages:
    """Tests for submission list and feedback page parsing"""

    def test_feedback_link_is_newest_submission(self):
        link = find_feedback_link(read_fixture("assessment_page.html"))
        assert link == "/courses/APCS-A-25/assessments/HW1/viewFeedback?feedback=1&submission_id=42"

    def test_no_submissions_means_no_link(self):
        assert find_feedback_link(read_fixture("assessment_page_no_submissions.html")) is None

    def test_in_progress_not_terminal(self):
        page = parse_feedback_page(read_fixture("feedback_in_progress.html"))
        assert page.status == FeedbackStatus.IN_PROGRESS
        assert not page.is_terminal

    def test_queued_with_table_not_terminal(self):
        """An in-progress marker wins over a results table"""
        page = parse_feedback_page(read_fixture("feedback_queued.html"))
        assert page.has_result_table
        assert not page.is_terminal

    def test_completed_page(self):
        page = parse_feedback_page(read_fixture("feedback_completed.html"))
        assert page.status == FeedbackStatus.COMPLETED
        assert page.is_terminal
        assert "All 12 tests passed" in page.output
        assert page.results == [("Correctness", "80/80"), ("Style", "20/20")]

    def test_results_table_alone_is_terminal(self):
        html = '<div class="result-summary"><table><tr><td>Total:</td><td>7</td></tr></table></div>'
        page = parse_feedback_page(html)
        assert page.status == FeedbackStatus.UNKNOWN
        assert page.is_terminal
        assert page.results == [("Total", "7")]

    def test_results_keep_spaces_around_inline_markup(self):
        html = (
            '<div class="result-summary"><table><tr>'
            '<td>Style <b>checks</b>:</td><td><span>18</span> / <span>20</span></td>'
            '</tr></table></div>'
        )
        assert parse_feedback_page(html).results == [("Style checks", "18 / 20")]

    def test_unmarked_page_not_terminal(self):
        assert not parse_feedback_page("<html><body>Loading</body></html>").is_terminal


class TestAuthenticityToken:
    """Tests for find_authenticity_token"""

    def test_token_found(self):
        assert find_authenticity_token(read_fixture("assessment_page.html")) == "tok123=="

    def test_missing_token_raises(self):
        with pytest.raises(ParseError) as exc:
            find_authenticity_token(read_fixture("assessment_page_no_token.html"))
        assert "authenticity token" in exc.value.message
