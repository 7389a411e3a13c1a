# tests/test_models.py
"""
Tests for Assignment display helpers
"""
import pytest

from snarf.models import Assignment, NO_GRADE, GRADING_IN_PROGRESS


def _assignment(score="", due="Wed, Dec 10 at 11:59pm", downloaded=False):
    return Assignment(
        name="HW1",
        due_date=due,
        writeup_url="https://example.test/HW1",
        download_url="https://example.test/HW1.zip",
        score=score,
        is_downloaded=downloaded,
    )


class TestAssignmentDisplay:

    def test_short_due_date(self):
        assert _assignment().short_due_date == "Dec 10"

    def test_unparseable_due_date_kept(self):
        assert _assignment(due="whenever").short_due_date == "whenever"

    @pytest.mark.parametrize("score, graded", [
        ("", False),
        (NO_GRADE, False),
        (GRADING_IN_PROGRESS, True),
        ("95", True),
    ])
    def test_is_graded(self, score, graded):
        assert _assignment(score=score).is_graded is graded

    def test_description_puts_score_first(self):
        assert _assignment(score="95").description == "95 • Dec 10"
        assert _assignment(score=NO_GRADE).description == "Dec 10"

    def test_context_value(self):
        assert _assignment(score="95", downloaded=True).context_value == "downloadedGraded"
        assert _assignment().context_value == "notDownloadedUngraded"

    def test_tooltip(self):
        assert _assignment().tooltip == "HW1\nDue: Wed, Dec 10 at 11:59pm\nScore: N/A"
