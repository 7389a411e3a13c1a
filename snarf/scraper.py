#!/usr/bin/env python3
"""
scraper.py - Parse Autolab HTML pages

Every selector Snarf depends on lives in this module. Autolab's markup is
not versioned, so each parser tolerates missing nodes and returns empty
or partial results instead of raising. The one exception is the
authenticity token: without it a submission cannot be made at all.

Parsers:
    parse_assessment_list(html, base_url, download_base) -> [Assignment]
    parse_grade_table(html) -> {name: score}
    find_feedback_link(html) -> href or None
    parse_feedback_page(html) -> FeedbackPage
    find_authenticity_token(html) -> token
"""

import re
from typing import Dict, List, Optional
from urllib.parse import quote, urljoin

from bs4 import BeautifulSoup, NavigableString, Tag

from snarf.errors import ParseError
from snarf.models import (
    Assignment,
    FeedbackPage,
    FeedbackStatus,
    GRADING_IN_PROGRESS,
)


# =============================================================================
# Selectors
# =============================================================================

ASSESSMENT_CONTAINER = ".collection.red.darken-4.date"
ASSESSMENT_ITEM = "a.collection-item"
ASSESSMENT_BADGE = "span.new.badge"
ASSESSMENT_DUE = "p.date"

GRADE_ROWS = ".category table.grades tr"
GRADE_NOT_SUBMITTED = ".not-yet-submitted"

SUBMISSION_ROW = "tbody tr"
FEEDBACK_LINK = 'td a[href*="viewFeedback"]'

STATUS_IN_PROGRESS = ".feedback-status__inprogress, .feedback-status__queued"
STATUS_COMPLETED = ".feedback-status__completed"
RESULT_TABLE = ".result-summary table"

TOKEN_INPUT = 'input[name="authenticity_token"]'

DUE_RE = re.compile(r"Due:\s*(.+)")

# "95.0" -> "95", "95.0/100.0" -> "95/100", "10.05" untouched
TRAILING_ZERO_RE = re.compile(r"(\d)\.0(?!\d)")


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def _own_text(tag: Tag) -> str:
    """First non-blank text node directly inside tag, skipping child elements"""
    for child in tag.children:
        if isinstance(child, NavigableString) and child.strip():
            return child.strip()
    return ""


# =============================================================================
# Assessment list
# =============================================================================

def parse_assessment_list(html: str, base_url: str, download_base: str) -> List[Assignment]:
    """
    Parse the course assessments page.

    Args:
        html: Assessment list page
        base_url: Site root used to absolutise writeup links
        download_base: Archive server root; archives live at <download_base>/<name>.zip

    Returns:
        Assignments in document order, score empty and not downloaded
    """
    soup = _soup(html)
    assignments = []

    for container in soup.select(ASSESSMENT_CONTAINER):
        for item in container.select(ASSESSMENT_ITEM):
            href = item.get("href")
            name = _own_text(item)
            if not name or not href:
                continue

            badge = item.select_one(ASSESSMENT_BADGE)
            writeup = href
            if badge is not None and badge.get("data-url"):
                writeup = badge["data-url"]

            due_node = item.select_one(ASSESSMENT_DUE)
            due_text = due_node.get_text().strip() if due_node else ""
            match = DUE_RE.search(due_text)
            due_date = match.group(1).strip() if match else due_text

            assignments.append(Assignment(
                name=name,
                due_date=due_date,
                writeup_url=urljoin(base_url.rstrip("/") + "/", writeup),
                download_url=f"{download_base.rstrip('/')}/{quote(name)}.zip",
            ))

    return assignments


# =============================================================================
# Gradebook
# =============================================================================

def classify_score_cell(cell: Tag) -> str:
    """Turn a gradebook score cell into a display string ("" when absent)"""
    # Autolab renders a spinner icon while the autograder runs
    if cell.find("i") is not None:
        return GRADING_IN_PROGRESS
    if cell.select_one(GRADE_NOT_SUBMITTED) is not None:
        return ""
    return TRAILING_ZERO_RE.sub(r"\1", cell.get_text().strip())


def parse_grade_table(html: str) -> Dict[str, str]:
    """
    Parse the student gradebook into {assignment name: score}.

    Rows with fewer than four cells, no name, or no score are dropped.
    """
    soup = _soup(html)
    grades = {}

    for row in soup.select(GRADE_ROWS):
        cells = row.find_all("td")
        if len(cells) < 4:
            continue
        link = cells[0].find("a")
        name = link.get_text().strip() if link else ""
        score = classify_score_cell(cells[3])
        if name and score:
            grades[name] = score

    return grades


# =============================================================================
# Submissions and feedback
# =============================================================================

def find_feedback_link(html: str) -> Optional[str]:
    """
    Return the feedback href of the most recent submission, if any.

    The submissions table lists newest first.
    """
    soup = _soup(html)
    row = soup.select_one(SUBMISSION_ROW)
    if row is None:
        # lxml does not invent <tbody>; fall back to the first data row
        row = next((tr for tr in soup.select("table tr") if tr.find("td")), None)
    if row is None:
        return None
    link = row.select_one(FEEDBACK_LINK)
    if link is None:
        return None
    return link.get("href") or None


def parse_feedback_page(html: str) -> FeedbackPage:
    """Classify a feedback page and pull out its autograder output"""
    soup = _soup(html)
    page = FeedbackPage()

    if soup.select_one(STATUS_IN_PROGRESS) is not None:
        page.status = FeedbackStatus.IN_PROGRESS
    elif soup.select_one(STATUS_COMPLETED) is not None:
        page.status = FeedbackStatus.COMPLETED

    pre = soup.find("pre")
    if pre is not None:
        page.output = pre.get_text()

    table = soup.select_one(RESULT_TABLE)
    if table is not None:
        page.has_result_table = True
        for row in table.find_all("tr"):
            cells = row.find_all("td")
            if not cells:
                continue
            key = cells[0].get_text().strip()
            if key.endswith(":"):
                key = key[:-1]
            value = cells[1].get_text().strip() if len(cells) > 1 else ""
            page.results.append((key, value))

    return page


def find_authenticity_token(html: str) -> str:
    """
    Pull the form authenticity token from an assessment page.

    Raises:
        ParseError: If the page has no token (Autolab rejects untokened handins)
    """
    soup = _soup(html)
    field = soup.select_one(TOKEN_INPUT)
    token = field.get("value") if field is not None else None
    if not token:
        raise ParseError(
            message="Could not find authenticity token",
            suggestion=(
                "The assessment page did not contain a handin form. "
                "Check that submissions are open and your session cookie is valid."
            ),
        )
    return token
