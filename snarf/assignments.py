#!/usr/bin/env python3
"""
assignments.py - Build the assignment list

Scrapes the assessments page and the gradebook, merges them by name, and
marks which assignments already have a folder in the workspace. The list
is rebuilt from scratch on every call.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from snarf.client import AutolabClient
from snarf.config_utils import SnarfConfig, get_config
from snarf.errors import NetworkError
from snarf.models import Assignment, NO_GRADE
from snarf.scraper import parse_assessment_list, parse_grade_table


logger = logging.getLogger(__name__)


def correlate(assignments: List[Assignment], grades: Dict[str, str], workspace_path: Path) -> List[Assignment]:
    """
    Attach gradebook scores and local download state to each assignment.

    Assignments without a gradebook entry get "No grade". Download state
    is checked against the filesystem now, never cached.
    """
    workspace = Path(workspace_path)
    for assignment in assignments:
        assignment.score = grades.get(assignment.name) or NO_GRADE
        assignment.is_downloaded = (workspace / assignment.name).exists()
    return assignments


def fetch_assignments(
    config: Optional[SnarfConfig] = None,
    client: Optional[AutolabClient] = None,
) -> List[Assignment]:
    """
    Scrape and correlate the course's assignments.

    A failed assessments fetch raises NetworkError. A failed gradebook
    fetch is logged and the assignments come back ungraded and
    uncorrelated.

    Returns:
        Assignments in reverse document order
    """
    if config is None:
        config = get_config()
    if client is None:
        client = AutolabClient(config)

    html = client.get_page(client.assessments_url, "Fetching assignments")
    assignments = parse_assessment_list(html, client.base_url, client.download_base)
    logger.info(f"Found {len(assignments)} assignments")

    try:
        grade_html = client.get_page(client.gradebook_url, "Fetching gradebook")
    except NetworkError as e:
        logger.warning(f"Gradebook unavailable, showing assignments without grades: {e.message}")
    else:
        grades = parse_grade_table(grade_html)
        logger.debug(f"Parsed {len(grades)} grades")
        correlate(assignments, grades, config.workspace_path)

    assignments.reverse()
    return assignments


def find_assignment(assignments: List[Assignment], name: str) -> Optional[Assignment]:
    """Exact name match, falling back to a case-insensitive one"""
    for assignment in assignments:
        if assignment.name == name:
            return assignment
    lowered = name.lower()
    for assignment in assignments:
        if assignment.name.lower() == lowered:
            return assignment
    return None


def search_assignments(assignments: List[Assignment], query: str) -> List[Assignment]:
    """Case-insensitive match on name, description, or download status"""
    needle = query.strip().lower()
    if not needle:
        return list(assignments)
    return [
        a for a in assignments
        if needle in a.name.lower()
        or needle in a.description.lower()
        or needle in a.detail.lower()
    ]
