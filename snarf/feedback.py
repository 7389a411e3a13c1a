#!/usr/bin/env python3
"""
feedback.py - Wait for autograder feedback

Autolab grades asynchronously and never notifies anyone, so after a
handin we poll:

    POLLING --(no link yet / in progress / fetch error)--> IN_PROGRESS --> POLLING
    POLLING --(completed or results table)--> TERMINAL (report)
    POLLING --(attempt budget spent)--> TIMED_OUT (GradingTimeoutError)

Each attempt fetches the assessment page, follows the newest submission's
feedback link and classifies the feedback page. Errors inside one attempt
only cost that attempt.

The delay function and attempt budget are injectable so tests run
without sleeping.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from snarf.client import AutolabClient
from snarf.config_utils import (
    DEFAULT_POLL_ATTEMPTS,
    DEFAULT_POLL_DELAY,
    SnarfConfig,
    get_config,
)
from snarf.errors import GradingTimeoutError, SnarfError
from snarf.models import FeedbackPage
from snarf.scraper import find_feedback_link, parse_feedback_page


logger = logging.getLogger(__name__)

NO_FEEDBACK_NOTE = "_No detailed feedback found._"


class PollState(str, Enum):
    POLLING = "polling"
    IN_PROGRESS = "in_progress"
    TERMINAL = "terminal"
    TIMED_OUT = "timed_out"


def render_report(assignment_name: str, page: FeedbackPage) -> str:
    """Markdown report for a finished feedback page"""
    title = f"# {assignment_name} - Feedback"
    lines = [title, ""]
    has_body = False

    if page.output.strip():
        lines.extend(["```", page.output, "```", ""])
        has_body = True

    if page.results:
        lines.append("## Results")
        for key, value in page.results:
            lines.append(f"- **{key}**: {value}")
        lines.append("")
        has_body = True

    if not has_body:
        lines.extend(["", NO_FEEDBACK_NOTE])

    return "\n".join(lines) + "\n"


class FeedbackPoller:
    """Bounded poll of one assignment's feedback"""

    def __init__(
        self,
        client: AutolabClient,
        max_attempts: int = DEFAULT_POLL_ATTEMPTS,
        delay: float = DEFAULT_POLL_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.max_attempts = max_attempts
        self.delay = delay
        self.sleep = sleep
        self.state = PollState.POLLING
        self.attempts = 0

    def check_once(self, assignment_name: str) -> Optional[FeedbackPage]:
        """
        One attempt. Returns the feedback page once grading has finished,
        None while there is nothing final to show.
        """
        assessment_page = self.client.get_page(
            self.client.assessment_url(assignment_name), "Fetching submissions"
        )
        link = find_feedback_link(assessment_page)
        if not link:
            logger.debug(f"No submission visible yet for {assignment_name}")
            return None

        feedback_html = self.client.get_page(self.client.absolute_url(link), "Fetching feedback")
        page = parse_feedback_page(feedback_html)
        if not page.is_terminal:
            logger.debug(f"Feedback for {assignment_name} is {page.status.value}")
            return None
        return page

    def poll(self, assignment_name: str, progress: Optional[Callable[[str], None]] = None) -> str:
        """
        Poll until feedback is ready.

        Args:
            assignment_name: Assessment to watch
            progress: Optional callback receiving a status line after each
                unsuccessful attempt

        Returns:
            Markdown feedback report

        Raises:
            GradingTimeoutError: If every attempt came back unfinished
        """
        self.state = PollState.POLLING
        self.attempts = 0

        while self.attempts < self.max_attempts:
            self.state = PollState.POLLING
            self.attempts += 1
            try:
                page = self.check_once(assignment_name)
            except SnarfError as e:
                logger.warning(f"Polling error (attempt {self.attempts}): {e.message}")
                page = None

            if page is not None:
                self.state = PollState.TERMINAL
                logger.info(f"Feedback ready for {assignment_name} after {self.attempts} attempt(s)")
                return render_report(assignment_name, page)

            self.state = PollState.IN_PROGRESS
            if progress is not None:
                progress(f"Waiting for feedback... Attempt {self.attempts}/{self.max_attempts}")
            if self.attempts < self.max_attempts:
                self.sleep(self.delay)

        self.state = PollState.TIMED_OUT
        raise GradingTimeoutError(
            message="Grading timed out",
            attempts=self.attempts,
            suggestion="The autograder may be busy. Try: snarf feedback NAME",
            context={"assignment": assignment_name, "attempts": self.attempts},
        )


def poll_feedback(
    assignment_name: str,
    progress: Optional[Callable[[str], None]] = None,
    config: Optional[SnarfConfig] = None,
    client: Optional[AutolabClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Poll with the configured attempt budget and delay"""
    if config is None:
        config = get_config()
    if client is None:
        client = AutolabClient(config)
    poller = FeedbackPoller(
        client,
        max_attempts=config.poll_attempts,
        delay=config.poll_delay,
        sleep=sleep,
    )
    return poller.poll(assignment_name, progress)
