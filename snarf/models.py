"""
models.py - Data shapes shared across Snarf

Assignments are rebuilt from scratch on every scrape; nothing here is
persisted.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


NO_GRADE = "No grade"
GRADING_IN_PROGRESS = "Grading in progress"

# "Wed, Dec 10 at 11:59pm" -> "Dec 10"
SHORT_DATE_RE = re.compile(r"([A-Z][a-z]{2})\s+(\d+)")


@dataclass(frozen=True)
class Preferences:
    """Read-only snapshot of the user's settings for one operation"""
    workspace_path: Path
    session_cookie: Optional[str] = None
    author_name: Optional[str] = None
    period: Optional[str] = None
    collaborators: Optional[str] = None


@dataclass
class Assignment:
    """One Autolab assessment, merged with its gradebook entry"""
    name: str
    due_date: str
    writeup_url: str
    download_url: str
    score: str = ""
    is_downloaded: bool = False

    @property
    def is_graded(self) -> bool:
        return bool(self.score) and self.score != NO_GRADE

    @property
    def short_due_date(self) -> str:
        match = SHORT_DATE_RE.search(self.due_date)
        if match:
            return f"{match.group(1)} {match.group(2)}"
        return self.due_date

    @property
    def description(self) -> str:
        """Score first when graded, so it stays visible in narrow listings"""
        if self.is_graded:
            return f"{self.score} • {self.short_due_date}"
        return self.short_due_date

    @property
    def detail(self) -> str:
        return "Downloaded" if self.is_downloaded else "Not Downloaded"

    @property
    def tooltip(self) -> str:
        return f"{self.name}\nDue: {self.due_date}\nScore: {self.score or 'N/A'}"

    @property
    def context_value(self) -> str:
        download_status = "downloaded" if self.is_downloaded else "notDownloaded"
        grade_status = "Graded" if self.is_graded else "Ungraded"
        return f"{download_status}{grade_status}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "due_date": self.due_date,
            "writeup_url": self.writeup_url,
            "download_url": self.download_url,
            "score": self.score,
            "is_downloaded": self.is_downloaded,
        }


class FeedbackStatus(str, Enum):
    """Grading state as shown on a feedback page"""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


@dataclass
class FeedbackPage:
    """Classified contents of one feedback page"""
    status: FeedbackStatus = FeedbackStatus.UNKNOWN
    output: str = ""
    results: List[Tuple[str, str]] = field(default_factory=list)
    has_result_table: bool = False

    @property
    def is_terminal(self) -> bool:
        if self.status == FeedbackStatus.IN_PROGRESS:
            return False
        return self.status == FeedbackStatus.COMPLETED or self.has_result_table
