# errors.py
"""
Custom exception classes with readable error messages for Snarf

All exceptions include:
- Clear error description
- Actionable suggestions
- Relevant context

The CLI prints str(error) as-is, so every message has to make sense
without a traceback.
"""
from pathlib import Path
from typing import Optional, Dict, Any


class SnarfError(Exception):
    """Base exception for all Snarf errors"""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        self.cause = cause
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error with all details"""
        lines = [
            "",
            "=" * 70,
            f"❌ {self.__class__.__name__}",
            "=" * 70,
            "",
            self.message,
        ]

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestion:
            lines.append("")
            lines.append("💡 Suggestion:")
            lines.append(f"  {self.suggestion}")

        if self.cause:
            lines.append("")
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        lines.append("")
        lines.append("=" * 70)
        lines.append("")

        return "\n".join(lines)


class ConfigurationError(SnarfError):
    """Configuration is missing or invalid"""
    pass


class NetworkError(SnarfError):
    """An Autolab request failed or returned a non-success status"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs
    ):
        self.status_code = status_code
        self.endpoint = endpoint
        context = kwargs.pop("context", None) or {}
        if endpoint:
            context.setdefault("endpoint", endpoint)
        if status_code is not None:
            context.setdefault("status", status_code)
        super().__init__(message, context=context, **kwargs)


class ParseError(SnarfError):
    """A required element was missing from a scraped page"""
    pass


class FilesystemError(SnarfError):
    """Local folder or archive problem"""
    pass


class GradingTimeoutError(SnarfError, TimeoutError):
    """Feedback did not become available within the polling budget"""

    def __init__(self, message: str, attempts: int = 0, **kwargs):
        self.attempts = attempts
        super().__init__(message, **kwargs)


# Specific error factory functions

def missing_session_cookie_error() -> ConfigurationError:
    """Create error for a missing Autolab session cookie"""
    return ConfigurationError(
        message="Session cookie not set. Please configure it in settings.",
        suggestion=(
            "Copy the Cookie header from a logged-in browser session, then either:\n\n"
            "  export SNARF_SESSION_COOKIE='_autolab3_session=...'\n\n"
            "or add it to snarf.yaml / ~/.snarf/config.yaml:\n"
            "  session_cookie: \"_autolab3_session=...\""
        ),
        context={
            "checked_locations": [
                "SNARF_SESSION_COOKIE environment variable",
                "snarf.yaml",
                "~/.snarf/config.yaml",
            ]
        }
    )


def http_status_error(action: str, status_code: int, endpoint: str) -> NetworkError:
    """Create error for a non-success HTTP response"""
    suggestion = None
    if status_code in (401, 403):
        suggestion = "Your session cookie may have expired. Log in again and update session_cookie."
    elif status_code == 404:
        suggestion = "Check that the assignment name and course are correct."
    return NetworkError(
        message=f"{action} failed (status: {status_code})",
        status_code=status_code,
        endpoint=endpoint,
        suggestion=suggestion,
    )


def missing_folder_error(folder: Path) -> FilesystemError:
    """Create error when an assignment folder is not on disk"""
    return FilesystemError(
        message=f"Assignment folder not found at {folder}",
        suggestion="Download the assignment first: snarf download NAME",
        context={"folder": str(folder)}
    )
