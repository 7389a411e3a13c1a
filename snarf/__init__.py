"""
Snarf - Autolab assignments from the command line

Scrapes an Autolab course for assignments and grades, downloads starter
code, hands in work, and waits for autograder feedback.

Core Concept: the Autolab site is the source of truth, rebuilt into an
in-memory assignment list on every call; the workspace folder holds the
code you are working on.
"""

__version__ = "1.0.0"
__author__ = "Dale Chapman"
__license__ = "MIT"

# Make key utilities easily importable
from .config_utils import get_config, get_preferences
from .errors import SnarfError, ConfigurationError

__all__ = [
    "__version__",
    "get_config",
    "get_preferences",
    "SnarfError",
    "ConfigurationError",
]
