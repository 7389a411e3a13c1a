# config_utils.py - YAML Configuration System for Snarf
"""
Snarf configuration utilities with YAML file support.

Configuration Resolution Order (highest to lowest priority):
1. Environment variables (SNARF_SESSION_COOKIE, SNARF_WORKSPACE, etc.)
2. snarf.yaml in the current directory
3. ~/.snarf/config.yaml (global defaults)

Nothing is cached: every command resolves the configuration again, so an
edited cookie or workspace path is picked up by the next call.

Usage:
    from snarf.config_utils import get_config, get_preferences

    config = get_config()
    print(config.workspace_path)

    prefs = get_preferences()
    print(prefs.author_name)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any

import yaml

from snarf.errors import ConfigurationError, missing_session_cookie_error
from snarf.models import Preferences


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://cs.lhs.fuhsd.org"
DEFAULT_COURSE = "APCS-A-25"
DEFAULT_DOWNLOAD_PATH = "apcssnarf"
DEFAULT_WORKSPACE = "~/Autolab"

# Shared, not per-student: the school's snarf server sits behind one
# basic-auth login. Override with download_auth in snarf.yaml.
DEFAULT_DOWNLOAD_USER = "lhsuser"
DEFAULT_DOWNLOAD_PASSWORD = "lhsuser"

DEFAULT_POLL_ATTEMPTS = 20
DEFAULT_POLL_DELAY = 3.0


def expand_home(path_str: str) -> Path:
    """Expand a leading ~ to the user's home directory"""
    if path_str.startswith("~"):
        return Path(os.path.expanduser("~")) / path_str[1:].lstrip("/\\")
    return Path(path_str)


@dataclass
class SnarfConfig:
    """Complete Snarf configuration"""
    # Local workspace
    workspace_path: Path = field(default_factory=lambda: expand_home(DEFAULT_WORKSPACE))

    # Autolab connection
    session_cookie: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    course: str = DEFAULT_COURSE
    download_path: str = DEFAULT_DOWNLOAD_PATH
    download_user: str = DEFAULT_DOWNLOAD_USER
    download_password: str = DEFAULT_DOWNLOAD_PASSWORD
    timeout: float = 30.0

    # Header placeholders
    author_name: Optional[str] = None
    period: Optional[str] = None
    collaborators: Optional[str] = None

    # Feedback polling
    poll_attempts: int = DEFAULT_POLL_ATTEMPTS
    poll_delay: float = DEFAULT_POLL_DELAY

    # Extra settings from config file
    extra: Dict[str, Any] = field(default_factory=dict)

    # Track where values came from (for debugging)
    _sources: Dict[str, str] = field(default_factory=dict)

    @property
    def preferences(self) -> Preferences:
        return Preferences(
            workspace_path=self.workspace_path,
            session_cookie=self.session_cookie,
            author_name=self.author_name,
            period=self.period,
            collaborators=self.collaborators,
        )


class ConfigLoader:
    """Load configuration from multiple sources"""

    # YAML key -> config attribute
    MAPPINGS = {
        "workspace_path": "workspace_path",
        "session_cookie": "session_cookie",
        "author_name": "author_name",
        "period": "period",
        "collaborators": "collaborators",
        "base_url": "base_url",
        "course": "course",
        "download_path": "download_path",
        "timeout": "timeout",
    }

    ENV_VARS = {
        "SNARF_WORKSPACE": "workspace_path",
        "SNARF_SESSION_COOKIE": "session_cookie",
        "SNARF_AUTHOR_NAME": "author_name",
        "SNARF_PERIOD": "period",
        "SNARF_COLLABORATORS": "collaborators",
        "SNARF_BASE_URL": "base_url",
        "SNARF_COURSE": "course",
    }

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        self.config = SnarfConfig()

    def load(self) -> SnarfConfig:
        """Load configuration from all sources in priority order"""
        # Load in reverse priority (lowest first, higher overwrites)
        self._load_global_config()
        self._load_yaml_config()
        self._load_env_vars()
        return self.config

    def _load_global_config(self):
        """Load ~/.snarf/config.yaml if it exists"""
        global_config = Path.home() / ".snarf" / "config.yaml"
        if global_config.exists():
            self._load_yaml_file(global_config, "global")

    def _load_yaml_config(self):
        """Load snarf.yaml from the config directory"""
        yaml_path = self.config_dir / "snarf.yaml"
        if yaml_path.exists():
            self._load_yaml_file(yaml_path, "snarf.yaml")

    def _load_yaml_file(self, path: Path, source_name: str):
        """Load settings from a YAML file"""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to parse {path}: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: expected a mapping at the top level")
            return

        for yaml_key, attr in self.MAPPINGS.items():
            if yaml_key in data and data[yaml_key] is not None:
                self._set(attr, data[yaml_key], source_name)

        # Nested download credentials
        if isinstance(data.get("download_auth"), dict):
            auth = data["download_auth"]
            if auth.get("user"):
                self._set("download_user", auth["user"], source_name)
            if auth.get("password"):
                self._set("download_password", auth["password"], source_name)

        # Nested polling settings
        if isinstance(data.get("poll"), dict):
            poll = data["poll"]
            if "attempts" in poll:
                self._set("poll_attempts", poll["attempts"], source_name)
            if "delay" in poll:
                self._set("poll_delay", poll["delay"], source_name)

        known_keys = set(self.MAPPINGS) | {"download_auth", "poll"}
        for key, value in data.items():
            if key not in known_keys:
                self.config.extra[key] = value

    def _load_env_vars(self):
        """Load from environment variables (highest priority)"""
        for env_name, attr in self.ENV_VARS.items():
            value = os.environ.get(env_name)
            if value:
                self._set(attr, value, f"env:{env_name}")

    def _set(self, attr: str, value: Any, source_name: str):
        if attr == "workspace_path":
            value = expand_home(str(value))
        elif attr in ("timeout", "poll_delay"):
            value = self._coerce(attr, value, float)
        elif attr == "poll_attempts":
            value = self._coerce(attr, value, int)
        else:
            value = str(value)
        setattr(self.config, attr, value)
        self.config._sources[attr] = source_name

    @staticmethod
    def _coerce(attr: str, value: Any, kind):
        try:
            return kind(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                message=f"Invalid value for {attr}: {value!r}",
                suggestion=f"{attr} must be a number",
            )


# ============================================================================
# Public API
# ============================================================================

def get_config(config_dir: Optional[Path] = None) -> SnarfConfig:
    """
    Get complete Snarf configuration.

    Args:
        config_dir: Directory holding snarf.yaml (defaults to cwd)

    Returns:
        SnarfConfig with all settings resolved
    """
    loader = ConfigLoader(config_dir)
    return loader.load()


def get_preferences(config_dir: Optional[Path] = None) -> Preferences:
    """Resolve the user preferences snapshot used by the pipelines"""
    return get_config(config_dir).preferences


def require_session_cookie(config: SnarfConfig) -> str:
    """
    Return the session cookie or raise.

    Raises:
        ConfigurationError: If no cookie is configured anywhere
    """
    if config.session_cookie:
        return config.session_cookie
    raise missing_session_cookie_error()


def create_config_template(include_comments: bool = True) -> str:
    """
    Generate a snarf.yaml template.

    Args:
        include_comments: Whether to include explanatory comments

    Returns:
        YAML string ready to write to file
    """
    if include_comments:
        return f'''# Snarf Configuration File

# Where assignments are downloaded (~ is your home directory)
workspace_path: {DEFAULT_WORKSPACE}

# Cookie header copied from a logged-in Autolab browser session
session_cookie: ""

# Filled into the TODO placeholders of .java file headers
author_name: ""
period: ""
collaborators: ""

# Autolab server
base_url: {DEFAULT_BASE_URL}
course: {DEFAULT_COURSE}

# Feedback polling after a submission
poll:
  attempts: {DEFAULT_POLL_ATTEMPTS}        # Give up after this many checks
  delay: {DEFAULT_POLL_DELAY}         # Seconds between checks
'''
    else:
        return f'''workspace_path: {DEFAULT_WORKSPACE}
session_cookie: ""
author_name: ""
period: ""
collaborators: ""
base_url: {DEFAULT_BASE_URL}
course: {DEFAULT_COURSE}
poll:
  attempts: {DEFAULT_POLL_ATTEMPTS}
  delay: {DEFAULT_POLL_DELAY}
'''
