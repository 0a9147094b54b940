"""Shared constants for the meeting audit.

Credential search paths follow the same config-root conventions as the
other assistant CLIs (``$CREDENTIALS``, ``$XDG_CONFIG_HOME``, ``~/.config``).
"""

from __future__ import annotations

import os

# -----------------------------------------------------------------------------
# Google APIs
# -----------------------------------------------------------------------------

SCOPES = [
    # Read events and attendee responses
    "https://www.googleapis.com/auth/calendar.readonly",
    # Send the report
    "https://www.googleapis.com/auth/gmail.send",
    # Resolve the current user's address for the default recipient
    "https://www.googleapis.com/auth/gmail.readonly",
]

DEFAULT_CALENDAR_ID = "primary"
DEFAULT_PAGE_SIZE = 250

# -----------------------------------------------------------------------------
# Audit defaults
# -----------------------------------------------------------------------------

DEFAULT_LOOKAHEAD_DAYS = 7
PLACEHOLDER_TITLE = "(No title)"
REPORT_SUBJECT_PREFIX = "Unconfirmed meetings"

# Daily cron trigger
DEFAULT_SCHEDULE_HOUR = 8
DEFAULT_SCHEDULE_MINUTE = 0
DEFAULT_HANDLER = "run"
CRON_MARKER = "# meeting-audit:"

# INI section for profile settings in credentials.ini
INI_SECTION = "meeting_audit"
ENV_PREFIX = "MEETING_AUDIT_"


# -----------------------------------------------------------------------------
# Config paths
# -----------------------------------------------------------------------------

def config_roots() -> list[str]:
    """Return ordered list of config root directories."""
    roots: list[str] = []
    env_cfg = os.environ.get("CREDENTIALS")
    if env_cfg:
        roots.append(os.path.expanduser(os.path.dirname(env_cfg)))
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        roots.append(os.path.expanduser(xdg))
    roots.append(os.path.expanduser("~/.config"))
    return roots


def credential_ini_paths() -> list[str]:
    """Return ordered, de-duplicated list of credentials.ini paths to search."""
    paths: list[str] = []
    env_creds = os.environ.get("CREDENTIALS")
    if env_creds:
        paths.append(os.path.expanduser(env_creds))
    for root in config_roots():
        paths.append(os.path.join(root, "credentials.ini"))
        paths.append(os.path.join(root, "meeting-audit", "credentials.ini"))

    seen: set[str] = set()
    unique: list[str] = []
    for p in paths:
        if p and p not in seen:
            seen.add(p)
            unique.append(p)
    return unique


def default_config_dir() -> str:
    xdg = os.environ.get("XDG_CONFIG_HOME") or "~/.config"
    return os.path.join(os.path.expanduser(xdg), "meeting-audit")


def default_config_path() -> str:
    return os.path.join(default_config_dir(), "config.yaml")


def default_credentials_path() -> str:
    return os.path.join(default_config_dir(), "credentials.json")


def default_token_path() -> str:
    return os.path.join(default_config_dir(), "token.json")
