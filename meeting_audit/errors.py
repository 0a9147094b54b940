"""Error types and exit codes for the meeting audit CLI.

Collaborator failures are converted to these at the boundary so the
orchestrator can log a diagnostic (with a remediation hint) instead of
crashing an unattended run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

LOG = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Standard CLI exit codes."""
    SUCCESS = 0
    ERROR = 1
    USAGE = 2
    CONFIG_ERROR = 3
    NETWORK_ERROR = 5
    INTERRUPTED = 130  # Standard for Ctrl+C


@dataclass
class AuditError(Exception):
    """Audit error with exit code and optional remediation hint."""
    message: str
    code: ExitCode = ExitCode.ERROR
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class ConfigError(AuditError):
    """Invalid or missing configuration."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.CONFIG_ERROR, hint)


class CalendarUnavailableError(AuditError):
    """The event source could not be reached or is not configured."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.CONFIG_ERROR, hint)


class ReportDeliveryError(AuditError):
    """The report could not be delivered."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.NETWORK_ERROR, hint)


class ScheduleError(AuditError):
    """The crontab could not be read or written."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.ERROR, hint)


HINT_CALENDAR_API = (
    "Enable the Google Calendar API for your OAuth client, install "
    "`google-api-python-client google-auth-oauthlib`, and check the "
    "credentials/token paths (see `meeting-audit --help`)."
)
HINT_GMAIL_API = "Enable the Gmail API for your OAuth client and re-authorize the token."


def handle_error(error: BaseException, verbose: bool = False) -> int:
    """Log an exception and return the matching exit code."""
    if isinstance(error, AuditError):
        LOG.error("%s", error.message)
        if error.hint:
            LOG.error("Hint: %s", error.hint)
        return error.code

    if isinstance(error, KeyboardInterrupt):
        LOG.warning("Interrupted.")
        return ExitCode.INTERRUPTED

    # Unexpected error
    LOG.error("%s", error, exc_info=verbose)
    return ExitCode.ERROR
