"""Google OAuth and service construction for Calendar and Gmail.

Google libraries are imported lazily so ``--help`` and the pure classifier
work without them; callers get a ``CalendarUnavailableError`` with an install
hint instead.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

try:
    from google.auth.transport.requests import Request  # type: ignore
    from google.oauth2.credentials import Credentials  # type: ignore
    from google_auth_oauthlib.flow import InstalledAppFlow  # type: ignore
    from googleapiclient.discovery import build  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    Request = Credentials = InstalledAppFlow = build = None  # type: ignore

from .constants import SCOPES
from .errors import HINT_CALENDAR_API, CalendarUnavailableError

LOG = logging.getLogger(__name__)


def ensure_google_api() -> None:
    """Ensure optional Google API dependencies are present."""
    if Credentials is None or InstalledAppFlow is None or build is None or Request is None:
        raise CalendarUnavailableError(
            "Google API libraries not installed.",
            hint="pip install google-api-python-client google-auth-httplib2 google-auth-oauthlib",
        )


class GoogleAuth:
    """Loads, refreshes, or (interactively) creates an OAuth token."""

    def __init__(self, credentials_path: str, token_path: str, *, interactive: bool = True) -> None:
        self.credentials_path = os.path.expanduser(credentials_path)
        self.token_path = os.path.expanduser(token_path)
        self.interactive = interactive
        self.creds: Optional[Any] = None

    def authenticate(self) -> Any:
        ensure_google_api()

        creds = None
        if os.path.exists(self.token_path):
            try:
                creds = Credentials.from_authorized_user_file(self.token_path, SCOPES)
            except ValueError as exc:
                LOG.warning("Ignoring unreadable token %s: %s", self.token_path, exc)
                creds = None

        if creds and creds.expired and getattr(creds, "refresh_token", None):
            try:
                creds.refresh(Request())
                self._save(creds)
            except Exception as exc:  # google.auth.exceptions.RefreshError and transport errors
                LOG.warning("Token refresh failed: %s", exc)
                creds = None

        if creds is None or not creds.valid:
            if not self.interactive:
                raise CalendarUnavailableError(
                    f"No valid OAuth token at {self.token_path}",
                    hint="Run `meeting-audit auth` once from a terminal to authorize.",
                )
            if not os.path.exists(self.credentials_path):
                raise CalendarUnavailableError(
                    f"OAuth client file not found: {self.credentials_path}",
                    hint=HINT_CALENDAR_API,
                )
            flow = InstalledAppFlow.from_client_secrets_file(self.credentials_path, SCOPES)
            creds = flow.run_local_server(port=0)
            self._save(creds)

        self.creds = creds
        return creds

    def _save(self, creds: Any) -> None:
        token_dir = os.path.dirname(self.token_path)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)
        with open(self.token_path, "w", encoding="utf-8") as fh:
            fh.write(creds.to_json())

    def build_service(self, api: str, version: str) -> Any:
        if self.creds is None:
            self.authenticate()
        try:
            return build(api, version, credentials=self.creds, cache_discovery=False)
        except Exception as exc:  # discovery HttpError / UnknownApiNameOrVersion
            raise CalendarUnavailableError(
                f"Could not build Google {api} {version} service: {exc}",
                hint=HINT_CALENDAR_API,
            ) from exc


class GoogleServices:
    """Builds the Calendar source, Gmail reporter, and identity on first use."""

    def __init__(self, auth: GoogleAuth) -> None:
        self.auth = auth
        self._calendar = None
        self._gmail = None

    def calendar(self):
        from .calendar_source import GoogleCalendarSource

        if self._calendar is None:
            self._calendar = GoogleCalendarSource(self.auth.build_service("calendar", "v3"))
        return self._calendar

    def _gmail_service(self) -> Any:
        if self._gmail is None:
            self._gmail = self.auth.build_service("gmail", "v1")
        return self._gmail

    def reporter(self):
        from .mailer import GmailReporter

        return GmailReporter(self._gmail_service())

    def current_user_email(self) -> Optional[str]:
        from .mailer import GoogleIdentity

        return GoogleIdentity(gmail_service=self._gmail_service(), calendar_source=self.calendar()).current_user_email()
