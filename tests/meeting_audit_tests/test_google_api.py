"""Tests for Google OAuth/service construction with the Google libs mocked out."""

from __future__ import annotations

import os
import unittest
from unittest.mock import MagicMock, patch

from meeting_audit import google_api
from meeting_audit.calendar_source import GoogleCalendarSource
from meeting_audit.errors import CalendarUnavailableError
from tests.fakes import FakeCalendarApi, FakeGmailApi
from tests.fixtures import TempDirMixin


class GoogleLibsMixin(TempDirMixin):
    def setUp(self):
        super().setUp()
        self.creds = MagicMock(valid=True, expired=False)
        self.creds.to_json.return_value = "{}"
        self.credentials_cls = MagicMock()
        self.credentials_cls.from_authorized_user_file.return_value = self.creds
        self.flow_cls = MagicMock()
        self.build = MagicMock()
        self._patches = [
            patch.object(google_api, "Credentials", self.credentials_cls),
            patch.object(google_api, "InstalledAppFlow", self.flow_cls),
            patch.object(google_api, "Request", MagicMock()),
            patch.object(google_api, "build", self.build),
        ]
        for p in self._patches:
            p.start()
        self.token = os.path.join(self.tmpdir, "token.json")
        self.client = os.path.join(self.tmpdir, "credentials.json")

    def tearDown(self):
        for p in reversed(self._patches):
            p.stop()
        super().tearDown()

    def _write_token(self):
        with open(self.token, "w", encoding="utf-8") as fh:
            fh.write("{}")


class TestGoogleAuth(GoogleLibsMixin, unittest.TestCase):
    def test_missing_libraries(self):
        with patch.object(google_api, "build", None):
            with self.assertRaises(CalendarUnavailableError) as ctx:
                google_api.ensure_google_api()
        self.assertIn("pip install", ctx.exception.hint)

    def test_existing_token(self):
        self._write_token()
        auth = google_api.GoogleAuth(self.client, self.token, interactive=False)
        auth.build_service("calendar", "v3")
        self.build.assert_called_once_with("calendar", "v3", credentials=self.creds, cache_discovery=False)
        self.flow_cls.from_client_secrets_file.assert_not_called()

    def test_non_interactive_without_token_fails_observably(self):
        auth = google_api.GoogleAuth(self.client, self.token, interactive=False)
        with self.assertRaises(CalendarUnavailableError) as ctx:
            auth.authenticate()
        self.assertIn("No valid OAuth token", ctx.exception.message)

    def test_interactive_without_client_file(self):
        auth = google_api.GoogleAuth(self.client, self.token, interactive=True)
        with self.assertRaises(CalendarUnavailableError):
            auth.authenticate()

    def test_interactive_flow_saves_token(self):
        with open(self.client, "w", encoding="utf-8") as fh:
            fh.write("{}")
        self.flow_cls.from_client_secrets_file.return_value.run_local_server.return_value = self.creds
        google_api.GoogleAuth(self.client, self.token).authenticate()
        self.assertTrue(os.path.exists(self.token))

    def test_build_failure_is_wrapped(self):
        self._write_token()
        self.build.side_effect = RuntimeError("discovery failed")
        auth = google_api.GoogleAuth(self.client, self.token, interactive=False)
        with self.assertRaises(CalendarUnavailableError):
            auth.build_service("calendar", "v3")


class TestGoogleServices(GoogleLibsMixin, unittest.TestCase):
    def test_builds_collaborators_lazily(self):
        self._write_token()
        cal, gmail = FakeCalendarApi(primary_id="cal@x.com"), FakeGmailApi(email="me@x.com")
        self.build.side_effect = lambda api, version, **kw: cal if api == "calendar" else gmail
        services = google_api.GoogleServices(google_api.GoogleAuth(self.client, self.token, interactive=False))
        self.build.assert_not_called()
        self.assertIsInstance(services.calendar(), GoogleCalendarSource)
        self.assertIs(services.calendar(), services.calendar())
        self.assertEqual(services.current_user_email(), "me@x.com")
        services.reporter().send("me@x.com", "s", "<p>x</p>")
        self.assertEqual(len(gmail.sent), 1)


if __name__ == "__main__":
    unittest.main()
