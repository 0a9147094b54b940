"""Shared fake/mock objects for testing.

Centralized location for fake clients used across test suites.

Modules:
    google  - FakeCalendarApi, FakeGmailApi resources for googleapiclient-shaped calls
    audit   - FakeEventSource, FakeReporter, FakeServices for the audit pipeline
    cron    - FakeCrontab runner for scheduler tests
"""

from __future__ import annotations

from tests.fakes.audit import FakeEventSource, FakeReporter, FakeServices
from tests.fakes.cron import FakeCrontab
from tests.fakes.google import FakeCalendarApi, FakeGmailApi, FakeHttpError

__all__ = [
    # Google resources
    "FakeCalendarApi",
    "FakeGmailApi",
    "FakeHttpError",
    # Audit collaborators
    "FakeEventSource",
    "FakeReporter",
    "FakeServices",
    # Cron
    "FakeCrontab",
]
