"""Shared test fixtures and utilities.

Common fakes, builders, and helpers for the meeting audit test suite.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from contextlib import contextmanager, redirect_stdout
from typing import Any, Dict, List, Optional

from meeting_audit.model import RawAttendee, RawEvent


# -----------------------------------------------------------------------------
# Event builders
# -----------------------------------------------------------------------------


def make_api_event(
    summary: Optional[str] = "Sync",
    *,
    organizer_self: Optional[bool] = True,
    attendees: Optional[List[Dict[str, Any]]] = None,
    start: Optional[Dict[str, str]] = None,
    link: str = "https://calendar.google.com/event?eid=abc",
) -> Dict[str, Any]:
    """Build a Calendar v3 event resource; ``None`` values omit the key."""
    ev: Dict[str, Any] = {"htmlLink": link, "start": start or {"dateTime": "2025-03-03T10:00:00+00:00"}}
    if summary is not None:
        ev["summary"] = summary
    if organizer_self is not None:
        ev["organizer"] = {"email": "me@example.com", "self": organizer_self}
    if attendees is not None:
        ev["attendees"] = attendees
    return ev


def attendee(email: str, status: str = "needsAction", *, is_self: bool = False) -> RawAttendee:
    return RawAttendee(email=email, is_self=is_self, response_status=status)


def make_event(
    *attendees: RawAttendee,
    title: Optional[str] = "Sync",
    organized: bool = True,
    starts_at: Any = None,
    link: str = "https://calendar.google.com/event?eid=abc",
) -> RawEvent:
    import datetime as _dt

    return RawEvent(
        is_self_organized=organized,
        attendees=tuple(attendees),
        title=title,
        starts_at=starts_at or _dt.datetime(2025, 3, 3, 10, 0, tzinfo=_dt.timezone.utc),
        canonical_link=link,
    )


# -----------------------------------------------------------------------------
# YAML config helpers
# -----------------------------------------------------------------------------


def write_yaml(data: dict, dir: Optional[str] = None, filename: str = "config.yaml") -> str:
    """Write a dict to a temporary YAML file, return the path."""
    import yaml

    td = dir or tempfile.mkdtemp()
    p = os.path.join(td, filename)
    with open(p, "w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, sort_keys=False)
    return p


# -----------------------------------------------------------------------------
# Output capture helpers
# -----------------------------------------------------------------------------


@contextmanager
def capture_stdout():
    """Context manager that captures stdout and yields a StringIO buffer."""
    buf = io.StringIO()
    with redirect_stdout(buf):
        yield buf


# -----------------------------------------------------------------------------
# Temporary directory mixin
# -----------------------------------------------------------------------------


class TempDirMixin:
    """Mixin providing a temporary directory that's cleaned up after each test.

    Usage:
        class MyTest(TempDirMixin, unittest.TestCase):
            def test_something(self):
                path = os.path.join(self.tmpdir, "file.txt")
                ...
    """

    tmpdir: str

    def setUp(self):
        super().setUp()
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        import shutil
        shutil.rmtree(self.tmpdir, ignore_errors=True)
        super().tearDown()


# -----------------------------------------------------------------------------
# Logger state mixin
# -----------------------------------------------------------------------------


class PackageLoggerMixin:
    """Restore the ``meeting_audit`` logger after tests that configure logging.

    ``configure_logging`` replaces handlers, sets the level and turns off
    propagation for the whole process.
    """

    def setUp(self):
        super().setUp()
        logger = logging.getLogger("meeting_audit")
        self._saved_logger = (list(logger.handlers), logger.level, logger.propagate)

    def tearDown(self):
        logger = logging.getLogger("meeting_audit")
        handlers, level, propagate = self._saved_logger
        for h in list(logger.handlers):
            if h not in handlers:
                logger.removeHandler(h)
                h.close()
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate
        super().tearDown()
