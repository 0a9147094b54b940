"""Tests for error handling and logging setup."""

from __future__ import annotations

import logging
import os
import unittest

from meeting_audit.applog import _HANDLER_TAG, configure_logging
from meeting_audit.errors import CalendarUnavailableError, ConfigError, ExitCode, ReportDeliveryError, handle_error
from tests.fixtures import PackageLoggerMixin, TempDirMixin


class TestHandleError(unittest.TestCase):
    def test_audit_error_logs_hint_and_returns_code(self):
        with self.assertLogs("meeting_audit.errors", level="ERROR") as logs:
            rc = handle_error(CalendarUnavailableError("API disabled", hint="Enable the Calendar API"))
        self.assertEqual(rc, ExitCode.CONFIG_ERROR)
        self.assertIn("Hint: Enable the Calendar API", "\n".join(logs.output))

    def test_codes(self):
        self.assertEqual(ConfigError("x").code, ExitCode.CONFIG_ERROR)
        self.assertEqual(ReportDeliveryError("x").code, ExitCode.NETWORK_ERROR)
        self.assertEqual(str(ConfigError("bad value")), "bad value")
        self.assertEqual([c.value for c in ExitCode], [0, 1, 2, 3, 5, 130])

    def test_unexpected_error(self):
        with self.assertLogs("meeting_audit.errors", level="ERROR"):
            self.assertEqual(handle_error(RuntimeError("boom")), ExitCode.ERROR)

    def test_interrupt(self):
        with self.assertLogs("meeting_audit.errors", level="WARNING"):
            self.assertEqual(handle_error(KeyboardInterrupt()), ExitCode.INTERRUPTED)


class TestConfigureLogging(PackageLoggerMixin, TempDirMixin, unittest.TestCase):
    def test_levels_and_file_handler(self):
        path = os.path.join(self.tmpdir, "nested", "audit.log")
        logger = configure_logging(verbose=True, log_file=path)
        self.assertEqual(logger.level, logging.DEBUG)
        logging.getLogger("meeting_audit.test").debug("hello file")
        with open(path, encoding="utf-8") as fh:
            self.assertIn("hello file", fh.read())
        # Reconfiguring replaces, not stacks, handlers
        logger = configure_logging(quiet=True)
        self.assertEqual(logger.level, logging.WARNING)
        ours = [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]
        self.assertEqual(len(ours), 1)
        self.assertFalse(logger.propagate)


if __name__ == "__main__":
    unittest.main()
