"""Tests for report rendering."""

from __future__ import annotations

import datetime as dt
import unittest

from meeting_audit.model import FlaggedMeeting
from meeting_audit.report import build_subject, format_when, render_html, render_text


def _meeting(title="Sync", when=dt.datetime(2025, 3, 3, 10, 0), summaries=("a@x.com (❓)",), link="https://x/e?1&2"):
    return FlaggedMeeting(title=title, when=when, attendee_summaries=summaries, link=link)


class TestReport(unittest.TestCase):
    def test_subject_pluralization(self):
        self.assertIn("1 meeting in the next 7 days", build_subject([_meeting()], 7))
        self.assertIn("2 meetings in the next 3 days", build_subject([_meeting(), _meeting()], 3))

    def test_html_escapes_content(self):
        html = render_html([_meeting(title="<Budget & Plans>")], 7)
        self.assertIn("&lt;Budget &amp; Plans&gt;", html)
        self.assertIn('href="https://x/e?1&amp;2"', html)
        self.assertIn("a@x.com (❓)", html)

    def test_html_row_per_meeting(self):
        html = render_html([_meeting(title="A"), _meeting(title="B")], 7)
        self.assertEqual(html.count("<tr><td>"), 2)

    def test_text_lists_attendees_and_links(self):
        text = render_text([_meeting()], 7)
        self.assertIn("- Sync (Mon 2025-03-03 10:00), 1 invitee(s)", text)
        self.assertIn("    a@x.com (❓)", text)
        self.assertIn("    https://x/e?1&2", text)

    def test_format_when(self):
        self.assertEqual(format_when(dt.datetime(2025, 3, 4)), "Tue 2025-03-04")
        self.assertEqual(format_when(None), "(unknown time)")


if __name__ == "__main__":
    unittest.main()
