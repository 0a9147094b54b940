"""Render the unconfirmed-meetings report (subject, HTML, plain text)."""
from __future__ import annotations

import datetime as _dt
from html import escape
from typing import List, Optional, Sequence

from .constants import REPORT_SUBJECT_PREFIX
from .model import FlaggedMeeting

_FMT_WHEN = "%a %Y-%m-%d %H:%M"
_FMT_DAY = "%a %Y-%m-%d"


def format_when(when: Optional[_dt.datetime]) -> str:
    if when is None:
        return "(unknown time)"
    if when.time() == _dt.time.min and when.tzinfo is None:
        return when.strftime(_FMT_DAY)
    return when.strftime(_FMT_WHEN)


def build_subject(meetings: Sequence[FlaggedMeeting], days: int) -> str:
    n = len(meetings)
    noun = "meeting" if n == 1 else "meetings"
    return f"⚠️ {REPORT_SUBJECT_PREFIX}: {n} {noun} in the next {days} days"


def render_html(meetings: Sequence[FlaggedMeeting], days: int) -> str:
    rows: List[str] = []
    for m in meetings:
        attendees = "<br>".join(escape(s) for s in m.attendee_summaries) or "&mdash;"
        rows.append(
            "<tr>"
            f"<td><a href=\"{escape(m.link, quote=True)}\">{escape(m.title)}</a></td>"
            f"<td>{escape(format_when(m.when))}</td>"
            f"<td style=\"text-align:right\">{m.attendee_count}</td>"
            f"<td>{attendees}</td>"
            "</tr>"
        )
    return (
        "<html><body style=\"font-family:sans-serif\">"
        f"<h2>{escape(build_subject(meetings, days))}</h2>"
        "<p>Nobody has accepted or tentatively accepted these meetings you organized.</p>"
        "<table border=\"1\" cellpadding=\"6\" cellspacing=\"0\" style=\"border-collapse:collapse\">"
        "<thead><tr><th>Meeting</th><th>When</th><th>Invitees</th><th>Responses</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        "</table>"
        "<p style=\"color:#888\">Legend: ❓ no reply, ❌ declined</p>"
        "</body></html>"
    )


def render_text(meetings: Sequence[FlaggedMeeting], days: int) -> str:
    lines = [build_subject(meetings, days), ""]
    for m in meetings:
        lines.append(f"- {m.title} ({format_when(m.when)}), {m.attendee_count} invitee(s)")
        for s in m.attendee_summaries:
            lines.append(f"    {s}")
        if m.link:
            lines.append(f"    {m.link}")
    return "\n".join(lines)
