"""Decide which organized events have no positive reply yet.

Pure and order-preserving: the same input always yields the same output.
Malformed records are excluded, never raised on or logged.
"""
from __future__ import annotations

import datetime as _dt
from typing import Iterable, List, Optional

from .constants import PLACEHOLDER_TITLE
from .model import POSITIVE_STATUSES, FlaggedMeeting, RawAttendee, RawEvent, When, status_glyph


def is_other_attendee(attendee: RawAttendee) -> bool:
    """True for attendees other than the calling user.

    Shared by the qualification check and the summary step so both skip the
    same entries.
    """
    return not attendee.is_self


def has_positive_response(event: RawEvent) -> bool:
    return any(
        a.response_status in POSITIVE_STATUSES
        for a in (event.attendees or ())
        if is_other_attendee(a)
    )


def qualifies(event: RawEvent) -> bool:
    """Organized by self, has attendees, and nobody else accepted or is tentative."""
    if not event.is_self_organized:
        return False
    if not event.attendees:
        return False
    return not has_positive_response(event)


def summarize_attendee(attendee: RawAttendee) -> str:
    return f"{attendee.email} ({status_glyph(attendee.response_status)})"


def _resolve_when(starts_at: Optional[When]) -> Optional[_dt.datetime]:
    if starts_at is None or isinstance(starts_at, _dt.datetime):
        return starts_at
    # All-day events: midnight of that date
    return _dt.datetime.combine(starts_at, _dt.time.min)


def to_flagged(event: RawEvent) -> FlaggedMeeting:
    summaries = tuple(summarize_attendee(a) for a in event.attendees if is_other_attendee(a))
    return FlaggedMeeting(
        title=event.title or PLACEHOLDER_TITLE,
        when=_resolve_when(event.starts_at),
        attendee_summaries=summaries,
        link=event.canonical_link,
    )


def classify_events(events: Optional[Iterable[RawEvent]]) -> List[FlaggedMeeting]:
    """Return a FlaggedMeeting for every qualifying event, in input order."""
    return [to_flagged(ev) for ev in (events or ()) if qualifies(ev)]
