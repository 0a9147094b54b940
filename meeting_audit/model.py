"""Calendar event records consumed and produced by the audit.

``RawEvent``/``RawAttendee`` mirror the subset of a Google Calendar v3 event
resource the classifier reads. ``FlaggedMeeting`` is the report-ready shape.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

When = Union[_dt.datetime, _dt.date]


class ResponseStatus(str, Enum):
    NEEDS_ACTION = "needsAction"
    DECLINED = "declined"
    TENTATIVE = "tentative"
    ACCEPTED = "accepted"


# Replies that count as "someone is coming"
POSITIVE_STATUSES = frozenset({ResponseStatus.ACCEPTED.value, ResponseStatus.TENTATIVE.value})

STATUS_GLYPHS: Mapping[str, str] = MappingProxyType({
    ResponseStatus.NEEDS_ACTION.value: "❓",
    ResponseStatus.DECLINED.value: "❌",
    ResponseStatus.TENTATIVE.value: "🤔",
    ResponseStatus.ACCEPTED.value: "✅",
})


def status_glyph(status: Optional[str]) -> str:
    """Return the display glyph for a response status ('' when unrecognized)."""
    return STATUS_GLYPHS.get(str(status or ""), "")


def _coerce_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s if s else None


def _parse_when(start: Any) -> Optional[When]:
    """Parse a v3 ``start`` object: ``dateTime`` (RFC3339) wins over ``date``."""
    if not isinstance(start, dict):
        return None
    value = _coerce_str(start.get("dateTime"))
    if value:
        try:
            return _dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    value = _coerce_str(start.get("date"))
    if value:
        try:
            return _dt.date.fromisoformat(value)
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class RawAttendee:
    email: str = ""
    is_self: bool = False
    response_status: str = ""

    @classmethod
    def from_api(cls, item: Any) -> Optional["RawAttendee"]:
        if not isinstance(item, dict):
            return None
        return cls(
            email=str(item.get("email") or ""),
            is_self=bool(item.get("self", False)),
            response_status=str(item.get("responseStatus") or ""),
        )


@dataclass(frozen=True)
class RawEvent:
    is_self_organized: bool = False
    attendees: tuple = field(default_factory=tuple)
    title: Optional[str] = None
    starts_at: Optional[When] = None
    canonical_link: str = ""

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "RawEvent":
        """Build from a Google Calendar v3 event resource without raising."""
        if not isinstance(item, dict):
            item = {}
        organizer = item.get("organizer")
        raw_attendees = item.get("attendees")
        attendees: List[RawAttendee] = []
        if isinstance(raw_attendees, list):
            for a in raw_attendees:
                att = RawAttendee.from_api(a)
                if att is not None:
                    attendees.append(att)
        return cls(
            is_self_organized=bool(isinstance(organizer, dict) and organizer.get("self", False)),
            attendees=tuple(attendees),
            title=_coerce_str(item.get("summary")),
            starts_at=_parse_when(item.get("start")),
            canonical_link=str(item.get("htmlLink") or ""),
        )


@dataclass(frozen=True)
class FlaggedMeeting:
    title: str
    when: Optional[_dt.datetime]
    attendee_summaries: tuple
    link: str

    @property
    def attendee_count(self) -> int:
        return len(self.attendee_summaries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "when": self.when.isoformat() if self.when else None,
            "attendees": list(self.attendee_summaries),
            "attendee_count": self.attendee_count,
            "link": self.link,
        }
