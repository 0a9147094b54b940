"""Google Calendar v3 event source."""

from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict, Iterator, List, Optional

from .constants import DEFAULT_PAGE_SIZE
from .errors import HINT_CALENDAR_API, CalendarUnavailableError
from .model import RawEvent

LOG = logging.getLogger(__name__)


def _rfc3339(value: _dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


def paginate_events(events_api, **kwargs: Any) -> Iterator[List[Dict[str, Any]]]:
    """Yield one list of event resources per ``events.list`` page.

    - events_api is a bound resource: service.events()
    """
    token: Optional[str] = None
    while True:
        params = dict(kwargs)
        if token:
            params["pageToken"] = token
        resp: Dict[str, Any] = events_api.list(**params).execute() or {}
        items = resp.get("items") or []
        if items:
            yield items
        token = resp.get("nextPageToken")
        if not token:
            break


def describe_api_failure(exc: Exception) -> str:
    """One-line summary of an API failure, including HTTP status when present."""
    resp = getattr(exc, "resp", None)
    status = getattr(resp, "status", None)
    reason = getattr(exc, "reason", None) or str(exc)
    if status:
        return f"HTTP {status}: {reason}"
    return f"{type(exc).__name__}: {reason}"


class GoogleCalendarSource:
    """Lists events for a window; failures surface as CalendarUnavailableError."""

    def __init__(self, service: Any, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if service is None:
            raise CalendarUnavailableError("Calendar service is not configured", hint=HINT_CALENDAR_API)
        self.service = service
        self.page_size = int(page_size)

    def list_events(
        self,
        calendar_id: str,
        time_min: _dt.datetime,
        time_max: _dt.datetime,
        *,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> List[RawEvent]:
        params: Dict[str, Any] = {
            "calendarId": calendar_id,
            "timeMin": _rfc3339(time_min),
            "timeMax": _rfc3339(time_max),
            "singleEvents": bool(single_events),
            "maxResults": self.page_size,
        }
        # orderBy=startTime is only accepted together with singleEvents
        if order_by and single_events:
            params["orderBy"] = order_by
        LOG.debug("events.list %s", params)
        try:
            items: List[Dict[str, Any]] = []
            for page in paginate_events(self.service.events(), **params):
                items.extend(page)
        except Exception as exc:  # googleapiclient.errors.HttpError, transport errors
            raise CalendarUnavailableError(
                f"Calendar events.list failed for {calendar_id!r}: {describe_api_failure(exc)}",
                hint=HINT_CALENDAR_API,
            ) from exc
        LOG.debug("Fetched %d events from %s", len(items), calendar_id)
        return [RawEvent.from_api(it) for it in items]

    def primary_calendar_id(self) -> Optional[str]:
        """Return the primary calendar id, which is the owner's address."""
        try:
            cal = self.service.calendars().get(calendarId="primary").execute() or {}
        except Exception as exc:  # googleapiclient.errors.HttpError, transport errors
            LOG.warning("Could not read primary calendar: %s", describe_api_failure(exc))
            return None
        return cal.get("id")
