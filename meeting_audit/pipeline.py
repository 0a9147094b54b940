"""Audit pipeline: consume a request, classify the window, produce the report.

One run is a linear fetch -> classify -> (maybe) report. Collaborator
failures are caught at this boundary and converted to log lines; nothing
escapes to an unattended caller.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Protocol, TypeVar

from .classifier import classify_events
from .constants import DEFAULT_CALENDAR_ID, DEFAULT_LOOKAHEAD_DAYS
from .errors import AuditError, ExitCode
from .model import FlaggedMeeting, RawEvent
from .report import build_subject, render_html, render_text

LOG = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT")
ResultT = TypeVar("ResultT")


@dataclass
class ResultEnvelope(Generic[ResultT]):
    status: str
    payload: Optional[ResultT] = None
    diagnostics: Optional[dict[str, Any]] = None

    def ok(self) -> bool:
        return self.status.lower() == "success"

    def unwrap(self) -> ResultT:
        """Return payload or raise ValueError. Use after ok() check."""
        if self.payload is None:
            msg = (self.diagnostics or {}).get("message", "No payload")
            raise ValueError(msg)
        return self.payload


class Consumer(Protocol[PayloadT]):
    def consume(self) -> PayloadT:
        ...


class Processor(Protocol[PayloadT, ResultT]):
    def process(self, payload: PayloadT) -> ResultT:
        ...


class Producer(Protocol[ResultT]):
    def produce(self, result: ResultT) -> None:
        ...


# -----------------------------------------------------------------------------
# Collaborator contracts
# -----------------------------------------------------------------------------

class EventSource(Protocol):
    def list_events(
        self,
        calendar_id: str,
        time_min: _dt.datetime,
        time_max: _dt.datetime,
        *,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> List[RawEvent]:
        ...


class Reporter(Protocol):
    def send(self, recipient: str, subject: str, html_body: str, text_body: Optional[str] = None) -> Any:
        ...


class AuditServices(Protocol):
    """Lazily built collaborators; each accessor may raise AuditError."""

    def calendar(self) -> EventSource:
        ...

    def reporter(self) -> Reporter:
        ...

    def current_user_email(self) -> Optional[str]:
        ...


# -----------------------------------------------------------------------------
# Window
# -----------------------------------------------------------------------------

def _now() -> _dt.datetime:
    return _dt.datetime.now().astimezone()


@dataclass(frozen=True)
class AuditWindow:
    start: _dt.datetime
    end: _dt.datetime

    @classmethod
    def resolve(cls, now: Optional[_dt.datetime] = None, days: int = DEFAULT_LOOKAHEAD_DAYS) -> "AuditWindow":
        """Half-open window ``[now, now + days)``."""
        start = now or _now()
        return cls(start=start, end=start + _dt.timedelta(days=int(days)))


# -----------------------------------------------------------------------------
# Audit
# -----------------------------------------------------------------------------

@dataclass
class AuditRequest:
    services: AuditServices
    calendar_id: str = DEFAULT_CALENDAR_ID
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS
    recipient: Optional[str] = None
    dry_run: bool = False
    output: str = "text"
    now_factory: Callable[[], _dt.datetime] = _now


class AuditRequestConsumer(Consumer[AuditRequest]):
    def __init__(self, request: AuditRequest) -> None:
        self._request = request

    def consume(self) -> AuditRequest:
        return self._request


@dataclass
class AuditResult:
    request: AuditRequest
    window: AuditWindow
    scanned: int
    flagged: List[FlaggedMeeting] = field(default_factory=list)


def _failure(exc: AuditError, context: str) -> ResultEnvelope[AuditResult]:
    LOG.error("%s: %s", context, exc.message)
    if exc.hint:
        LOG.error("Hint: %s", exc.hint)
    return ResultEnvelope(
        status="error",
        diagnostics={"message": exc.message, "hint": exc.hint, "code": int(exc.code)},
    )


class AuditProcessor(Processor[AuditRequest, ResultEnvelope[AuditResult]]):
    def process(self, payload: AuditRequest) -> ResultEnvelope[AuditResult]:
        window = AuditWindow.resolve(payload.now_factory(), payload.lookahead_days)
        LOG.info(
            "Auditing %s from %s to %s",
            payload.calendar_id, window.start.isoformat(), window.end.isoformat(),
        )
        try:
            source = payload.services.calendar()
            events = source.list_events(
                payload.calendar_id,
                window.start,
                window.end,
                single_events=True,
                order_by="startTime",
            )
        except AuditError as exc:
            return _failure(exc, "Audit aborted, event source unavailable")
        except Exception as exc:
            return _failure(
                AuditError(f"{type(exc).__name__}: {exc}", ExitCode.ERROR),
                "Audit aborted, event retrieval failed",
            )
        flagged = classify_events(events)
        LOG.info("Scanned %d events, %d without confirmations", len(events), len(flagged))
        return ResultEnvelope(
            status="success",
            payload=AuditResult(request=payload, window=window, scanned=len(events), flagged=flagged),
        )


def emit_preview(flagged: List[FlaggedMeeting], days: int, fmt: str = "text") -> None:
    """Print flagged meetings instead of sending them."""
    if fmt == "json":
        print(json.dumps([m.to_dict() for m in flagged], ensure_ascii=False, indent=2))
    elif fmt == "yaml":
        import yaml  # type: ignore

        print(yaml.safe_dump([m.to_dict() for m in flagged], sort_keys=False, allow_unicode=True), end="")
    elif flagged:
        print(render_text(flagged, days))
    else:
        print(f"No unconfirmed meetings in the next {days} days.")


class AuditProducer(Producer[ResultEnvelope[AuditResult]]):
    """Sends the batch report; reporter failures are logged, never raised."""

    def produce(self, result: ResultEnvelope[AuditResult]) -> None:
        if not result.ok() or result.payload is None:
            return
        res = result.payload
        if res.request.dry_run:
            emit_preview(res.flagged, res.request.lookahead_days, res.request.output)
            return
        if not res.flagged:
            LOG.info("All organized meetings in the next %d days have a confirmation; nothing to report",
                     res.request.lookahead_days)
            return
        days = res.request.lookahead_days
        subject = build_subject(res.flagged, days)
        try:
            recipient = res.request.recipient or res.request.services.current_user_email()
            if not recipient:
                raise AuditError("Could not determine report recipient", hint="Set `recipient` in the config.")
            res.request.services.reporter().send(
                recipient, subject, render_html(res.flagged, days), render_text(res.flagged, days)
            )
        except AuditError as exc:
            LOG.error("Report not delivered: %s", exc.message)
            if exc.hint:
                LOG.error("Hint: %s", exc.hint)
            return
        except Exception as exc:
            LOG.error("Report not delivered: %s: %s", type(exc).__name__, exc)
            return
        LOG.info("Sent report of %d meeting(s) to %s", len(res.flagged), recipient)


def run_pipeline(request: Any, processor: Any, producer: Any) -> int:
    """Process, produce, and return a CLI exit code (0 on success)."""
    envelope = processor.process(request)
    producer.produce(envelope)
    return 0 if envelope.ok() else int((envelope.diagnostics or {}).get("code", 2))


def run_audit(request: AuditRequest) -> int:
    return run_pipeline(AuditRequestConsumer(request).consume(), AuditProcessor(), AuditProducer())
