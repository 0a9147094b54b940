"""Gmail report delivery and current-user identity."""
from __future__ import annotations

import base64
import logging
from email.message import EmailMessage
from typing import Any, Dict, Optional

from .calendar_source import describe_api_failure
from .errors import HINT_GMAIL_API, ReportDeliveryError

LOG = logging.getLogger(__name__)


def compose_message(
    *,
    recipient: str,
    subject: str,
    html_body: str,
    text_body: Optional[str] = None,
    sender: Optional[str] = None,
) -> EmailMessage:
    msg = EmailMessage()
    msg["To"] = recipient
    if sender:
        msg["From"] = sender
    msg["Subject"] = subject
    msg.set_content(text_body or "This report is best viewed in an HTML-capable mail client.")
    msg.add_alternative(html_body, subtype="html")
    return msg


def encode_message_raw(msg: EmailMessage) -> str:
    return base64.urlsafe_b64encode(msg.as_bytes()).decode("utf-8")


class GmailReporter:
    def __init__(self, service: Any) -> None:
        self.service = service

    def send(
        self,
        recipient: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not recipient:
            raise ReportDeliveryError("No report recipient configured")
        msg = compose_message(recipient=recipient, subject=subject, html_body=html_body, text_body=text_body)
        body = {"raw": encode_message_raw(msg)}
        try:
            resp = self.service.users().messages().send(userId="me", body=body).execute()
        except Exception as exc:  # googleapiclient.errors.HttpError, transport errors
            raise ReportDeliveryError(
                f"Gmail send to {recipient} failed: {describe_api_failure(exc)}",
                hint=HINT_GMAIL_API,
            ) from exc
        LOG.debug("Sent message id=%s", (resp or {}).get("id"))
        return resp or {}


class GoogleIdentity:
    """Resolves the current user's address from Gmail, else the primary calendar."""

    def __init__(self, gmail_service: Any = None, calendar_source: Any = None) -> None:
        self.gmail_service = gmail_service
        self.calendar_source = calendar_source

    def current_user_email(self) -> Optional[str]:
        if self.gmail_service is not None:
            try:
                prof = self.service_profile()
                if prof.get("emailAddress"):
                    return prof["emailAddress"]
            except Exception as exc:  # googleapiclient.errors.HttpError, transport errors
                LOG.warning("Gmail profile lookup failed: %s", describe_api_failure(exc))
        if self.calendar_source is not None:
            return self.calendar_source.primary_calendar_id()
        return None

    def service_profile(self) -> Dict[str, Any]:
        return self.gmail_service.users().getProfile(userId="me").execute() or {}
