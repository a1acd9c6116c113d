# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Collaborators behind the email routes.

The service does not own candidate data or mail delivery. It talks to a
`CandidateDirectory` and an `EmailSender`, and notes every attempt in an `EmailLog`;
the in-memory and recording versions here stand in for the real data store and mail
provider during verification runs.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

import httpx

from ..config import EmailSettings

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class Candidate:
    candidate_id: str
    name: str = "Dear Candidate"
    email: str | None = None


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class SentInvite:
    candidate: Candidate
    session_url: str
    message_id: str


@dataclass(frozen=True)
class EmailLogEntry:
    """One delivery attempt, successful or not."""

    candidate_id: str
    recipient_email: str
    session_url: str
    email_sent: bool
    attempted_at: datetime
    recruiter_email: str | None = None
    custom_message: str | None = None
    message_id: str | None = None
    error: str | None = None
    kind: str = "candidate_session_url"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.message_id,
            "type": self.kind,
            "emailSent": self.email_sent,
            "sentAt": self.attempted_at.isoformat(),
            "recipientEmail": self.recipient_email,
            "recruiterEmail": self.recruiter_email,
            "sessionUrl": self.session_url,
            "customMessage": self.custom_message,
            "error": self.error,
        }


class CandidateDirectory(Protocol):
    def find(self, candidate_id: str) -> Candidate | None: ...


class EmailSender(Protocol):
    def send_session_invite(self, candidate: Candidate, session_url: str) -> DeliveryResult: ...


class EmailLog(Protocol):
    def record(self, entry: EmailLogEntry) -> None: ...

    def for_candidate(self, candidate_id: str) -> list[EmailLogEntry]: ...


class InMemoryEmailLog(EmailLog):
    def __init__(self):
        self._entries: list[EmailLogEntry] = []
        self._lock = threading.Lock()

    def record(self, entry: EmailLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def for_candidate(self, candidate_id: str) -> list[EmailLogEntry]:
        """Attempts for `candidate_id`, newest first."""
        with self._lock:
            matching = [entry for entry in self._entries if entry.candidate_id == candidate_id]
        return list(reversed(matching))


class InMemoryCandidateDirectory(CandidateDirectory):
    def __init__(self, candidates: Iterable[Candidate] = ()):
        self._candidates = {candidate.candidate_id: candidate for candidate in candidates}

    def add(self, candidate: Candidate) -> None:
        self._candidates[candidate.candidate_id] = candidate

    def find(self, candidate_id: str) -> Candidate | None:
        return self._candidates.get(candidate_id)


@dataclass
class RecordingEmailSender(EmailSender):
    """Records invites instead of delivering them. Set `fail_with` to simulate a provider error."""

    fail_with: str | None = None
    sent: list[SentInvite] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def send_session_invite(self, candidate: Candidate, session_url: str) -> DeliveryResult:
        if self.fail_with:
            return DeliveryResult(success=False, error=self.fail_with)
        message_id = f"recorded-{next(self._ids)}"
        self.sent.append(SentInvite(candidate, session_url, message_id))
        return DeliveryResult(success=True, message_id=message_id)


class ResendEmailSender(EmailSender):
    """Thin adapter over the Resend `/emails` API. One attempt per invite, no retries."""

    def __init__(self, settings: EmailSettings, client: httpx.Client | None = None, timeout: float = 10.0):
        if not settings.resend_api_key:
            raise ValueError("ResendEmailSender needs RESEND_API_KEY")
        self.settings = settings
        self._client = client or httpx.Client(timeout=timeout)

    def _payload(self, candidate: Candidate, session_url: str) -> dict[str, object]:
        return {
            "from": self.settings.from_email,
            "to": [candidate.email],
            "subject": "Your interview session is ready",
            "text": (
                f"Hi {candidate.name},\n\n"
                f"Your interview session is ready. Join here: {session_url}\n"
                f"Candidate ID: {candidate.candidate_id}\n"
            ),
        }

    def send_session_invite(self, candidate: Candidate, session_url: str) -> DeliveryResult:
        try:
            response = self._client.post(
                RESEND_API_URL,
                json=self._payload(candidate, session_url),
                headers={"Authorization": f"Bearer {self.settings.resend_api_key}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Resend request failed for %s: %s", candidate.candidate_id, exc)
            return DeliveryResult(success=False, error=str(exc) or type(exc).__name__)

        if response.status_code >= 400:
            return DeliveryResult(success=False, error=f"Resend returned {response.status_code}: {response.text[:200]}")
        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None
        return DeliveryResult(success=True, message_id=message_id)

    def close(self) -> None:
        self._client.close()


DEMO_CANDIDATES = (
    Candidate("navas", "Navas", "navas@example.com"),
    Candidate("no-email", "Candidate Without Email"),
)


def demo_directory() -> InMemoryCandidateDirectory:
    """Directory seeded with the fixtures used by the built-in scenarios."""
    return InMemoryCandidateDirectory(DEMO_CANDIDATES)


def default_sender(settings: EmailSettings) -> EmailSender:
    """Resend when an API key is configured, otherwise a recording stand-in."""
    if settings.provider_configured:
        return ResendEmailSender(settings)
    logger.warning("RESEND_API_KEY is not set; invites will be recorded, not delivered")
    return RecordingEmailSender()


__all__ = [
    "Candidate",
    "CandidateDirectory",
    "DeliveryResult",
    "EmailLog",
    "EmailLogEntry",
    "EmailSender",
    "InMemoryCandidateDirectory",
    "InMemoryEmailLog",
    "RecordingEmailSender",
    "ResendEmailSender",
    "SentInvite",
    "default_sender",
    "demo_directory",
]
