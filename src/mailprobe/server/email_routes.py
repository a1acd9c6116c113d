# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""The candidate-session email routes."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from urllib.parse import urlencode

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from ..config import DEFAULT_MOUNT_PREFIX, EmailSettings
from ..http.url import join_url, normalize
from ..routes import RouteGroup, list_routes
from .collaborators import CandidateDirectory, EmailLog, EmailLogEntry, EmailSender, InMemoryEmailLog

logger = logging.getLogger(__name__)


class SendCandidateSessionBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    candidateId: str | None = None
    recruiterEmail: str | None = None
    message: str | None = None


def _failure(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


def session_url_for(frontend_url: str, candidate_id: str) -> str:
    return f"{normalize(frontend_url)}?{urlencode({'candidateId': candidate_id})}"


def build_email_routes(
    directory: CandidateDirectory,
    sender: EmailSender,
    settings: EmailSettings | None = None,
    *,
    mount_prefix: str = DEFAULT_MOUNT_PREFIX,
    email_log: EmailLog | None = None,
) -> RouteGroup:
    """
    Build the email route group.

    `mount_prefix` is only used to advertise full paths from `GET /test`; the caller
    decides where the group is actually mounted. Every delivery attempt is recorded in
    `email_log` and served back by `GET /logs/{candidate_id}`.
    """
    settings = settings or EmailSettings()
    email_log = email_log if email_log is not None else InMemoryEmailLog()
    group = RouteGroup("email")

    @group.get("/test")
    def email_routes_test():
        logger.info("Email routes test endpoint hit")
        return {
            "success": True,
            "message": "Email routes are accessible",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": [
                f"{descriptor.method.value} {join_url(mount_prefix, descriptor.path)}" for descriptor in list_routes(group)
            ],
        }

    @group.get("/test-config")
    def email_config_test():
        return {
            "success": settings.provider_configured,
            "message": "Email provider is configured" if settings.provider_configured else "Email provider is not configured",
            "config": {
                "hasResendApiKey": settings.provider_configured,
                "fromEmail": settings.from_email,
                "frontendUrl": normalize(settings.frontend_url),
            },
        }

    @group.post("/send-candidate-session")
    def send_candidate_session(body: SendCandidateSessionBody):
        candidate_id = (body.candidateId or "").strip()
        if not candidate_id:
            return _failure(400, "candidateId is required")

        candidate = directory.find(candidate_id)
        if candidate is None:
            logger.info("Candidate %s not found", candidate_id)
            return _failure(404, "Candidate not found")
        if not candidate.email:
            return _failure(400, "Candidate email not found", data={"candidateId": candidate_id})

        session_url = session_url_for(settings.frontend_url, candidate_id)
        result = sender.send_session_invite(candidate, session_url)
        email_log.record(
            EmailLogEntry(
                candidate_id=candidate_id,
                recipient_email=candidate.email,
                session_url=session_url,
                email_sent=result.success,
                attempted_at=datetime.now(timezone.utc),
                recruiter_email=body.recruiterEmail,
                custom_message=body.message,
                message_id=result.message_id,
                error=result.error,
            )
        )
        if not result.success:
            logger.warning("Invite for %s failed: %s", candidate_id, result.error)
            return _failure(
                500,
                "Failed to send session URL to candidate",
                error=result.error,
                data={"candidateId": candidate_id, "candidateEmail": candidate.email},
            )

        logger.info("Invite for %s sent to %s (recruiter=%s)", candidate_id, candidate.email, body.recruiterEmail or "system")
        return {
            "success": True,
            "message": "Session URL sent successfully to candidate",
            "data": {
                "candidateId": candidate_id,
                "candidateName": candidate.name,
                "candidateEmail": candidate.email,
                "sessionUrl": session_url,
                "emailMessageId": result.message_id,
            },
        }

    @group.get("/logs/{candidate_id}")
    def email_logs(candidate_id: str):
        entries = email_log.for_candidate(candidate_id)
        return {
            "success": True,
            "data": {
                "candidateId": candidate_id,
                "totalEmails": len(entries),
                "emails": [entry.to_dict() for entry in entries],
            },
        }

    return group


__all__ = ["SendCandidateSessionBody", "build_email_routes", "session_url_for"]
