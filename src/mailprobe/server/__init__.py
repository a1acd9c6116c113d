# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Verification service: a minimal HTTP service exposing the email routes."""

from .app import VerificationService, bind_socket, create_app, describe_routes, serve, start
from .collaborators import (
    Candidate,
    CandidateDirectory,
    DeliveryResult,
    EmailLog,
    EmailLogEntry,
    EmailSender,
    InMemoryCandidateDirectory,
    InMemoryEmailLog,
    RecordingEmailSender,
    ResendEmailSender,
    default_sender,
    demo_directory,
)
from .email_routes import build_email_routes

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
    "VerificationService",
    "bind_socket",
    "build_email_routes",
    "create_app",
    "default_sender",
    "demo_directory",
    "describe_routes",
    "serve",
    "start",
]
