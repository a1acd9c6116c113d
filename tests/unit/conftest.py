# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest
from fastapi.testclient import TestClient

from mailprobe.config import EmailSettings, HttpSettings, ServiceConfig
from mailprobe.http.httpx_client import HttpxClient
from mailprobe.server import RecordingEmailSender, build_email_routes, create_app, demo_directory

TEST_ORIGIN = "http://localhost:3000"


@pytest.fixture
def service_config():
    return ServiceConfig(port=0, allowed_origins={TEST_ORIGIN})


@pytest.fixture
def email_settings():
    return EmailSettings(frontend_url="https://interview.example.com/")


@pytest.fixture
def sender():
    return RecordingEmailSender()


@pytest.fixture
def email_routes(sender, email_settings):
    return build_email_routes(demo_directory(), sender, email_settings)


@pytest.fixture
def app(service_config, email_routes):
    return create_app(service_config, email_routes)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def in_process_http_client(client):
    """HttpxClient that drives the app in-process instead of over a socket."""
    return HttpxClient(HttpSettings(), client=client)
