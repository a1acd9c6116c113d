# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import unittest

import httpx

from mailprobe.config import EmailSettings
from mailprobe.server.collaborators import (
    RESEND_API_URL,
    Candidate,
    InMemoryCandidateDirectory,
    RecordingEmailSender,
    ResendEmailSender,
    default_sender,
    demo_directory,
)

CANDIDATE = Candidate("c1", "Casey", "casey@example.com")


def _resend(handler) -> ResendEmailSender:
    settings = EmailSettings(resend_api_key="re_test", from_email="hr@example.com")
    return ResendEmailSender(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestCollaborators(unittest.TestCase):
    def test_directory_lookup(self):
        directory = InMemoryCandidateDirectory()
        self.assertIsNone(directory.find("c1"))
        directory.add(CANDIDATE)
        self.assertEqual(directory.find("c1"), CANDIDATE)
        self.assertEqual(demo_directory().find("navas").email, "navas@example.com")

    def test_recording_sender_counts_message_ids(self):
        sender = RecordingEmailSender()
        first = sender.send_session_invite(CANDIDATE, "http://app?candidateId=c1")
        second = sender.send_session_invite(CANDIDATE, "http://app?candidateId=c1")
        self.assertEqual([first.message_id, second.message_id], ["recorded-1", "recorded-2"])
        self.assertEqual(len(sender.sent), 2)

    def test_recording_sender_can_fail(self):
        result = RecordingEmailSender(fail_with="boom").send_session_invite(CANDIDATE, "http://app")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "boom")

    def test_default_sender_depends_on_api_key(self):
        self.assertIsInstance(default_sender(EmailSettings()), RecordingEmailSender)
        self.assertIsInstance(default_sender(EmailSettings(resend_api_key="re_x")), ResendEmailSender)

    def test_resend_sender_requires_api_key(self):
        with self.assertRaises(ValueError):
            ResendEmailSender(EmailSettings())


class TestResendSender(unittest.TestCase):
    def test_successful_delivery(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "msg_123"})

        result = _resend(handler).send_session_invite(CANDIDATE, "http://app?candidateId=c1")
        self.assertTrue(result.success)
        self.assertEqual(result.message_id, "msg_123")
        self.assertEqual(seen["url"], RESEND_API_URL)
        self.assertEqual(seen["auth"], "Bearer re_test")
        self.assertEqual(seen["payload"]["to"], ["casey@example.com"])
        self.assertIn("http://app?candidateId=c1", seen["payload"]["text"])

    def test_provider_error_status(self):
        result = _resend(lambda request: httpx.Response(422, text="invalid from")).send_session_invite(CANDIDATE, "http://app")
        self.assertFalse(result.success)
        self.assertIn("422", result.error)

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = _resend(handler).send_session_invite(CANDIDATE, "http://app")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "refused")


if __name__ == "__main__":
    unittest.main()
