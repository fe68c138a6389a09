# =============================================================================
# tests/test_gmail_client.py - Gmail Sender Tests
# =============================================================================
# The Gmail API service is mocked; no network calls are made.
# =============================================================================

import base64
import email
import json
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from lib.gmail_client import EmailTransportError, GmailSender, build_raw_message


@pytest.fixture
def service():
    service = MagicMock()
    service.users.return_value.messages.return_value.send.return_value.execute.return_value = {"id": "18c2f"}
    return service


@pytest.fixture
def oauth_files(tmp_path):
    credentials = tmp_path / "credentials.json"
    credentials.write_text(json.dumps({
        "installed": {
            "client_id": "client-123.apps.googleusercontent.com",
            "client_secret": "shh",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    }))
    token = tmp_path / "token.json"
    token.write_text(json.dumps({"token": "ya29.access", "refresh_token": "1//refresh"}))
    return credentials, token


def decode(raw):
    return email.message_from_bytes(base64.urlsafe_b64decode(raw))


class TestBuildRawMessage:

    def test_headers_and_body(self):
        message = decode(build_raw_message("jane@acme.org", "Missing phone", "Hi Jane,\nPlease reply."))

        assert message["To"] == "jane@acme.org"
        assert message["Subject"] == "Missing phone"
        assert message.get_content_type() == "text/plain"
        assert message.get_payload(decode=True).decode("utf-8") == "Hi Jane,\nPlease reply."

    def test_url_safe_encoding(self):
        raw = build_raw_message("jane@acme.org", "Hi", "x" * 500)

        assert "+" not in raw and "/" not in raw


class TestSend:

    def test_returns_message_id(self, service, tmp_path):
        sender = GmailSender(tmp_path / "c.json", tmp_path / "t.json", service=service)

        message_id = sender.send("jane@acme.org", "Hello", "Body")

        assert message_id == "18c2f"
        send = service.users.return_value.messages.return_value.send
        kwargs = send.call_args.kwargs
        assert kwargs["userId"] == "me"
        assert decode(kwargs["body"]["raw"])["To"] == "jane@acme.org"

    def test_custom_sender(self, service, tmp_path):
        sender = GmailSender(tmp_path / "c.json", tmp_path / "t.json", sender="ops@acme.org", service=service)

        sender.send("jane@acme.org", "Hello", "Body")

        send = service.users.return_value.messages.return_value.send
        assert send.call_args.kwargs["userId"] == "ops@acme.org"

    def test_http_error_wrapped(self, service, tmp_path):
        resp = MagicMock(status=403, reason="Forbidden")
        execute = service.users.return_value.messages.return_value.send.return_value.execute
        execute.side_effect = HttpError(resp, b"Insufficient permission")
        sender = GmailSender(tmp_path / "c.json", tmp_path / "t.json", service=service)

        with pytest.raises(EmailTransportError) as exc_info:
            sender.send("jane@acme.org", "Hello", "Body")

        assert exc_info.value.code == "EMAIL_SEND_FAILED"
        assert exc_info.value.details["status"] == 403

    def test_missing_files(self, tmp_path):
        sender = GmailSender(tmp_path / "nope.json", tmp_path / "token.json")

        with pytest.raises(EmailTransportError) as exc_info:
            sender.send("jane@acme.org", "Hello", "Body")

        assert "credentials file not found" in exc_info.value.message


class TestCredentials:

    def test_load_credentials(self, oauth_files):
        credentials_path, token_path = oauth_files
        sender = GmailSender(credentials_path, token_path)

        credentials = sender.load_credentials()

        assert credentials.token == "ya29.access"
        assert credentials.refresh_token == "1//refresh"
        assert credentials.client_id == "client-123.apps.googleusercontent.com"
        assert credentials.client_secret == "shh"

    def test_access_token_key_accepted(self, oauth_files):
        credentials_path, token_path = oauth_files
        token_path.write_text(json.dumps({"access_token": "ya29.other", "refresh_token": "1//r"}))

        credentials = GmailSender(credentials_path, token_path).load_credentials()

        assert credentials.token == "ya29.other"

    def test_invalid_token_json(self, oauth_files):
        credentials_path, token_path = oauth_files
        token_path.write_text("{broken")

        with pytest.raises(EmailTransportError):
            GmailSender(credentials_path, token_path).load_credentials()
