# =============================================================================
# lib/gmail_client.py - Gmail Notification Sender
# =============================================================================
# Sends plain-text emails through the Gmail API with a stored OAuth2 token.
#
# Two files are needed, both injected through settings:
# - GMAIL_CREDENTIALS_PATH: OAuth client file downloaded from Google Cloud
#   ("installed" or "web" section with client_id / client_secret)
# - GMAIL_TOKEN_PATH: previously authorized token (access + refresh token)
#
# The interactive consent flow that creates the token is not part of this
# service; an expired access token is refreshed and written back.
#
# Usage:
#   sender = GmailSender(settings.GMAIL_CREDENTIALS_PATH, settings.GMAIL_TOKEN_PATH)
#   message_id = sender.send("jane@example.com", "Hello", "Body text")
# =============================================================================

from __future__ import annotations

import base64
import json
import logging
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any, Protocol

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/gmail.send"]
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


class EmailTransportError(ApplicationError):
    """Raised when an email could not be handed to the provider."""

    def __init__(self, error: str, suggestion: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Failed to send email: {error}",
            code="EMAIL_SEND_FAILED",
            suggestion=suggestion or "Check the Gmail credentials/token files and network connection",
            details={"error": error, **(details or {})},
        )


class NotificationSender(Protocol):
    """What the send-email tool needs from a mail transport."""

    def send(self, to: str, subject: str, body: str) -> str:
        ...


def build_raw_message(to: str, subject: str, body: str) -> str:
    """Encode a single-part plain text message the way the Gmail API expects."""
    message = MIMEText(body, "plain", "utf-8")
    message["To"] = to
    message["Subject"] = subject
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


class GmailSender:
    """
    Gmail API sender.

    The API client is built lazily on first send and reused afterwards.

    Attributes:
        credentials_path: OAuth client secrets file
        token_path: Authorized user token file
        sender: Gmail userId to send as ("me" = the token's account)
    """

    def __init__(
        self,
        credentials_path: str | Path,
        token_path: str | Path,
        sender: str = "me",
        service: Any | None = None,
    ):
        self.credentials_path = Path(credentials_path)
        self.token_path = Path(token_path)
        self.sender = sender
        self._service = service

        logger.info(f"Gmail credentials path: {self.credentials_path}")
        logger.info(f"Gmail token path: {self.token_path}")

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    def _read_json(self, path: Path, what: str) -> dict[str, Any]:
        if not path.exists():
            raise EmailTransportError(
                f"{what} file not found: {path}",
                suggestion=f"Set GMAIL_{what.upper()}_PATH or authorize the Gmail account to create it",
                details={"path": str(path)},
            )
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise EmailTransportError(
                f"Could not read {what} file: {e}",
                details={"path": str(path)},
            ) from e

    def load_credentials(self) -> Credentials:
        """
        Combine the OAuth client file and the stored token into credentials.

        Accepts token files written by google-auth ("token") and by other
        Google client libraries ("access_token").
        """
        client_file = self._read_json(self.credentials_path, "credentials")
        client = client_file.get("installed") or client_file.get("web") or {}
        token = self._read_json(self.token_path, "token")

        credentials = Credentials(
            token=token.get("token") or token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            token_uri=client.get("token_uri") or token.get("token_uri") or DEFAULT_TOKEN_URI,
            client_id=client.get("client_id") or token.get("client_id"),
            client_secret=client.get("client_secret") or token.get("client_secret"),
            scopes=SCOPES,
        )

        if not credentials.valid and credentials.refresh_token:
            logger.info("Refreshing Gmail access token")
            credentials.refresh(Request())
            self.token_path.write_text(credentials.to_json(), encoding="utf-8")

        return credentials

    def _get_service(self) -> Any:
        if self._service is None:
            credentials = self.load_credentials()
            self._service = build("gmail", "v1", credentials=credentials, cache_discovery=False)
        return self._service

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    def send(self, to: str, subject: str, body: str) -> str:
        """
        Send a plain text email.

        Returns:
            The Gmail message id

        Raises:
            EmailTransportError: If credentials or the API call fail
        """
        try:
            service = self._get_service()
            response = (
                service.users()
                .messages()
                .send(userId=self.sender, body={"raw": build_raw_message(to, subject, body)})
                .execute()
            )
        except EmailTransportError:
            raise
        except HttpError as e:
            logger.error(f"Gmail API error: {e}")
            raise EmailTransportError(str(e), details={"status": getattr(e.resp, "status", None)}) from e
        except (GoogleAuthError, OSError, ValueError) as e:
            logger.error(f"Gmail transport error: {e}")
            raise EmailTransportError(str(e)) from e

        message_id = (response or {}).get("id", "")
        logger.info(f"Email sent to {to} (message id {message_id})")
        return message_id
