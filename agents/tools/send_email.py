# =============================================================================
# agents/tools/send_email.py - send-email Tool
# =============================================================================
# Sends a plain text email through the configured notification sender.
# Input is validated (valid address, non-blank subject and body) by the
# registry before the sender is touched.
# =============================================================================

from __future__ import annotations

from typing import Any

from agents.tools.registry import ToolContext, register_tool
from core.models.tools import SendEmailInput
from lib.utils import ApplicationError

DESCRIPTION = "Sends an email using the Gmail API. Provide recipient email, subject, and body."


@register_tool("send-email", DESCRIPTION, SendEmailInput)
def send_email_tool(params: SendEmailInput, context: ToolContext) -> dict[str, Any]:
    if context.sender is None:
        raise ApplicationError(
            "No email sender is configured for this assistant.",
            code="EMAIL_SEND_FAILED",
            suggestion="Set GMAIL_CREDENTIALS_PATH and GMAIL_TOKEN_PATH and restart the service.",
        )

    message_id = context.sender.send(str(params.to), params.subject, params.body)
    return {"success": True, "message_id": message_id}
