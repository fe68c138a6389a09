# =============================================================================
# app/routers/assistant.py - Assistant Chat Endpoint
# =============================================================================
# Conversational access to the contact assistant. The client keeps the
# conversation and sends it with every request.
# =============================================================================

import logging
from typing import Any, Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from agents.assistant import AssistantError, ContactAssistant
from app.config import settings
from app.dependencies import ToolContextDep
from app.exceptions import ContactGapException, ServiceNotConfiguredError

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================

class ChatMessage(BaseModel):
    """A single conversation message."""
    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    """Conversation so far, ending with the user's latest message."""
    messages: list[ChatMessage] = Field(..., min_length=1)


class ToolCallOut(BaseModel):
    name: str
    arguments: dict[str, Any]
    result: dict[str, Any]


class ChatResponse(BaseModel):
    reply: str
    tool_calls: list[ToolCallOut] = Field(default_factory=list)


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, context: ToolContextDep):
    """
    Ask the assistant about missing candidate information.

    The assistant may run detect-missing-info and send-email while
    answering; every call it made is listed in tool_calls.
    """
    if not settings.OPENAI_API_KEY and not settings.use_azure_openai:
        raise ServiceNotConfiguredError("OpenAI", "OPENAI_API_KEY or AZURE_OPENAI_ENDPOINT")

    try:
        assistant = ContactAssistant(context=context)
        reply = assistant.chat([m.model_dump() for m in request.messages])
    except AssistantError as e:
        logger.error(f"Assistant failed: {e}")
        raise ContactGapException.from_application_error(e, status_code=502)

    return ChatResponse(
        reply=reply.content,
        tool_calls=[
            ToolCallOut(name=c.name, arguments=c.arguments, result=c.result)
            for c in reply.tool_calls
        ],
    )
