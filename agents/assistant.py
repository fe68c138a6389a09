# =============================================================================
# agents/assistant.py - Contact Assistant Agent
# =============================================================================
# This module hosts the chat model that uses the registered tools:
# - detect-missing-info: audit the candidate database
# - send-email: send a follow-up email
#
# The loop is plain OpenAI function calling:
# 1. Send the conversation plus tool definitions to the model
# 2. Run every tool call the model asks for (via the tool registry)
# 3. Feed the JSON results back and repeat until the model answers
#
# Tool failures are returned to the model as structured results, never
# raised. Only failures of the model API itself raise AssistantError.
#
# Usage:
#   from agents.assistant import ContactAssistant
#   assistant = ContactAssistant(context=ToolContext(executor=executor, sender=sender))
#   reply = assistant.chat([{"role": "user", "content": "Who is missing a phone?"}])
# =============================================================================

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from openai import AzureOpenAI, OpenAI

from app.config import settings
from agents.prompts.assistant_system import build_assistant_prompt
from agents.tools import ToolContext, get_tool_definitions, list_tools, run_tool
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class AssistantError(ApplicationError):
    """Error while talking to the chat model."""

    def __init__(self, message: str, code: str = "ASSISTANT_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


@dataclass
class ToolCallRecord:
    """A tool call made during a chat turn."""
    name: str
    arguments: dict[str, Any]
    result: dict[str, Any]


@dataclass
class AssistantReply:
    """Final answer of a chat turn plus the tool calls that led to it."""
    content: str
    tool_calls: list[ToolCallRecord] = field(default_factory=list)
    messages: list[dict[str, Any]] = field(default_factory=list)


def create_openai_client() -> OpenAI:
    """Azure OpenAI when an endpoint is configured, OpenAI otherwise."""
    if settings.use_azure_openai:
        return AzureOpenAI(
            api_key=settings.AZURE_OPENAI_API_KEY,
            azure_endpoint=settings.AZURE_OPENAI_ENDPOINT,
            api_version=settings.AZURE_OPENAI_API_VERSION,
        )
    return OpenAI(api_key=settings.OPENAI_API_KEY or None)


# =============================================================================
# Contact Assistant
# =============================================================================

class ContactAssistant:
    """
    Chat agent with access to the missing-info and email tools.

    Attributes:
        context: Client handles passed to every tool call
        model: Model / deployment name (default from settings)
        temperature: Generation temperature
        max_tool_rounds: Max model->tool round trips per turn
    """

    def __init__(
        self,
        context: ToolContext,
        client: Any | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tool_rounds: int | None = None,
    ):
        self.context = context
        self.client = client or create_openai_client()
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature if temperature is not None else settings.ASSISTANT_TEMPERATURE
        self.max_tool_rounds = max_tool_rounds or settings.ASSISTANT_MAX_TOOL_ROUNDS
        self.tools = get_tool_definitions()

        logger.info(f"ContactAssistant initialized with model={self.model}, tools={list_tools()}")

    def _complete(self, messages: list[dict[str, Any]]) -> Any:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=messages,
                tools=self.tools,
            )
        except Exception as e:
            raise AssistantError(
                message=f"OpenAI API call failed: {e}",
                code="OPENAI_ERROR",
                suggestion="Check your OpenAI / Azure OpenAI key and network connection",
                details={"model": self.model},
            ) from e
        return response.choices[0].message

    def chat(self, conversation: list[dict[str, Any]]) -> AssistantReply:
        """
        Answer the last user message of a conversation.

        Args:
            conversation: OpenAI-style messages without the system prompt

        Returns:
            AssistantReply with the final text and every tool call made

        Raises:
            AssistantError: If the model API fails or the tool budget runs out
        """
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": build_assistant_prompt(list_tools())},
            *conversation,
        ]
        calls: list[ToolCallRecord] = []

        for round_number in range(self.max_tool_rounds + 1):
            message = self._complete(messages)
            tool_calls = message.tool_calls or []

            if not tool_calls:
                return AssistantReply(
                    content=message.content or "",
                    tool_calls=calls,
                    messages=messages[1:],
                )

            if round_number == self.max_tool_rounds:
                break

            messages.append({
                "role": "assistant",
                "content": message.content,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {
                            "name": call.function.name,
                            "arguments": call.function.arguments,
                        },
                    }
                    for call in tool_calls
                ],
            })

            for call in tool_calls:
                name = call.function.name
                logger.info(f"Model requested tool {name}")
                result = run_tool(name, call.function.arguments, self.context)
                try:
                    arguments = json.loads(call.function.arguments or "{}")
                except json.JSONDecodeError:
                    arguments = {}
                if not isinstance(arguments, dict):
                    arguments = {}
                calls.append(ToolCallRecord(name=name, arguments=arguments, result=result))
                messages.append({
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": json.dumps(result, default=str),
                })

        raise AssistantError(
            message=f"Assistant did not finish within {self.max_tool_rounds} tool rounds",
            code="TOOL_ROUNDS_EXCEEDED",
            suggestion="Ask a narrower question or raise ASSISTANT_MAX_TOOL_ROUNDS",
            details={"tool_calls": [c.name for c in calls]},
        )
