# =============================================================================
# agents/tools/registry.py - Agent Tool Registry
# =============================================================================
# Maps tool names to handler functions and their pydantic input schemas.
#
# Each tool function takes (params, context) and returns a pydantic model or
# dict. Functions are registered using the @register_tool decorator; the
# registry derives the OpenAI function-calling definitions from the input
# models and dispatches calls coming from the agent host.
#
# run_tool() NEVER raises: every failure becomes a structured
# {"success": false, "error": CODE, "message": ..., "suggestion": ...} dict.
#
# Example:
#   @register_tool("send-email", "Sends an email", SendEmailInput)
#   def send_email(params: SendEmailInput, context: ToolContext) -> dict:
#       ...
#
#   result = run_tool("send-email", {"to": "a@b.co", ...}, context)
# =============================================================================

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from core.models.tools import ToolFailure
from lib.gmail_client import NotificationSender
from lib.query_executor import QueryExecutor
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """
    Client handles owned by the hosting process.

    Built once at startup and passed to every tool call; tools never reach
    for module-level clients.
    """
    executor: QueryExecutor | None = None
    sender: NotificationSender | None = None


# Type alias for tool functions
# Takes (validated input model, ToolContext) and returns a model or dict
ToolFunc = Callable[[Any, ToolContext], BaseModel | dict[str, Any]]


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool."""
    name: str
    description: str
    input_model: type[BaseModel]
    func: ToolFunc

    def definition(self) -> dict[str, Any]:
        """OpenAI function-calling definition of this tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(by_alias=True),
            },
        }


# Global registry mapping tool name -> ToolSpec
TOOL_REGISTRY: dict[str, ToolSpec] = {}


def register_tool(name: str, description: str, input_model: type[BaseModel]):
    """
    Decorator to register a tool function.

    Usage:
        @register_tool("detect-missing-info", "...", DetectMissingInfoInput)
        def detect(params, context):
            ...
    """
    def decorator(func: ToolFunc) -> ToolFunc:
        TOOL_REGISTRY[name] = ToolSpec(
            name=name,
            description=description,
            input_model=input_model,
            func=func,
        )
        return func
    return decorator


def get_tool(name: str) -> ToolSpec | None:
    """Get a registered tool by name."""
    return TOOL_REGISTRY.get(name)


def list_tools() -> list[str]:
    """List all registered tool names."""
    return list(TOOL_REGISTRY)


def get_tool_definitions() -> list[dict[str, Any]]:
    """OpenAI function definitions for every registered tool."""
    return [spec.definition() for spec in TOOL_REGISTRY.values()]


# =============================================================================
# Dispatch
# =============================================================================

def failure(
    error: str,
    message: str,
    suggestion: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured failure result."""
    return ToolFailure(
        error=error,
        message=message,
        suggestion=suggestion,
        details=details or {},
    ).model_dump(mode="json")


def _validation_details(exc: ValidationError) -> dict[str, Any]:
    return {
        "errors": [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
    }


def run_tool(
    name: str,
    arguments: dict[str, Any] | str | None,
    context: ToolContext,
) -> dict[str, Any]:
    """
    Validate arguments and run a tool.

    Args:
        name: Registered tool name
        arguments: Tool arguments, as a dict or the JSON string an LLM emits
        context: Client handles for the tool

    Returns:
        The tool's result as a JSON-safe dict, or a structured failure
    """
    spec = get_tool(name)
    if spec is None:
        return failure(
            "UNKNOWN_TOOL",
            f"Tool not found: {name}",
            suggestion=f"Use one of: {', '.join(list_tools())}",
            details={"available_tools": list_tools()},
        )

    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as e:
            return failure(
                "INVALID_INPUT",
                f"Tool arguments are not valid JSON: {e}",
                suggestion="Pass the arguments as a JSON object",
            )

    try:
        params = spec.input_model.model_validate(arguments or {})
    except ValidationError as e:
        logger.info(f"Rejected input for tool {name}: {e.error_count()} errors")
        return failure(
            "INVALID_INPUT",
            f"Invalid input for {name}",
            suggestion="Check the required fields and their formats",
            details=_validation_details(e),
        )

    try:
        result = spec.func(params, context)
    except ApplicationError as e:
        logger.warning(f"Tool {name} failed: {e.code} - {e.message}")
        return failure(e.code, e.message, suggestion=e.suggestion, details=e.details)
    except Exception as e:
        logger.exception(f"Unexpected error in tool {name}: {e}")
        return failure(
            "TOOL_EXECUTION_FAILED",
            str(e) or type(e).__name__,
            suggestion="Check the server logs for details",
        )

    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    return result
