# =============================================================================
# app/routers/tools.py - Tool Endpoints
# =============================================================================
# Exposes the agent tools over HTTP for agent hosts that call tools
# remotely. Responses are always 200 with the tool's own result: either the
# success payload or {"success": false, "error": CODE, ...}.
# =============================================================================

from typing import Any

from fastapi import APIRouter, Body

from agents.tools import get_tool_definitions, run_tool
from app.dependencies import ToolContextDep


router = APIRouter()


@router.get("")
def list_tool_definitions():
    """
    List the available tools.

    Returns OpenAI function-calling definitions, usable as the `tools`
    parameter of a chat completion.
    """
    return {"tools": get_tool_definitions()}


@router.post("/detect-missing-info")
def detect_missing_info(
    context: ToolContextDep,
    arguments: dict[str, Any] | None = Body(default=None),
):
    """
    Detect candidates with missing contact information.

    Body (all optional): includeRecoveryAnalysis, limitResults,
    priorityFilter, autoDiscoverTables.
    """
    return run_tool("detect-missing-info", arguments or {}, context)


@router.post("/send-email")
def send_email(
    context: ToolContextDep,
    arguments: dict[str, Any] | None = Body(default=None),
):
    """
    Send a plain text email.

    Body: to, subject, body. Invalid input is rejected before anything is
    sent.
    """
    return run_tool("send-email", arguments or {}, context)
