# =============================================================================
# agents/tools/__init__.py - Agent Tools Package
# =============================================================================
# This package contains the tools exposed to the assistant and the HTTP API.
#
# Usage:
#   from agents.tools import ToolContext, run_tool, get_tool_definitions
#
#   context = ToolContext(executor=executor, sender=sender)
#   result = run_tool("detect-missing-info", {"limitResults": 20}, context)
# =============================================================================

from agents.tools.registry import (
    TOOL_REGISTRY,
    ToolContext,
    ToolSpec,
    get_tool,
    get_tool_definitions,
    list_tools,
    register_tool,
    run_tool,
)

# Import all tool modules to trigger registration
from agents.tools import detect_missing_info
from agents.tools import send_email


__all__ = [
    # Registry functions
    "TOOL_REGISTRY",
    "ToolContext",
    "ToolSpec",
    "get_tool",
    "get_tool_definitions",
    "list_tools",
    "register_tool",
    "run_tool",
]
