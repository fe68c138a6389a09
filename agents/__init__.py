# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the contact assistant and its tools:
# - assistant.py: Chat agent (OpenAI function calling) that runs the tools
# - tools/: detect-missing-info and send-email, plus the tool registry
# - prompts/: System prompt for the assistant
#
# The tools are usable without the assistant: the HTTP API and the scripts
# call them through agents.tools.run_tool().
# =============================================================================

from agents.tools import (
    ToolContext,
    get_tool_definitions,
    list_tools,
    run_tool,
)

__all__ = [
    "ToolContext",
    "get_tool_definitions",
    "list_tools",
    "run_tool",
]
