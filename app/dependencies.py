# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# The lifespan handler in main.py builds the clients once and stores them on
# app.state; these dependencies hand them to route handlers.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from agents.tools import ToolContext


def get_tool_context(request: Request) -> ToolContext:
    """
    Get the ToolContext built at startup.

    Falls back to an empty context (tools then report the missing
    collaborator) when the app was started without the lifespan.
    """
    context = getattr(request.app.state, "tool_context", None)
    return context if context is not None else ToolContext()


# Type alias for dependency injection
ToolContextDep = Annotated[ToolContext, Depends(get_tool_context)]
