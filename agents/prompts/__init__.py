# =============================================================================
# agents/prompts/ - Agent System Prompts
# =============================================================================
# System prompts for the AI agents:
# - assistant_system.py: Contact assistant (missing info + follow-up emails)
# =============================================================================

from agents.prompts.assistant_system import (
    ASSISTANT_SYSTEM_PROMPT,
    build_assistant_prompt,
)

__all__ = [
    "ASSISTANT_SYSTEM_PROMPT",
    "build_assistant_prompt",
]
