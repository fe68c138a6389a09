# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - tools.py: Tool definitions and direct tool calls
# - reports.py: CSV report download
# - assistant.py: Conversational assistant endpoint
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import tools
from . import reports
from . import assistant

__all__ = [
    "health",
    "tools",
    "reports",
    "assistant",
]
