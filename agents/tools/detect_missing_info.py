# =============================================================================
# agents/tools/detect_missing_info.py - detect-missing-info Tool
# =============================================================================
# Discovers the database schema, finds the contact/candidate table and
# reports records with a missing email, phone or name, including what can be
# recovered from related tables such as parsed resumes.
# =============================================================================

from __future__ import annotations

from agents.tools.registry import ToolContext, register_tool
from core.models.report import MissingInfoReport
from core.models.tools import DetectMissingInfoInput
from core.services.missing_info_service import detect_missing_info
from lib.utils import ApplicationError

DESCRIPTION = (
    "Automatically discovers database schema and analyzes all contact/candidate "
    "tables for missing information. Identifies what can be recovered from related "
    "tables like resumes, forms, etc."
)


@register_tool("detect-missing-info", DESCRIPTION, DetectMissingInfoInput)
def detect_missing_info_tool(
    params: DetectMissingInfoInput,
    context: ToolContext,
) -> MissingInfoReport:
    """Run the detector on the context's database."""
    if context.executor is None:
        raise ApplicationError(
            "No database is configured for this assistant.",
            code="DATABASE_CONNECTION_FAILED",
            suggestion="Set DATABASE_URL and restart the service.",
        )
    return detect_missing_info(context.executor, params)
