# =============================================================================
# app/routers/reports.py - Report Download Endpoints
# =============================================================================
# Provides the missing-information report as a CSV download.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import Response

from agents.tools import run_tool
from app.config import settings
from app.dependencies import ToolContextDep
from app.exceptions import ReportFailedError
from core.models.report import MissingInfoReport, Priority
from lib.report_export import records_to_csv

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/missing-info.csv")
def download_missing_info_csv(
    context: ToolContextDep,
    include_recovery: Annotated[bool, Query(description="Include recovery analysis")] = True,
    limit: Annotated[int | None, Query(ge=1, description="Max records")] = None,
    priority: Annotated[Priority | None, Query(description="Only this priority")] = None,
):
    """
    Download records with missing contact information as CSV.
    """
    arguments = {
        "includeRecoveryAnalysis": include_recovery,
        "limitResults": limit or settings.DETECT_DEFAULT_LIMIT,
    }
    if priority is not None:
        arguments["priorityFilter"] = priority.value

    result = run_tool("detect-missing-info", arguments, context)
    if not result.get("success"):
        raise ReportFailedError(result)

    report = MissingInfoReport.model_validate(result)
    table = report.database_analysis.main_table
    logger.info(f"Exporting {len(report.missing_info_report)} records from '{table}'")

    return Response(
        content=records_to_csv(report.missing_info_report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="missing_info_{table}.csv"'},
    )
