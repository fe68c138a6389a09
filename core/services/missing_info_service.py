# =============================================================================
# core/services/missing_info_service.py - Missing Information Detection
# =============================================================================
# Orchestrates one detection run against an unknown schema:
#   1. Fetch the column catalog
#   2. Analyze it (main table, field bindings, recovery tables)
#   3. Run the summary statement
#   4. Run the detail statement (optionally joined to a recovery table)
#   5. Assemble prioritized records and statistics
#
# Queries run one after another on the executor handed in by the caller.
# Nothing is cached between runs; every call re-discovers the schema.
#
# Failures surface as ApplicationError subclasses with a machine-readable
# code; the tool layer turns them into structured failure objects.
# =============================================================================

from __future__ import annotations

import logging

from core.models.report import (
    DatabaseAnalysis,
    MissingInfoReport,
    QueryInfo,
    RecoveryAnalysis,
)
from core.models.tools import DetectMissingInfoInput
from lib.query_builder import build_detail, build_summary
from lib.query_executor import QueryExecutor
from lib.report_assembler import assemble, recommended_actions
from lib.schema_analyzer import analyze
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class MissingInfoError(ApplicationError):
    """Base error for the detection flow."""

    def __init__(self, message: str, code: str = "MISSING_INFO_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class NoTablesFoundError(MissingInfoError):
    """The catalog query worked but returned no tables."""

    def __init__(self, schema: str | None):
        super().__init__(
            message=f"Could not find any tables in the '{schema or 'default'}' schema.",
            code="NO_TABLES_FOUND",
            suggestion="Check database connection and ensure tables exist.",
            details={"schema": schema},
        )


class NoMainTableError(MissingInfoError):
    """No table looks like it holds contacts or candidates."""

    def __init__(self, available_tables: list[str]):
        super().__init__(
            message="Could not identify a primary table for contacts or candidates.",
            code="NO_MAIN_TABLE",
            suggestion="Ensure there is a table with fields like email, name, or phone for contact information.",
            details={"available_tables": available_tables},
        )


# =============================================================================
# Detection
# =============================================================================

def detect_missing_info(
    executor: QueryExecutor,
    params: DetectMissingInfoInput | None = None,
) -> MissingInfoReport:
    """
    Run a full missing-information analysis.

    Args:
        executor: Database access for this run
        params: Tool options (defaults when None)

    Returns:
        MissingInfoReport

    Raises:
        DatabaseConnectionError: If the database is unreachable
        QueryExecutionError: If a statement fails
        NoTablesFoundError: If the schema has no tables
        NoMainTableError: If no contact table was identified
    """
    params = params or DetectMissingInfoInput()
    schema = executor.schema

    # -------------------------------------------------------------------------
    # Step 1-2: Discover the schema
    # -------------------------------------------------------------------------
    catalog = executor.fetch_column_catalog()
    if not catalog:
        raise NoTablesFoundError(schema)

    model = analyze(catalog)
    if not model.has_main_table:
        raise NoMainTableError(model.all_tables)

    # -------------------------------------------------------------------------
    # Step 3: Summary statistics
    # -------------------------------------------------------------------------
    summary_rows = executor.execute(build_summary(model, schema=schema))
    summary_row = summary_rows[0] if summary_rows else None

    # -------------------------------------------------------------------------
    # Step 4: Per-record detail
    # -------------------------------------------------------------------------
    detail_sql = build_detail(
        model,
        include_recovery=params.include_recovery_analysis,
        limit=params.limit_results,
        schema=schema,
    )
    detail_rows = executor.execute(detail_sql)

    # -------------------------------------------------------------------------
    # Step 5: Assemble
    # -------------------------------------------------------------------------
    assembled = assemble(
        model,
        detail_rows,
        summary_row,
        recovery_enabled=params.include_recovery_analysis,
        priority_filter=params.priority_filter,
    )
    summary = assembled.summary

    recovery = None
    if params.include_recovery_analysis:
        recovery = RecoveryAnalysis(
            total_recoverable=summary.recoverable_phones + summary.recoverable_names,
            phone_recovery_available=summary.recoverable_phones,
            name_recovery_available=summary.recoverable_names,
            recovery_sources=list(model.recovery_tables),
            recommended_actions=recommended_actions(summary),
        )

    logger.info(
        f"Detection on '{model.main_table}': {len(assembled.records)} records reported, "
        f"{summary.total_candidates} total"
    )

    return MissingInfoReport(
        message=(
            f"Found {len(assembled.records)} records with missing information "
            f"in table '{model.main_table}'"
        ),
        database_analysis=DatabaseAnalysis(
            main_table=model.main_table,
            discovered_tables=list(model.all_tables),
            recovery_tables=list(model.recovery_tables),
            field_mapping=model.field_mapping(),
        ),
        summary=summary,
        missing_info_report=assembled.records,
        recovery_analysis=recovery,
        query_info=QueryInfo(
            included_recovery_analysis=params.include_recovery_analysis,
            results_limited_to=params.limit_results,
            priority_filter=params.priority_filter.value if params.priority_filter else "none",
            auto_discovered_schema=params.auto_discover_tables,
        ),
    )
