# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains the detector and its collaborators:
# - schema_analyzer.py: Finds the contact table and its fields in a catalog
# - query_builder.py: Builds the summary/detail SQL for that table
# - report_assembler.py: Turns query rows into prioritized records
# - query_executor.py: Read-only SQLAlchemy executor
# - gmail_client.py: Gmail API notification sender
# - report_export.py: CSV export of reports (pandas)
# - utils.py: Shared utilities (error base class, rounding)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.query_executor import (
    DatabaseConnectionError,
    QueryExecutionError,
    QueryExecutor,
    QueryExecutorError,
    SQLAlchemyQueryExecutor,
)
from lib.schema_analyzer import analyze, resolve_recovery_join
from lib.query_builder import build_detail, build_summary
from lib.report_assembler import AssembledReport, assemble, categorize_priority
from lib.utils import ApplicationError

__all__ = [
    # Database
    "DatabaseConnectionError",
    "QueryExecutionError",
    "QueryExecutor",
    "QueryExecutorError",
    "SQLAlchemyQueryExecutor",
    # Detector
    "analyze",
    "resolve_recovery_join",
    "build_detail",
    "build_summary",
    "AssembledReport",
    "assemble",
    "categorize_priority",
    # Utils
    "ApplicationError",
]
