# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - schema.py: Catalog columns and the discovered structural model
# - report.py: Missing-information report (records, summary, analysis)
# - tools.py: Agent tool inputs and the structured failure object
#
# These models define the "contract" between the detector, the tools and
# the API clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Schema Models - What discovery found
# -----------------------------------------------------------------------------
from .schema import (
    ColumnDescriptor,
    RecoveryJoin,
    StructuralModel,
)

# -----------------------------------------------------------------------------
# Report Models - Detector output
# -----------------------------------------------------------------------------
from .report import (
    CandidateRecord,
    DatabaseAnalysis,
    MissingInfoReport,
    MissingInfoSummary,
    Priority,
    QueryInfo,
    RecoveryAnalysis,
)

# -----------------------------------------------------------------------------
# Tool Models - Agent tool contracts
# -----------------------------------------------------------------------------
from .tools import (
    DetectMissingInfoInput,
    SendEmailInput,
    ToolFailure,
)

__all__ = [
    # Schema
    "ColumnDescriptor",
    "RecoveryJoin",
    "StructuralModel",
    # Report
    "CandidateRecord",
    "DatabaseAnalysis",
    "MissingInfoReport",
    "MissingInfoSummary",
    "Priority",
    "QueryInfo",
    "RecoveryAnalysis",
    # Tools
    "DetectMissingInfoInput",
    "SendEmailInput",
    "ToolFailure",
]
