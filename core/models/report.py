# =============================================================================
# core/models/report.py - Missing Information Report Models
# =============================================================================
# Output schemas of the missing-information detector:
# - CandidateRecord: one contact with its missing/recoverable fields
# - MissingInfoSummary: aggregate counts and recovery rates
# - MissingInfoReport: the full payload returned by detect-missing-info
#
# Example:
#   report = detect_missing_info(executor, params)
#   for record in report.missing_info_report:
#       print(record.candidate_id, record.priority, record.missing_fields)
# =============================================================================

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, model_validator


class Priority(str, Enum):
    """Follow-up priority of a record with missing contact information."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class CandidateRecord(BaseModel):
    """
    A single record from the main table that is missing contact data.

    missing_fields and recoverable_fields hold the bound column names of
    the main table, always in email, phone, name order.
    """

    candidate_id: str = Field(..., description="Record id as text")
    full_name: str | None = None
    email: str | None = None
    phone_number: str | None = None

    missing_fields: list[str] = Field(
        default_factory=list,
        description="Columns that are NULL for this record"
    )

    recoverable_fields: list[str] = Field(
        default_factory=list,
        description="Missing columns with a candidate value in a recovery table"
    )

    recovery_sources: dict[str, str] = Field(
        default_factory=dict,
        description="Recovered values keyed by source, e.g. phone_from_related"
    )

    priority: Priority

    @model_validator(mode="after")
    def _recoverable_subset_of_missing(self) -> CandidateRecord:
        stray = [f for f in self.recoverable_fields if f not in self.missing_fields]
        if stray:
            raise ValueError(f"Recoverable fields must also be missing: {stray}")
        return self


class MissingInfoSummary(BaseModel):
    """Aggregate statistics over the whole main table."""

    total_candidates: int = Field(default=0, ge=0)
    missing_email: int = Field(default=0, ge=0)
    missing_phone: int = Field(default=0, ge=0)
    missing_name: int = Field(default=0, ge=0)

    missing_email_percentage: float = Field(default=0.0, ge=0.0)
    missing_phone_percentage: float = Field(default=0.0, ge=0.0)
    missing_name_percentage: float = Field(default=0.0, ge=0.0)

    phone_recovery_rate: int = Field(default=0, ge=0)
    name_recovery_rate: int = Field(default=0, ge=0)
    recoverable_phones: int = Field(default=0, ge=0)
    recoverable_names: int = Field(default=0, ge=0)


class DatabaseAnalysis(BaseModel):
    """What schema discovery found."""
    main_table: str
    discovered_tables: list[str]
    recovery_tables: list[str]
    field_mapping: dict[str, str | None]


class RecoveryAnalysis(BaseModel):
    """Recovery overview, present only when recovery analysis was requested."""
    total_recoverable: int = 0
    phone_recovery_available: int = 0
    name_recovery_available: int = 0
    recovery_sources: list[str] = Field(default_factory=list)
    recommended_actions: list[str] = Field(default_factory=list)


class QueryInfo(BaseModel):
    """Echo of the options the detection ran with."""
    included_recovery_analysis: bool
    results_limited_to: int
    priority_filter: str = "none"
    auto_discovered_schema: bool = True


class MissingInfoReport(BaseModel):
    """Success payload of the detect-missing-info tool."""

    success: Literal[True] = True
    message: str
    database_analysis: DatabaseAnalysis
    summary: MissingInfoSummary
    missing_info_report: list[CandidateRecord] = Field(default_factory=list)
    recovery_analysis: RecoveryAnalysis | None = None
    query_info: QueryInfo
