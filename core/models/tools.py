# =============================================================================
# core/models/tools.py - Tool Input/Output Schemas
# =============================================================================
# Input schemas for the agent tools and the structured failure object every
# tool returns instead of raising.
#
# Inputs accept the camelCase names the agent host sends
# (includeRecoveryAnalysis) as well as the snake_case field names.
# =============================================================================

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from core.models.report import Priority


class DetectMissingInfoInput(BaseModel):
    """Arguments of the detect-missing-info tool."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    include_recovery_analysis: bool = Field(
        default=True,
        alias="includeRecoveryAnalysis",
        description="Whether to analyze what missing information can be recovered from related tables",
    )

    limit_results: int = Field(
        default=50,
        ge=1,
        alias="limitResults",
        description="Maximum number of records to return",
    )

    priority_filter: Priority | None = Field(
        default=None,
        alias="priorityFilter",
        description="Filter by priority level",
    )

    auto_discover_tables: bool = Field(
        default=True,
        alias="autoDiscoverTables",
        description="Automatically discover and analyze all relevant tables",
    )


class SendEmailInput(BaseModel):
    """Arguments of the send-email tool."""

    model_config = ConfigDict(extra="ignore")

    to: EmailStr = Field(..., description="Recipient email address")
    subject: str = Field(..., min_length=1, description="Email subject")
    body: str = Field(..., min_length=1, description="Email body (plain text)")

    @field_validator("subject", "body")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ToolFailure(BaseModel):
    """
    Structured failure returned by every tool.

    error is a machine-readable tag (e.g. DATABASE_CONNECTION_FAILED),
    message is for humans, suggestion tells how to fix it.
    """

    success: Literal[False] = False
    error: str
    message: str
    suggestion: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
