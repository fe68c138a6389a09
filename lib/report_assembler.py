# =============================================================================
# lib/report_assembler.py - Missing-Information Report Assembly
# =============================================================================
# Turns the rows returned by the summary and detail statements into
# CandidateRecords with a follow-up priority, plus aggregate statistics.
#
# Priority rules over missing_fields (first match wins):
#   1. "email" missing                                           -> Critical
#   2. "phone_number" AND "full_name" missing                    -> High
#   3. "phone_number" or "full_name" missing and not recoverable -> Medium
#   4. everything else                                           -> Low
#
# The priority filter is applied last; summary numbers always describe the
# unfiltered set.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from core.models.report import CandidateRecord, MissingInfoSummary, Priority
from core.models.schema import StructuralModel
from lib import query_builder as q
from lib.utils import clean_text, percentage

logger = logging.getLogger(__name__)

PHONE_SOURCE_KEY = "phone_from_related"
NAME_SOURCE_KEY = "name_from_related"


@dataclass
class AssembledReport:
    """Summary plus the (filtered) records, ready to be wrapped in a report."""
    summary: MissingInfoSummary
    records: list[CandidateRecord] = field(default_factory=list)
    all_records: list[CandidateRecord] = field(default_factory=list)


# =============================================================================
# Row Helpers
# =============================================================================

def _flag(row: Mapping[str, Any], key: str) -> bool:
    value = row.get(key)
    if value is None:
        return False
    try:
        return int(value) == 1
    except (TypeError, ValueError):
        return False


def _count(row: Mapping[str, Any], key: str) -> int:
    value = row.get(key)
    return int(value) if value is not None else 0


def _pct(row: Mapping[str, Any], key: str) -> float:
    value = row.get(key)
    return round(float(value), 2) if value is not None else 0.0


def has_missing_flag(row: Mapping[str, Any]) -> bool:
    return any(_flag(row, key) for key in (q.MISSING_EMAIL, q.MISSING_PHONE, q.MISSING_NAME))


# =============================================================================
# Priority
# =============================================================================

# Column names the priority rules look for in missing_fields
PRIORITY_EMAIL = "email"
PRIORITY_PHONE = "phone_number"
PRIORITY_NAME = "full_name"


def categorize_priority(
    missing_fields: Iterable[str],
    recoverable_fields: Iterable[str] = (),
) -> Priority:
    """
    Assign the follow-up priority of a record (see module header).

    The rules match the column names email, phone_number and full_name.
    A main table that binds other names (e.g. "phone" or "name") only
    reaches Critical/High/Medium through the names that do match.
    """
    missing = set(missing_fields)
    recoverable = set(recoverable_fields)

    phone_missing = PRIORITY_PHONE in missing
    name_missing = PRIORITY_NAME in missing

    if PRIORITY_EMAIL in missing:
        return Priority.CRITICAL
    if phone_missing and name_missing:
        return Priority.HIGH
    if (phone_missing and PRIORITY_PHONE not in recoverable) or (
        name_missing and PRIORITY_NAME not in recoverable
    ):
        return Priority.MEDIUM
    return Priority.LOW


# =============================================================================
# Record Assembly
# =============================================================================

def build_record(
    model: StructuralModel,
    row: Mapping[str, Any],
    recovery_enabled: bool = True,
) -> CandidateRecord:
    """
    Build a CandidateRecord from one detail row.

    A field counts as missing only when it is bound and its flag is 1; it
    counts as recoverable only when it is missing and the recovery columns
    carry a non-blank value.
    """
    missing: list[str] = []
    recoverable: list[str] = []
    sources: dict[str, str] = {}

    email_missing = model.email_field is not None and _flag(row, q.MISSING_EMAIL)
    phone_missing = model.phone_field is not None and _flag(row, q.MISSING_PHONE)
    name_missing = model.name_field is not None and _flag(row, q.MISSING_NAME)

    recovered_phone = clean_text(row.get(q.RECOVERABLE_PHONE)) if recovery_enabled else None
    recovered_name = clean_text(row.get(q.RECOVERABLE_NAME)) if recovery_enabled else None

    if email_missing:
        missing.append(model.email_field)

    if phone_missing:
        missing.append(model.phone_field)
        if recovered_phone:
            recoverable.append(model.phone_field)
            sources[PHONE_SOURCE_KEY] = recovered_phone

    if name_missing:
        missing.append(model.name_field)
        if recovered_name:
            recoverable.append(model.name_field)
            sources[NAME_SOURCE_KEY] = recovered_name

    record_id = row.get(q.RECORD_ID)

    return CandidateRecord(
        candidate_id=str(record_id) if record_id is not None else "unknown",
        full_name=clean_text(row.get(q.NAME)),
        email=clean_text(row.get(q.EMAIL)),
        phone_number=clean_text(row.get(q.PHONE)),
        missing_fields=missing,
        recoverable_fields=recoverable,
        recovery_sources=sources,
        priority=categorize_priority(missing, recoverable),
    )


def summarize(
    model: StructuralModel,
    summary_row: Mapping[str, Any] | None,
    records: list[CandidateRecord],
) -> MissingInfoSummary:
    """
    Combine the aggregate row with recovery counts from the records.

    Recovery rate = round(recoverable / missing * 100), 0 when nothing of
    that type is missing.
    """
    row = summary_row or {}
    missing_phone = _count(row, q.MISSING_PHONE)
    missing_name = _count(row, q.MISSING_NAME)

    recoverable_phones = sum(
        1 for r in records if model.phone_field and model.phone_field in r.recoverable_fields
    )
    recoverable_names = sum(
        1 for r in records if model.name_field and model.name_field in r.recoverable_fields
    )

    return MissingInfoSummary(
        total_candidates=_count(row, q.TOTAL_RECORDS),
        missing_email=_count(row, q.MISSING_EMAIL),
        missing_phone=missing_phone,
        missing_name=missing_name,
        missing_email_percentage=_pct(row, f"{q.MISSING_EMAIL}_percentage"),
        missing_phone_percentage=_pct(row, f"{q.MISSING_PHONE}_percentage"),
        missing_name_percentage=_pct(row, f"{q.MISSING_NAME}_percentage"),
        phone_recovery_rate=percentage(recoverable_phones, missing_phone),
        name_recovery_rate=percentage(recoverable_names, missing_name),
        recoverable_phones=recoverable_phones,
        recoverable_names=recoverable_names,
    )


def assemble(
    model: StructuralModel,
    detail_rows: Iterable[Mapping[str, Any]],
    summary_row: Mapping[str, Any] | None,
    recovery_enabled: bool = True,
    priority_filter: Priority | str | None = None,
) -> AssembledReport:
    """
    Assemble the report from raw query results.

    Args:
        model: Structural model the queries were built from
        detail_rows: Rows of the detail statement
        summary_row: The single row of the summary statement
        recovery_enabled: Whether recovered values may be used
        priority_filter: Keep only records with this priority

    Returns:
        AssembledReport with the unfiltered summary and filtered records
    """
    records = [
        build_record(model, row, recovery_enabled=recovery_enabled)
        for row in detail_rows
        if row and has_missing_flag(row)
    ]

    summary = summarize(model, summary_row, records)

    filtered = records
    if priority_filter is not None:
        wanted = Priority(priority_filter)
        filtered = [r for r in records if r.priority == wanted]

    logger.debug(
        f"Assembled {len(records)} records ({len(filtered)} after filter {priority_filter})"
    )
    return AssembledReport(summary=summary, records=filtered, all_records=records)


def recommended_actions(summary: MissingInfoSummary) -> list[str]:
    """Suggested follow-ups shown in the recovery analysis."""
    actions = []
    if summary.recoverable_names > 0:
        actions.append(f"Update {summary.recoverable_names} missing names from related tables")
    if summary.recoverable_phones > 0:
        actions.append(f"Update {summary.recoverable_phones} missing phone numbers from related tables")
    if summary.missing_email > 0:
        actions.append(
            f"{summary.missing_email} records missing email addresses "
            "(critical - requires manual review)"
        )
    return actions
