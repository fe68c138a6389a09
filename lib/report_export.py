# =============================================================================
# lib/report_export.py - Report Export
# =============================================================================
# Flattens the records of a MissingInfoReport into a pandas DataFrame so the
# report can be downloaded as CSV and opened in a spreadsheet.
# =============================================================================

from __future__ import annotations

import pandas as pd

from core.models.report import CandidateRecord

EXPORT_COLUMNS = [
    "candidate_id",
    "priority",
    "full_name",
    "email",
    "phone_number",
    "missing_fields",
    "recoverable_fields",
    "phone_from_related",
    "name_from_related",
]


def records_to_dataframe(records: list[CandidateRecord]) -> pd.DataFrame:
    """
    One row per record, list fields joined with ';'.

    Always returns the EXPORT_COLUMNS, even for an empty report.
    """
    rows = [
        {
            "candidate_id": r.candidate_id,
            "priority": r.priority.value,
            "full_name": r.full_name,
            "email": r.email,
            "phone_number": r.phone_number,
            "missing_fields": ";".join(r.missing_fields),
            "recoverable_fields": ";".join(r.recoverable_fields),
            "phone_from_related": r.recovery_sources.get("phone_from_related"),
            "name_from_related": r.recovery_sources.get("name_from_related"),
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def records_to_csv(records: list[CandidateRecord]) -> str:
    """Render the records as CSV text."""
    return records_to_dataframe(records).to_csv(index=False)
