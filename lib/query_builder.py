# =============================================================================
# lib/query_builder.py - Missing-Information SQL Builder
# =============================================================================
# Builds the two read-only statements the detector runs against the main
# table discovered by lib/schema_analyzer.py:
# - summary: total rows plus missing counts/percentages per field
# - detail: one row per record with at least one missing field, optionally
#   joined to the first recovery table
#
# The result shape is FIXED whatever fields were bound: an unbound field
# contributes a literal 0 (or NULL for values), never a missing column. The
# report assembler reads the output by the alias constants below.
#
# Table and column names come from the catalog, so every identifier goes
# through SQLAlchemy's PostgreSQL identifier preparer. Nothing user-typed is
# ever interpolated; the only number is a validated int limit.
#
# Usage:
#   from lib.query_builder import build_summary, build_detail
#   summary_sql = build_summary(model)
#   detail_sql = build_detail(model, include_recovery=True, limit=50)
# =============================================================================

from __future__ import annotations

from sqlalchemy.dialects import postgresql

from core.models.schema import RecoveryJoin, StructuralModel
from lib.schema_analyzer import resolve_recovery_join

_PREPARER = postgresql.dialect().identifier_preparer

# Phone-number shaped text inside the recovery contact field
PHONE_PATTERN = r"\+?[\d\s\-\(\)]{8,}"

# JSON keys read from the recovery content column
RECOVERY_NAME_KEY = "name"
RECOVERY_CONTACT_KEY = "contact"


# =============================================================================
# Output Aliases
# =============================================================================

RECORD_ID = "record_id"
EMAIL = "email"
PHONE = "phone"
NAME = "name"
MISSING_EMAIL = "missing_email"
MISSING_PHONE = "missing_phone"
MISSING_NAME = "missing_name"
RECOVERABLE_NAME = "recoverable_name"
RECOVERABLE_CONTACT = "recoverable_contact"
RECOVERABLE_PHONE = "recoverable_phone"

TOTAL_RECORDS = "total_records"


def quote_identifier(name: str) -> str:
    """Quote a table/column name for PostgreSQL, only where required."""
    return _PREPARER.quote(name)


def _table_ref(table: str, schema: str | None) -> str:
    if schema:
        return f"{quote_identifier(schema)}.{quote_identifier(table)}"
    return quote_identifier(table)


def _sql_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _require_main_table(model: StructuralModel) -> str:
    if not model.main_table:
        raise ValueError("Structural model has no main table to query")
    return model.main_table


def _validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit


def _bound_fields(model: StructuralModel) -> list[tuple[str | None, str, str]]:
    """(column or None, value alias, missing-flag alias) in fixed order."""
    return [
        (model.email_field, EMAIL, MISSING_EMAIL),
        (model.phone_field, PHONE, MISSING_PHONE),
        (model.name_field, NAME, MISSING_NAME),
    ]


def _missing_flag(column: str | None) -> str:
    if column is None:
        return "0"
    return f"CASE WHEN {quote_identifier(column)} IS NULL THEN 1 ELSE 0 END"


# =============================================================================
# Summary Statement
# =============================================================================

def build_summary(model: StructuralModel, schema: str | None = None) -> str:
    """
    Build the aggregate statement over the main table.

    Columns: total_records, missing_email, missing_phone, missing_name and
    missing_{email,phone,name}_percentage (two decimals, 0 for an empty
    table).
    """
    table = _require_main_table(model)

    counts = [f"COUNT(*) AS {TOTAL_RECORDS}"]
    for column, _, missing_alias in _bound_fields(model):
        if column is None:
            counts.append(f"0 AS {missing_alias}")
        else:
            counts.append(f"COUNT(*) - COUNT({quote_identifier(column)}) AS {missing_alias}")

    percentages = [
        f"COALESCE(ROUND({alias} * 100.0 / NULLIF({TOTAL_RECORDS}, 0), 2), 0) AS {alias}_percentage"
        for _, _, alias in _bound_fields(model)
    ]

    return (
        "WITH main_table_analysis AS (\n"
        "    SELECT\n        " + ",\n        ".join(counts) + "\n"
        f"    FROM {_table_ref(table, schema)}\n"
        ")\n"
        "SELECT\n"
        f"    {TOTAL_RECORDS},\n"
        f"    {MISSING_EMAIL},\n"
        f"    {MISSING_PHONE},\n"
        f"    {MISSING_NAME},\n"
        "    " + ",\n    ".join(percentages) + "\n"
        "FROM main_table_analysis"
    )


# =============================================================================
# Detail Statement
# =============================================================================

def _base_select(model: StructuralModel) -> list[str]:
    id_field = model.id_field or "id"
    select = [f"{quote_identifier(id_field)} AS {RECORD_ID}"]
    for column, value_alias, _ in _bound_fields(model):
        source = quote_identifier(column) if column else "NULL"
        select.append(f"{source} AS {value_alias}")
    for column, _, missing_alias in _bound_fields(model):
        select.append(f"{_missing_flag(column)} AS {missing_alias}")
    return select


def _missing_filter(model: StructuralModel) -> str:
    conditions = [
        f"{quote_identifier(column)} IS NULL"
        for column, _, _ in _bound_fields(model)
        if column is not None
    ]
    return " OR ".join(conditions) if conditions else "1 = 0"


def _missing_count(model: StructuralModel) -> str:
    return " + ".join(_missing_flag(column) for column, _, _ in _bound_fields(model))


def build_detail(
    model: StructuralModel,
    include_recovery: bool = True,
    limit: int = 50,
    schema: str | None = None,
) -> str:
    """
    Build the per-record statement.

    Without recovery (or when the first recovery table cannot be joined)
    returns record_id, email, phone, name and the three missing flags for
    rows missing at least one bound field, most-missing first, then by id.

    With recovery the same rows are LEFT JOINed to the first recovery table
    and gain recoverable_name, recoverable_contact and recoverable_phone.
    """
    table = _require_main_table(model)
    limit = _validate_limit(limit)

    join = resolve_recovery_join(model) if include_recovery else None
    if join is None:
        id_column = quote_identifier(model.id_field or "id")
        return (
            "SELECT\n    " + ",\n    ".join(_base_select(model)) + "\n"
            f"FROM {_table_ref(table, schema)}\n"
            f"WHERE {_missing_filter(model)}\n"
            f"ORDER BY ({_missing_count(model)}) DESC, {id_column}\n"
            f"LIMIT {limit}"
        )

    return _build_recovery_detail(model, join, limit, schema)


def _build_recovery_detail(
    model: StructuralModel,
    join: RecoveryJoin,
    limit: int,
    schema: str | None,
) -> str:
    table = _require_main_table(model)
    content = f"CAST(r.{quote_identifier(join.content_column)} AS jsonb)"
    contact = f"{content} ->> {_sql_literal(RECOVERY_CONTACT_KEY)}"

    return (
        "WITH missing_records AS (\n"
        "    SELECT\n        " + ",\n        ".join(_base_select(model)) + "\n"
        f"    FROM {_table_ref(table, schema)}\n"
        f"    WHERE {_missing_filter(model)}\n"
        ")\n"
        "SELECT\n"
        "    mr.*,\n"
        f"    {content} ->> {_sql_literal(RECOVERY_NAME_KEY)} AS {RECOVERABLE_NAME},\n"
        f"    {contact} AS {RECOVERABLE_CONTACT},\n"
        f"    CASE WHEN mr.{MISSING_PHONE} = 1\n"
        f"         THEN substring({contact} from {_sql_literal(PHONE_PATTERN)})\n"
        f"         ELSE NULL END AS {RECOVERABLE_PHONE}\n"
        "FROM missing_records mr\n"
        f"LEFT JOIN {_table_ref(join.table, schema)} r\n"
        f"    ON r.{quote_identifier(join.join_column)} = mr.{RECORD_ID}\n"
        f"ORDER BY (mr.{MISSING_EMAIL} + mr.{MISSING_PHONE} + mr.{MISSING_NAME}) DESC, mr.{RECORD_ID}\n"
        f"LIMIT {limit}"
    )
