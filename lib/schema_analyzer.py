# =============================================================================
# lib/schema_analyzer.py - Schema Discovery Heuristics
# =============================================================================
# Turns the raw column catalog of an unknown schema into a StructuralModel:
# - which table holds the candidates/contacts (the "main table")
# - which of its columns hold the id, email, phone and name
# - which auxiliary tables (resumes, forms, ...) may hold recoverable copies
#
# Matching is plain substring matching against ordered pattern families.
# The main table is the FIRST qualifying table in catalog order; a better
# scoring table later in the catalog is ignored.
#
# Usage:
#   from lib.schema_analyzer import analyze
#   model = analyze(executor.fetch_column_catalog())
#   if not model.has_main_table:
#       ...
# =============================================================================

from __future__ import annotations

import logging
from typing import Iterable

from core.models.schema import ColumnDescriptor, RecoveryJoin, StructuralModel

logger = logging.getLogger(__name__)


# =============================================================================
# Pattern Families
# =============================================================================

ENTITY_TABLE_HINTS: tuple[str, ...] = (
    "candidates", "contacts", "users", "people", "customers", "clients",
)

EMAIL_PATTERNS: tuple[str, ...] = ("email", "email_address", "contact_email", "mail")
PHONE_PATTERNS: tuple[str, ...] = ("phone", "phone_number", "contact_phone", "mobile", "telephone")
NAME_PATTERNS: tuple[str, ...] = ("name", "full_name", "first_name", "last_name", "contact_name")
ID_PATTERNS: tuple[str, ...] = ("id", "candidate_id", "contact_id", "user_id", "person_id")

RECOVERY_TABLE_HINTS: tuple[str, ...] = (
    "resume", "form", "application", "profile", "information",
)

TABLE_NAME_BONUS = 10
DEFAULT_ID_FIELD = "id"

# Recovery join resolution
RECOVERY_JOIN_COLUMN = "candidate_id"
JSON_TYPES: tuple[str, ...] = ("json", "jsonb")
CONTENT_COLUMN_NAMES: tuple[str, ...] = ("content_json", "content", "parsed_data", "data")


def _matches(name: str, patterns: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(pattern in lowered for pattern in patterns)


def _first_match(columns: list[ColumnDescriptor], patterns: Iterable[str]) -> str | None:
    patterns = tuple(patterns)
    for col in columns:
        if _matches(col.column, patterns):
            return col.column
    return None


def _is_contact_column(name: str) -> bool:
    return (
        _matches(name, EMAIL_PATTERNS)
        or _matches(name, PHONE_PATTERNS)
        or _matches(name, NAME_PATTERNS)
    )


# =============================================================================
# Catalog Grouping
# =============================================================================

def group_by_table(columns: Iterable[ColumnDescriptor]) -> dict[str, list[ColumnDescriptor]]:
    """
    Group catalog columns by table, in catalog order.

    Catalog order is table name ascending (case-insensitive) with columns
    in the order supplied, matching ORDER BY table_name, ordinal_position.
    Sorting here keeps discovery deterministic whatever order the rows
    arrive in.
    """
    grouped: dict[str, list[ColumnDescriptor]] = {}
    for col in columns:
        grouped.setdefault(col.table, []).append(col)

    return {
        table: grouped[table]
        for table in sorted(grouped, key=lambda t: (t.lower(), t))
    }


def score_table(table: str, columns: list[ColumnDescriptor]) -> int:
    """
    Score a table's likelihood of being the main entity table.

    +10 per entity hint found in the table name, +1 per column.
    """
    lowered = table.lower()
    bonus = sum(TABLE_NAME_BONUS for hint in ENTITY_TABLE_HINTS if hint in lowered)
    return bonus + len(columns)


# =============================================================================
# Analysis
# =============================================================================

def analyze(columns: Iterable[ColumnDescriptor]) -> StructuralModel:
    """
    Derive the structural model of a schema from its column catalog.

    Args:
        columns: Every column of the schema

    Returns:
        StructuralModel. main_table is None when no table has a column
        that looks like an email, phone or name.
    """
    tables = group_by_table(columns)
    all_tables = list(tables)

    main_table: str | None = None
    for table, table_cols in tables.items():
        if not any(_is_contact_column(col.column) for col in table_cols):
            continue
        score = score_table(table, table_cols)
        logger.debug(f"Table '{table}' qualifies with score {score}")
        if score > 0:
            main_table = table
            break

    recovery_tables = [t for t in all_tables if _matches(t, RECOVERY_TABLE_HINTS)]

    if main_table is None:
        logger.info(f"No main contact table among {len(all_tables)} tables")
        return StructuralModel(
            all_tables=all_tables,
            recovery_tables=recovery_tables,
            table_columns=tables,
        )

    main_cols = tables[main_table]
    model = StructuralModel(
        main_table=main_table,
        id_field=_first_match(main_cols, ID_PATTERNS) or DEFAULT_ID_FIELD,
        email_field=_first_match(main_cols, EMAIL_PATTERNS),
        phone_field=_first_match(main_cols, PHONE_PATTERNS),
        name_field=_first_match(main_cols, NAME_PATTERNS),
        all_tables=all_tables,
        recovery_tables=recovery_tables,
        table_columns=tables,
    )

    logger.info(
        f"Main table '{main_table}' with fields {model.field_mapping()}, "
        f"recovery tables {recovery_tables}"
    )
    return model


def resolve_recovery_join(model: StructuralModel) -> RecoveryJoin | None:
    """
    Work out how to join the first recovery table to the main table.

    Only recovery_tables[0] is consulted. Returns None when there is no
    recovery table, or it lacks a column referencing the main record or
    a JSON content column.
    """
    if not model.has_main_table or not model.recovery_tables:
        return None

    table = model.recovery_tables[0]
    columns = model.columns_of(table)
    by_lower = {col.column.lower(): col.column for col in columns}

    join_candidates = []
    if model.id_field and model.id_field.lower() != DEFAULT_ID_FIELD:
        join_candidates.append(model.id_field.lower())
    join_candidates.append(RECOVERY_JOIN_COLUMN)
    join_column = next((by_lower[c] for c in join_candidates if c in by_lower), None)

    content_column = next(
        (col.column for col in columns if col.data_type.lower() in JSON_TYPES),
        None,
    )
    if content_column is None:
        content_column = next((by_lower[c] for c in CONTENT_COLUMN_NAMES if c in by_lower), None)

    if join_column is None or content_column is None:
        logger.warning(
            f"Recovery table '{table}' is not joinable "
            f"(join column: {join_column}, content column: {content_column})"
        )
        return None

    return RecoveryJoin(table=table, join_column=join_column, content_column=content_column)
