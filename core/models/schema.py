# =============================================================================
# core/models/schema.py - Schema Discovery Models
# =============================================================================
# Pydantic models describing a discovered database schema:
# - ColumnDescriptor: one physical column from the catalog
# - StructuralModel: which table holds the contacts and which columns hold
#   their id/email/phone/name
# - RecoveryJoin: how an auxiliary table is joined back to the main table
#
# A StructuralModel is derived once per detection run and never mutated.
# =============================================================================

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ColumnDescriptor(BaseModel):
    """A single column as reported by the database catalog."""

    model_config = ConfigDict(frozen=True)

    table: str = Field(
        ...,
        min_length=1,
        description="Table the column belongs to (original case)"
    )

    column: str = Field(
        ...,
        min_length=1,
        description="Column name (original case)"
    )

    data_type: str = Field(
        default="",
        description="Database type name, e.g. 'integer', 'text', 'jsonb'"
    )

    nullable: bool = Field(
        default=True,
        description="Whether the column accepts NULL"
    )


class StructuralModel(BaseModel):
    """
    Structural view of an unknown schema, produced by the schema analyzer.

    Field bindings are None when no column matched. When main_table is None
    every binding is None as well; callers report "no primary table found"
    instead of querying.
    """

    model_config = ConfigDict(frozen=True)

    main_table: str | None = Field(
        default=None,
        description="Table believed to hold the candidate/contact records"
    )

    id_field: str | None = Field(default=None, description="Record id column")
    email_field: str | None = Field(default=None, description="Email column")
    phone_field: str | None = Field(default=None, description="Phone column")
    name_field: str | None = Field(default=None, description="Name column")

    all_tables: list[str] = Field(
        default_factory=list,
        description="Every table in the schema, in discovery order"
    )

    recovery_tables: list[str] = Field(
        default_factory=list,
        description="Auxiliary tables that may hold copies of missing data"
    )

    table_columns: dict[str, list[ColumnDescriptor]] = Field(
        default_factory=dict,
        description="Catalog columns grouped by table"
    )

    @model_validator(mode="after")
    def _bindings_require_main_table(self) -> StructuralModel:
        if self.main_table is None:
            bound = [
                name for name in ("id_field", "email_field", "phone_field", "name_field")
                if getattr(self, name) is not None
            ]
            if bound:
                raise ValueError(f"Field bindings without a main table: {bound}")
        return self

    @property
    def has_main_table(self) -> bool:
        return self.main_table is not None

    def field_mapping(self) -> dict[str, str | None]:
        """Field bindings in the shape reported to tool callers."""
        return {
            "email_field": self.email_field,
            "phone_field": self.phone_field,
            "name_field": self.name_field,
            "id_field": self.id_field,
        }

    def columns_of(self, table: str) -> list[ColumnDescriptor]:
        return self.table_columns.get(table, [])


class RecoveryJoin(BaseModel):
    """Resolved join between the main table and a recovery table."""

    model_config = ConfigDict(frozen=True)

    table: str
    join_column: str = Field(
        ...,
        description="Column on the recovery table that references the main record id"
    )
    content_column: str = Field(
        ...,
        description="Semi-structured (JSON) column holding the parsed contact data"
    )
