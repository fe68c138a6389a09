# =============================================================================
# tests/test_schema_analyzer.py - Schema Discovery Tests
# =============================================================================
# This module contains tests for:
# - Main table selection (first qualifying table in catalog order)
# - Field binding with ordered pattern families
# - Recovery table detection and join resolution
# =============================================================================

import random

import pytest

from core.models.schema import StructuralModel
from lib.schema_analyzer import (
    analyze,
    group_by_table,
    resolve_recovery_join,
    score_table,
)


# =============================================================================
# Main Table Selection
# =============================================================================

class TestMainTableSelection:
    """Test which table is chosen as the contact table."""

    def test_candidates_table_found(self, candidate_catalog):
        model = analyze(candidate_catalog)

        assert model.main_table == "candidates"
        assert model.field_mapping() == {
            "email_field": "email",
            "phone_field": "phone_number",
            "name_field": "full_name",
            "id_field": "id",
        }

    def test_tables_without_contact_columns_are_skipped(self, candidate_catalog):
        model = analyze(candidate_catalog)

        # audit_log sorts first but has no email/phone/name column
        assert model.all_tables == ["audit_log", "candidates"]
        assert model.main_table == "candidates"

    def test_first_qualifying_table_wins(self, make_columns):
        catalog = [
            *make_columns("candidates", "id", "email", "phone", "full_name"),
            *make_columns("accounts", "id", "username"),
        ]

        model = analyze(catalog)

        # "username" contains "name", and accounts comes first alphabetically
        assert model.main_table == "accounts"
        assert model.name_field == "username"
        assert model.email_field is None

    @pytest.mark.parametrize("users_first", [True, False])
    def test_candidates_beats_users(self, make_columns, users_first):
        fields = ("id", "email", "phone_number", "full_name")
        users = make_columns("users", *fields)
        candidates = make_columns("candidates", *fields)
        catalog = users + candidates if users_first else candidates + users

        model = analyze(catalog)

        assert model.main_table == "candidates"
        assert model.phone_field == "phone_number"

    def test_input_order_does_not_matter(self, recovery_catalog):
        shuffled = list(recovery_catalog)
        random.Random(7).shuffle(shuffled)

        assert analyze(shuffled).main_table == analyze(recovery_catalog).main_table

    def test_no_contact_table(self, make_columns):
        catalog = [
            *make_columns("orders", "id", "total"),
            *make_columns("invoices", "id", "amount"),
        ]

        model = analyze(catalog)

        assert model.main_table is None
        assert model.has_main_table is False
        assert model.all_tables == ["invoices", "orders"]
        assert model.field_mapping() == {
            "email_field": None,
            "phone_field": None,
            "name_field": None,
            "id_field": None,
        }

    def test_empty_catalog(self):
        model = analyze([])

        assert model.main_table is None
        assert model.all_tables == []


# =============================================================================
# Field Binding
# =============================================================================

class TestFieldBinding:
    """Test column-to-role binding on the main table."""

    def test_id_defaults_when_no_id_column(self, make_columns):
        model = analyze(make_columns("contacts", "email", "full_name"))

        assert model.id_field == "id"

    def test_first_column_in_order_is_bound(self, make_columns):
        model = analyze(make_columns("people", "person_id", "first_name", "last_name", "mobile"))

        assert model.id_field == "person_id"
        assert model.name_field == "first_name"
        assert model.phone_field == "mobile"
        assert model.email_field is None

    def test_matching_is_case_insensitive(self, make_columns):
        model = analyze(make_columns("Customers", "ID", "EmailAddress", "Telephone"))

        assert model.main_table == "Customers"
        assert model.email_field == "EmailAddress"
        assert model.phone_field == "Telephone"
        assert model.id_field == "ID"

    def test_bindings_require_main_table(self):
        with pytest.raises(ValueError):
            StructuralModel(main_table=None, email_field="email")


# =============================================================================
# Scoring and Grouping
# =============================================================================

class TestScoring:

    def test_score_includes_entity_bonus(self, make_columns):
        cols = make_columns("candidates", "id", "email")
        assert score_table("candidates", cols) == 12

    def test_score_without_bonus(self, make_columns):
        cols = make_columns("leads", "id", "email", "phone")
        assert score_table("leads", cols) == 3

    def test_group_by_table_sorted_case_insensitive(self, make_columns):
        catalog = [
            *make_columns("users", "id"),
            *make_columns("Applications", "id"),
            *make_columns("contacts", "id"),
        ]

        assert list(group_by_table(catalog)) == ["Applications", "contacts", "users"]


# =============================================================================
# Recovery Tables
# =============================================================================

class TestRecoveryTables:
    """Test recovery table detection and join resolution."""

    def test_recovery_tables_detected(self, make_columns):
        catalog = [
            *make_columns("candidates", "id", "email"),
            *make_columns("resumes", "id", "candidate_id"),
            *make_columns("intake_forms", "id"),
            *make_columns("user_profiles", "id"),
        ]

        model = analyze(catalog)

        assert model.recovery_tables == ["intake_forms", "resumes", "user_profiles"]

    def test_join_resolved_from_json_column(self, recovery_catalog):
        join = resolve_recovery_join(analyze(recovery_catalog))

        assert join is not None
        assert join.table == "resumes"
        assert join.join_column == "candidate_id"
        assert join.content_column == "content_json"

    def test_join_uses_content_column_name_without_json_type(self, make_columns):
        catalog = [
            *make_columns("candidates", "id", "email"),
            *make_columns("resumes", "id", "candidate_id", ("content", "text")),
        ]

        join = resolve_recovery_join(analyze(catalog))

        assert join.content_column == "content"

    def test_join_uses_main_id_field_when_not_plain_id(self, make_columns):
        catalog = [
            *make_columns("contacts", "contact_id", "email"),
            *make_columns("forms", "id", "contact_id", ("payload", "json")),
        ]

        join = resolve_recovery_join(analyze(catalog))

        assert join.join_column == "contact_id"
        assert join.content_column == "payload"

    def test_unjoinable_recovery_table(self, make_columns):
        catalog = [
            *make_columns("candidates", "id", "email"),
            *make_columns("resumes", "id", "file_path"),
        ]

        assert resolve_recovery_join(analyze(catalog)) is None

    def test_no_recovery_tables(self, candidate_catalog):
        assert resolve_recovery_join(analyze(candidate_catalog)) is None
