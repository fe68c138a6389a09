# =============================================================================
# tests/test_query_executor.py - SQLAlchemy Executor Tests
# =============================================================================

import pytest
from sqlalchemy import create_engine

from lib.query_executor import (
    DatabaseConnectionError,
    QueryExecutionError,
    SQLAlchemyQueryExecutor,
    create_database_engine,
)


class TestCatalog:

    def test_catalog_sorted_by_table(self, sqlite_executor):
        catalog = sqlite_executor.fetch_column_catalog()

        assert [(c.table, c.column) for c in catalog] == [
            ("audit_log", "id"),
            ("audit_log", "action"),
            ("candidates", "id"),
            ("candidates", "full_name"),
            ("candidates", "email"),
            ("candidates", "phone_number"),
        ]

    def test_types_lowercased(self, sqlite_executor):
        catalog = sqlite_executor.fetch_column_catalog()

        assert {c.data_type for c in catalog} == {"integer", "text"}

    def test_empty_database(self, empty_sqlite_executor):
        assert empty_sqlite_executor.fetch_column_catalog() == []


class TestExecute:

    def test_rows_as_dicts(self, sqlite_executor):
        rows = sqlite_executor.execute("SELECT id, email FROM candidates ORDER BY id")

        assert rows[1] == {"id": 2, "email": None}

    def test_bound_parameters(self, sqlite_executor):
        rows = sqlite_executor.execute("SELECT id FROM candidates WHERE email = :email", {"email": "alice@acme.org"})

        assert rows == [{"id": 1}]

    def test_bad_statement(self, sqlite_executor):
        with pytest.raises(QueryExecutionError) as exc_info:
            sqlite_executor.execute("SELECT nope FROM candidates")

        error = exc_info.value
        assert error.code == "QUERY_FAILED"
        assert "nope" in error.details["error"]
        assert error.details["sql"] == "SELECT nope FROM candidates"

    def test_ping(self, sqlite_executor):
        sqlite_executor.ping()


class TestConnection:

    def test_unreachable_database(self, tmp_path):
        # Parent directory does not exist, so SQLite cannot open the file
        engine = create_engine(f"sqlite:///{tmp_path}/missing/dir/db.sqlite")
        executor = SQLAlchemyQueryExecutor(engine)

        with pytest.raises(DatabaseConnectionError) as exc_info:
            executor.ping()

        assert exc_info.value.code == "DATABASE_CONNECTION_FAILED"
        engine.dispose()

    def test_sqlite_engine_passthrough(self):
        engine = create_database_engine("sqlite://")

        assert engine.dialect.name == "sqlite"
        engine.dispose()

    def test_schema_blank_means_default(self, sqlite_engine):
        assert SQLAlchemyQueryExecutor(sqlite_engine, schema="").schema is None
