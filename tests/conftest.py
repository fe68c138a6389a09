# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - In-memory SQLite database with a small candidates table
# - Fake executor / sender doubles for the tool layer
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("GMAIL_CREDENTIALS_PATH", "/nonexistent/gmail-credentials.json")
os.environ.setdefault("GMAIL_TOKEN_PATH", "/nonexistent/gmail-token.json")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from core.models.schema import ColumnDescriptor
from lib.query_executor import SQLAlchemyQueryExecutor


# =============================================================================
# Catalog Fixtures
# =============================================================================

def columns(table, *fields):
    """Build ColumnDescriptors from (name, type) pairs or bare names."""
    result = []
    for field in fields:
        name, data_type = field if isinstance(field, tuple) else (field, "text")
        result.append(ColumnDescriptor(table=table, column=name, data_type=data_type))
    return result


@pytest.fixture
def make_columns():
    return columns


@pytest.fixture
def candidate_catalog():
    """A candidates table plus an unrelated table that sorts before it."""
    return [
        *columns("audit_log", ("id", "integer"), "action", ("created_at", "timestamp")),
        *columns("candidates", ("id", "integer"), "full_name", "email", "phone_number"),
    ]


@pytest.fixture
def recovery_catalog(candidate_catalog):
    """candidate_catalog plus a resumes table with parsed JSON content."""
    return [
        *candidate_catalog,
        *columns("resumes", ("id", "integer"), ("candidate_id", "integer"), ("content_json", "jsonb")),
    ]


# =============================================================================
# SQLite Fixtures
# =============================================================================

CANDIDATE_ROWS = [
    {"id": 1, "full_name": "Alice Martin", "email": "alice@acme.org", "phone_number": "+1 555 0100"},
    {"id": 2, "full_name": "Bob Stone", "email": None, "phone_number": "+1 555 0101"},
    {"id": 3, "full_name": None, "email": "carol@acme.org", "phone_number": None},
]


@pytest.fixture
def sqlite_engine():
    """In-memory database shared by every connection of the test."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE audit_log (id INTEGER PRIMARY KEY, action TEXT)"))
        conn.execute(text(
            "CREATE TABLE candidates ("
            "id INTEGER PRIMARY KEY, full_name TEXT, email TEXT, phone_number TEXT)"
        ))
        conn.execute(
            text("INSERT INTO candidates (id, full_name, email, phone_number) VALUES (:id, :full_name, :email, :phone_number)"),
            CANDIDATE_ROWS,
        )
    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_executor(sqlite_engine):
    return SQLAlchemyQueryExecutor(sqlite_engine)


@pytest.fixture
def empty_sqlite_executor():
    engine = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    yield SQLAlchemyQueryExecutor(engine)
    engine.dispose()


# =============================================================================
# Test Doubles
# =============================================================================

class FakeExecutor:
    """
    QueryExecutor double.

    Returns the given catalog, the summary row for the aggregate statement
    and the detail rows for everything else. Executed SQL is recorded.
    """

    def __init__(self, catalog=None, summary_row=None, detail_rows=None, error=None, schema=None):
        self.schema = schema
        self.catalog = catalog or []
        self.summary_row = summary_row
        self.detail_rows = detail_rows or []
        self.error = error
        self.executed = []

    def fetch_column_catalog(self):
        if self.error:
            raise self.error
        return list(self.catalog)

    def execute(self, sql, params=None):
        if self.error:
            raise self.error
        self.executed.append(sql)
        if "main_table_analysis" in sql:
            return [self.summary_row] if self.summary_row is not None else []
        return list(self.detail_rows)

    def ping(self):
        if self.error:
            raise self.error


@pytest.fixture
def fake_executor():
    """Factory for FakeExecutor instances."""
    return FakeExecutor


@pytest.fixture
def mock_sender():
    sender = MagicMock()
    sender.send.return_value = "msg-123"
    return sender
