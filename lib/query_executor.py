# =============================================================================
# lib/query_executor.py - Read-Only SQL Executor
# =============================================================================
# Thin wrapper around a SQLAlchemy engine that the detector uses for every
# database access:
# - fetch_column_catalog(): every column of the configured schema
# - execute(sql): run one statement, rows as plain dicts
# - ping(): connectivity check for readiness probes
#
# The engine is created once by the hosting process and handed in; this
# module never builds a global client. Statements run on PostgreSQL inside a
# read-only transaction, and the connection is always rolled back.
#
# Usage:
#   engine = create_database_engine(settings.DATABASE_URL)
#   executor = SQLAlchemyQueryExecutor(engine, schema="public")
#   rows = executor.execute("SELECT 1 AS ok")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Protocol

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError

from core.models.schema import ColumnDescriptor
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class QueryExecutorError(ApplicationError):
    """Base error for database access."""

    def __init__(self, message: str, code: str = "QUERY_EXECUTOR_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class DatabaseConnectionError(QueryExecutorError):
    """Raised when the database cannot be reached."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Unable to connect to the database: {error}",
            code="DATABASE_CONNECTION_FAILED",
            suggestion="Check that the database server is running and DATABASE_URL is correct",
            details={"error": error},
        )


class QueryExecutionError(QueryExecutorError):
    """Raised when a statement fails to execute."""

    def __init__(self, error: str, sql: str | None = None):
        details: dict[str, Any] = {"error": error}
        if sql:
            details["sql"] = sql
        super().__init__(
            message=f"Query failed: {error}",
            code="QUERY_FAILED",
            suggestion="Check the database schema and permissions of the configured user",
            details=details,
        )


# =============================================================================
# Executor Interface
# =============================================================================

class QueryExecutor(Protocol):
    """What the detector needs from a database."""

    schema: str | None

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        ...

    def fetch_column_catalog(self) -> list[ColumnDescriptor]:
        ...

    def ping(self) -> None:
        ...


def _is_connection_error(exc: Exception) -> bool:
    # OperationalError also covers SQLite syntax errors, so mid-statement
    # failures only count when the driver invalidated the connection.
    if isinstance(exc, InterfaceError):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)


def _short_error(exc: Exception) -> str:
    orig = getattr(exc, "orig", None)
    message = str(orig if orig is not None else exc).strip()
    return message.splitlines()[0] if message else type(exc).__name__


def create_database_engine(database_url: str, connect_timeout: int = 10) -> Engine:
    """
    Create the process-wide engine.

    Network databases get a connect timeout and pre-ping; SQLite URLs are
    passed through unchanged.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url)

    connect_args = {"timeout": connect_timeout} if database_url.startswith("mssql+") else {"connect_timeout": connect_timeout}
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


class SQLAlchemyQueryExecutor:
    """
    Query executor backed by a SQLAlchemy engine.

    Attributes:
        engine: The shared engine (connection pool)
        schema: Schema to introspect and query; None uses the default
    """

    def __init__(self, engine: Engine, schema: str | None = None):
        self.engine = engine
        self.schema = schema or None

    def _connect(self):
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(_short_error(e)) from e
        if self.engine.dialect.name == "postgresql":
            conn = conn.execution_options(postgresql_readonly=True)
        return conn

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        Run one statement and return its rows.

        Raises:
            DatabaseConnectionError: If no connection could be made
            QueryExecutionError: If the statement failed
        """
        logger.debug(f"Executing SQL: {sql[:200]}")
        with self._connect() as conn:
            try:
                result = conn.execute(text(sql), params or {})
                rows = [dict(row._mapping) for row in result] if result.returns_rows else []
            except SQLAlchemyError as e:
                if _is_connection_error(e):
                    raise DatabaseConnectionError(_short_error(e)) from e
                raise QueryExecutionError(_short_error(e), sql=sql) from e

        logger.debug(f"Query returned {len(rows)} rows")
        return rows

    def fetch_column_catalog(self) -> list[ColumnDescriptor]:
        """
        Return every column of the schema, ordered by table name then
        ordinal position.
        """
        try:
            inspector = inspect(self.engine)
            table_names = sorted(inspector.get_table_names(schema=self.schema))
            catalog: list[ColumnDescriptor] = []
            for table_name in table_names:
                for col in inspector.get_columns(table_name, schema=self.schema):
                    catalog.append(ColumnDescriptor(
                        table=table_name,
                        column=col["name"],
                        data_type=str(col["type"]).lower(),
                        nullable=bool(col.get("nullable", True)),
                    ))
        except SQLAlchemyError as e:
            # The inspector opens its own connection; failing there is a
            # connectivity problem.
            if isinstance(e, OperationalError) or _is_connection_error(e):
                raise DatabaseConnectionError(_short_error(e)) from e
            raise QueryExecutionError(_short_error(e)) from e

        logger.info(f"Catalog has {len(catalog)} columns in {len(table_names)} tables")
        return catalog

    def ping(self) -> None:
        """Raise DatabaseConnectionError unless SELECT 1 succeeds."""
        try:
            self.execute("SELECT 1")
        except QueryExecutionError as e:
            raise DatabaseConnectionError(e.details.get("error", e.message)) from e
