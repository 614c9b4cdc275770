"""Database schema introspection."""

import logging
from typing import Any

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import InterfaceError, NoSuchTableError, OperationalError, SQLAlchemyError

from sprocgen.database.engine import create_database_engine, detect_database_type, sanitize_connection_string
from sprocgen.errors import SchemaConnectionError, SchemaQueryError
from sprocgen.models import ColumnDescriptor

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return str(value)


def _flag(value: Any, sentinel: str) -> bool:
    if value is None:
        return False
    return _text(value).strip().casefold() == sentinel


def column_from_show_columns(
    name: str,
    sql_type: str,
    null: str | None,
    key: str | None,
    extra: str | None,
) -> ColumnDescriptor:
    """Build a column descriptor from a MySQL ``SHOW COLUMNS`` row.

    The flag columns are compared case-insensitively: ``Null`` is 'YES' for
    nullable columns, ``Key`` is 'PRI' for primary key columns and ``Extra`` is
    'auto_increment' for autoincrement columns.

    Args:
        name: Value of the Field column
        sql_type: Value of the Type column
        null: Value of the Null column
        key: Value of the Key column
        extra: Value of the Extra column

    Returns:
        ColumnDescriptor for the row
    """
    return ColumnDescriptor(
        name=_text(name),
        sql_type=_text(sql_type),
        is_nullable=_flag(null, "yes"),
        is_primary_key=_flag(key, "pri"),
        is_auto_increment=_flag(extra, "auto_increment"),
    )


def column_from_reflection(column: dict[str, Any], primary_keys: set[str]) -> ColumnDescriptor:
    """Build a column descriptor from a SQLAlchemy inspector column entry.

    Args:
        column: Entry returned by ``Inspector.get_columns``
        primary_keys: Names of the table's primary key columns

    Returns:
        ColumnDescriptor for the column
    """
    return ColumnDescriptor(
        name=column["name"],
        sql_type=str(column["type"]),
        is_nullable=bool(column.get("nullable", True)),
        is_primary_key=column["name"] in primary_keys,
        # Dialects report "auto" when they cannot tell
        is_auto_increment=column.get("autoincrement") is True,
    )


class DatabaseSchemaProvider:
    """Lists tables and their columns through a SQLAlchemy engine"""

    def __init__(
        self,
        connection_string: str,
        database_type: str | None = None,
        schema: str | None = None,
    ) -> None:
        """Create the provider and its engine.

        Args:
            connection_string: Database connection string
            database_type: Database type (postgresql, mysql, sqlite); inferred from the URL if omitted
            schema: Database schema name (optional, defaults to 'public' for PostgreSQL)

        Raises:
            SchemaConnectionError: If the connection string or database type is invalid
        """
        self.database_type = database_type or detect_database_type(connection_string)

        # For PostgreSQL, default to 'public' schema if not specified
        if self.database_type == "postgresql" and schema is None:
            schema = "public"

        self.schema = schema
        self.sanitized_connection = sanitize_connection_string(connection_string)
        self.engine: Engine = create_database_engine(connection_string, self.database_type)

    def __enter__(self) -> "DatabaseSchemaProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        self.engine.dispose()

    def list_tables(self) -> list[str]:
        """List table names in the database or schema.

        Returns:
            Table names in the order reported by the database

        Raises:
            SchemaConnectionError: If the database cannot be reached
            SchemaQueryError: If the table listing fails
        """
        try:
            inspector = inspect(self.engine)
            tables = list(inspector.get_table_names(schema=self.schema))
        except (OperationalError, InterfaceError) as e:
            raise SchemaConnectionError(f"Cannot connect to {self.sanitized_connection}: {e}") from e
        except SQLAlchemyError as e:
            raise SchemaQueryError(f"Failed to list tables: {e}") from e

        logger.debug(f"Found {len(tables)} tables in {self.sanitized_connection}")
        return tables

    def list_columns(self, table: str) -> list[ColumnDescriptor]:
        """List the columns of a table in declaration order.

        Args:
            table: Table name

        Returns:
            Column descriptors in declaration order

        Raises:
            SchemaQueryError: If the table does not exist or the query fails
        """
        try:
            if self.database_type == "mysql":
                columns = self._show_columns(table)
            else:
                columns = self._reflect_columns(table)
        except NoSuchTableError as e:
            raise SchemaQueryError(f"Table '{table}' not found", table=table) from e
        except SQLAlchemyError as e:
            raise SchemaQueryError(f"Failed to read columns of table '{table}': {e}", table=table) from e

        logger.debug(f"Table '{table}' has {len(columns)} columns")
        return columns

    def _show_columns(self, table: str) -> list[ColumnDescriptor]:
        preparer = self.engine.dialect.identifier_preparer
        query = f"SHOW COLUMNS FROM {preparer.quote(table)}"
        if self.schema:
            query += f" FROM {preparer.quote_schema(self.schema)}"

        with self.engine.connect() as conn:
            rows = conn.execute(text(query)).fetchall()

        # Field, Type, Null, Key, Default, Extra
        return [column_from_show_columns(row[0], row[1], row[2], row[3], row[5]) for row in rows]

    def _reflect_columns(self, table: str) -> list[ColumnDescriptor]:
        inspector = inspect(self.engine)

        if not inspector.has_table(table, schema=self.schema):
            raise NoSuchTableError(table)

        columns = inspector.get_columns(table, schema=self.schema)
        pk_constraint = inspector.get_pk_constraint(table, schema=self.schema)
        primary_keys = set(pk_constraint.get("constrained_columns") or [])

        return [column_from_reflection(dict(column), primary_keys) for column in columns]
