"""Database schema access.

This package connects to a database through SQLAlchemy and reads the table
and column metadata consumed by the procedure generator.
"""

from sprocgen.database.engine import create_database_engine, detect_database_type, sanitize_connection_string
from sprocgen.database.introspection import (
    DatabaseSchemaProvider,
    column_from_reflection,
    column_from_show_columns,
)

__all__ = [
    # Engine
    "create_database_engine",
    "detect_database_type",
    "sanitize_connection_string",
    # Introspection
    "DatabaseSchemaProvider",
    "column_from_reflection",
    "column_from_show_columns",
]
