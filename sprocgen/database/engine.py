"""Database connection and engine management."""

import re
from typing import Any
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError

from sprocgen.errors import SchemaConnectionError

SUPPORTED_DATABASE_TYPES = ("postgresql", "mysql", "sqlite")


def sanitize_connection_string(connection_string: str) -> str:
    """Sanitize a database connection string by removing passwords for logging.

    Args:
        connection_string: The database connection string

    Returns:
        Sanitized connection string with password replaced by ***
    """
    try:
        parsed = urlparse(connection_string)
        if parsed.password:
            return connection_string.replace(f":{parsed.password}@", ":***@")
    except ValueError:
        # urlparse rejects malformed ports; fall through to the regex
        pass

    return re.sub(r"://([^:/@]+):([^@/]+)@", r"://\1:***@", connection_string)


def detect_database_type(connection_string: str) -> str:
    """Infer the database type from a SQLAlchemy URL.

    Args:
        connection_string: The database connection string (e.g. mysql+pymysql://...)

    Returns:
        One of 'postgresql', 'mysql' or 'sqlite'

    Raises:
        SchemaConnectionError: If the URL is invalid or the backend is not supported
    """
    try:
        backend = make_url(connection_string).get_backend_name()
    except ArgumentError as e:
        raise SchemaConnectionError(f"Invalid connection string: {sanitize_connection_string(connection_string)}") from e

    if backend == "mariadb":
        backend = "mysql"
    if backend not in SUPPORTED_DATABASE_TYPES:
        raise SchemaConnectionError(
            f"Unsupported database type: {backend}. Must be 'postgresql', 'mysql', or 'sqlite'"
        )
    return backend


def create_database_engine(connection_string: str, database_type: str) -> Engine:
    """Create a SQLAlchemy engine for the specified database.

    Args:
        connection_string: The database connection string
        database_type: The database type (postgresql, mysql, sqlite)

    Returns:
        SQLAlchemy Engine instance

    Raises:
        SchemaConnectionError: If the engine cannot be created (bad URL, missing driver)
    """
    if database_type not in SUPPORTED_DATABASE_TYPES:
        raise SchemaConnectionError(
            f"Unsupported database type: {database_type}. Must be 'postgresql', 'mysql', or 'sqlite'"
        )

    connect_args: dict[str, Any] = {}

    if database_type == "sqlite":
        # Worker threads share the pool
        connect_args = {"check_same_thread": False}

    try:
        return create_engine(connection_string, connect_args=connect_args, echo=False)
    except (ArgumentError, ImportError) as e:
        raise SchemaConnectionError(
            f"Cannot create engine for {sanitize_connection_string(connection_string)}: {e}"
        ) from e
