"""Exceptions raised while reading schemas and writing scripts."""


class ProcedureGenError(Exception):
    """Base class for all sproc-gen errors."""


class SchemaConnectionError(ProcedureGenError):
    """The database cannot be reached or the connection string is invalid."""


class SchemaQueryError(ProcedureGenError):
    """An introspection query failed."""

    def __init__(self, message: str, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table


class ScriptWriteError(ProcedureGenError):
    """The generated script cannot be written to its destination."""
