"""Stored procedure generation handlers"""

import json
from pathlib import Path

from pydantic import ValidationError

from sprocgen.database import DatabaseSchemaProvider
from sprocgen.errors import ProcedureGenError
from sprocgen.models import GenerationOptions
from sprocgen.orchestrator import render_database_script, write_script_file


class ProcedureHandler:
    """Handles all stored procedure operations"""

    def list_tables(
        self,
        connection_string: str,
        database_type: str | None = None,
        schema: str | None = None,
        with_fields: bool = False,
    ) -> str:
        """List tables in a database

        Args:
            connection_string: Database connection string
            database_type: Database type (postgresql, mysql, sqlite); inferred if omitted
            schema: Database schema name (optional)
            with_fields: Whether to include column details

        Returns:
            JSON string with the tables and optional columns
        """
        try:
            with DatabaseSchemaProvider(connection_string, database_type=database_type, schema=schema) as provider:
                tables = []
                for name in provider.list_tables():
                    table: dict[str, object] = {"name": name}
                    if with_fields:
                        table["columns"] = [column.model_dump() for column in provider.list_columns(name)]
                    tables.append(table)

                result = {
                    "database_type": provider.database_type,
                    "schema": provider.schema,
                    "connection": provider.sanitized_connection,
                    "tables": tables,
                }
            return json.dumps(result, indent=2)
        except ProcedureGenError as e:
            return json.dumps({"error": f"Failed to list tables: {e!s}"}, indent=2)

    def generate_procedures(
        self,
        connection_string: str,
        database_type: str | None = None,
        schema: str | None = None,
        tables: list[str] | None = None,
        output_path: str | None = None,
        param_prefix: str = "_",
        bind_marker: str = ":",
        max_workers: int = 4,
        continue_on_error: bool = False,
    ) -> str:
        """Generate insert, update and delete procedures for database tables

        Args:
            connection_string: Database connection string
            database_type: Database type (postgresql, mysql, sqlite); inferred if omitted
            schema: Database schema name (optional)
            tables: Specific tables to generate procedures for (defaults to all tables)
            output_path: Absolute path of a script file to write (optional, script is returned otherwise)
            param_prefix: Prefix added to column names for parameters
            bind_marker: Marker placed before parameter names in clause bodies
            max_workers: Number of tables processed concurrently
            continue_on_error: Skip tables whose columns cannot be read

        Returns:
            JSON string with the generation report and the script or output path
        """
        if output_path and not Path(output_path).is_absolute():
            return json.dumps({"error": "output_path must be an absolute path", "provided_path": output_path}, indent=2)

        try:
            options = GenerationOptions(param_prefix=param_prefix, bind_marker=bind_marker)

            with DatabaseSchemaProvider(connection_string, database_type=database_type, schema=schema) as provider:
                if output_path:
                    report = write_script_file(
                        Path(output_path),
                        provider,
                        options=options,
                        max_workers=max_workers,
                        continue_on_error=continue_on_error,
                        tables=tables,
                    )
                    result: dict[str, object] = {"output_path": output_path}
                else:
                    script, report = render_database_script(
                        provider,
                        options=options,
                        max_workers=max_workers,
                        continue_on_error=continue_on_error,
                        tables=tables,
                    )
                    result = {"script": script}

            result["report"] = report.model_dump()
            return json.dumps(result, indent=2)
        except (ProcedureGenError, ValidationError, ValueError) as e:
            return json.dumps({"error": f"Failed to generate procedures: {e!s}"}, indent=2)
