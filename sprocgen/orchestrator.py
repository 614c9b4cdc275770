"""Whole-database script generation

Column retrieval and generation run in worker threads, one task per table.
Each task returns an immutable script and the calling thread writes the
scripts to the sink in table-listing order, so the sink has a single writer.
"""

import io
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Protocol, TextIO

from sprocgen.errors import SchemaQueryError, ScriptWriteError
from sprocgen.generator import build_table_script
from sprocgen.models import (
    ColumnDescriptor,
    GenerationOptions,
    GenerationReport,
    ProcedureKind,
    TableFailure,
    TableScript,
)

logger = logging.getLogger(__name__)


class SchemaProvider(Protocol):
    """Source of table names and column metadata"""

    def list_tables(self) -> list[str]: ...

    def list_columns(self, table: str) -> list[ColumnDescriptor]: ...


def _render_table(provider: SchemaProvider, table: str, options: GenerationOptions) -> TableScript:
    columns = provider.list_columns(table)
    return build_table_script(table, columns, options)


def _write(sink: TextIO, text: str) -> None:
    try:
        sink.write(text)
    except OSError as e:
        raise ScriptWriteError(f"Can't write SQL script: {e}") from e


def generate_database_script(
    provider: SchemaProvider,
    sink: TextIO,
    options: GenerationOptions | None = None,
    max_workers: int = 1,
    continue_on_error: bool = False,
    tables: Sequence[str] | None = None,
) -> GenerationReport:
    """Generate procedures for every table and write them to a sink.

    Args:
        provider: Schema provider to read tables and columns from
        sink: Text stream receiving the script
        options: Naming options for the generated procedures
        max_workers: Number of tables processed concurrently
        continue_on_error: Record column retrieval failures and keep going instead of aborting
        tables: Tables to process, in output order (defaults to every table of the provider)

    Returns:
        GenerationReport describing the run

    Raises:
        SchemaConnectionError: If the provider cannot reach the database
        SchemaQueryError: If a table's columns cannot be read and continue_on_error is False
        ScriptWriteError: If the sink cannot be written
    """
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    options = options or GenerationOptions()
    table_names = list(tables) if tables is not None else provider.list_tables()
    report = GenerationReport(tables=table_names)

    logger.info(f"Generating procedures for {len(table_names)} tables with {max_workers} workers")

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="sproc-gen") as executor:
        futures = [executor.submit(_render_table, provider, table, options) for table in table_names]

        for table, future in zip(table_names, futures, strict=True):
            try:
                script = future.result()
            except SchemaQueryError as e:
                if not continue_on_error:
                    for pending in futures:
                        pending.cancel()
                    logger.debug(f"Can't get the list of columns for table '{table}': {e}")
                    raise SchemaQueryError(
                        f"Can't get the list of columns for table '{table}': {e}", table=table
                    ) from e

                logger.debug(f"Skipping table '{table}': {e}")
                report.failures.append(TableFailure(table=table, error=str(e)))
                _write(sink, f"----- TABLE: {table}\n-- failed to read columns for table {table}: {e}\n\n")
                continue

            _write(sink, script.text)
            report.generated.append(table)

            if ProcedureKind.DELETE in script.skipped:
                logger.debug(f"Table '{table}' has no primary key, update and delete procedures skipped")
                report.missing_primary_key.append(table)

    logger.info(f"Generated procedures for {len(report.generated)} of {len(table_names)} tables")
    return report


def render_database_script(
    provider: SchemaProvider,
    options: GenerationOptions | None = None,
    max_workers: int = 1,
    continue_on_error: bool = False,
    tables: Sequence[str] | None = None,
) -> tuple[str, GenerationReport]:
    """Generate the script into memory.

    Returns:
        Tuple of (script text, GenerationReport)
    """
    buffer = io.StringIO()
    report = generate_database_script(
        provider,
        buffer,
        options=options,
        max_workers=max_workers,
        continue_on_error=continue_on_error,
        tables=tables,
    )
    return buffer.getvalue(), report


def write_script_file(
    output_path: Path,
    provider: SchemaProvider,
    options: GenerationOptions | None = None,
    max_workers: int = 1,
    continue_on_error: bool = False,
    tables: Sequence[str] | None = None,
) -> GenerationReport:
    """Generate the script into a file, replacing any existing content.

    Args:
        output_path: Script file path (parent directories are created)
        provider: Schema provider to read tables and columns from
        options: Naming options for the generated procedures
        max_workers: Number of tables processed concurrently
        continue_on_error: Record column retrieval failures and keep going instead of aborting
        tables: Tables to process, in output order

    Returns:
        GenerationReport describing the run

    Raises:
        ScriptWriteError: If the file cannot be opened or written
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as sink:
            return generate_database_script(
                provider,
                sink,
                options=options,
                max_workers=max_workers,
                continue_on_error=continue_on_error,
                tables=tables,
            )
    except OSError as e:
        raise ScriptWriteError(f"Can't open file: {output_path}: {e}") from e
