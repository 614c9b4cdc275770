"""Stored procedure generation from table column metadata

Each table yields three procedures: insert, update and delete. Structural
problems such as a missing primary key are written into the script as comment
lines instead of being raised, so one bad table never stops the others.
"""

from collections.abc import Sequence

from sprocgen.models import ColumnDescriptor, GenerationOptions, ProcedureKind, TableScript

MISSING_PRIMARY_KEY = "-- table should have a primary key"
NO_UPDATABLE_COLUMNS = "-- table has no updatable columns"

_INDENT = "    "


def parameter_name(column_name: str, options: GenerationOptions) -> str:
    """Return the procedure parameter name bound to a column.

    Args:
        column_name: Column name
        options: Naming options

    Returns:
        The column name with the parameter prefix, e.g. '_name'
    """
    return f"{options.param_prefix}{column_name}"


def _bound(column: ColumnDescriptor, options: GenerationOptions) -> str:
    return f"{options.bind_marker}{parameter_name(column.name, options)}"


def _assignments(columns: Sequence[ColumnDescriptor], options: GenerationOptions) -> list[str]:
    return [f"{column.name} = {_bound(column, options)}" for column in columns]


def writable_columns(columns: Sequence[ColumnDescriptor]) -> list[ColumnDescriptor]:
    """Columns the caller supplies values for (everything except autoincrement)."""
    return [column for column in columns if not column.is_auto_increment]


def primary_key_columns(columns: Sequence[ColumnDescriptor]) -> list[ColumnDescriptor]:
    """Columns that identify a row."""
    return [column for column in columns if column.is_primary_key]


def check_precondition(columns: Sequence[ColumnDescriptor], kind: ProcedureKind) -> str | None:
    """Check whether a procedure of the given kind can be generated.

    Args:
        columns: Table columns in declaration order
        kind: Procedure kind

    Returns:
        Diagnostic comment line if the procedure must be skipped, otherwise None
    """
    if kind is ProcedureKind.INSERT:
        return None

    if not primary_key_columns(columns):
        return MISSING_PRIMARY_KEY

    if kind is ProcedureKind.UPDATE and not writable_columns(columns):
        return NO_UPDATABLE_COLUMNS

    return None


def procedure_parameters(columns: Sequence[ColumnDescriptor], kind: ProcedureKind) -> list[ColumnDescriptor]:
    """Columns that become IN parameters of the procedure."""
    if kind is ProcedureKind.DELETE:
        return primary_key_columns(columns)
    return writable_columns(columns)


def build_clause(
    table: str,
    columns: Sequence[ColumnDescriptor],
    kind: ProcedureKind,
    options: GenerationOptions,
) -> str:
    """Build the SQL statement wrapped by a procedure.

    The caller is expected to have checked the precondition for ``kind``.

    Args:
        table: Table name
        columns: Table columns in declaration order
        kind: Procedure kind
        options: Naming options

    Returns:
        SQL statement lines, terminated by a semicolon
    """
    match kind:
        case ProcedureKind.INSERT:
            values = writable_columns(columns)
            names = ", ".join(column.name for column in values)
            params = ", ".join(_bound(column, options) for column in values)
            lines = [f"INSERT INTO {table} ({names})", f"VALUES({params});"]
        case ProcedureKind.UPDATE:
            assignments = ", ".join(_assignments(writable_columns(columns), options))
            condition = " AND ".join(_assignments(primary_key_columns(columns), options))
            lines = [f"UPDATE {table}", f"SET {assignments}", f"WHERE {condition};"]
        case ProcedureKind.DELETE:
            condition = " AND ".join(_assignments(primary_key_columns(columns), options))
            lines = [f"DELETE FROM {table}", f"WHERE {condition};"]

    return "\n".join(f"{_INDENT}{line}" for line in lines)


def create_procedure(
    table: str,
    kind: ProcedureKind,
    parameters: Sequence[ColumnDescriptor],
    clause: str,
    options: GenerationOptions,
) -> str:
    """Wrap a clause in a CREATE PROCEDURE declaration."""
    params = ", ".join(f"IN {parameter_name(column.name, options)} {column.sql_type}" for column in parameters)
    return f"CREATE PROCEDURE usp_{table}_{kind.value} ({params})\nBEGIN\n{clause}\nEND;\n"


def build_section(
    table: str,
    columns: Sequence[ColumnDescriptor],
    kind: ProcedureKind,
    options: GenerationOptions,
) -> tuple[str, bool]:
    """Build one procedure section, or its diagnostic.

    Returns:
        Tuple of (section text, whether a procedure was generated)
    """
    header = f"----- {kind.value.upper()}\n"

    diagnostic = check_precondition(columns, kind)
    if diagnostic:
        return f"{header}{diagnostic}\n\n", False

    clause = build_clause(table, columns, kind, options)
    procedure = create_procedure(table, kind, procedure_parameters(columns, kind), clause, options)
    return f"{header}{procedure}\n", True


def build_table_script(
    table: str,
    columns: Sequence[ColumnDescriptor],
    options: GenerationOptions | None = None,
) -> TableScript:
    """Generate insert, update and delete procedures for a table.

    Args:
        table: Table name
        columns: Table columns in declaration order
        options: Naming options (defaults to '_' prefix and ':' bind marker)

    Returns:
        TableScript with the generated text and the kinds that were skipped
    """
    options = options or GenerationOptions()

    parts = [f"----- TABLE: {table}\n"]
    skipped: list[ProcedureKind] = []

    for kind in ProcedureKind:
        section, generated = build_section(table, columns, kind, options)
        parts.append(section)
        if not generated:
            skipped.append(kind)

    return TableScript(table=table, text="".join(parts), skipped=skipped)


def generate_table_script(
    table: str,
    columns: Sequence[ColumnDescriptor],
    options: GenerationOptions | None = None,
) -> str:
    """Generate the SQL script text for a table.

    Args:
        table: Table name
        columns: Table columns in declaration order
        options: Naming options

    Returns:
        SQL text with the table header and three procedure sections
    """
    return build_table_script(table, columns, options).text
