"""Pydantic models for schema metadata and generated scripts"""

from enum import Enum

from pydantic import BaseModel, Field

# ============================================================================
# Schema Models
# ============================================================================


class ColumnDescriptor(BaseModel):
    """Description of a single table column, in declaration order"""

    name: str = Field(description="Column name")
    sql_type: str = Field(description="Declared SQL type (e.g. 'VARCHAR(255)')")
    is_nullable: bool = Field(default=True, description="Whether the column accepts NULL")
    is_primary_key: bool = Field(default=False, description="Whether the column is part of the primary key")
    is_auto_increment: bool = Field(default=False, description="Whether the database assigns the value on insert")

    model_config = {"frozen": True}


class ProcedureKind(str, Enum):
    """Kinds of generated stored procedures, in generation order"""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


# ============================================================================
# Generation Models
# ============================================================================


class GenerationOptions(BaseModel):
    """Naming options applied to generated procedures"""

    param_prefix: str = Field(default="_", min_length=1, description="Prefix added to column names for parameters")
    bind_marker: str = Field(default=":", description="Marker placed before parameter names in clause bodies")

    model_config = {"frozen": True}


class TableScript(BaseModel):
    """Generated procedures for one table"""

    table: str = Field(description="Table name")
    text: str = Field(description="Generated SQL text")
    skipped: list[ProcedureKind] = Field(default_factory=list, description="Kinds replaced by a diagnostic")

    model_config = {"frozen": True}


class TableFailure(BaseModel):
    """A table whose columns could not be read"""

    table: str = Field(description="Table name")
    error: str = Field(description="Error message")


class GenerationReport(BaseModel):
    """Summary of a whole-database generation run"""

    tables: list[str] = Field(default_factory=list, description="Tables processed, in output order")
    generated: list[str] = Field(default_factory=list, description="Tables whose script was written")
    failures: list[TableFailure] = Field(default_factory=list, description="Tables that failed to load")
    missing_primary_key: list[str] = Field(
        default_factory=list, description="Tables written without update/delete procedures"
    )
