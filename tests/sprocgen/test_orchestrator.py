"""Tests for whole-database script generation"""

import io
import threading
import time
from pathlib import Path

import pytest

from sprocgen.errors import SchemaQueryError, ScriptWriteError
from sprocgen.generator import MISSING_PRIMARY_KEY, generate_table_script
from sprocgen.models import ColumnDescriptor, GenerationOptions
from sprocgen.orchestrator import generate_database_script, render_database_script, write_script_file


class FakeProvider:
    """In-memory schema provider"""

    def __init__(
        self,
        tables: dict[str, list[ColumnDescriptor]],
        failing: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.tables = tables
        self.failing = failing or set()
        self.delays = delays or {}
        self.requested: list[str] = []
        self._lock = threading.Lock()

    def list_tables(self) -> list[str]:
        return list(self.tables)

    def list_columns(self, table: str) -> list[ColumnDescriptor]:
        with self._lock:
            self.requested.append(table)
        time.sleep(self.delays.get(table, 0))
        if table in self.failing:
            raise SchemaQueryError(f"Table '{table}' not found", table=table)
        return self.tables[table]


class FailingSink(io.StringIO):
    """Sink whose writes always fail"""

    def write(self, s: str) -> int:
        raise OSError("disk full")


@pytest.fixture
def provider(
    users_columns: list[ColumnDescriptor],
    logs_columns: list[ColumnDescriptor],
    order_items_columns: list[ColumnDescriptor],
) -> FakeProvider:
    return FakeProvider({"users": users_columns, "logs": logs_columns, "order_items": order_items_columns})


class TestGenerateDatabaseScript:
    """Tests for generate_database_script"""

    def test_writes_tables_in_listing_order(self, provider: FakeProvider) -> None:
        """Test that the sink receives every table script in order"""
        sink = io.StringIO()
        report = generate_database_script(provider, sink)

        expected = "".join(generate_table_script(table, provider.tables[table]) for table in provider.tables)
        assert sink.getvalue() == expected
        assert report.tables == ["users", "logs", "order_items"]
        assert report.generated == ["users", "logs", "order_items"]
        assert report.failures == []

    def test_concurrent_workers_keep_order(self, provider: FakeProvider) -> None:
        """Test that slow tables do not change output order"""
        provider.delays = {"users": 0.2, "logs": 0.1}

        sequential, _ = render_database_script(provider, max_workers=1)
        concurrent, _ = render_database_script(provider, max_workers=3)

        assert concurrent == sequential
        assert concurrent.index("TABLE: users") < concurrent.index("TABLE: logs") < concurrent.index("TABLE: order_items")

    def test_reports_tables_without_primary_key(self, provider: FakeProvider) -> None:
        """Test that tables without primary key are reported but still written"""
        script, report = render_database_script(provider)

        assert report.missing_primary_key == ["logs"]
        assert script.count(MISSING_PRIMARY_KEY) == 2

    def test_options_are_applied(self, provider: FakeProvider) -> None:
        """Test that naming options reach the generator"""
        script, _ = render_database_script(provider, options=GenerationOptions(param_prefix="p_"))
        assert "IN p_name VARCHAR(255)" in script

    def test_table_subset(self, provider: FakeProvider) -> None:
        """Test that only the selected tables are generated, in the given order"""
        script, report = render_database_script(provider, tables=["order_items", "users"])

        assert report.tables == ["order_items", "users"]
        assert "TABLE: logs" not in script
        assert script.index("TABLE: order_items") < script.index("TABLE: users")

    def test_failure_is_fatal_by_default(self, provider: FakeProvider) -> None:
        """Test that a column retrieval failure aborts the run"""
        provider.failing = {"logs"}

        with pytest.raises(SchemaQueryError) as exc_info:
            generate_database_script(provider, io.StringIO())

        assert exc_info.value.table == "logs"
        assert "logs" in str(exc_info.value)

    def test_failure_stops_writing(self, provider: FakeProvider) -> None:
        """Test that tables after a fatal failure are not written"""
        provider.failing = {"users"}
        sink = io.StringIO()

        with pytest.raises(SchemaQueryError):
            generate_database_script(provider, sink)

        assert sink.getvalue() == ""

    def test_continue_on_error(self, provider: FakeProvider) -> None:
        """Test that failures are recorded and other tables still written"""
        provider.failing = {"logs"}

        script, report = render_database_script(provider, max_workers=2, continue_on_error=True)

        assert report.generated == ["users", "order_items"]
        assert [failure.table for failure in report.failures] == ["logs"]
        assert "-- failed to read columns for table logs" in script
        assert "CREATE PROCEDURE usp_order_items_delete" in script

    def test_write_failure(self, provider: FakeProvider) -> None:
        """Test that sink errors are raised as write errors"""
        with pytest.raises(ScriptWriteError, match="disk full"):
            generate_database_script(provider, FailingSink())

    def test_invalid_worker_count(self, provider: FakeProvider) -> None:
        """Test that at least one worker is required"""
        with pytest.raises(ValueError, match="max_workers"):
            generate_database_script(provider, io.StringIO(), max_workers=0)


class TestWriteScriptFile:
    """Tests for write_script_file"""

    def test_writes_file(self, provider: FakeProvider, tmp_path: Path) -> None:
        """Test that the script file is created with parent directories"""
        output = tmp_path / "nested" / "result.sql"

        report = write_script_file(output, provider, max_workers=2)

        assert output.exists()
        assert output.read_text(encoding="utf-8").startswith("----- TABLE: users\n")
        assert report.generated == ["users", "logs", "order_items"]

    def test_truncates_existing_file(self, provider: FakeProvider, tmp_path: Path) -> None:
        """Test that previous content is replaced"""
        output = tmp_path / "result.sql"
        output.write_text("old content\n")

        write_script_file(output, provider)

        assert "old content" not in output.read_text(encoding="utf-8")

    def test_unwritable_path(self, provider: FakeProvider, tmp_path: Path) -> None:
        """Test that an output path that is a directory raises a write error"""
        with pytest.raises(ScriptWriteError, match="Can't open file"):
            write_script_file(tmp_path, provider)
