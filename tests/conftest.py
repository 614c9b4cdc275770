"""Pytest configuration and shared fixtures"""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from sprocgen.models import ColumnDescriptor


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI config at a temporary file so tests never read the user's config"""
    config_path = tmp_path / "sproc-gen.yaml"
    monkeypatch.setenv("SPROC_GEN_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def users_columns() -> list[ColumnDescriptor]:
    """Return columns of a table with an autoincrement primary key"""
    return [
        ColumnDescriptor(name="id", sql_type="INT", is_nullable=False, is_primary_key=True, is_auto_increment=True),
        ColumnDescriptor(name="name", sql_type="VARCHAR(255)", is_nullable=True),
    ]


@pytest.fixture
def logs_columns() -> list[ColumnDescriptor]:
    """Return columns of a table without a primary key"""
    return [
        ColumnDescriptor(name="level", sql_type="VARCHAR(10)", is_nullable=False),
        ColumnDescriptor(name="message", sql_type="TEXT"),
        ColumnDescriptor(name="created_at", sql_type="DATETIME", is_nullable=False),
    ]


@pytest.fixture
def order_items_columns() -> list[ColumnDescriptor]:
    """Return columns of a table with a composite primary key"""
    return [
        ColumnDescriptor(name="order_id", sql_type="INT", is_nullable=False, is_primary_key=True),
        ColumnDescriptor(name="product_id", sql_type="INT", is_nullable=False, is_primary_key=True),
        ColumnDescriptor(name="quantity", sql_type="INT", is_nullable=False),
        ColumnDescriptor(name="price", sql_type="DECIMAL(10,2)"),
    ]


@pytest.fixture
def sqlite_db(tmp_path: Path) -> str:
    """Create a SQLite database with users, logs and order_items tables"""
    db_path = tmp_path / "shop.db"
    connection_string = f"sqlite:///{db_path}"

    engine = create_engine(connection_string)
    with engine.connect() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE users (
                    id INTEGER PRIMARY KEY,
                    username TEXT NOT NULL,
                    email TEXT
                )
                """
            )
        )
        conn.execute(
            text(
                """
                CREATE TABLE logs (
                    message TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
        )
        conn.execute(
            text(
                """
                CREATE TABLE order_items (
                    order_id INTEGER NOT NULL,
                    product_id INTEGER NOT NULL,
                    quantity INTEGER NOT NULL,
                    PRIMARY KEY (order_id, product_id)
                )
                """
            )
        )
        conn.commit()
    engine.dispose()

    return connection_string
