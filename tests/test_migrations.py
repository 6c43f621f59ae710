"""Run the schema migration against SQLite and compare it with the ORM models."""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from blogo.models import Base

VERSIONS = Path(__file__).resolve().parent.parent / "migrations" / "versions"


def load_migration():
    path = VERSIONS / "3c1d7e9a4b20_create_blog_schema.py"
    spec = importlib.util.spec_from_file_location("create_blog_schema", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def conn():
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        yield conn
    engine.dispose()


def migrate(conn, *steps):
    with Operations.context(MigrationContext.configure(conn)):
        for step in steps:
            step()


def test_upgrade_creates_model_tables(conn):
    migration = load_migration()
    assert migration.down_revision is None

    migrate(conn, migration.upgrade)
    inspector = inspect(conn)

    assert set(inspector.get_table_names()) == set(Base.metadata.tables)
    for name, table in Base.metadata.tables.items():
        columns = {c["name"] for c in inspector.get_columns(name)}
        assert columns == set(table.columns.keys()), name

    indexes = {i["name"] for i in inspector.get_indexes("followers")}
    assert {"idx_followers_follower", "idx_followers_following"} <= indexes
    uniques = {u["name"] for u in inspector.get_unique_constraints("likes")}
    assert "uq_likes_pair" in uniques


def test_downgrade_drops_everything(conn):
    migration = load_migration()
    migrate(conn, migration.upgrade, migration.downgrade)
    assert inspect(conn).get_table_names() == []
