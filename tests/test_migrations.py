"""Verify Alembic migrations: empty DB -> upgrade head -> downgrade base (own Postgres, run with pytest -m migration)."""

import pytest
from sqlalchemy import create_engine, text
from testcontainers.postgres import PostgresContainer

from tests.conftest import database_url

EXPECTED_TABLES = ["cultural_sites", "recognition_history", "user_favorites"]


@pytest.fixture(scope="module")
def migration_postgres():
    """Dedicated Postgres 16 container for migration tests only (empty DB)."""
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="module")
def migration_engine(migration_postgres):
    """Engine bound to the migration test container."""
    url = migration_postgres.get_connection_url()
    return create_engine(url, pool_pre_ping=True)


@pytest.fixture(scope="module")
def alembic_cfg(migration_postgres):
    """Alembic Config pointed at the container through DATABASE_URL; restores the env after."""
    from alembic.config import Config

    cfg = Config("alembic.ini")
    cfg.set_main_option("script_location", "migrations")
    with database_url(migration_postgres.get_connection_url()):
        yield cfg


def _public_tables(engine) -> list[str]:
    with engine.connect() as conn:
        result = conn.execute(
            text(
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = 'public' AND table_name <> 'alembic_version' "
                "ORDER BY table_name"
            )
        )
        return [row[0] for row in result]


@pytest.mark.migration
@pytest.mark.order(1)
def test_migration_01_upgrade_head(alembic_cfg, migration_engine):
    """Run Alembic upgrade head on empty DB; verify tables, unique name index and JSONB defaults."""
    from alembic import command

    command.upgrade(alembic_cfg, "head")
    assert _public_tables(migration_engine) == EXPECTED_TABLES

    with migration_engine.connect() as conn:
        idx = conn.execute(
            text(
                "SELECT indexdef FROM pg_indexes "
                "WHERE tablename = 'cultural_sites' AND indexname = 'ix_cultural_sites_name'"
            )
        ).fetchone()
        assert idx is not None
        assert "UNIQUE" in idx[0]

        conn.execute(text("INSERT INTO cultural_sites (name) VALUES ('Colosseum')"))
        row = conn.execute(
            text("SELECT fun_facts, image_keywords, created_at FROM cultural_sites WHERE name = 'Colosseum'")
        ).fetchone()
        assert row[0] == []
        assert row[1] == []
        assert row[2] is not None
        conn.rollback()


@pytest.mark.migration
@pytest.mark.order(2)
def test_migration_02_downgrade_base(alembic_cfg, migration_engine):
    """Downgrade to base drops every application table."""
    from alembic import command

    command.downgrade(alembic_cfg, "base")
    assert _public_tables(migration_engine) == []
