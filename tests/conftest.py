"""Pytest fixtures. Use testcontainers-python for PostgreSQL in tests."""

import contextlib
import os
from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from testcontainers.postgres import PostgresContainer

from landmark_lens.models.entities import CulturalSite


def clear_app_db_caches() -> None:
    """
    Clear the app's config, DB and extractor caches. Call this in any fixture that
    sets DATABASE_URL (e.g. to a testcontainer URL) or LANDMARK_LENS_CONFIG so the app
    picks up the new settings instead of a previously cached connection or backend.
    """
    from landmark_lens.api.main import (
        _get_extractor,
        _get_favorite_repo,
        _get_history_repo,
        _get_session_factory,
        _get_site_repo,
    )
    from landmark_lens.core import config as config_module

    config_module.reset_config()
    _get_session_factory.cache_clear()
    _get_site_repo.cache_clear()
    _get_history_repo.cache_clear()
    _get_favorite_repo.cache_clear()
    _get_extractor.cache_clear()


def make_site(site_id: int | None = None, name: str = "Colosseum", city: str = "Rome", country: str = "Italy", **kwargs) -> CulturalSite:
    """Unsaved CulturalSite for pure-logic tests (id set by hand)."""
    return CulturalSite(id=site_id, name=name, location_city=city, location_country=country, **kwargs)


@pytest.fixture
def heuristic_config(tmp_path, monkeypatch):
    """Point LANDMARK_LENS_CONFIG at a YAML selecting the heuristic backend; restore caches after."""
    path = tmp_path / "landmark_lens.yml"
    path.write_text(
        "vision_backend: heuristic\n"
        "analysis_method: primary\n"
        "catalog_limit: 10\n"
        "log_level: debug\n"
    )
    monkeypatch.setenv("LANDMARK_LENS_CONFIG", str(path))
    clear_app_db_caches()
    yield path
    clear_app_db_caches()


@pytest.fixture(scope="module")
def postgres_container():
    """Module-scoped PostgreSQL 16 container (testcontainers).

    Module scope reduces container lifetime per test file, avoiding connection
    refused errors when a session-scoped container is torn down or becomes
    unreachable during long test runs.
    """
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@contextlib.contextmanager
def database_url(url: str) -> Iterator[str]:
    """Point DATABASE_URL at url for the duration, with app caches cleared on entry and exit."""
    prev = os.environ.get("DATABASE_URL")
    os.environ["DATABASE_URL"] = url
    clear_app_db_caches()
    try:
        yield url
    finally:
        if prev is None:
            os.environ.pop("DATABASE_URL", None)
        else:
            os.environ["DATABASE_URL"] = prev
        clear_app_db_caches()


@pytest.fixture(scope="module")
def engine(postgres_container):
    """Engine on the module container; DATABASE_URL follows it so the API and CLI share the database."""
    with database_url(postgres_container.get_connection_url()) as url:
        yield create_engine(url, pool_pre_ping=True)


@pytest.fixture(scope="module")
def _session_factory(engine):
    """Module-scoped session factory (used to create per-test sessions)."""
    return sessionmaker(engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def session(engine, _session_factory):
    """Function-scoped, clean SQLAlchemy session. Each test runs in a transaction that is rolled back."""
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()
