"""Tests for SiteRepository against Postgres (testcontainers): catalog reads, add/remove rules."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from landmark_lens.models.entities import CulturalSite
from landmark_lens.repository.history_repo import HistoryRepository
from landmark_lens.repository.site_repo import CatalogUnavailable, SiteRepository

pytestmark = [pytest.mark.slow]


def _create_tables_and_site_repo(engine, session_factory) -> SiteRepository:
    SQLModel.metadata.create_all(engine)
    return SiteRepository(session_factory)


def _unique(request, prefix: str) -> str:
    return f"{prefix} {request.node.name[:40]}"


def test_add_site_populates_id_and_normalizes_keywords(engine, _session_factory, request):
    repo = _create_tables_and_site_repo(engine, _session_factory)
    name = _unique(request, "Colosseum")
    site = repo.add_site(
        CulturalSite(
            name=name,
            location_city="Rome",
            location_country="Italy",
            fun_facts=["Opened in 80 AD."],
            image_keywords=[" Amphitheater ", "", "ROMAN"],
        )
    )
    assert site.id is not None
    loaded = repo.get_by_id(site.id)
    assert loaded is not None
    assert loaded.name == name
    assert loaded.image_keywords == ["amphitheater", "roman"]
    assert loaded.fun_facts == ["Opened in 80 AD."]


def test_add_site_duplicate_name_case_insensitive_raises(engine, _session_factory, request):
    repo = _create_tables_and_site_repo(engine, _session_factory)
    name = _unique(request, "Big Ben")
    repo.add_site(CulturalSite(name=name))
    with pytest.raises(ValueError, match="already exists"):
        repo.add_site(CulturalSite(name=name.upper()))


def test_add_site_blank_name_raises(engine, _session_factory):
    repo = _create_tables_and_site_repo(engine, _session_factory)
    with pytest.raises(ValueError, match="non-empty"):
        repo.add_site(CulturalSite(name="  "))


def test_get_by_name_is_case_insensitive(engine, _session_factory, request):
    repo = _create_tables_and_site_repo(engine, _session_factory)
    name = _unique(request, "Sagrada Familia")
    repo.add_site(CulturalSite(name=name))
    found = repo.get_by_name(name.lower())
    assert found is not None
    assert found.name == name
    assert repo.get_by_name("no such site anywhere") is None


def test_list_sites_is_bounded_and_ordered_by_id(engine, _session_factory, request):
    repo = _create_tables_and_site_repo(engine, _session_factory)
    for i in range(3):
        repo.add_site(CulturalSite(name=_unique(request, f"Site {i}")))
    total = repo.count()
    assert total >= 3
    limited = repo.list_sites(limit=2)
    assert len(limited) == 2
    everything = repo.list_sites()
    assert len(everything) == total
    ids = [s.id for s in everything]
    assert ids == sorted(ids)


def test_delete_site_refused_while_history_references_it(engine, _session_factory, request):
    repo = _create_tables_and_site_repo(engine, _session_factory)
    site = repo.add_site(CulturalSite(name=_unique(request, "Notre-Dame")))
    HistoryRepository(_session_factory).save_recognition("u1", site.id, 0.7)
    with pytest.raises(ValueError, match="recognition history"):
        repo.delete_site(site.id)
    assert repo.get_by_id(site.id) is not None


def test_delete_site_removes_row(engine, _session_factory, request):
    repo = _create_tables_and_site_repo(engine, _session_factory)
    site = repo.add_site(CulturalSite(name=_unique(request, "Neuschwanstein")))
    assert repo.delete_site(site.id) is True
    assert repo.get_by_id(site.id) is None
    assert repo.delete_site(site.id) is False


@pytest.mark.fast
def test_list_sites_unreachable_database_raises_catalog_unavailable():
    """A DB that refuses connections surfaces as CatalogUnavailable, not an empty catalog."""
    engine = create_engine("postgresql+psycopg2://nobody@127.0.0.1:1/none", pool_pre_ping=False)
    repo = SiteRepository(sessionmaker(engine, expire_on_commit=False))
    with pytest.raises(CatalogUnavailable):
        repo.list_sites(limit=5)
