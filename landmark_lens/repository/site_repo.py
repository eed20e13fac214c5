"""Cultural site catalog: bounded list for matching, lookup, admin add/remove."""

from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from landmark_lens.models.entities import CulturalSite


class CatalogUnavailable(Exception):
    """The site catalog could not be read."""


class SiteRepository:
    """
    Database access for the cultural site catalog.

    list_sites() is the only call the recognition path makes; it is bounded by
    limit because every listed site is scored per request.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session_scope(self, write: bool = False) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            if write:
                session.commit()
        finally:
            session.close()

    def list_sites(self, limit: int | None = None) -> list[CulturalSite]:
        """Return sites in id order, at most limit rows. Raises CatalogUnavailable on DB failure."""
        stmt = select(CulturalSite).order_by(CulturalSite.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            with self._session_scope() as session:
                return list(session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise CatalogUnavailable(f"Could not read site catalog: {e.__class__.__name__}") from e

    def count(self) -> int:
        with self._session_scope() as session:
            return int(session.execute(select(func.count()).select_from(CulturalSite)).scalar() or 0)

    def get_by_id(self, site_id: int) -> CulturalSite | None:
        """Return the site, or None if not found."""
        with self._session_scope() as session:
            return session.get(CulturalSite, site_id)

    def get_by_name(self, name: str) -> CulturalSite | None:
        """Case-insensitive exact name lookup."""
        with self._session_scope() as session:
            return session.execute(
                select(CulturalSite).where(func.lower(CulturalSite.name) == name.strip().lower())
            ).scalar_one_or_none()

    def add_site(self, site: CulturalSite) -> CulturalSite:
        """
        Insert a site; return it with id populated.
        Raises ValueError if a site with the same name (case-insensitive) exists.
        """
        if not site.name or not site.name.strip():
            raise ValueError("Site name must be non-empty")
        if self.get_by_name(site.name) is not None:
            raise ValueError(f"A site named '{site.name}' already exists.")
        site.image_keywords = [k.strip().lower() for k in site.image_keywords if k and k.strip()]
        with self._session_scope(write=True) as session:
            session.add(site)
            session.flush()
            session.refresh(site)
            return site

    def delete_site(self, site_id: int) -> bool:
        """
        Delete a site and its favorites. If any history row references it, raise ValueError.
        Return True if a row was deleted, False if none found.
        """
        with self._session_scope(write=True) as session:
            n = int(
                session.execute(
                    text("SELECT COUNT(*) FROM recognition_history WHERE cultural_site_id = :id"),
                    {"id": site_id},
                ).scalar()
                or 0
            )
            if n > 0:
                raise ValueError(
                    f"Cannot delete site {site_id}. It is referenced by {n} recognition history rows."
                )
            session.execute(
                text("DELETE FROM user_favorites WHERE cultural_site_id = :id"),
                {"id": site_id},
            )
            result = session.execute(
                text("DELETE FROM cultural_sites WHERE id = :id"),
                {"id": site_id},
            )
            return result.rowcount is not None and result.rowcount > 0
