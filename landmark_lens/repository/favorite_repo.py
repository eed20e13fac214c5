"""User favorites: add (no duplicates), remove, list."""

from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from landmark_lens.models.entities import CulturalSite, UserFavorite


class FavoriteRepository:
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

    def add_favorite(self, user_id: str, cultural_site_id: int) -> None:
        """Raises ValueError if the site is missing or already a favorite."""
        with self._session_scope(write=True) as session:
            if session.get(CulturalSite, cultural_site_id) is None:
                raise ValueError(f"Cultural site {cultural_site_id} does not exist.")
            if session.get(UserFavorite, (user_id, cultural_site_id)) is not None:
                raise ValueError("Site already in favorites")
            session.add(UserFavorite(user_id=user_id, cultural_site_id=cultural_site_id))

    def remove_favorite(self, user_id: str, cultural_site_id: int) -> bool:
        """Return True if a favorite was removed."""
        with self._session_scope(write=True) as session:
            result = session.execute(
                delete(UserFavorite).where(
                    UserFavorite.user_id == user_id,
                    UserFavorite.cultural_site_id == cultural_site_id,
                )
            )
            return result.rowcount is not None and result.rowcount > 0

    def list_favorites(self, user_id: str) -> list[CulturalSite]:
        """Return favorited sites for the user, most recently added first."""
        with self._session_scope() as session:
            result = session.execute(
                select(CulturalSite)
                .join(UserFavorite, UserFavorite.cultural_site_id == CulturalSite.id)
                .where(UserFavorite.user_id == user_id)
                .order_by(UserFavorite.created_at.desc())
            )
            return list(result.scalars().all())
