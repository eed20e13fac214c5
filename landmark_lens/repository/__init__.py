"""Repository layer: database access only. No ORM calls in business logic."""

from landmark_lens.repository.favorite_repo import FavoriteRepository
from landmark_lens.repository.history_repo import HistoryRepository
from landmark_lens.repository.site_repo import CatalogUnavailable, SiteRepository

__all__ = [
    "CatalogUnavailable",
    "FavoriteRepository",
    "HistoryRepository",
    "SiteRepository",
]
