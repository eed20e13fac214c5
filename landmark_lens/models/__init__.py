"""SQLModel table/entity definitions. Used by Repository layer only."""

from landmark_lens.models.entities import CulturalSite, RecognitionRecord, UserFavorite

__all__ = [
    "CulturalSite",
    "RecognitionRecord",
    "UserFavorite",
]
