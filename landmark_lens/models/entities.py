"""SQLModel table/entity definitions for landmark-lens. Postgres 16+ only (JSONB)."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Tables (FK order: CulturalSite -> RecognitionRecord, UserFavorite). Timestamps are UTC, TIMESTAMPTZ. ---


class CulturalSite(SQLModel, table=True):
    """A catalog entry the recognizer can match against. Read-only to the recognition core."""

    __tablename__ = "cultural_sites"
    __table_args__ = (Index("ix_cultural_sites_name", "name", unique=True),)

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    description: str = ""
    historical_context: str = ""
    cultural_significance: str = ""
    location_city: str = ""
    location_country: str = ""
    site_type: str = ""
    construction_date: str = ""
    architect_artist: str = ""
    fun_facts: list[str] = Field(default_factory=list, sa_column=Column(JSONB, nullable=False, server_default="[]"))
    visitor_tips: str = ""
    # Curated, lower-case terms that help keyword matching (e.g. "amphitheater").
    image_keywords: list[str] = Field(
        default_factory=list, sa_column=Column(JSONB, nullable=False, server_default="[]")
    )
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))


class RecognitionRecord(SQLModel, table=True):
    """One saved recognition in a visitor's history."""

    __tablename__ = "recognition_history"
    __table_args__ = (Index("ix_recognition_history_user_created", "user_id", "created_at"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False)
    cultural_site_id: int = Field(foreign_key="cultural_sites.id")
    image_url: Optional[str] = Field(default=None)
    recognition_confidence: float = 0.0
    audio_duration: Optional[int] = Field(default=None)
    generated_script: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))


class UserFavorite(SQLModel, table=True):
    __tablename__ = "user_favorites"

    user_id: str = Field(primary_key=True)
    cultural_site_id: int = Field(foreign_key="cultural_sites.id", primary_key=True)
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))
