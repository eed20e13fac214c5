"""Pydantic contracts for recognition output (serialized directly as the API response)."""

from typing import Literal

from pydantic import BaseModel, Field

from landmark_lens.ai.schema import ImageAnnotations
from landmark_lens.models.entities import CulturalSite


class SiteOut(BaseModel):
    """Site fields consumed by the client and by narration generation."""

    id: int
    name: str
    location_city: str = ""
    location_country: str = ""
    location: str = ""
    site_type: str = ""
    description: str = ""
    historical_context: str = ""
    cultural_significance: str = ""
    construction_date: str = ""
    architect_artist: str = ""
    fun_facts: list[str] = Field(default_factory=list)
    visitor_tips: str = ""
    image_keywords: list[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, site: CulturalSite) -> "SiteOut":
        location = ", ".join(p for p in (site.location_city, site.location_country) if p)
        return cls(
            id=site.id or 0,
            name=site.name,
            location_city=site.location_city or "",
            location_country=site.location_country or "",
            location=location,
            site_type=site.site_type or "",
            description=site.description or "",
            historical_context=site.historical_context or "",
            cultural_significance=site.cultural_significance or "",
            construction_date=site.construction_date or "",
            architect_artist=site.architect_artist or "",
            fun_facts=list(site.fun_facts or []),
            visitor_tips=site.visitor_tips or "",
            image_keywords=list(site.image_keywords or []),
        )


class SiteScore(BaseModel):
    site_id: int | None
    name: str
    score: int


class PatternScore(BaseModel):
    """How one reference pattern scored against the extracted structural flags."""

    name: str
    score: int
    matched_characteristics: int
    total_characteristics: int
    characteristic_match: float
    final_confidence: float


class RecognitionDiagnostics(BaseModel):
    """Observability only; callers must not depend on it for correctness."""

    extractor: str | None = None
    strategy: Literal["keyword", "structural"] | None = None
    annotations: ImageAnnotations | None = None
    candidates: list[SiteScore] = Field(default_factory=list)
    pattern: PatternScore | None = None
    catalog_size: int = 0
    error: Literal["extraction_failed", "catalog_unavailable"] | None = None
    detail: str | None = None


class MatchResult(BaseModel):
    """Outcome of one recognition: Matched (site set, confidence > 0) or Unmatched (site None)."""

    success: bool
    site: SiteOut | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    message: str = Field(min_length=1)
    diagnostics: RecognitionDiagnostics = Field(default_factory=RecognitionDiagnostics)
