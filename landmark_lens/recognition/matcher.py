"""Site matcher: rank catalog sites against extracted signals.

Two scoring strategies share one entry point:

- keyword overlap, for annotations from a real vision service (landmark names,
  labels and OCR tokens compared with site name, location and curated keywords);
- structural flags, for annotations from the heuristic extractor (flags compared
  with a fixed table of reference patterns, the winning pattern then resolved
  against the catalog by keyword overlap).

A missing or weak match is a normal outcome (None); the matcher never raises for it.
"""

from dataclasses import dataclass, field
from typing import Iterable, Literal, Sequence

from landmark_lens.ai.schema import ImageAnnotations, StructuralFeatures
from landmark_lens.models.entities import CulturalSite
from landmark_lens.recognition.patterns import REFERENCE_PATTERNS, ReferencePattern
from landmark_lens.recognition.schema import PatternScore, SiteScore

NAME_MATCH_POINTS = 10
LOCATION_MATCH_POINTS = 5
KEYWORD_PAIR_POINTS = 1
# Keyword score that maps to full match strength.
FULL_STRENGTH_SCORE = 10
MAX_STRUCTURAL_CONFIDENCE = 0.98
LARGE_FILE_ANCIENT_BONUS = 1


@dataclass
class SiteMatch:
    """Winning site with its raw score and normalized strength in [0, 1]."""

    site: CulturalSite
    score: int
    strength: float
    strategy: Literal["keyword", "structural"]
    candidates: list[SiteScore] = field(default_factory=list)
    pattern: PatternScore | None = None


def _contains_either(a: str, b: str) -> bool:
    return a in b or b in a


def _clean(values: Iterable[str | None]) -> list[str]:
    return [v.strip().lower() for v in values if v and v.strip()]


def score_site(keywords: Sequence[str], site: CulturalSite) -> int:
    """Keyword-overlap score for one site. keywords must already be lower-cased and non-blank."""
    name = (site.name or "").strip().lower()
    locations = _clean([site.location_city, site.location_country])
    site_keywords = _clean([site.name, *(site.image_keywords or []), site.location_city, site.location_country])

    score = 0
    if name and any(_contains_either(kw, name) for kw in keywords):
        score += NAME_MATCH_POINTS
    if any(_contains_either(kw, loc) for kw in keywords for loc in locations):
        score += LOCATION_MATCH_POINTS
    for kw in keywords:
        for site_kw in site_keywords:
            if _contains_either(kw, site_kw):
                score += KEYWORD_PAIR_POINTS
    return score


def score_pattern(features: StructuralFeatures, pattern: ReferencePattern) -> PatternScore:
    """Compare extracted flags with one reference pattern's signature."""
    matched = 0
    score = 0
    total = len(pattern.signature)
    for flag, expected in pattern.signature.items():
        if features.flag(flag) == expected:
            matched += 1
            score += 2 if expected else 1
    if features.is_large_file and pattern.signature.get("has_ancient_features"):
        score += LARGE_FILE_ANCIENT_BONUS
    characteristic_match = matched / total if total else 0.0
    return PatternScore(
        name=pattern.name,
        score=score,
        matched_characteristics=matched,
        total_characteristics=total,
        characteristic_match=characteristic_match,
        final_confidence=min(pattern.prior_confidence * characteristic_match, MAX_STRUCTURAL_CONFIDENCE),
    )


class SiteMatcher:
    """Scores a catalog against ImageAnnotations. Stateless apart from its pattern table."""

    def __init__(self, patterns: Sequence[ReferencePattern] = REFERENCE_PATTERNS) -> None:
        self._patterns = tuple(patterns)

    def rank_sites(self, keywords: Sequence[str], catalog: Sequence[CulturalSite]) -> list[SiteScore]:
        """Per-site keyword scores in catalog order."""
        cleaned = _clean(keywords)
        return [SiteScore(site_id=site.id, name=site.name, score=score_site(cleaned, site)) for site in catalog]

    def rank_patterns(self, features: StructuralFeatures) -> list[ReferencePattern]:
        """Patterns sorted by score descending; ties keep table order."""
        scored = [(score_pattern(features, p).score, p) for p in self._patterns]
        return [p for _, p in sorted(scored, key=lambda item: item[0], reverse=True)]

    def best_pattern(self, features: StructuralFeatures) -> tuple[ReferencePattern, PatternScore] | None:
        if not self._patterns:
            return None
        top = self.rank_patterns(features)[0]
        return top, score_pattern(features, top)

    def _best_site(
        self, keywords: Sequence[str], catalog: Sequence[CulturalSite]
    ) -> tuple[CulturalSite, int, list[SiteScore]] | None:
        candidates = self.rank_sites(keywords, catalog)
        best_index, best_score = -1, 0
        for i, cand in enumerate(candidates):
            if cand.score > best_score:
                best_index, best_score = i, cand.score
        if best_index < 0:
            return None
        return catalog[best_index], best_score, candidates

    def match_keywords(self, keywords: Sequence[str], catalog: Sequence[CulturalSite]) -> SiteMatch | None:
        if not catalog or not _clean(keywords):
            return None
        best = self._best_site(keywords, catalog)
        if best is None:
            return None
        site, score, candidates = best
        return SiteMatch(
            site=site,
            score=score,
            strength=min(score / FULL_STRENGTH_SCORE, 1.0),
            strategy="keyword",
            candidates=candidates,
        )

    def match_structural(self, features: StructuralFeatures, catalog: Sequence[CulturalSite]) -> SiteMatch | None:
        if not catalog:
            return None
        chosen = self.best_pattern(features)
        if chosen is None:
            return None
        pattern, pattern_score = chosen
        if pattern_score.characteristic_match <= 0:
            return None
        best = self._best_site(pattern.match_terms(), catalog)
        if best is None:
            return None
        site, score, candidates = best
        return SiteMatch(
            site=site,
            score=score,
            strength=pattern_score.final_confidence,
            strategy="structural",
            candidates=candidates,
            pattern=pattern_score,
        )

    def match(self, annotations: ImageAnnotations, catalog: Sequence[CulturalSite]) -> SiteMatch | None:
        """Return the best-matching site, or None when nothing matches."""
        if annotations.features is not None:
            return self.match_structural(annotations.features, catalog)
        return self.match_keywords(annotations.keywords(), catalog)
