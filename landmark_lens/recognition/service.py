"""Recognition orchestrator: image bytes -> annotations -> catalog match -> MatchResult."""

import logging
from typing import Protocol, Sequence

from landmark_lens.ai.schema import ImageAnnotations
from landmark_lens.ai.vision_base import BaseSignalExtractor, ExtractionError
from landmark_lens.models.entities import CulturalSite
from landmark_lens.recognition.matcher import SiteMatch, SiteMatcher
from landmark_lens.recognition.schema import MatchResult, RecognitionDiagnostics, SiteOut
from landmark_lens.repository.site_repo import CatalogUnavailable

_log = logging.getLogger(__name__)

DEFAULT_LANDMARK_CONFIDENCE = 0.5
DEFAULT_CATALOG_LIMIT = 10

MSG_EXTRACTION_FAILED = "Could not analyze the image ({detail}). Please try again with another photo."
MSG_CATALOG_UNAVAILABLE = "The site catalog is unavailable right now. Please try again shortly."
MSG_NO_LANDMARK = "No landmark detected in the image. Try a different angle or a more famous landmark."
MSG_TOP_LABEL = (
    "No matching cultural site found. The image looks like '{label}'{score}. "
    "Try a different angle or a more famous landmark."
)
MSG_NO_CATALOG_MATCH = "No matching cultural site found. Try a different angle or a more famous landmark."
MSG_MATCHED = "Recognized {name} ({percent}% confidence)."


class SiteCatalog(Protocol):
    def list_sites(self, limit: int | None = None) -> list[CulturalSite]: ...


def combined_confidence(annotations: ImageAnnotations, match: SiteMatch) -> float:
    """Mean of a landmark term and the match strength, clamped to [0, 1].

    The landmark term is the top landmark's confidence when the provider scored it,
    else the matched pattern's final_confidence on the structural path, else 0.5.
    """
    top = annotations.top_landmark()
    if top is not None and top.confidence is not None:
        landmark_conf = top.confidence
    elif match.pattern is not None:
        landmark_conf = match.pattern.final_confidence
    else:
        landmark_conf = DEFAULT_LANDMARK_CONFIDENCE
    return min(max((landmark_conf + match.strength) / 2, 0.0), 1.0)


def unmatched_message(annotations: ImageAnnotations) -> str:
    """Explain why nothing matched: no signal at all, a top label, or no catalog entry."""
    if annotations.features is None and not annotations.keywords():
        return MSG_NO_LANDMARK
    label = annotations.top_label()
    if annotations.features is None and not annotations.landmarks and label is not None:
        score = f" ({round(label.score * 100)}% confidence)" if label.score is not None else ""
        return MSG_TOP_LABEL.format(label=label.keyword, score=score)
    return MSG_NO_CATALOG_MATCH


class RecognitionService:
    """
    Public entry point for landmark recognition.

    Stateless per call: every recognize() reads the catalog afresh and builds a
    new MatchResult. Extraction and catalog failures come back as failed results,
    never as exceptions.
    """

    def __init__(
        self,
        extractor: BaseSignalExtractor,
        catalog: SiteCatalog,
        matcher: SiteMatcher | None = None,
        *,
        catalog_limit: int = DEFAULT_CATALOG_LIMIT,
    ) -> None:
        self._extractor = extractor
        self._catalog = catalog
        self._matcher = matcher or SiteMatcher()
        self._catalog_limit = catalog_limit

    @property
    def extractor_name(self) -> str:
        return self._extractor.get_model_card().name

    def _failed(self, message: str, diagnostics: RecognitionDiagnostics) -> MatchResult:
        return MatchResult(success=False, site=None, confidence=0.0, message=message, diagnostics=diagnostics)

    def recognize(self, image_bytes: bytes) -> MatchResult:
        diagnostics = RecognitionDiagnostics(extractor=self.extractor_name)

        try:
            annotations = self._extractor.extract(image_bytes)
        except ExtractionError as e:
            _log.warning("Extraction failed (%s): %s", self.extractor_name, e)
            diagnostics.error = "extraction_failed"
            diagnostics.detail = str(e)
            return self._failed(MSG_EXTRACTION_FAILED.format(detail=e), diagnostics)
        diagnostics.annotations = annotations

        try:
            catalog: Sequence[CulturalSite] = self._catalog.list_sites(limit=self._catalog_limit)
        except CatalogUnavailable as e:
            _log.warning("Catalog unavailable: %s", e)
            diagnostics.error = "catalog_unavailable"
            diagnostics.detail = str(e)
            return self._failed(MSG_CATALOG_UNAVAILABLE, diagnostics)
        diagnostics.catalog_size = len(catalog)

        match = self._matcher.match(annotations, catalog)
        if match is None:
            if annotations.features is not None:
                diagnostics.strategy = "structural"
                best = self._matcher.best_pattern(annotations.features)
                diagnostics.pattern = best[1] if best is not None else None
            else:
                diagnostics.strategy = "keyword"
            _log.info("No match (%s, catalog=%s)", self.extractor_name, len(catalog))
            return self._failed(unmatched_message(annotations), diagnostics)

        diagnostics.strategy = match.strategy
        diagnostics.candidates = match.candidates
        diagnostics.pattern = match.pattern
        confidence = combined_confidence(annotations, match)
        _log.info(
            "Matched site %s '%s' score=%s confidence=%.3f (%s)",
            match.site.id,
            match.site.name,
            match.score,
            confidence,
            match.strategy,
        )
        return MatchResult(
            success=True,
            site=SiteOut.from_entity(match.site),
            confidence=confidence,
            message=MSG_MATCHED.format(name=match.site.name, percent=round(confidence * 100)),
            diagnostics=diagnostics,
        )
