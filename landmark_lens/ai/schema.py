"""Pydantic data contracts for signal extractors and image annotations."""

from pydantic import BaseModel, Field


class ModelCard(BaseModel):
    """Metadata identifying a signal extractor backend."""

    name: str
    version: str


class LandmarkAnnotation(BaseModel):
    """A named detection of a specific recognizable structure. confidence is None when the provider gave no usable score."""

    name: str
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class LabelAnnotation(BaseModel):
    """Generic visual concept. score is the provider's own score when it reports one."""

    keyword: str
    score: float | None = Field(default=None, ge=0.0, le=1.0)


class StructuralFeatures(BaseModel):
    """Boolean structural-feature flags derived from raw image bytes."""

    has_circular_structures: bool = False
    has_vertical_structures: bool = False
    has_gothic_features: bool = False
    has_ancient_features: bool = False
    has_modern_features: bool = False
    file_size: int = 0
    is_large_file: bool = False

    def flag(self, name: str) -> bool:
        return bool(getattr(self, name))


class ImageAnnotations(BaseModel):
    """
    Visual signals extracted from one image.

    landmarks are ordered by descending confidence; an empty list means no
    landmark-level detection. features is set only by the heuristic extractor.
    """

    landmarks: list[LandmarkAnnotation] = Field(default_factory=list)
    labels: list[LabelAnnotation] = Field(default_factory=list)
    text_tokens: list[str] = Field(default_factory=list)
    features: StructuralFeatures | None = None
    source: str = "unknown"

    def keywords(self) -> list[str]:
        """Landmark names, label keywords and text tokens, lower-cased, blanks dropped."""
        raw = (
            [lm.name for lm in self.landmarks]
            + [lb.keyword for lb in self.labels]
            + list(self.text_tokens)
        )
        return [k.strip().lower() for k in raw if k and k.strip()]

    def top_landmark(self) -> LandmarkAnnotation | None:
        return self.landmarks[0] if self.landmarks else None

    def top_label(self) -> LabelAnnotation | None:
        """Highest-scoring label; first label when no scores are reported."""
        if not self.labels:
            return None
        return max(self.labels, key=lambda lb: lb.score if lb.score is not None else -1.0)
