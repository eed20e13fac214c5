"""AI module: annotation contracts and the signal extractor abstraction."""

from landmark_lens.ai.schema import (
    ImageAnnotations,
    LabelAnnotation,
    LandmarkAnnotation,
    ModelCard,
    StructuralFeatures,
)
from landmark_lens.ai.vision_base import BaseSignalExtractor, ExtractionError
from landmark_lens.ai.factory import get_signal_extractor

__all__ = [
    "BaseSignalExtractor",
    "ExtractionError",
    "ImageAnnotations",
    "LabelAnnotation",
    "LandmarkAnnotation",
    "ModelCard",
    "StructuralFeatures",
    "get_signal_extractor",
]
