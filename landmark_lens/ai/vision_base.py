"""Abstract base for visual signal extractors and the extraction error."""

from abc import ABC, abstractmethod

from landmark_lens.ai.schema import ImageAnnotations, ModelCard


class ExtractionError(Exception):
    """The visual-signal source failed (unreachable, rejected payload, timeout, corrupt input).

    Distinct from a successful extraction that found no landmarks.
    """


class BaseSignalExtractor(ABC):
    """Abstract base for turning image bytes into ImageAnnotations."""

    @abstractmethod
    def get_model_card(self) -> ModelCard:
        """Return extractor identity (name, version)."""
        ...

    @abstractmethod
    def extract(self, image_bytes: bytes) -> ImageAnnotations:
        """Extract landmarks, labels and text tokens from raw image bytes.

        Raises ExtractionError when the source fails.
        """
        ...
