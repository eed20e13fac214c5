"""Deterministic signal extractor derived from byte statistics (no network, no model).

The flags are a low-fidelity placeholder: file size and a checksum over the
first 1000 bytes are tested against fixed thresholds and moduli. Output depends
only on the input bytes, which keeps the matcher and orchestrator exercisable
offline and reproducible in tests.
"""

from landmark_lens.ai.schema import ImageAnnotations, ModelCard, StructuralFeatures
from landmark_lens.ai.vision_base import BaseSignalExtractor, ExtractionError

ANALYSIS_METHODS = ("primary", "secondary", "tertiary")
LARGE_FILE_BYTES = 500_000
CHECKSUM_PREFIX_BYTES = 1000
DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024

FLAG_NAMES = (
    "has_circular_structures",
    "has_vertical_structures",
    "has_gothic_features",
    "has_ancient_features",
    "has_modern_features",
)


def _size_flags(size: int) -> dict[str, bool]:
    return {
        "has_circular_structures": size > 300_000 and size % 7 == 0,
        "has_vertical_structures": size > 200_000 and size % 3 == 0,
        "has_gothic_features": size > 400_000 and size % 11 == 0,
        "has_ancient_features": size > 350_000 and size % 5 == 0,
        "has_modern_features": size < 400_000 and size % 2 == 0,
    }


def _checksum_flags(checksum: int) -> dict[str, bool]:
    return {
        "has_circular_structures": checksum % 13 == 0,
        "has_vertical_structures": checksum % 7 == 0,
        "has_gothic_features": checksum % 17 == 0,
        "has_ancient_features": checksum % 9 == 0,
        "has_modern_features": checksum % 4 == 0,
    }


def compute_structural_features(image_bytes: bytes, method: str = "primary") -> StructuralFeatures:
    """Return structural flags for image_bytes using the given analysis method."""
    if method not in ANALYSIS_METHODS:
        raise ValueError(f"Unknown analysis method: {method}")
    size = len(image_bytes)
    checksum = sum(image_bytes[:CHECKSUM_PREFIX_BYTES])

    if method == "primary":
        flags = _size_flags(size)
    elif method == "secondary":
        flags = _checksum_flags(checksum)
    else:
        by_size = _size_flags(size)
        by_sum = _checksum_flags(checksum)
        flags = {name: by_size[name] or by_sum[name] for name in FLAG_NAMES}

    return StructuralFeatures(
        **flags,
        file_size=size,
        is_large_file=size > LARGE_FILE_BYTES,
    )


class HeuristicSignalExtractor(BaseSignalExtractor):
    """Fallback extractor used when no vision service is configured."""

    def __init__(self, method: str = "primary", max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> None:
        if method not in ANALYSIS_METHODS:
            raise ValueError(f"Unknown analysis method: {method}")
        self.method = method
        self._max_image_bytes = max_image_bytes

    def get_model_card(self) -> ModelCard:
        return ModelCard(name=f"heuristic-{self.method}", version="1")

    def extract(self, image_bytes: bytes) -> ImageAnnotations:
        if not image_bytes:
            raise ExtractionError("Image is empty")
        if len(image_bytes) > self._max_image_bytes:
            raise ExtractionError(
                f"Image is {len(image_bytes)} bytes; the limit is {self._max_image_bytes}"
            )
        return ImageAnnotations(
            features=compute_structural_features(image_bytes, self.method),
            source=self.get_model_card().name,
        )
