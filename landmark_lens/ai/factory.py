"""Factory for signal extractors. Imports are lazy so the HTTP client is only built when requested."""

from landmark_lens.ai.vision_base import BaseSignalExtractor
from landmark_lens.core.config import Settings, get_config, get_vision_api_key


def get_signal_extractor(
    extractor_name: str,
    *,
    method: str | None = None,
    settings: Settings | None = None,
) -> BaseSignalExtractor:
    """Return a signal extractor by name ('heuristic' or 'google').

    method selects the heuristic analysis variant and is ignored by 'google'.
    """
    cfg = settings or get_config()
    if extractor_name == "heuristic":
        from landmark_lens.ai.vision_heuristic import HeuristicSignalExtractor

        return HeuristicSignalExtractor(
            method=method or cfg.analysis_method,
            max_image_bytes=cfg.max_image_bytes,
        )
    if extractor_name == "google":
        from landmark_lens.ai.vision_google import GoogleVisionExtractor

        api_key = get_vision_api_key()
        if api_key is None:
            raise ValueError("vision_backend is 'google' but GOOGLE_VISION_API_KEY is not set")
        return GoogleVisionExtractor(
            api_key,
            timeout_seconds=cfg.vision_timeout_seconds,
            language_hint=cfg.vision_language_hint,
            max_image_bytes=cfg.max_image_bytes,
        )
    raise ValueError(f"Unknown signal extractor: {extractor_name}")
