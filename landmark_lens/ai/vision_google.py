"""Signal extractor backed by the Google Cloud Vision REST API (images:annotate).

One request asks for LANDMARK_DETECTION, LABEL_DETECTION and TEXT_DETECTION
together. The API key comes from GOOGLE_VISION_API_KEY; set
LANDMARK_LENS_VISION_ENDPOINT to point at a different host (e.g. a local stub).

Uses a persistent requests.Session with connection pooling so concurrent
recognition requests reuse TCP connections.
"""

import base64
import logging
import math
import os

import requests

from landmark_lens.ai.schema import (
    ImageAnnotations,
    LabelAnnotation,
    LandmarkAnnotation,
    ModelCard,
)
from landmark_lens.ai.vision_base import BaseSignalExtractor, ExtractionError

_log = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://vision.googleapis.com/v1"
ENDPOINT_ENV = "LANDMARK_LENS_VISION_ENDPOINT"
MAX_LANDMARK_RESULTS = 5
MAX_LABEL_RESULTS = 15


def _clamp_score(value: object) -> float | None:
    """Provider score clamped to [0, 1]; None when absent, non-numeric or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        score = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(score):
        return None
    return min(max(score, 0.0), 1.0)


def _dedupe(items: list[str]) -> list[str]:
    """Order-preserving deduplication of non-blank strings."""
    return list(dict.fromkeys(t.strip() for t in items if t and t.strip()))


def _described(items: object) -> list[dict]:
    """Entries of an annotation list that carry a description. A non-list value is malformed."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise TypeError(f"expected a list of annotations, got {type(items).__name__}")
    return [item for item in items if isinstance(item, dict) and item.get("description")]


def _map_entry(response: dict, source: str) -> ImageAnnotations:
    landmarks = [
        LandmarkAnnotation(name=str(item["description"]), confidence=_clamp_score(item.get("score")))
        for item in _described(response.get("landmarkAnnotations"))
    ]
    landmarks.sort(key=lambda lm: lm.confidence if lm.confidence is not None else -1.0, reverse=True)

    labels = [
        LabelAnnotation(keyword=str(item["description"]), score=_clamp_score(item.get("score")))
        for item in _described(response.get("labelAnnotations"))
    ]

    # textAnnotations[0] is the full text block; the rest are individual words.
    text_items = _described(response.get("textAnnotations"))
    words = [str(item["description"]) for item in text_items[1:]]
    if not words and text_items:
        words = str(text_items[0]["description"]).split()

    return ImageAnnotations(
        landmarks=landmarks,
        labels=labels,
        text_tokens=_dedupe(words),
        source=source,
    )


def parse_annotate_response(response: object, source: str = "google-vision") -> ImageAnnotations:
    """Map one entry of images:annotate ``responses`` to ImageAnnotations.

    Raises ExtractionError when the entry carries a per-image ``error`` or is malformed.
    """
    if not isinstance(response, dict):
        raise ExtractionError("Vision API returned a malformed body")
    error = response.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise ExtractionError(f"Vision API rejected the image: {message}")
    try:
        return _map_entry(response, source)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ExtractionError("Vision API returned a malformed body") from e


class GoogleVisionExtractor(BaseSignalExtractor):
    """Extractor that calls Cloud Vision images:annotate with landmark, label and text features."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout_seconds: float = 5.0,
        language_hint: str = "en",
        max_image_bytes: int = 10 * 1024 * 1024,
        endpoint: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Google Vision extractor requires an API key")
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._language_hint = language_hint
        self._max_image_bytes = max_image_bytes
        resolved = endpoint or os.environ.get(ENDPOINT_ENV, DEFAULT_ENDPOINT).strip() or DEFAULT_ENDPOINT
        self._endpoint = resolved.rstrip("/")
        if session is None:
            session = requests.Session()
            adapter = requests.adapters.HTTPAdapter(pool_connections=10, pool_maxsize=20)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self._session = session

    def get_model_card(self) -> ModelCard:
        return ModelCard(name="google-vision", version="v1")

    def _build_payload(self, image_bytes: bytes) -> dict:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [
                        {"type": "LANDMARK_DETECTION", "maxResults": MAX_LANDMARK_RESULTS},
                        {"type": "LABEL_DETECTION", "maxResults": MAX_LABEL_RESULTS},
                        {"type": "TEXT_DETECTION"},
                    ],
                    "imageContext": {"languageHints": [self._language_hint]},
                }
            ]
        }

    def _post(self, payload: dict) -> dict:
        """POST to images:annotate and return the parsed body. Network failures raise ExtractionError."""
        url = f"{self._endpoint}/images:annotate"
        try:
            resp = self._session.post(
                url,
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.Timeout as e:
            raise ExtractionError(f"Vision API timed out after {self._timeout}s") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise ExtractionError(f"Vision API returned HTTP {status}") from e
        except requests.RequestException as e:
            raise ExtractionError(f"Vision API unreachable ({type(e).__name__})") from e
        try:
            return resp.json()
        except ValueError as e:
            raise ExtractionError("Vision API returned a non-JSON body") from e

    def extract(self, image_bytes: bytes) -> ImageAnnotations:
        if not image_bytes:
            raise ExtractionError("Image is empty")
        if len(image_bytes) > self._max_image_bytes:
            raise ExtractionError(
                f"Image is {len(image_bytes)} bytes; the limit is {self._max_image_bytes}"
            )

        _log.debug("Vision API request: %s bytes", len(image_bytes))
        body = self._post(self._build_payload(image_bytes))
        responses = body.get("responses") if isinstance(body, dict) else None
        if responses is not None and not isinstance(responses, list):
            raise ExtractionError("Vision API returned a malformed body")
        if not responses:
            raise ExtractionError("Vision API returned no responses")

        annotations = parse_annotate_response(responses[0], source=self.get_model_card().name)
        _log.debug(
            "Vision API: %s landmarks, %s labels, %s text tokens",
            len(annotations.landmarks),
            len(annotations.labels),
            len(annotations.text_tokens),
        )
        return annotations
