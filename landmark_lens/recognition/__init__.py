"""Recognition pipeline: matcher, reference patterns and the orchestrating service."""

from landmark_lens.recognition.matcher import SiteMatch, SiteMatcher
from landmark_lens.recognition.schema import MatchResult, RecognitionDiagnostics, SiteOut
from landmark_lens.recognition.service import RecognitionService

__all__ = [
    "MatchResult",
    "RecognitionDiagnostics",
    "RecognitionService",
    "SiteMatch",
    "SiteMatcher",
    "SiteOut",
]
