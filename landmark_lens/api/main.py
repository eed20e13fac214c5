"""HTTP API: landmark recognition, site catalog, narration, audio, history, favorites, feedback."""

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Callable, Literal

from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, Request, Response, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session, sessionmaker

from landmark_lens.ai.factory import get_signal_extractor
from landmark_lens.ai.vision_base import BaseSignalExtractor
from landmark_lens.core.config import get_config
from landmark_lens.core.io_utils import decode_data_url, encode_data_url
from landmark_lens.core.logging import setup_logging
from landmark_lens.models.entities import CulturalSite
from landmark_lens.narration.audio import BaseSpeechSynthesizer, SilentSpeechSynthesizer
from landmark_lens.narration.script import generate_script
from landmark_lens.recognition.matcher import SiteMatcher
from landmark_lens.recognition.schema import MatchResult, SiteOut
from landmark_lens.recognition.service import RecognitionService
from landmark_lens.repository.favorite_repo import FavoriteRepository
from landmark_lens.repository.history_repo import HistoryRepository
from landmark_lens.repository.site_repo import CatalogUnavailable, SiteRepository

_log = logging.getLogger(__name__)

AnalysisMethod = Literal["primary", "secondary", "tertiary"]


@lru_cache(maxsize=1)
def _get_session_factory() -> Callable[[], Session]:
    from sqlalchemy import create_engine

    cfg = get_config()
    engine = create_engine(cfg.database_url, pool_pre_ping=True)
    return sessionmaker(engine, autocommit=False, autoflush=False, expire_on_commit=False)


@lru_cache(maxsize=1)
def _get_site_repo() -> SiteRepository:
    return SiteRepository(_get_session_factory())


@lru_cache(maxsize=1)
def _get_history_repo() -> HistoryRepository:
    return HistoryRepository(_get_session_factory())


@lru_cache(maxsize=1)
def _get_favorite_repo() -> FavoriteRepository:
    return FavoriteRepository(_get_session_factory())


@lru_cache(maxsize=1)
def _get_matcher() -> SiteMatcher:
    return SiteMatcher()


@lru_cache(maxsize=1)
def _get_synthesizer() -> BaseSpeechSynthesizer:
    return SilentSpeechSynthesizer()


@lru_cache(maxsize=8)
def _get_extractor(method: str | None = None) -> BaseSignalExtractor:
    """Extractor for the configured backend; method only varies the heuristic variant."""
    cfg = get_config()
    return get_signal_extractor(cfg.vision_backend, method=method, settings=cfg)


def _get_recognition_service(
    method: str | None,
    site_repo: SiteRepository,
    matcher: SiteMatcher,
) -> RecognitionService:
    cfg = get_config()
    try:
        extractor = _get_extractor(method)
    except ValueError as e:
        _log.error("Signal extractor misconfigured: %s", e)
        raise HTTPException(status_code=503, detail=str(e))
    return RecognitionService(extractor, site_repo, matcher, catalog_limit=cfg.catalog_limit)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    setup_logging()
    yield


app = FastAPI(title="Landmark Lens", lifespan=_lifespan)


@app.exception_handler(CatalogUnavailable)
async def _catalog_unavailable_handler(request: Request, exc: CatalogUnavailable) -> JSONResponse:
    _log.warning("Catalog unavailable on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Site catalog is unavailable"})


# --- Recognition ---


class DataUrlRecognizeIn(BaseModel):
    image: str = Field(..., description="data:image/...;base64,... or bare base64")
    analysis_method: AnalysisMethod | None = None


@app.post("/api/recognize", response_model=MatchResult)
def api_recognize(
    image: UploadFile = File(..., description="Photo of the landmark"),
    analysis_method: AnalysisMethod | None = Form(default=None),
    site_repo: SiteRepository = Depends(_get_site_repo),
    matcher: SiteMatcher = Depends(_get_matcher),
) -> MatchResult:
    """Recognize a landmark from a multipart upload."""
    image_bytes = image.file.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="No image provided")
    service = _get_recognition_service(analysis_method, site_repo, matcher)
    return service.recognize(image_bytes)


@app.post("/api/recognize/data-url", response_model=MatchResult)
def api_recognize_data_url(
    body: DataUrlRecognizeIn,
    site_repo: SiteRepository = Depends(_get_site_repo),
    matcher: SiteMatcher = Depends(_get_matcher),
) -> MatchResult:
    """Recognize a landmark from a base64 data URL in a JSON body."""
    try:
        image_bytes = decode_data_url(body.image)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    service = _get_recognition_service(body.analysis_method, site_repo, matcher)
    return service.recognize(image_bytes)


# --- Site catalog (admin) ---


class SiteCreateIn(BaseModel):
    name: str
    location_city: str = ""
    location_country: str = ""
    site_type: str = ""
    description: str = ""
    historical_context: str = ""
    cultural_significance: str = ""
    construction_date: str = ""
    architect_artist: str = ""
    fun_facts: list[str] = []
    visitor_tips: str = ""
    image_keywords: list[str] = []


@app.get("/api/sites", response_model=list[SiteOut])
def api_sites(
    limit: int = Query(default=50, ge=1, le=500),
    site_repo: SiteRepository = Depends(_get_site_repo),
) -> list[SiteOut]:
    return [SiteOut.from_entity(s) for s in site_repo.list_sites(limit=limit)]


@app.post("/api/sites", response_model=SiteOut, status_code=201)
def api_create_site(
    body: SiteCreateIn,
    site_repo: SiteRepository = Depends(_get_site_repo),
) -> SiteOut:
    """Add a cultural site to the catalog."""
    if not body.name or not body.name.strip():
        raise HTTPException(status_code=400, detail="Site name must be non-empty")
    try:
        site = site_repo.add_site(CulturalSite(**body.model_dump() | {"name": body.name.strip()}))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SiteOut.from_entity(site)


@app.delete("/api/sites/{site_id}", status_code=204)
def api_delete_site(
    site_id: int,
    site_repo: SiteRepository = Depends(_get_site_repo),
) -> Response:
    try:
        deleted = site_repo.delete_site(site_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Site not found")
    return Response(status_code=204)


# --- Narration and audio ---


class ContentIn(BaseModel):
    site_id: int
    language: Literal["english", "spanish"] = "english"
    duration: Literal[1, 3, 5] = 3


class ContentOut(BaseModel):
    success: bool
    script: str


class AudioIn(BaseModel):
    script: str = ""
    site_id: int | None = None
    voice: str = "en-US-Standard-A"
    language: Literal["english", "spanish"] = "english"


class AudioOut(BaseModel):
    success: bool
    audio_url: str
    duration: int


@app.post("/api/content", response_model=ContentOut)
def api_generate_content(
    body: ContentIn,
    site_repo: SiteRepository = Depends(_get_site_repo),
) -> ContentOut:
    """Generate a narration script for a catalog site."""
    site = site_repo.get_by_id(body.site_id)
    if site is None:
        raise HTTPException(status_code=404, detail="Site not found")
    script = generate_script(SiteOut.from_entity(site), language=body.language, duration=body.duration)
    return ContentOut(success=True, script=script)


@app.post("/api/audio", response_model=AudioOut)
def api_generate_audio(
    body: AudioIn,
    synthesizer: BaseSpeechSynthesizer = Depends(_get_synthesizer),
) -> AudioOut:
    """Synthesize playable audio for a script; returned inline as a data URL."""
    if not body.script.strip():
        raise HTTPException(status_code=400, detail="Script is required")
    audio = synthesizer.synthesize(body.script, voice=body.voice, language=body.language)
    return AudioOut(
        success=True,
        audio_url=encode_data_url(audio.audio_bytes, audio.media_type),
        duration=audio.duration_seconds,
    )


# --- History and favorites ---


class HistoryIn(BaseModel):
    user_id: str = Field(min_length=1)
    cultural_site_id: int
    recognition_confidence: float = Field(ge=0.0, le=1.0)
    image_url: str | None = None
    audio_duration: int | None = None
    generated_script: str | None = None


class HistoryOut(BaseModel):
    id: int
    site: SiteOut
    recognition_confidence: float
    image_url: str | None = None
    audio_duration: int | None = None
    created_at: str


class FavoriteIn(BaseModel):
    user_id: str = Field(min_length=1)
    cultural_site_id: int


@app.post("/api/history", status_code=201)
def api_save_recognition(
    body: HistoryIn,
    history_repo: HistoryRepository = Depends(_get_history_repo),
) -> dict:
    try:
        record = history_repo.save_recognition(
            body.user_id,
            body.cultural_site_id,
            body.recognition_confidence,
            image_url=body.image_url,
            audio_duration=body.audio_duration,
            generated_script=body.generated_script,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "id": record.id}


@app.get("/api/history", response_model=list[HistoryOut])
def api_history(
    user_id: str = Query(..., min_length=1),
    limit: int = Query(default=50, ge=1, le=200),
    history_repo: HistoryRepository = Depends(_get_history_repo),
) -> list[HistoryOut]:
    return [
        HistoryOut(
            id=record.id or 0,
            site=SiteOut.from_entity(site),
            recognition_confidence=record.recognition_confidence,
            image_url=record.image_url,
            audio_duration=record.audio_duration,
            created_at=record.created_at.isoformat(),
        )
        for record, site in history_repo.list_for_user(user_id, limit=limit)
    ]


@app.post("/api/favorites", status_code=201)
def api_add_favorite(
    body: FavoriteIn,
    favorite_repo: FavoriteRepository = Depends(_get_favorite_repo),
) -> dict:
    try:
        favorite_repo.add_favorite(body.user_id, body.cultural_site_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True}


@app.delete("/api/favorites/{site_id}", status_code=204)
def api_remove_favorite(
    site_id: int,
    user_id: str = Query(..., min_length=1),
    favorite_repo: FavoriteRepository = Depends(_get_favorite_repo),
) -> Response:
    if not favorite_repo.remove_favorite(user_id, site_id):
        raise HTTPException(status_code=404, detail="Favorite not found")
    return Response(status_code=204)


@app.get("/api/favorites", response_model=list[SiteOut])
def api_favorites(
    user_id: str = Query(..., min_length=1),
    favorite_repo: FavoriteRepository = Depends(_get_favorite_repo),
) -> list[SiteOut]:
    return [SiteOut.from_entity(s) for s in favorite_repo.list_favorites(user_id)]


# --- Feedback and health ---


class FeedbackIn(BaseModel):
    is_correct: bool
    site_id: int | None = None
    recognized_site_id: int | None = None
    confidence: float | None = None


@app.post("/api/feedback")
def api_feedback(body: FeedbackIn) -> dict:
    """Record whether a recognition was correct. Logged only."""
    _log.info(
        "Recognition feedback: correct=%s site=%s recognized=%s confidence=%s",
        body.is_correct,
        body.site_id,
        body.recognized_site_id,
        body.confidence,
    )
    message = (
        "Thank you for confirming!"
        if body.is_correct
        else "Thanks for the feedback, we'll improve our recognition!"
    )
    return {"success": True, "message": message}


@app.get("/api/health")
def api_health(site_repo: SiteRepository = Depends(_get_site_repo)) -> dict:
    """Report the configured extractor and whether the catalog can be read."""
    cfg = get_config()
    checks: dict = {"vision_backend": cfg.vision_backend}
    try:
        checks["extractor"] = _get_extractor(None).get_model_card().name
    except ValueError as e:
        checks["extractor"] = None
        checks["extractor_error"] = str(e)
    try:
        checks["catalog_size"] = len(site_repo.list_sites(limit=cfg.catalog_limit))
        checks["catalog_reachable"] = True
    except CatalogUnavailable:
        checks["catalog_reachable"] = False
    checks["all_ok"] = checks["catalog_reachable"] and checks["extractor"] is not None
    return checks
