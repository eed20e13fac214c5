"""Recognition history: save a recognition for a user, list newest first."""

from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from landmark_lens.models.entities import CulturalSite, RecognitionRecord


class HistoryRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session_scope(self, write: bool = False) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            if write:
                session.commit()
        finally:
            session.close()

    def save_recognition(
        self,
        user_id: str,
        cultural_site_id: int,
        recognition_confidence: float,
        *,
        image_url: str | None = None,
        audio_duration: int | None = None,
        generated_script: str | None = None,
    ) -> RecognitionRecord:
        """Insert a history row. Raises ValueError if the site does not exist."""
        with self._session_scope(write=True) as session:
            if session.get(CulturalSite, cultural_site_id) is None:
                raise ValueError(f"Cultural site {cultural_site_id} does not exist.")
            record = RecognitionRecord(
                user_id=user_id,
                cultural_site_id=cultural_site_id,
                recognition_confidence=recognition_confidence,
                image_url=image_url,
                audio_duration=audio_duration,
                generated_script=generated_script,
            )
            session.add(record)
            session.flush()
            session.refresh(record)
            return record

    def list_for_user(self, user_id: str, limit: int = 50) -> list[tuple[RecognitionRecord, CulturalSite]]:
        """Return (record, site) pairs for the user, newest first."""
        with self._session_scope() as session:
            rows = session.execute(
                select(RecognitionRecord, CulturalSite)
                .join(CulturalSite, CulturalSite.id == RecognitionRecord.cultural_site_id)
                .where(RecognitionRecord.user_id == user_id)
                .order_by(RecognitionRecord.created_at.desc(), RecognitionRecord.id.desc())
                .limit(limit)
            ).all()
            return [(row[0], row[1]) for row in rows]
