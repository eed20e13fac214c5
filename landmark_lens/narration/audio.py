"""Speech synthesis boundary and the offline stub used when no TTS provider is configured."""

import io
import math
import wave
from abc import ABC, abstractmethod

from pydantic import BaseModel

WORDS_PER_MINUTE = 150
STUB_SAMPLE_RATE = 8000


class SynthesizedAudio(BaseModel):
    audio_bytes: bytes
    duration_seconds: int
    media_type: str = "audio/wav"


def estimate_duration_seconds(script: str) -> int:
    """Spoken duration at 150 words per minute, rounded up to whole seconds."""
    words = len(script.split())
    return math.ceil(words / WORDS_PER_MINUTE * 60)


class BaseSpeechSynthesizer(ABC):
    @abstractmethod
    def synthesize(self, script: str, voice: str = "en-US-Standard-A", language: str = "english") -> SynthesizedAudio:
        """Return playable audio for script."""
        ...


class SilentSpeechSynthesizer(BaseSpeechSynthesizer):
    """Writes a mono 8-bit WAV of silence lasting the estimated spoken duration."""

    def __init__(self, sample_rate: int = STUB_SAMPLE_RATE) -> None:
        self._sample_rate = sample_rate

    def synthesize(self, script: str, voice: str = "en-US-Standard-A", language: str = "english") -> SynthesizedAudio:
        if not script or not script.strip():
            raise ValueError("Script must be non-empty")
        duration = estimate_duration_seconds(script)
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(1)
            wav.setsampwidth(1)
            wav.setframerate(self._sample_rate)
            # 8-bit PCM is unsigned; 0x80 is the zero level.
            wav.writeframes(b"\x80" * (self._sample_rate * duration))
        return SynthesizedAudio(audio_bytes=buffer.getvalue(), duration_seconds=duration)
