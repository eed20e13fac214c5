"""Narration: script templates and speech synthesis for recognized sites."""

from landmark_lens.narration.audio import (
    BaseSpeechSynthesizer,
    SilentSpeechSynthesizer,
    SynthesizedAudio,
    estimate_duration_seconds,
)
from landmark_lens.narration.script import generate_script

__all__ = [
    "BaseSpeechSynthesizer",
    "SilentSpeechSynthesizer",
    "SynthesizedAudio",
    "estimate_duration_seconds",
    "generate_script",
]
