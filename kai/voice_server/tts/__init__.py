"""
TTS providers for the voice server.

Cascade order: ElevenLabs (cloud) > Kokoro (local neural) > platform voice
"""

from kai.voice_server.tts.base import (
    ProviderError,
    QuotaExceededError,
    SpeechSynthesisError,
    SynthesizedAudio,
)
from kai.voice_server.tts.cascade import ProviderCascade, ProviderHealth, ProviderState

__all__ = [
    "ProviderCascade",
    "ProviderError",
    "ProviderHealth",
    "ProviderState",
    "QuotaExceededError",
    "SpeechSynthesisError",
    "SynthesizedAudio",
]
