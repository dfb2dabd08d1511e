"""Shared types for TTS providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from kai.voice_server.emotions import VoiceSettings


@dataclass(frozen=True)
class SynthesizedAudio:
    """Encoded audio plus the container suffix the player needs"""
    data: bytes
    suffix: str
    provider: str


class ProviderError(Exception):
    """A provider could not synthesize this message"""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class QuotaExceededError(ProviderError):
    """Quota or rate limit exhausted; the provider should be skipped from now on"""


class SpeechSynthesisError(Exception):
    """Every provider in the cascade failed"""


class TTSProvider(ABC):
    """Interface implemented by every synthesis backend"""

    name = "provider"
    suffix = ".wav"

    def is_available(self) -> bool:
        return True

    @abstractmethod
    def synthesize(self, text: str, settings: VoiceSettings, voice_id: Optional[str] = None) -> SynthesizedAudio:
        raise NotImplementedError
