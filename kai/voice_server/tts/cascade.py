#!/usr/bin/env python3
"""
Provider cascade - try each TTS backend in order until one produces audio

Default order: ElevenLabs > Kokoro > platform voice. The TTS_PROVIDER
setting moves the preferred provider to the front; the platform voice is
always tried last and is always present.

Only the cloud provider carries health state. A quota or rate-limit answer
pins it to DISABLED for the rest of the process; any other failure marks it
DEGRADED until the next success.
"""

import enum
import logging
import threading
from typing import Any, Dict, List, Optional

from kai.voice_server.config import Settings
from kai.voice_server.emotions import VoiceSettings
from kai.voice_server.tts.base import (
    ProviderError,
    QuotaExceededError,
    SpeechSynthesisError,
    SynthesizedAudio,
    TTSProvider,
)
from kai.voice_server.tts.elevenlabs import ElevenLabsProvider
from kai.voice_server.tts.kokoro_voice import KokoroProvider
from kai.voice_server.tts.platform_voice import PlatformProvider

logger = logging.getLogger(__name__)

MAX_FAILURES = 3


class ProviderState(enum.Enum):
    AVAILABLE = "available"
    DEGRADED = "degraded"
    DISABLED = "disabled"


class ProviderHealth:
    """Failure counter for one provider"""

    def __init__(self, max_failures: int = MAX_FAILURES):
        self.max_failures = max_failures
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    @property
    def state(self) -> ProviderState:
        failures = self.failures
        if failures >= self.max_failures:
            return ProviderState.DISABLED
        if failures > 0:
            return ProviderState.DEGRADED
        return ProviderState.AVAILABLE

    def record_success(self) -> None:
        with self._lock:
            # Quota exhaustion is sticky
            if self._failures < self.max_failures:
                self._failures = 0

    def record_failure(self) -> None:
        with self._lock:
            self._failures = min(self.max_failures, self._failures + 1)

    def record_quota_exceeded(self) -> None:
        with self._lock:
            self._failures = self.max_failures


class ProviderCascade:
    """Ordered fallback across the configured TTS providers"""

    def __init__(self, settings: Settings,
                 elevenlabs: Optional[TTSProvider] = None,
                 kokoro: Optional[TTSProvider] = None,
                 platform: Optional[TTSProvider] = None,
                 health: Optional[ProviderHealth] = None):
        self.settings = settings
        self.elevenlabs = elevenlabs or ElevenLabsProvider(
            api_key=settings.elevenlabs_api_key,
            default_voice_id=settings.elevenlabs_voice_id,
            model_id=settings.elevenlabs_model,
        )
        self.kokoro = kokoro or KokoroProvider(
            model_path=settings.kokoro_model_path,
            voices_path=settings.kokoro_voices_path,
            default_voice=settings.kokoro_voice,
        )
        self.platform = platform or PlatformProvider(macos_voice=settings.macos_voice)
        self.health = health or ProviderHealth()

    def build_candidates(self) -> List[TTSProvider]:
        """
        Providers eligible for this request, in the order they will be tried.

        Returns:
            List ending with the platform provider
        """
        candidates: List[TTSProvider] = []
        if self.elevenlabs.is_available() and self.health.state is not ProviderState.DISABLED:
            candidates.append(self.elevenlabs)
        if self.kokoro.is_available():
            candidates.append(self.kokoro)

        preferred = self.settings.tts_provider
        for provider in candidates:
            if provider.name == preferred:
                candidates.remove(provider)
                candidates.insert(0, provider)
                break

        candidates.append(self.platform)
        return candidates

    def synthesize(self, text: str, voice_settings: VoiceSettings,
                   voice_id: Optional[str] = None) -> SynthesizedAudio:
        """
        Synthesize text with the first provider that succeeds.

        Raises:
            SpeechSynthesisError: Every candidate failed
        """
        last_error: Optional[Exception] = None
        attempted = []

        for provider in self.build_candidates():
            attempted.append(provider.name)
            try:
                audio = provider.synthesize(text, voice_settings, voice_id=voice_id)
            except QuotaExceededError as e:
                logger.warning("%s quota exhausted, disabling it: %s", provider.name, e)
                if provider is self.elevenlabs:
                    self.health.record_quota_exceeded()
                last_error = e
                continue
            except ProviderError as e:
                logger.warning("%s failed, trying next provider: %s", provider.name, e)
                if provider is self.elevenlabs:
                    self.health.record_failure()
                last_error = e
                continue
            except Exception as e:
                logger.exception("%s raised unexpectedly", provider.name)
                if provider is self.elevenlabs:
                    self.health.record_failure()
                last_error = e
                continue

            if provider is self.elevenlabs:
                self.health.record_success()
            logger.info("Synthesized with %s (%d bytes)", provider.name, len(audio.data))
            return audio

        raise SpeechSynthesisError(
            f"All TTS providers failed ({', '.join(attempted)}): {last_error}"
        ) from last_error

    def status(self) -> Dict[str, Any]:
        """Provider availability for /health."""
        return {
            "elevenlabs": {
                "available": self.elevenlabs.is_available() and self.health.state is not ProviderState.DISABLED,
                "configured": self.elevenlabs.is_available(),
                "failures": self.health.failures,
                "state": self.health.state.value,
            },
            "kokoro": {"available": self.kokoro.is_available()},
            "platform": {"available": True},
            "preferred": self.settings.tts_provider,
        }
