"""
ElevenLabs cloud TTS provider.

Returns MP3. Quota and rate-limit responses raise QuotaExceededError so the
cascade can stop calling ElevenLabs for the rest of the process.
"""

import logging
from typing import Optional

import httpx

from kai.voice_server.emotions import VoiceSettings
from kai.voice_server.tts.base import ProviderError, QuotaExceededError, SynthesizedAudio, TTSProvider

logger = logging.getLogger(__name__)

API_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"
REQUEST_TIMEOUT = 15.0
QUOTA_MARKERS = ("quota", "rate limit", "rate_limit", "too many requests")


def is_quota_signal(status_code: int, body: str) -> bool:
    """True when a response means "stop calling us", not a one-off failure."""
    if status_code == 429:
        return True
    lowered = body.lower()
    return status_code in (401, 402, 403) and any(marker in lowered for marker in QUOTA_MARKERS)


class ElevenLabsProvider(TTSProvider):
    name = "elevenlabs"
    suffix = ".mp3"

    def __init__(self, api_key: Optional[str], default_voice_id: str, model_id: str,
                 client: Optional[httpx.Client] = None):
        self.api_key = api_key
        self.default_voice_id = default_voice_id
        self.model_id = model_id
        self._client = client

    def is_available(self) -> bool:
        return bool(self.api_key)

    def synthesize(self, text: str, settings: VoiceSettings, voice_id: Optional[str] = None) -> SynthesizedAudio:
        voice = voice_id or self.default_voice_id
        payload = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": settings.as_dict(),
        }
        headers = {
            "xi-api-key": self.api_key or "",
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
        }

        try:
            if self._client is not None:
                response = self._client.post(API_URL.format(voice_id=voice), json=payload,
                                             headers=headers, timeout=REQUEST_TIMEOUT)
            else:
                with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
                    response = client.post(API_URL.format(voice_id=voice), json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(self.name, f"request failed: {e}") from e

        if response.status_code != 200:
            body = response.text[:300]
            if is_quota_signal(response.status_code, body):
                raise QuotaExceededError(self.name, f"quota exceeded ({response.status_code}): {body}")
            raise ProviderError(self.name, f"HTTP {response.status_code}: {body}")

        if not response.content:
            raise ProviderError(self.name, "empty audio response")

        logger.debug("ElevenLabs synthesized %d bytes with voice %s", len(response.content), voice)
        return SynthesizedAudio(data=response.content, suffix=self.suffix, provider=self.name)
