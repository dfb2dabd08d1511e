#!/usr/bin/env python3
"""
Speak one notification: chime, synthesize, play.

Runs after the HTTP response has been sent, so nothing here raises.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from kai.voice_server.audio_player import play_audio_bytes
from kai.voice_server.chime import play_chime
from kai.voice_server.config import Settings
from kai.voice_server.emotions import resolve_voice_settings
from kai.voice_server.tts.base import SpeechSynthesisError
from kai.voice_server.tts.cascade import ProviderCascade
from kai.voice_server.voice_config import VoicesConfig

logger = logging.getLogger(__name__)


class VoiceNotifier:
    """Turns a validated message into sound"""

    def __init__(self, settings: Settings, voices: VoicesConfig,
                 cascade: Optional[ProviderCascade] = None,
                 player: Callable[..., bool] = play_audio_bytes,
                 chime: Callable[..., bool] = play_chime):
        self.settings = settings
        self.voices = voices
        self.cascade = cascade or ProviderCascade(settings)
        self._player = player
        self._chime = chime

    def notify(self, message: str, voice_id: Optional[str] = None,
               emotion: Optional[str] = None) -> bool:
        """
        Chime (if enabled) then speak message.

        Args:
            message: Sanitized text with any emotion tag already removed
            voice_id: Personality key or provider voice id
            emotion: Emotion label from the message tag

        Returns:
            bool: True if speech was played
        """
        volume = self.voices.default_volume

        if self.settings.chime_enabled:
            self._chime(self.settings.chime_path, volume=volume)

        voice_settings = resolve_voice_settings(emotion, voice_id, self.voices)
        profile = self.voices.resolve(voice_id)
        provider_voice = profile.voice_id if profile is not None else voice_id

        try:
            audio = self.cascade.synthesize(message, voice_settings, voice_id=provider_voice)
        except SpeechSynthesisError as e:
            logger.error("Speech synthesis failed: %s", e)
            self._log_error(e, message)
            return False

        try:
            played = self._player(audio.data, audio.suffix, volume=volume)
        except Exception:
            logger.exception("Audio playback raised for %s output", audio.provider)
            return False
        if not played:
            logger.warning("Audio playback failed for %s output", audio.provider)
        return bool(played)

    def _log_error(self, error: Exception, message: str) -> None:
        """Append the failure to the persistent TTS error log."""
        log_path = Path(self.settings.tts_error_log)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "a") as f:
                f.write(f"{datetime.now().isoformat()} | {error} | message={message!r}\n")
        except OSError as e:
            logger.warning("Could not write TTS error log %s: %s", log_path, e)
