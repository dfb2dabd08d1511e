#!/usr/bin/env python3
"""
Platform TTS - the always-available last resort

- macOS: native `say` rendered to AIFF
- Windows / Linux: pyttsx3 (SAPI5 / eSpeak) rendered to WAV
"""

import logging
import os
import subprocess
import sys
import tempfile
from typing import Optional

from kai.voice_server.emotions import VoiceSettings
from kai.voice_server.tts.base import ProviderError, SynthesizedAudio, TTSProvider

logger = logging.getLogger(__name__)

SAY_TIMEOUT = 30
PYTTSX3_RATE = 180


class PlatformProvider(TTSProvider):
    name = "platform"

    def __init__(self, macos_voice: str = "Samantha", platform: Optional[str] = None):
        self.macos_voice = macos_voice
        self.platform = platform or sys.platform

    @property
    def suffix(self) -> str:
        return ".aiff" if self.platform == "darwin" else ".wav"

    def synthesize(self, text: str, settings: VoiceSettings, voice_id: Optional[str] = None) -> SynthesizedAudio:
        tmp_file = tempfile.NamedTemporaryFile(prefix="kai-platform-", suffix=self.suffix, delete=False)
        tmp_path = tmp_file.name
        tmp_file.close()
        try:
            if self.platform == "darwin":
                self._render_with_say(text, tmp_path)
            else:
                self._render_with_pyttsx3(text, tmp_path)

            with open(tmp_path, "rb") as f:
                data = f.read()
        finally:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass

        if not data:
            raise ProviderError(self.name, "no audio generated")
        logger.debug("Platform voice rendered %d bytes", len(data))
        return SynthesizedAudio(data=data, suffix=self.suffix, provider=self.name)

    def _render_with_say(self, text: str, output_path: str) -> None:
        try:
            subprocess.run(
                ["say", "-v", self.macos_voice, "-o", output_path, "--", text],
                check=True,
                capture_output=True,
                timeout=SAY_TIMEOUT,
            )
        except (subprocess.SubprocessError, FileNotFoundError) as e:
            raise ProviderError(self.name, f"say failed: {e}") from e

    def _render_with_pyttsx3(self, text: str, output_path: str) -> None:
        import pyttsx3

        try:
            engine = pyttsx3.init()
            engine.setProperty("rate", PYTTSX3_RATE)
            engine.save_to_file(text, output_path)
            engine.runAndWait()
            engine.stop()
        except (RuntimeError, OSError) as e:
            raise ProviderError(self.name, f"pyttsx3 failed: {e}") from e
