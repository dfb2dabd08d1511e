#!/usr/bin/env python3
"""
Kokoro Voice TTS - local neural synthesis with kokoro-onnx

Only offered to the cascade when the model file is on disk; the model is
loaded on first use and kept for the life of the server. Returns WAV.
"""

import io
import logging
import threading
import time
from pathlib import Path
from typing import Optional

from kai.voice_server.emotions import VoiceSettings
from kai.voice_server.tts.base import ProviderError, SynthesizedAudio, TTSProvider

logger = logging.getLogger(__name__)

# Voice-specific settings for optimal TTS delivery
VOICE_SETTINGS = {
    "af_alloy": {"speed": 1.1, "lang": "en-us", "trim": True},
    "af_river": {"speed": 1.1, "lang": "en-us", "trim": True},
    "af_sky": {"speed": 1.05, "lang": "en-us", "trim": True},
    "af_sarah": {"speed": 1.0, "lang": "en-us", "trim": True},
    "af_nicole": {"speed": 1.3, "lang": "en-us", "trim": True},
    "am_adam": {"speed": 1.0, "lang": "en-us", "trim": True},
    "am_echo": {"speed": 1.0, "lang": "en-us", "trim": True},
    "am_puck": {"speed": 0.94, "lang": "en-us", "trim": True},
    "am_michael": {"speed": 1.1, "lang": "en-us", "trim": True},
    "bf_emma": {"speed": 1.0, "lang": "en-gb", "trim": True},
    "bm_daniel": {"speed": 1.3, "lang": "en-gb", "trim": True},
    "bm_lewis": {"speed": 1.0, "lang": "en-gb", "trim": True},
    "bm_george": {"speed": 1.2, "lang": "en-gb", "trim": True},
}


def get_voice_settings(voice):
    """Get voice-specific settings with fallback to defaults."""
    return VOICE_SETTINGS.get(voice, {"speed": 1.0, "lang": "en-us", "trim": True})


def normalize_voice(voice: Optional[str]) -> Optional[str]:
    """Accept both "am_echo" and the friendly "kokoro-am_echo" form."""
    if not voice:
        return None
    if voice.startswith("kokoro-"):
        voice = voice[len("kokoro-"):]
    return voice if voice in VOICE_SETTINGS else None


class KokoroProvider(TTSProvider):
    name = "kokoro"
    suffix = ".wav"

    def __init__(self, model_path: Path, voices_path: Path, default_voice: str = "am_echo"):
        self.model_path = Path(model_path)
        self.voices_path = Path(voices_path)
        self.default_voice = normalize_voice(default_voice) or "am_echo"
        self._kokoro = None
        self._load_lock = threading.Lock()

    def is_available(self) -> bool:
        return self.model_path.exists()

    def _get_engine(self):
        with self._load_lock:
            if self._kokoro is None:
                from kokoro_onnx import Kokoro

                load_start = time.time()
                self._kokoro = Kokoro(str(self.model_path), str(self.voices_path))
                logger.info("Loaded Kokoro model in %.0fms", (time.time() - load_start) * 1000)
            return self._kokoro

    def synthesize(self, text: str, settings: VoiceSettings, voice_id: Optional[str] = None) -> SynthesizedAudio:
        import numpy as np
        import soundfile as sf

        voice = normalize_voice(voice_id) or self.default_voice
        voice_settings = get_voice_settings(voice)

        try:
            kokoro = self._get_engine()
            synthesis_start = time.time()
            samples, sample_rate = kokoro.create(
                text,
                voice=voice,
                speed=voice_settings["speed"],
                lang=voice_settings["lang"],
                trim=voice_settings["trim"],
            )
        except Exception as e:
            raise ProviderError(self.name, f"synthesis failed: {e}") from e

        samples = np.asarray(samples, dtype=np.float32)
        if samples.size == 0:
            raise ProviderError(self.name, "no audio generated")

        synthesis_time = time.time() - synthesis_start
        duration = len(samples) / sample_rate
        rtf = synthesis_time / duration if duration > 0 else 0
        logger.debug("Kokoro synthesis: %.0fms (RTF: %.2fx)", synthesis_time * 1000, rtf)

        buffer = io.BytesIO()
        sf.write(buffer, samples, sample_rate, format="WAV")
        return SynthesizedAudio(data=buffer.getvalue(), suffix=self.suffix, provider=self.name)
