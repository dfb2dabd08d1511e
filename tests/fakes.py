"""Test doubles for the voice server."""

from kai.voice_server.emotions import VoiceSettings
from kai.voice_server.tts.base import SynthesizedAudio, TTSProvider


class FakeProvider(TTSProvider):
    """Provider that records calls and either returns audio or raises"""

    def __init__(self, name, available=True, error=None, suffix=".wav"):
        self.name = name
        self.suffix = suffix
        self.available = available
        self.error = error
        self.calls = []

    def is_available(self):
        return self.available

    def synthesize(self, text, settings: VoiceSettings, voice_id=None):
        self.calls.append((text, settings, voice_id))
        if self.error is not None:
            raise self.error
        return SynthesizedAudio(data=f"audio-{self.name}".encode(), suffix=self.suffix, provider=self.name)


class FakePlayer:
    """Stands in for play_audio_bytes / play_chime"""

    def __init__(self, result=True):
        self.result = result
        self.calls = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.result
