import pytest

from kai.voice_server.config import Settings
from fakes import FakeProvider


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        elevenlabs_api_key="test-key",
        tts_provider="elevenlabs",
        chime_enabled=False,
        chime_path=tmp_path / "chime.mp3",
        kokoro_model_path=tmp_path / "kokoro.onnx",
        kokoro_voices_path=tmp_path / "voices.bin",
        voices_config_path=tmp_path / "voice-personalities.json",
        tts_error_log=tmp_path / "logs" / "tts-errors.log",
    )


@pytest.fixture
def providers():
    return {
        "elevenlabs": FakeProvider("elevenlabs", suffix=".mp3"),
        "kokoro": FakeProvider("kokoro"),
        "platform": FakeProvider("platform", suffix=".aiff"),
    }


@pytest.fixture
def hook_env(tmp_path, monkeypatch):
    """Isolate hook side effects: markers, log file and notification env."""
    monkeypatch.setenv("KAI_PROMPT_TIMER_DIR", str(tmp_path / "markers"))
    monkeypatch.setenv("KAI_HOOK_LOG", str(tmp_path / "hooks.log"))
    monkeypatch.delenv("ELEVENLABS_VOICE_ID", raising=False)
    monkeypatch.delenv("KAI_VOICE_SERVER_URL", raising=False)
    monkeypatch.delenv("DA", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    return tmp_path
